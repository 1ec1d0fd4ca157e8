from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, date, timedelta


@dataclass(frozen=True)
class Month:
    year: int
    month: int

    def __post_init__(self) -> None:
        if not MINYEAR <= self.year <= MAXYEAR:
            raise ValueError(f"year must be between {MINYEAR} and {MAXYEAR}, got {self.year}")
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be between 1 and 12, got {self.month}")

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, monthrange(self.year, self.month)[1])

    @property
    def day_count(self) -> int:
        return self.last_day.day

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def parse_month(value: str) -> Month:
    raw = value.strip()
    parts = raw.split("-")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise ValueError(f"Invalid month (expected YYYY-MM): {value!r}")
    return Month(year=int(parts[0]), month=int(parts[1]))


def _as_month(value: Month | date) -> Month:
    if isinstance(value, Month):
        return value
    return Month(year=value.year, month=value.month)


def first_day_of_month(value: Month | date) -> date:
    return _as_month(value).first_day


def last_day_of_month(value: Month | date) -> date:
    return _as_month(value).last_day


def next_day(day: date) -> date:
    return day + timedelta(days=1)


def days_in_month(value: Month | date) -> int:
    return _as_month(value).day_count
