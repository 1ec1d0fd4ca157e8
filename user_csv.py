from __future__ import annotations

import csv
from pathlib import Path

from billing.api.charges import User
from billing.api.records import user_from_mapping


REQUIRED_COLUMNS = {
    "id",
    "name",
    "customerId",
    "activatedOn",
    "deactivatedOn",
}


def parse_users_csv(path: Path) -> list[User]:
    with path.open("r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        if reader.fieldnames is None:
            raise ValueError(f"CSV has no header row: {path}")

        normalized_headers = [header.strip() for header in reader.fieldnames]
        missing_columns = REQUIRED_COLUMNS - set(normalized_headers)
        if missing_columns:
            missing = ", ".join(sorted(missing_columns))
            raise ValueError(f"CSV missing required columns: {missing}")

        users: list[User] = []
        for line_number, raw_row in enumerate(reader, start=2):
            row = {str(key).strip(): (value or "").strip() for key, value in raw_row.items() if key is not None}
            try:
                users.append(user_from_mapping(row))
            except ValueError as exc:
                raise ValueError(f"{path} line {line_number}: {exc}") from exc

    return users
