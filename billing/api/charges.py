from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from billing.api.calendar_months import Month, parse_month
from billing.api.proration import active_days_in_month, user_charge

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Subscription:
    id: int
    customer_id: int
    monthly_price_in_cents: int

    def __post_init__(self) -> None:
        if self.monthly_price_in_cents < 0:
            raise ValueError("monthly_price_in_cents must be zero or greater")


@dataclass(frozen=True)
class User:
    id: int
    name: str
    customer_id: int
    activated_on: date
    deactivated_on: date | None = None

    def __post_init__(self) -> None:
        # datetime is a date subclass; only the calendar day matters here
        if isinstance(self.activated_on, datetime):
            object.__setattr__(self, "activated_on", self.activated_on.date())
        if isinstance(self.deactivated_on, datetime):
            object.__setattr__(self, "deactivated_on", self.deactivated_on.date())
        if self.deactivated_on is not None and self.deactivated_on < self.activated_on:
            raise ValueError(
                f"User {self.id} deactivated_on {self.deactivated_on} is before activated_on {self.activated_on}"
            )


@dataclass(frozen=True)
class UserCharge:
    user_id: int
    active_days: int
    charge_cents: int


@dataclass(frozen=True)
class MonthlyChargeResult:
    month: Month
    days_in_month: int
    total_cents: int
    users: tuple[UserCharge, ...] = ()


def charge_breakdown(
    month: str | Month,
    subscription: Subscription | None,
    users: Sequence[User],
) -> MonthlyChargeResult:
    billing_month = month if isinstance(month, Month) else parse_month(month)
    first_of_month = billing_month.first_day
    last_of_month = billing_month.last_day
    days_in_month = billing_month.day_count

    if subscription is None or not users:
        return MonthlyChargeResult(month=billing_month, days_in_month=days_in_month, total_cents=0)

    charges: list[UserCharge] = []
    for user in users:
        if user.activated_on > last_of_month:
            logger.debug("Skipping user %s: activated %s after %s", user.id, user.activated_on, billing_month)
            continue
        if user.deactivated_on is not None and user.deactivated_on < first_of_month:
            logger.debug("Skipping user %s: deactivated %s before %s", user.id, user.deactivated_on, billing_month)
            continue

        active_days = active_days_in_month(user, first_of_month, last_of_month)
        charges.append(
            UserCharge(
                user_id=user.id,
                active_days=active_days,
                charge_cents=user_charge(active_days, days_in_month, subscription.monthly_price_in_cents),
            )
        )

    return MonthlyChargeResult(
        month=billing_month,
        days_in_month=days_in_month,
        total_cents=sum(item.charge_cents for item in charges),
        users=tuple(charges),
    )


def monthly_charge(month: str | Month, subscription: Subscription | None, users: Sequence[User]) -> int:
    return charge_breakdown(month, subscription, users).total_cents


def format_cents(cents: int) -> str:
    dollars = (Decimal(cents) / 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"${dollars}"


def monthly_charge_display(month: str | Month, subscription: Subscription | None, users: Sequence[User]) -> str:
    return format_cents(monthly_charge(month, subscription, users))
