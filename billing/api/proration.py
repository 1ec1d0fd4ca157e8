from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from billing.api.charges import User


def active_days_in_month(user: User, first_of_month: date, last_of_month: date) -> int:
    """Inclusive count of days the user was active between the two bounds.

    Both bounds belong to the same calendar month and the user is expected
    to overlap it, so the count comes straight from the day-of-month fields.
    """
    start = max(user.activated_on, first_of_month)
    end = last_of_month
    if user.deactivated_on is not None:
        end = min(user.deactivated_on, last_of_month)
    return (end.day - start.day) + 1


def user_charge(active_days: int, days_in_month: int, monthly_price_in_cents: int) -> int:
    if active_days >= days_in_month:
        return monthly_price_in_cents
    # ceiling division; a partial cent is always billed up
    return -(-monthly_price_in_cents * active_days // days_in_month)
