from datetime import date

from billing.api.charges import User
from billing.api.proration import active_days_in_month, user_charge

FIRST = date(2020, 12, 1)
LAST = date(2020, 12, 31)


def _user(activated_on: date, deactivated_on: date | None = None) -> User:
    return User(id=1, name="Employee #1", customer_id=1, activated_on=activated_on, deactivated_on=deactivated_on)


def test_active_days_full_month() -> None:
    assert active_days_in_month(_user(date(2020, 1, 1)), FIRST, LAST) == 31


def test_active_days_late_start() -> None:
    assert active_days_in_month(_user(date(2020, 12, 14)), FIRST, LAST) == 18


def test_active_days_early_deactivation() -> None:
    assert active_days_in_month(_user(date(2020, 1, 1), date(2020, 12, 20)), FIRST, LAST) == 20


def test_active_days_late_start_and_deactivation() -> None:
    assert active_days_in_month(_user(date(2020, 12, 3), date(2020, 12, 25)), FIRST, LAST) == 23


def test_active_days_single_day_counts_inclusively() -> None:
    assert active_days_in_month(_user(date(2020, 12, 31)), FIRST, LAST) == 1
    assert active_days_in_month(_user(date(2020, 11, 1), date(2020, 12, 1)), FIRST, LAST) == 1


def test_active_days_ignores_deactivation_after_month_end() -> None:
    assert active_days_in_month(_user(date(2020, 12, 10), date(2021, 3, 1)), FIRST, LAST) == 22


def test_user_charge_rounds_partial_month_up() -> None:
    assert user_charge(3, 31, 5000) == 484
    assert user_charge(3, 30, 5000) == 500
    assert user_charge(1, 31, 1) == 1


def test_user_charge_full_month_is_exact_price() -> None:
    assert user_charge(30, 30, 5000) == 5000
    assert user_charge(31, 31, 359) == 359


def test_user_charge_zero_price() -> None:
    assert user_charge(12, 31, 0) == 0
