from datetime import date, datetime

import pytest

from billing.api.charges import Subscription, User
from billing.api.records import parse_calendar_date, subscription_from_mapping, user_from_mapping


def test_parse_calendar_date_variants() -> None:
    assert parse_calendar_date("2021-11-04") == date(2021, 11, 4)
    assert parse_calendar_date("2022-04-10T18:30:00Z") == date(2022, 4, 10)
    assert parse_calendar_date(datetime(2022, 4, 10, 23, 59)) == date(2022, 4, 10)
    assert parse_calendar_date(date(2022, 4, 10)) == date(2022, 4, 10)
    assert parse_calendar_date(None) is None
    assert parse_calendar_date("  ") is None


@pytest.mark.parametrize("raw", ["2022-13-01", "04/10/2022", 20220410])
def test_parse_calendar_date_rejects_garbage(raw) -> None:
    with pytest.raises(ValueError):
        parse_calendar_date(raw)


def test_user_from_mapping_reads_camel_case_fields() -> None:
    user = user_from_mapping(
        {
            "id": 1,
            "name": "Employee #1",
            "customerId": 1,
            "activatedOn": "2021-11-04",
            "deactivatedOn": "2022-04-10",
        }
    )

    assert user == User(
        id=1,
        name="Employee #1",
        customer_id=1,
        activated_on=date(2021, 11, 4),
        deactivated_on=date(2022, 4, 10),
    )


def test_user_from_mapping_treats_missing_deactivation_as_active() -> None:
    user = user_from_mapping({"id": "2", "name": "Employee #2", "customerId": "1", "activatedOn": "2021-12-04"})

    assert user.id == 2
    assert user.deactivated_on is None


def test_user_from_mapping_requires_activation() -> None:
    with pytest.raises(ValueError, match="activatedOn"):
        user_from_mapping({"id": 1, "name": "x", "customerId": 1, "activatedOn": None})


def test_user_from_mapping_rejects_inverted_dates() -> None:
    with pytest.raises(ValueError):
        user_from_mapping({"id": 1, "customerId": 1, "activatedOn": "2022-04-10", "deactivatedOn": "2022-04-09"})


def test_subscription_from_mapping() -> None:
    subscription = subscription_from_mapping({"id": 763, "customerId": 328, "monthlyPriceInCents": 359})

    assert subscription == Subscription(id=763, customer_id=328, monthly_price_in_cents=359)


def test_subscription_from_mapping_rejects_boolean_price() -> None:
    with pytest.raises(ValueError, match="monthlyPriceInCents"):
        subscription_from_mapping({"id": 1, "customerId": 1, "monthlyPriceInCents": True})
