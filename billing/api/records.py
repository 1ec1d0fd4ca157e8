from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping

from billing.api.charges import Subscription, User


def parse_calendar_date(value: Any) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid date: {value!r}")

    raw = value.strip()
    if not raw:
        return None
    try:
        if len(raw) == 10:
            return date.fromisoformat(raw)
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError as exc:
        raise ValueError(f"Invalid date: {value!r}") from exc


def _parse_int(payload: Mapping[str, Any], name: str) -> int:
    if name not in payload or payload[name] is None:
        raise ValueError(f"Missing required field: {name}")
    value = payload[name]
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise ValueError(f"{name} must be an integer")


def subscription_from_mapping(payload: Mapping[str, Any]) -> Subscription:
    return Subscription(
        id=_parse_int(payload, "id"),
        customer_id=_parse_int(payload, "customerId"),
        monthly_price_in_cents=_parse_int(payload, "monthlyPriceInCents"),
    )


def user_from_mapping(payload: Mapping[str, Any]) -> User:
    activated_on = parse_calendar_date(payload.get("activatedOn"))
    if activated_on is None:
        raise ValueError("Missing required field: activatedOn")

    return User(
        id=_parse_int(payload, "id"),
        name=str(payload.get("name") or ""),
        customer_id=_parse_int(payload, "customerId"),
        activated_on=activated_on,
        deactivated_on=parse_calendar_date(payload.get("deactivatedOn")),
    )
