import logging
import os
import sys
from datetime import date, datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Callable

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from billing.api.calendar_months import Month, parse_month
from billing.api.charges import MonthlyChargeResult, Subscription, User, charge_breakdown, format_cents
from billing.api.records import parse_calendar_date, subscription_from_mapping, user_from_mapping

load_dotenv()


def configure_logging() -> logging.Logger:
    logs_dir = Path(os.getenv("BILLING_LOG_DIR", "logs"))
    logs_dir.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter("%(asctime)s %(levelname)s [%(threadName)s] %(name)s - %(message)s")
    file_handler = TimedRotatingFileHandler(
        logs_dir / "billing_api.log",
        when="midnight",
        interval=1,
        backupCount=30,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    root_logger.handlers.clear()
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    for logger_name in ("uvicorn", "uvicorn.access", "uvicorn.error", "fastapi"):
        named = logging.getLogger(logger_name)
        named.handlers.clear()
        named.propagate = True

    return logging.getLogger("billing_api")


logger = configure_logging()


class SubscriptionIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    customer_id: int = Field(alias="customerId")
    monthly_price_in_cents: int = Field(alias="monthlyPriceInCents", ge=0)


class UserIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str = ""
    customer_id: int = Field(alias="customerId")
    activated_on: date = Field(alias="activatedOn")
    deactivated_on: date | None = Field(default=None, alias="deactivatedOn")

    @field_validator("activated_on", "deactivated_on", mode="before")
    @classmethod
    def calendar_date(cls, value: Any) -> date | None:
        return parse_calendar_date(value)


class MonthlyChargeRequest(BaseModel):
    month: str
    subscription: SubscriptionIn | None = None
    users: list[UserIn] = Field(default_factory=list)


def get_max_users() -> int:
    return int(os.getenv("BILLING_MAX_USERS", "10000"))


def parse_billing_month(value: str) -> Month:
    try:
        return parse_month(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid month: {value}") from exc


def to_records(request: MonthlyChargeRequest) -> tuple[Subscription | None, list[User]]:
    max_users = get_max_users()
    if len(request.users) > max_users:
        raise HTTPException(status_code=400, detail=f"User count exceeds limit of {max_users}")

    try:
        subscription = None
        if request.subscription is not None:
            subscription = subscription_from_mapping(request.subscription.model_dump(by_alias=True))
        users = [user_from_mapping(item.model_dump(by_alias=True)) for item in request.users]
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return subscription, users


def result_to_payload(result: MonthlyChargeResult) -> dict[str, Any]:
    return {
        "month": str(result.month),
        "daysInMonth": result.days_in_month,
        "totalCents": result.total_cents,
        "total": format_cents(result.total_cents),
        "users": [
            {"id": item.user_id, "activeDays": item.active_days, "chargeCents": item.charge_cents}
            for item in result.users
        ],
    }


app = FastAPI(title="Subscription Billing API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def auth_middleware(request: Request, call_next: Callable[..., Any]) -> JSONResponse:
    if request.url.path.startswith("/api"):
        auth_token = os.getenv("BILLING_AUTH_TOKEN", "").strip()
        if auth_token:
            provided = request.headers.get("X-Auth-Token", "") or request.query_params.get("token", "")
            if provided != auth_token:
                return JSONResponse(status_code=401, content={"detail": "Unauthorized"})
    return await call_next(request)


@app.get("/api/health")
def get_health() -> dict[str, Any]:
    return {"status": "ok", "serverTime": datetime.now().isoformat()}


@app.post("/api/monthly-charge")
def post_monthly_charge(payload: MonthlyChargeRequest) -> dict[str, Any]:
    month = parse_billing_month(payload.month)
    subscription, users = to_records(payload)
    result = charge_breakdown(month, subscription, users)
    logger.info(
        "Computed charge month=%s users=%s billed=%s totalCents=%s",
        month,
        len(users),
        len(result.users),
        result.total_cents,
    )
    return result_to_payload(result)
