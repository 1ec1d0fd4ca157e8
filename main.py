import argparse
import logging
import os
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from dotenv import load_dotenv

from billing.api.charges import Subscription, charge_breakdown, format_cents
from user_csv import parse_users_csv


class ConfigError(Exception):
    """Raised when required configuration is missing."""


def configure_logging() -> logging.Logger:
    logs_dir = Path(os.getenv("BILLING_LOG_DIR", "logs"))
    logs_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("billing_cli")
    logger.setLevel(logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [%(threadName)s] %(name)s - %(message)s"
    )

    file_handler = TimedRotatingFileHandler(
        logs_dir / "billing_cli.log",
        when="midnight",
        interval=1,
        backupCount=30,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)

    logger.handlers.clear()
    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


def get_env_int(name: str, default: int | None = None) -> int:
    raw = os.getenv(name)
    if raw in (None, ""):
        if default is None:
            raise ConfigError(f"Missing required environment variable: {name}")
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid integer for {name}: {raw}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute a prorated monthly subscription charge")
    parser.add_argument("--month", required=True, help="Billing month in YYYY-MM format")
    parser.add_argument("--users", required=True, type=Path, help="CSV file of users to bill")
    parser.add_argument("--price", type=int, help="Monthly price per user in cents (env BILLING_MONTHLY_PRICE_CENTS)")
    parser.add_argument("--subscription-id", type=int, default=0)
    parser.add_argument("--customer-id", type=int, default=0)
    parser.add_argument("--no-subscription", action="store_true", help="Bill as if the customer had no subscription")
    parser.add_argument("--cents", action="store_true", help="Print the total in integer cents")
    parser.add_argument("--breakdown", action="store_true", help="Print one line per billed user")
    return parser


def resolve_subscription(args: argparse.Namespace) -> Subscription | None:
    if args.no_subscription:
        return None
    price = args.price if args.price is not None else get_env_int("BILLING_MONTHLY_PRICE_CENTS")
    if price < 0:
        raise ConfigError("Monthly price must be zero or greater")
    return Subscription(id=args.subscription_id, customer_id=args.customer_id, monthly_price_in_cents=price)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    logger = configure_logging()

    try:
        subscription = resolve_subscription(args)
        users = parse_users_csv(args.users)
        result = charge_breakdown(args.month, subscription, users)
    except ConfigError:
        logger.exception("Configuration error")
        return 2
    except Exception:
        logger.exception("Failed to compute monthly charge")
        return 1

    logger.info(
        "Computed charge month=%s users=%s billed=%s totalCents=%s",
        result.month,
        len(users),
        len(result.users),
        result.total_cents,
    )

    if args.breakdown:
        for item in result.users:
            print(f"{item.user_id}\t{item.active_days}/{result.days_in_month}\t{format_cents(item.charge_cents)}")
    print(result.total_cents if args.cents else format_cents(result.total_cents))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
