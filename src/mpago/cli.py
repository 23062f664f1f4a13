"""
Command-line interface for exercising the Mercado Pago APIs.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Sequence, Tuple

from .api import create_client
from .client import MercadoPagoClient
from .core.config import load_client_config
from .core.errors import ConstructionError, MercadoPagoError
from .payments import Payment, PaymentSearchOptions

__all__ = ["build_parser", "main", "run_cli"]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mpago",
        description="Call the Mercado Pago API with credentials from the environment",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing MERCADOPAGO_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("check", help="Verify that the access token is accepted")

    get_payment = commands.add_parser("get-payment", help="Show one payment")
    get_payment.add_argument("payment_id", type=int)

    cancel_payment = commands.add_parser("cancel-payment", help="Cancel a pending payment")
    cancel_payment.add_argument("payment_id", type=int)

    search = commands.add_parser("search-payments", help="List payments, newest first")
    search.add_argument("--limit", type=int, default=30, help="Page size (default: 30)")
    search.add_argument("--offset", type=int, default=0)
    search.add_argument("--external-reference", default=None)
    search.add_argument(
        "--all",
        action="store_true",
        help="Walk every page instead of printing only the first one",
    )
    return parser


def _log_payment(payment: Payment) -> None:
    logging.info(
        "Payment %s: %s (%s) %s %s",
        payment.id,
        getattr(payment.status, "value", payment.status),
        getattr(payment.status_detail, "value", payment.status_detail),
        payment.transaction_amount,
        getattr(payment.currency_id, "value", payment.currency_id) or "",
    )


def _search_payments(client: MercadoPagoClient, args: argparse.Namespace) -> None:
    options = PaymentSearchOptions(
        sort="date_created",
        criteria="desc",
        limit=args.limit,
        offset=args.offset,
        external_reference=args.external_reference,
    )
    if args.all:
        results = client.iter_payments(options)
    else:
        page = client.search_payments(options)
        logging.info("Showing %d of %d payments", len(page.results), page.paging.total)
        results = iter(page.results)
    for payment in results:
        _log_payment(payment)


def _dispatch(client: MercadoPagoClient, args: argparse.Namespace) -> None:
    if args.command == "check":
        client.check_credentials()
    elif args.command == "get-payment":
        _log_payment(client.get_payment(args.payment_id))
    elif args.command == "cancel-payment":
        _log_payment(client.cancel_payment(args.payment_id))
    elif args.command == "search-payments":
        _search_payments(client, args)


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_overrides(args.set or ())

    try:
        config = load_client_config(env_file=args.env_file, overrides=overrides)
    except ConstructionError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    with create_client(config=config) as client:
        try:
            _dispatch(client, args)
        except MercadoPagoError as exc:
            logging.error("%s failed: %s", args.command, exc)
            return 1
    return 0


def main() -> int:
    return run_cli(sys.argv[1:])
