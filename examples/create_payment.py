"""
Minimal script that uses the public API to create a Pix payment.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Tuple

from mpago import (
    ConstructionError,
    MercadoPagoError,
    Payer,
    PaymentCreateBuilder,
    ProductItem,
    create_client,
    load_client_config,
)


def _override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _build_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a Mercado Pago payment using the SDK API")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing MERCADOPAGO_* settings",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument(
        "--access-token",
        help="Provide the access token without relying on environment data",
    )
    parser.add_argument("--payer-email", required=True, help="E-mail of the paying user")
    parser.add_argument("--amount", required=True, help="Amount to charge, e.g. 10.50")
    parser.add_argument("--description", default="Test payment")
    parser.add_argument(
        "--payment-method",
        default="pix",
        help="Payment method id (default: pix)",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    overrides = _build_overrides(args.set or ())

    try:
        config = load_client_config(
            env_file=args.env_file,
            overrides=overrides,
            access_token=args.access_token,
        )
    except ConstructionError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    builder = PaymentCreateBuilder.create(
        args.description,
        Payer(email=args.payer_email),
        args.payment_method,
        args.amount,
    ).add_items(
        [ProductItem(id="1", title=args.description, quantity=1, unit_price=args.amount)]
    )

    with create_client(config=config) as client:
        logging.info("Creating payment on %s", client.base_url)
        try:
            payment = builder.send(client)
        except MercadoPagoError as exc:
            logging.error("Payment request failed: %s", exc)
            return 1

    logging.info("Payment %s created with status %s", payment.id, payment.status)
    if payment.point_of_interaction and payment.point_of_interaction.transaction_data:
        logging.info("Pix code: %s", payment.point_of_interaction.transaction_data.qr_code)
    return 0


if __name__ == "__main__":
    sys.exit(main())
