"""
Public, high-level helpers for building a client and making one-off calls.
"""

from __future__ import annotations

from typing import Mapping, Optional

import requests

from .client import MercadoPagoClient
from .core.config import ClientConfig, load_client_config
from .payments import Payment, PaymentCreateOptions

__all__ = ["create_client", "create_payment"]


def _resolve_config(
    *,
    config: Optional[ClientConfig],
    env_file: Optional[str],
    overrides: Optional[Mapping[str, str]],
    base: Optional[Mapping[str, str]],
    access_token: Optional[str],
    base_url: Optional[str],
    timeout_seconds: Optional[float | str],
    pool_maxsize: Optional[int | str],
) -> ClientConfig:
    if config is not None:
        extras = (overrides, base, access_token, base_url, timeout_seconds, pool_maxsize)
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built ClientConfig or individual parameters, not both."
            )
        return config
    return load_client_config(
        env_file=env_file,
        overrides=overrides,
        base=base,
        access_token=access_token,
        base_url=base_url,
        timeout_seconds=timeout_seconds,
        pool_maxsize=pool_maxsize,
    )


def create_client(
    *,
    config: Optional[ClientConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    access_token: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout_seconds: Optional[float | str] = None,
    pool_maxsize: Optional[int | str] = None,
) -> MercadoPagoClient:
    """
    Construct a :class:`MercadoPagoClient`.

    Callers can either supply a ready-made :class:`ClientConfig` or let the
    helper assemble one from ``MERCADOPAGO_*`` environment data.
    """
    cfg = _resolve_config(
        config=config,
        env_file=env_file,
        overrides=overrides,
        base=base,
        access_token=access_token,
        base_url=base_url,
        timeout_seconds=timeout_seconds,
        pool_maxsize=pool_maxsize,
    )
    return MercadoPagoClient.from_config(cfg, session=session)


def create_payment(
    options: PaymentCreateOptions,
    *,
    config: Optional[ClientConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    access_token: Optional[str] = None,
    idempotency_key: Optional[str] = None,
) -> Payment:
    """
    Create a single payment with a short-lived client.
    """
    with create_client(
        config=config,
        session=session,
        env_file=env_file,
        overrides=overrides,
        base=base,
        access_token=access_token,
    ) as client:
        return client.create_payment(options, idempotency_key=idempotency_key)
