"""
Configuration objects and helpers for the Mercado Pago client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .environment import build_environment
from .errors import ConstructionError

__all__ = [
    "API_BASE_URL",
    "ClientConfig",
    "DEFAULT_POOL_MAXSIZE",
    "DEFAULT_TIMEOUT_SECONDS",
    "load_client_config",
    "normalize_access_token",
    "normalize_base_url",
]

API_BASE_URL = "https://api.mercadopago.com"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_POOL_MAXSIZE = 10

_PARAMETER_TO_ENV_KEY = {
    "access_token": "MERCADOPAGO_ACCESS_TOKEN",
    "base_url": "MERCADOPAGO_BASE_URL",
    "timeout_seconds": "MERCADOPAGO_TIMEOUT_SECONDS",
    "pool_maxsize": "MERCADOPAGO_POOL_MAXSIZE",
}


def normalize_access_token(raw_token: Optional[str]) -> str:
    token = (raw_token or "").strip()
    if not token:
        raise ConstructionError(
            "An access token is required to build a Mercado Pago client",
            reason="missing_token",
        )
    return token


def normalize_base_url(raw_url: Optional[str]) -> str:
    if raw_url is None:
        return API_BASE_URL
    url = raw_url.strip().rstrip("/")
    scheme, _, host = url.partition("://")
    if scheme not in ("https", "http") or not host:
        raise ConstructionError(
            f"Base URL must be an http(s) URL, got '{raw_url}'",
            reason="invalid_base_url",
        )
    return url


def _parse_timeout(raw_value: str) -> float:
    try:
        timeout = float(raw_value)
    except ValueError as exc:
        raise ConstructionError(
            f"MERCADOPAGO_TIMEOUT_SECONDS must be a number, got '{raw_value}'",
            reason="invalid_timeout",
        ) from exc
    if timeout <= 0:
        raise ConstructionError(
            "MERCADOPAGO_TIMEOUT_SECONDS must be greater than zero",
            reason="invalid_timeout",
        )
    return timeout


def _parse_pool_maxsize(raw_value: str) -> int:
    try:
        size = int(raw_value)
    except ValueError as exc:
        raise ConstructionError(
            f"MERCADOPAGO_POOL_MAXSIZE must be an integer, got '{raw_value}'",
            reason="invalid_pool_size",
        ) from exc
    if size < 1:
        raise ConstructionError(
            "MERCADOPAGO_POOL_MAXSIZE must be at least 1",
            reason="invalid_pool_size",
        )
    return size


def _collect_parameter_overrides(explicit: Mapping[str, Any]) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for key, value in explicit.items():
        if value is None:
            continue
        overrides[_PARAMETER_TO_ENV_KEY[key]] = str(value)
    return overrides


@dataclass(frozen=True)
class ClientConfig:
    access_token: str = field(repr=False)
    base_url: str = API_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    pool_maxsize: int = DEFAULT_POOL_MAXSIZE

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "ClientConfig":
        access_token = normalize_access_token(values.get("MERCADOPAGO_ACCESS_TOKEN"))
        base_url = normalize_base_url(values.get("MERCADOPAGO_BASE_URL") or None)
        timeout_seconds = _parse_timeout(
            values.get("MERCADOPAGO_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
        )
        pool_maxsize = _parse_pool_maxsize(
            values.get("MERCADOPAGO_POOL_MAXSIZE", str(DEFAULT_POOL_MAXSIZE))
        )
        return cls(
            access_token=access_token,
            base_url=base_url,
            timeout_seconds=timeout_seconds,
            pool_maxsize=pool_maxsize,
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float | str] = None,
        pool_maxsize: Optional[int | str] = None,
    ) -> "ClientConfig":
        parameter_overrides = _collect_parameter_overrides(
            {
                "access_token": access_token,
                "base_url": base_url,
                "timeout_seconds": timeout_seconds,
                "pool_maxsize": pool_maxsize,
            }
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.variables)


def load_client_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    access_token: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout_seconds: Optional[float | str] = None,
    pool_maxsize: Optional[int | str] = None,
) -> ClientConfig:
    """
    Convenience wrapper that mirrors :meth:`ClientConfig.from_env`.

    Settings may come from the process environment, a ``.env`` file, explicit
    keyword arguments, or any combination. Keyword arguments win over
    ``overrides``, which win over the file and the environment.
    """
    return ClientConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        access_token=access_token,
        base_url=base_url,
        timeout_seconds=timeout_seconds,
        pool_maxsize=pool_maxsize,
    )
