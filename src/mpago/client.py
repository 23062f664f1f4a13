"""
The Mercado Pago client facade.

A :class:`MercadoPagoClient` owns the credentials and one pooled
``requests.Session``. It is safe to share between threads; each call is a
single blocking HTTP request.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, Optional, TypeVar, Union

import requests

from .common import SearchPage
from .core.config import DEFAULT_POOL_MAXSIZE, DEFAULT_TIMEOUT_SECONDS, ClientConfig
from .core.errors import ConstructionError
from .core.resolver import resolve
from .core.transport import Credentials, RawResponse, Transport, ValidatedRequest, build_session
from .payments import (
    Payment,
    PaymentCreateBuilder,
    PaymentCreateOptions,
    PaymentGetBuilder,
    PaymentSearchBuilder,
    PaymentSearchOptions,
    PaymentSummary,
    PaymentUpdateBuilder,
    PaymentUpdateOptions,
)
from .subscriptions import (
    Subscription,
    SubscriptionCreateBuilder,
    SubscriptionCreateOptions,
    SubscriptionSearchBuilder,
    SubscriptionSearchOptions,
)
from .wallet_connect import Agreement, AgreementBuilder

__all__ = ["MercadoPagoClient", "MercadoPagoClientBuilder"]

T = TypeVar("T")


def _ignore_body(data: Any) -> None:
    return None


def _checked_timeout(value: Any) -> float:
    if isinstance(value, bool):
        raise ConstructionError(f"timeout_seconds must be a number, got {value!r}", reason="invalid_timeout")
    try:
        seconds = float(value)
    except (TypeError, ValueError) as exc:
        raise ConstructionError(
            f"timeout_seconds must be a number, got {value!r}", reason="invalid_timeout"
        ) from exc
    if not seconds > 0:
        raise ConstructionError("timeout_seconds must be greater than zero", reason="invalid_timeout")
    return seconds


class MercadoPagoClient:
    """
    Entry point for every Mercado Pago operation.

    Example::

        with MercadoPagoClient("APP_USR-...") as client:
            payment = client.create_payment(
                PaymentCreateOptions(transaction_amount="10.00", payer=Payer(email="a@b.com"))
            )

    The access token and base URL are fixed at construction. Build another
    client to talk to a different account or sandbox.
    """

    def __init__(
        self,
        access_token: str,
        base_url: Optional[str] = None,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
        pool_maxsize: int = DEFAULT_POOL_MAXSIZE,
    ) -> None:
        self._credentials = Credentials(access_token, base_url)
        timeout_seconds = _checked_timeout(timeout_seconds)
        if isinstance(pool_maxsize, bool) or not isinstance(pool_maxsize, int) or pool_maxsize < 1:
            raise ConstructionError(
                f"pool_maxsize must be an integer of at least 1, got {pool_maxsize!r}",
                reason="invalid_pool_size",
            )
        self._owns_session = session is None
        self._session = session if session is not None else build_session(pool_maxsize)
        self._transport = Transport(self._session, timeout_seconds=timeout_seconds)

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> "MercadoPagoClient":
        return cls(
            config.access_token,
            config.base_url,
            timeout_seconds=config.timeout_seconds,
            session=session,
            pool_maxsize=config.pool_maxsize,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r})"

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def base_url(self) -> str:
        return self._credentials.base_url

    @property
    def session(self) -> requests.Session:
        return self._session

    @property
    def timeout_seconds(self) -> float:
        return self._transport.timeout_seconds

    def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "MercadoPagoClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Low level
    # ------------------------------------------------------------------

    def execute(self, request: ValidatedRequest) -> RawResponse:
        """Send an already validated request and return the raw response."""
        return self._transport.execute(request, self._credentials)

    def send(self, request: ValidatedRequest, parser: Callable[[Any], T]) -> T:
        """Send ``request`` and resolve the response with ``parser``."""
        raw = self.execute(request)
        return resolve(raw, parser, operation=request.operation)

    def check_credentials(self) -> None:
        """Raise unless the access token is accepted by the API."""
        request = ValidatedRequest(
            operation="credentials.check",
            method="GET",
            path="/v1/payment_methods",
        )
        self.send(request, _ignore_body)
        logging.info("Credentials accepted by %s", self.base_url)

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    def create_payment(
        self,
        options: PaymentCreateOptions,
        *,
        idempotency_key: Optional[str] = None,
    ) -> Payment:
        return PaymentCreateBuilder(options, idempotency_key=idempotency_key).send(self)

    def get_payment(self, payment_id: Union[int, str]) -> Payment:
        return PaymentGetBuilder(payment_id).send(self)

    def update_payment(self, payment_id: Union[int, str], options: PaymentUpdateOptions) -> Payment:
        return PaymentUpdateBuilder(payment_id, options).send(self)

    def cancel_payment(self, payment_id: Union[int, str]) -> Payment:
        return PaymentUpdateBuilder.cancel(payment_id).send(self)

    def search_payments(self, options: Optional[PaymentSearchOptions] = None) -> SearchPage[PaymentSummary]:
        return PaymentSearchBuilder(options).fetch_page(self)

    def iter_payments(self, options: Optional[PaymentSearchOptions] = None) -> Iterator[PaymentSummary]:
        return PaymentSearchBuilder(options).iter_all(self)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def create_subscription(
        self,
        options: SubscriptionCreateOptions,
        *,
        idempotency_key: Optional[str] = None,
    ) -> Subscription:
        return SubscriptionCreateBuilder(options, idempotency_key=idempotency_key).send(self)

    def search_subscriptions(
        self,
        options: Optional[SubscriptionSearchOptions] = None,
    ) -> SearchPage[Subscription]:
        return SubscriptionSearchBuilder(options).fetch_page(self)

    def iter_subscriptions(
        self,
        options: Optional[SubscriptionSearchOptions] = None,
    ) -> Iterator[Subscription]:
        return SubscriptionSearchBuilder(options).iter_all(self)

    # ------------------------------------------------------------------
    # Wallet Connect
    # ------------------------------------------------------------------

    def create_agreement(self, builder: AgreementBuilder) -> Agreement:
        return builder.send(self)


class MercadoPagoClientBuilder:
    """
    Fluent construction of a :class:`MercadoPagoClient`::

        client = MercadoPagoClientBuilder.builder("APP_USR-...").with_timeout(10).build()

    Nothing is validated until :meth:`build`.
    """

    def __init__(self, access_token: Optional[str]) -> None:
        self._access_token = access_token
        self._base_url: Optional[str] = None
        self._timeout_seconds = DEFAULT_TIMEOUT_SECONDS
        self._session: Optional[requests.Session] = None
        self._pool_maxsize = DEFAULT_POOL_MAXSIZE

    @classmethod
    def builder(cls, access_token: Optional[str]) -> "MercadoPagoClientBuilder":
        return cls(access_token)

    def with_base_url(self, base_url: str) -> "MercadoPagoClientBuilder":
        self._base_url = base_url
        return self

    def with_timeout(self, seconds: float) -> "MercadoPagoClientBuilder":
        self._timeout_seconds = seconds
        return self

    def with_session(self, session: requests.Session) -> "MercadoPagoClientBuilder":
        self._session = session
        return self

    def with_pool_maxsize(self, pool_maxsize: int) -> "MercadoPagoClientBuilder":
        self._pool_maxsize = pool_maxsize
        return self

    def build(self) -> MercadoPagoClient:
        return MercadoPagoClient(
            self._access_token,
            self._base_url,
            timeout_seconds=self._timeout_seconds,
            session=self._session,
            pool_maxsize=self._pool_maxsize,
        )
