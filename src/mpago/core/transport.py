"""
Authenticated HTTP exchange with the Mercado Pago API.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import requests
from requests.adapters import HTTPAdapter

from .config import (
    API_BASE_URL,
    DEFAULT_POOL_MAXSIZE,
    DEFAULT_TIMEOUT_SECONDS,
    normalize_access_token,
    normalize_base_url,
)
from .errors import TransportError, TransportErrorKind

__all__ = [
    "Credentials",
    "IDEMPOTENCY_HEADER",
    "RawResponse",
    "Transport",
    "USER_AGENT",
    "ValidatedRequest",
    "build_session",
    "new_idempotency_key",
]

IDEMPOTENCY_HEADER = "X-Idempotency-Key"
USER_AGENT = "mpago-python/0.1.0"
_REDACTED = "***"


def new_idempotency_key() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Credentials:
    """
    Access token and API root shared by every request of one client.

    Both values are validated on construction and cannot be changed
    afterwards. The token never appears in ``repr``.
    """

    access_token: str = field(repr=False)
    base_url: str = API_BASE_URL

    def __post_init__(self) -> None:
        object.__setattr__(self, "access_token", normalize_access_token(self.access_token))
        object.__setattr__(self, "base_url", normalize_base_url(self.base_url))

    @property
    def authorization(self) -> str:
        return f"Bearer {self.access_token}"

    def redact(self, text: str) -> str:
        return text.replace(self.access_token, _REDACTED)


@dataclass(frozen=True)
class ValidatedRequest:
    """
    Wire-ready request produced by a builder.

    ``payload`` is already JSON-compatible. ``headers`` holds per-operation
    headers only; authentication is added by :class:`Transport`.
    """

    operation: str
    method: str
    path: str
    payload: Optional[Any] = None
    query: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    idempotency_key: Optional[str] = None

    @property
    def body(self) -> Optional[bytes]:
        if self.payload is None:
            return None
        return json.dumps(self.payload, separators=(",", ":")).encode("utf-8")


@dataclass(frozen=True)
class RawResponse:
    status: int
    body: bytes
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_response(cls, response: requests.Response) -> "RawResponse":
        return cls(
            status=response.status_code,
            body=response.content or b"",
            headers=dict(response.headers),
        )


def build_session(pool_maxsize: int = DEFAULT_POOL_MAXSIZE) -> requests.Session:
    """
    Create a session whose connection pool allows ``pool_maxsize`` requests
    in flight at once. urllib3-level retries are disabled.
    """
    session = requests.Session()
    adapter = HTTPAdapter(
        pool_connections=pool_maxsize,
        pool_maxsize=pool_maxsize,
        max_retries=0,
    )
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def _classify_exception(exc: requests.RequestException) -> TransportErrorKind:
    # SSLError is a ConnectionError and ConnectTimeout is both; order matters.
    if isinstance(exc, requests.exceptions.SSLError):
        return TransportErrorKind.TLS
    if isinstance(exc, requests.exceptions.Timeout):
        return TransportErrorKind.TIMEOUT
    if isinstance(exc, requests.exceptions.ConnectionError):
        return TransportErrorKind.CONNECTION
    return TransportErrorKind.REQUEST


class Transport:
    """
    Performs exactly one HTTP call per :meth:`execute`. Never retries.

    The session is shared by every call and may be used from several threads
    at once.
    """

    def __init__(
        self,
        session: requests.Session,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = USER_AGENT,
    ) -> None:
        self.session = session
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent

    def _headers(
        self,
        request: ValidatedRequest,
        credentials: Optional[Credentials],
    ) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }
        if request.payload is not None:
            headers["Content-Type"] = "application/json"
        if request.idempotency_key:
            headers[IDEMPOTENCY_HEADER] = request.idempotency_key
        headers.update(request.headers)
        if credentials is not None:
            headers["Authorization"] = credentials.authorization
        return headers

    def execute(
        self,
        request: ValidatedRequest,
        credentials: Optional[Credentials] = None,
        *,
        base_url: Optional[str] = None,
    ) -> RawResponse:
        """
        Send ``request`` and return the raw response, whatever its status.

        ``credentials`` may only be omitted for the OAuth token exchange,
        which authenticates with client secrets in the body instead.
        """
        root = base_url or (credentials.base_url if credentials else API_BASE_URL)
        url = f"{root}{request.path}"
        logging.info("Submitting %s: %s %s", request.operation, request.method, url)

        try:
            response = self.session.request(
                request.method,
                url,
                params=dict(request.query) or None,
                data=request.body,
                headers=self._headers(request, credentials),
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            kind = _classify_exception(exc)
            detail = str(exc)
            if credentials is not None:
                detail = credentials.redact(detail)
            logging.warning("%s failed before a response arrived (%s)", request.operation, kind.value)
            raise TransportError(
                f"{request.operation} failed ({kind.value}): {detail}",
                kind=kind,
                operation=request.operation,
            ) from exc

        logging.debug("%s responded with HTTP %s", request.operation, response.status_code)
        return RawResponse.from_response(response)
