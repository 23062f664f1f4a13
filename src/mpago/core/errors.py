"""
Error taxonomy shared by every layer of the Mercado Pago client.

Nothing in the library recovers from these errors; each one is raised to the
caller as-is so it can decide whether to fix its input, retry or give up.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

__all__ = [
    "ApiError",
    "BuilderConsumedError",
    "ConstructionError",
    "ErrorCause",
    "MalformedError",
    "MalformedResponseError",
    "MalformedSuccess",
    "MercadoPagoError",
    "ResponseError",
    "ServerError",
    "TransportError",
    "TransportErrorKind",
    "ValidationError",
]


class MercadoPagoError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str, *, operation: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "error": type(self).__name__,
            "message": self.message,
        }
        if self.operation:
            result["operation"] = self.operation
        return result


class ConstructionError(MercadoPagoError):
    """Raised when a client cannot be built from the supplied credentials or settings."""

    def __init__(self, message: str, *, reason: str) -> None:
        super().__init__(message)
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["reason"] = self.reason
        return result


class ValidationError(MercadoPagoError):
    """
    Local validation failure. Raised before any network call is made.

    ``fields`` lists every offending field, nested fields as dotted paths
    (``payer.email``, ``additional_info.items[0].unit_price``).
    """

    def __init__(
        self,
        fields: Union[str, Iterable[str]],
        message: Optional[str] = None,
        *,
        operation: Optional[str] = None,
        problems: Optional[Dict[str, str]] = None,
    ) -> None:
        names: Tuple[str, ...] = (fields,) if isinstance(fields, str) else tuple(fields)
        self.fields = names
        self.problems = dict(problems or {})
        if message is None:
            if self.problems:
                message = "; ".join(f"{name}: {self.problems[name]}" for name in self.problems)
            else:
                message = f"Invalid value for {', '.join(names)}"
        super().__init__(message, operation=operation)

    @property
    def field(self) -> str:
        return self.fields[0] if self.fields else ""

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["fields"] = list(self.fields)
        return result


class BuilderConsumedError(MercadoPagoError):
    """Raised when a request builder is sent a second time."""


class TransportErrorKind(str, Enum):
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    TLS = "tls"
    REQUEST = "request"


class TransportError(MercadoPagoError):
    """
    Network-level failure: the request never produced an HTTP response.

    The underlying ``requests`` exception is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: TransportErrorKind,
        operation: Optional[str] = None,
    ) -> None:
        super().__init__(message, operation=operation)
        self.kind = kind

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["kind"] = self.kind.value
        return result


@dataclass(frozen=True)
class ErrorCause:
    """One entry of the ``cause`` list Mercado Pago attaches to error bodies."""

    code: Optional[Union[int, str]]
    description: Optional[str]
    # The API sends a date joined to a request id here, e.g. "08-09-2023T22:33:32UTC;c68d...".
    data: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ErrorCause":
        known = {"code", "description", "data"}
        return cls(
            code=data.get("code"),
            description=data.get("description"),
            data=data.get("data"),
            extra={key: value for key, value in data.items() if key not in known},
        )


class ResponseError(MercadoPagoError):
    """Base class for errors derived from an HTTP response."""

    def __init__(self, message: str, *, status: int, operation: Optional[str] = None) -> None:
        super().__init__(message, operation=operation)
        self.status = status

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["status"] = self.status
        return result


class ApiError(ResponseError):
    """Structured rejection returned by Mercado Pago (4xx with a documented error body)."""

    def __init__(
        self,
        *,
        status: int,
        code: str,
        message: str,
        causes: Optional[List[ErrorCause]] = None,
        details: Optional[Dict[str, Any]] = None,
        operation: Optional[str] = None,
    ) -> None:
        super().__init__(message, status=status, operation=operation)
        self.code = code
        self.causes = list(causes or [])
        self.details = dict(details or {})

    def __str__(self) -> str:
        return f"[{self.status}] {self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["code"] = self.code
        if self.causes:
            result["causes"] = [
                {"code": cause.code, "description": cause.description} for cause in self.causes
            ]
        return result


class MalformedResponseError(ResponseError):
    """The response did not match the schema expected for its status class."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        body: bytes,
        operation: Optional[str] = None,
    ) -> None:
        super().__init__(message, status=status, operation=operation)
        self.body = body


class MalformedSuccess(MalformedResponseError):
    """A 2xx response whose body does not parse as the expected resource."""


class MalformedError(MalformedResponseError):
    """A non-2xx, non-5xx response whose body is not a documented API error."""


class ServerError(ResponseError):
    """Remote 5xx. Potentially transient; retry policy belongs to the caller."""

    retriable = True

    def __init__(
        self,
        *,
        status: int,
        body: bytes = b"",
        operation: Optional[str] = None,
    ) -> None:
        super().__init__(
            f"Mercado Pago responded with server error {status}",
            status=status,
            operation=operation,
        )
        self.body = body
