"""
Turns a :class:`RawResponse` into a typed value or a typed error.

Every response ends in exactly one outcome:

* 2xx and the body parses as the expected resource -> the parsed value
* 2xx and it does not                               -> :class:`MalformedSuccess`
* 4xx with a documented error body                  -> :class:`ApiError`
* 4xx (or any other non-5xx status) without one     -> :class:`MalformedError`
* 5xx                                               -> :class:`ServerError`
"""

from __future__ import annotations

import json
import logging
from decimal import InvalidOperation
from typing import Any, Callable, Optional, TypeVar

from .errors import ApiError, ErrorCause, MalformedError, MalformedSuccess, ServerError
from .transport import RawResponse

__all__ = ["parse_api_error", "resolve"]

T = TypeVar("T")

_PARSE_ERRORS = (KeyError, TypeError, ValueError, AttributeError, InvalidOperation)
_NO_BODY = object()


def _decode(body: bytes) -> Any:
    if not body or not body.strip():
        return _NO_BODY
    return json.loads(body)


def parse_api_error(status: int, data: Any, *, operation: Optional[str] = None) -> Optional[ApiError]:
    """Build an :class:`ApiError` from a decoded body, or ``None`` if it is not one."""
    if not isinstance(data, dict):
        return None
    message = data.get("message")
    if not isinstance(message, str):
        return None
    code = data.get("code")
    if not isinstance(code, str) or not code:
        code = data.get("error")
    if not isinstance(code, str) or not code:
        code = str(status)

    raw_causes = data.get("cause") or []
    if isinstance(raw_causes, dict):
        raw_causes = [raw_causes]
    if not isinstance(raw_causes, list):
        return None
    causes = [ErrorCause.from_dict(item) for item in raw_causes if isinstance(item, dict)]

    return ApiError(
        status=status,
        code=code,
        message=message,
        causes=causes,
        details=data,
        operation=operation,
    )


def _resolve_success(raw: RawResponse, parser: Callable[[Any], T], operation: Optional[str]) -> T:
    try:
        data = _decode(raw.body)
    except ValueError as exc:
        raise MalformedSuccess(
            f"{operation or 'request'} returned HTTP {raw.status} with a body that is not JSON",
            status=raw.status,
            body=raw.body,
            operation=operation,
        ) from exc
    try:
        return parser(None if data is _NO_BODY else data)
    except _PARSE_ERRORS as exc:
        logging.warning("%s returned a payload that does not match the expected schema", operation)
        raise MalformedSuccess(
            f"{operation or 'request'} returned HTTP {raw.status} with an unexpected payload: {exc!r}",
            status=raw.status,
            body=raw.body,
            operation=operation,
        ) from exc


def resolve(
    raw: RawResponse,
    parser: Callable[[Any], T],
    *,
    operation: Optional[str] = None,
) -> T:
    """
    Return ``parser(decoded_body)`` for a successful response, raise otherwise.

    ``parser`` receives ``None`` when a 2xx response has no body and must
    raise ``KeyError``/``TypeError``/``ValueError`` on a payload it cannot
    accept; those become :class:`MalformedSuccess`.
    """
    status = raw.status
    if 200 <= status <= 299:
        return _resolve_success(raw, parser, operation)

    if status >= 500:
        logging.warning("%s hit a server error (HTTP %s)", operation, status)
        raise ServerError(status=status, body=raw.body, operation=operation)

    if 400 <= status <= 499:
        try:
            data = _decode(raw.body)
        except ValueError:
            data = _NO_BODY
        error = parse_api_error(status, data, operation=operation)
        if error is not None:
            raise error
        raise MalformedError(
            f"{operation or 'request'} returned HTTP {status} without a recognizable error body",
            status=status,
            body=raw.body,
            operation=operation,
        )

    raise MalformedError(
        f"{operation or 'request'} returned unexpected HTTP status {status}",
        status=status,
        body=raw.body,
        operation=operation,
    )
