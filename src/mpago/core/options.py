"""
Helpers shared by every options structure.

Options are plain dataclasses whose fields default to ``None``; ``None``
means "leave the field out of the wire payload". Each options class may also
carry an ``extra`` mapping for keys this package does not model yet. Those
keys are forwarded untouched.
"""

from __future__ import annotations

import copy
import dataclasses
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Type, TypeVar

from .errors import ValidationError

__all__ = [
    "FieldChecker",
    "currency_decimals",
    "merge_with_defaults",
    "parse_timestamp",
    "to_payload",
    "to_query",
]

T = TypeVar("T")
E = TypeVar("E", bound=Enum)

EXTRA_FIELD = "extra"

_CURRENCY_DECIMALS = {
    "CLP": 0,
    "BTC": 8,
    "ETH": 8,
}
_DEFAULT_DECIMALS = 2

_RELATIVE_DATE = re.compile(r"^NOW(?:[+-]\d+(?:MINUTE|HOUR|DAY|WEEK|MONTH|YEAR)S?)?$")


def currency_decimals(currency: Optional[Any]) -> int:
    """Number of decimal places Mercado Pago accepts for ``currency``."""
    if currency is None:
        return _DEFAULT_DECIMALS
    code = currency.value if isinstance(currency, Enum) else str(currency)
    return _CURRENCY_DECIMALS.get(code.upper(), _DEFAULT_DECIMALS)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z`` for UTC."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _wire_name(field: dataclasses.Field) -> str:
    return field.metadata.get("wire", field.name)


def _wire_value(value: Any, *, as_string: bool = False) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_payload(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value) if as_string else float(value)
    if isinstance(value, datetime):
        return value.isoformat(timespec="milliseconds")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_wire_value(item, as_string=as_string) for item in value]
    if isinstance(value, Mapping):
        return {str(key): _wire_value(item) for key, item in value.items()}
    if as_string and value is not None:
        return str(value)
    return value


def to_payload(options: Any) -> Dict[str, Any]:
    """
    Serialize an options dataclass into a JSON-ready ``dict``.

    ``None`` fields are omitted, nested dataclasses are serialized
    recursively and the ``extra`` mapping is merged in without overriding any
    declared field.
    """
    payload: Dict[str, Any] = {}
    passthrough: Mapping[str, Any] = {}
    for field in dataclasses.fields(options):
        value = getattr(options, field.name)
        if field.name == EXTRA_FIELD:
            passthrough = value or {}
            continue
        if value is None:
            continue
        payload[_wire_name(field)] = _wire_value(
            value, as_string=field.metadata.get("as_string", False)
        )
    for key, value in passthrough.items():
        payload.setdefault(key, _wire_value(value))
    return payload


def to_query(options: Any) -> Dict[str, str]:
    """Flatten an options dataclass into query-string parameters."""
    query: Dict[str, str] = {}
    for key, value in to_payload(options).items():
        if isinstance(value, bool):
            query[key] = "true" if value else "false"
        elif isinstance(value, float) and value.is_integer():
            query[key] = str(int(value))
        else:
            query[key] = str(value)
    return query


def merge_with_defaults(options: Optional[T], defaults: Optional[T]) -> T:
    """
    Fill the unset fields of ``options`` from ``defaults``.

    Caller-set fields always win, field by field. Nested option dataclasses
    are merged recursively and ``extra`` mappings are combined with the
    caller's keys taking precedence. Neither input is modified.
    """
    if options is None:
        if defaults is None:
            raise ValueError("Either options or defaults must be provided")
        return copy.deepcopy(defaults)
    merged = copy.deepcopy(options)
    if defaults is None:
        return merged
    if type(defaults) is not type(options):
        raise TypeError(
            f"Cannot merge {type(options).__name__} with defaults of type {type(defaults).__name__}"
        )

    for field in dataclasses.fields(merged):
        current = getattr(merged, field.name)
        fallback = getattr(defaults, field.name)
        if field.name == EXTRA_FIELD:
            combined = dict(fallback or {})
            combined.update(current or {})
            setattr(merged, field.name, combined)
        elif current is None:
            setattr(merged, field.name, copy.deepcopy(fallback))
        elif (
            fallback is not None
            and dataclasses.is_dataclass(current)
            and type(current) is type(fallback)
        ):
            setattr(merged, field.name, merge_with_defaults(current, fallback))
    return merged


class FieldChecker:
    """
    Collects validation problems for one options value.

    Each ``check`` method returns the normalized value (or ``None`` when the
    value is absent or invalid) so builders can write it back onto their
    working copy. :meth:`raise_for_problems` raises a single
    :class:`ValidationError` naming every offending field.
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation
        self.problems: Dict[str, str] = {}

    def add(self, name: str, problem: str) -> None:
        self.problems.setdefault(name, problem)

    def require(self, name: str, value: Any) -> bool:
        if value is None or (isinstance(value, str) and not value.strip()):
            self.add(name, "is required")
            return False
        return True

    def amount(
        self,
        name: str,
        value: Any,
        *,
        currency: Optional[Any] = None,
        required: bool = False,
    ) -> Optional[Decimal]:
        if value is None:
            if required:
                self.add(name, "is required")
            return None
        if isinstance(value, bool):
            self.add(name, "must be a decimal amount")
            return None
        try:
            amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
        except InvalidOperation:
            self.add(name, f"must be a decimal amount, got {value!r}")
            return None
        if not amount.is_finite():
            self.add(name, "must be a finite amount")
            return None
        if amount < 0:
            self.add(name, "must not be negative")
            return None

        places = currency_decimals(currency)
        quantum = Decimal(1).scaleb(-places)
        try:
            exact = amount.quantize(quantum) == amount
        except InvalidOperation:
            self.add(name, "is too large")
            return None
        if not exact:
            self.add(name, f"allows at most {places} decimal places")
            return None
        # Amounts travel as JSON numbers, so they must survive a float round trip.
        if Decimal(repr(float(amount))) != amount:
            self.add(name, "has more significant digits than a JSON number can carry")
            return None
        return amount

    def integer(
        self,
        name: str,
        value: Any,
        *,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
        required: bool = False,
    ) -> Optional[int]:
        if value is None:
            if required:
                self.add(name, "is required")
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            self.add(name, "must be an integer")
            return None
        if minimum is not None and value < minimum:
            self.add(name, f"must be at least {minimum}")
            return None
        if maximum is not None and value > maximum:
            self.add(name, f"must be at most {maximum}")
            return None
        return value

    def enum(
        self,
        name: str,
        value: Any,
        enum_cls: Type[E],
        *,
        required: bool = False,
    ) -> Optional[E]:
        if value is None:
            if required:
                self.add(name, "is required")
            return None
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(value)
        except ValueError:
            allowed = ", ".join(str(member.value) for member in enum_cls)
            self.add(name, f"must be one of: {allowed}")
            return None

    def timestamp(
        self,
        name: str,
        value: Any,
        *,
        allow_relative: bool = False,
        required: bool = False,
    ) -> Optional[Any]:
        if value is None:
            if required:
                self.add(name, "is required")
            return None
        if isinstance(value, (datetime, date)):
            return value
        if not isinstance(value, str):
            self.add(name, "must be an ISO-8601 timestamp")
            return None
        if allow_relative and _RELATIVE_DATE.match(value.strip()):
            return value
        try:
            parse_timestamp(value)
        except ValueError:
            self.add(name, f"must be an ISO-8601 timestamp, got {value!r}")
            return None
        return value

    def url(self, name: str, value: Any, *, required: bool = False) -> Optional[str]:
        if value is None:
            if required:
                self.add(name, "is required")
            return None
        if not isinstance(value, str) or not value.startswith(("http://", "https://")):
            self.add(name, "must be an http(s) URL")
            return None
        return value

    def email(self, name: str, value: Any, *, required: bool = False) -> Optional[str]:
        if value is None or (isinstance(value, str) and not value.strip()):
            if required:
                self.add(name, "is required")
            return None
        if not isinstance(value, str) or "@" not in value.strip(" @"):
            self.add(name, "must be an e-mail address")
            return None
        return value.strip()

    def exclusive(self, names: Sequence[str], values: Iterable[Any], reason: str) -> bool:
        """Flag ``names`` when more than one of ``values`` is set."""
        present = [name for name, value in zip(names, values) if value is not None]
        if len(present) > 1:
            for name in present:
                self.add(name, reason)
            return False
        return True

    def raise_for_problems(self) -> None:
        if self.problems:
            raise ValidationError(
                list(self.problems),
                operation=self.operation,
                problems=self.problems,
            )
