"""
Small parsing helpers used by the ``from_dict`` constructors of response types.

They raise ``KeyError``/``TypeError``/``ValueError`` on data that does not fit,
which the resolver reports as :class:`~mpago.core.errors.MalformedSuccess`.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar, Union

from .options import EXTRA_FIELD, parse_timestamp

__all__ = [
    "extra_fields",
    "open_enum",
    "optional_bool",
    "optional_decimal",
    "optional_int",
    "optional_str",
    "optional_timestamp",
    "parse_list",
    "require_decimal",
    "require_mapping",
]

E = TypeVar("E", bound=Enum)


def require_mapping(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"Expected a JSON object for {what}, got {type(data).__name__}")
    return data


def require_decimal(value: Any) -> Decimal:
    if value is None:
        raise ValueError("amount is missing")
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise TypeError(f"amount must be numeric, got {type(value).__name__}")
    return Decimal(str(value))


def optional_decimal(value: Any) -> Optional[Decimal]:
    return None if value is None else require_decimal(value)


def optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError("expected an integer, got a boolean")
    if isinstance(value, str):
        return int(value)
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"expected an integer, got {value}")
    return int(value)


def optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    return str(value)


def optional_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if not isinstance(value, bool):
        raise TypeError(f"expected a boolean, got {type(value).__name__}")
    return value


def optional_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise TypeError(f"expected an ISO-8601 string, got {type(value).__name__}")
    return parse_timestamp(value)


def open_enum(enum_cls: Type[E], value: Any) -> Optional[Union[E, str]]:
    """Known values become members; values the API added later stay strings."""
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return str(value)


def extra_fields(cls: type, data: Mapping[str, Any]) -> Dict[str, Any]:
    known = {
        field.metadata.get("wire", field.name)
        for field in dataclasses.fields(cls)
        if field.name != EXTRA_FIELD
    }
    return {key: value for key, value in data.items() if key not in known}


def parse_list(data: Any, what: str) -> List[Any]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise TypeError(f"Expected a JSON array for {what}, got {type(data).__name__}")
    return data
