"""JSON-safe dict conversion for athlete records.

Dates become ISO strings, Decimals become strings and enums their values.
``record_from_dict`` reverses this using the dataclass type hints.
"""

from __future__ import annotations

import dataclasses
import typing
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, TypeVar

T = TypeVar("T")

_NONE_TYPE = type(None)


def record_to_dict(record: Any) -> dict[str, Any]:
    """Convert a record dataclass to a JSON-serializable dict."""
    out: dict[str, Any] = {}
    for f in dataclasses.fields(record):
        out[f.name] = _encode(getattr(record, f.name))
    return out


def record_from_dict(cls: type[T], data: dict[str, Any]) -> T:
    """Rebuild a record dataclass from ``record_to_dict`` output.

    Unknown keys are ignored so older files keep loading after a field is
    removed.
    """
    hints = typing.get_type_hints(cls)
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if f.name not in data:
            continue
        kwargs[f.name] = _decode(data[f.name], hints[f.name])
    return cls(**kwargs)


def _encode(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    return value


def _decode(value: Any, hint: Any) -> Any:
    if value is None:
        return None
    target = _unwrap_optional(hint)
    if target is datetime:
        return datetime.fromisoformat(value)
    if target is date:
        return date.fromisoformat(value)
    if target is Decimal:
        return Decimal(str(value))
    if isinstance(target, type) and issubclass(target, Enum):
        return target(value)
    if target is float:
        return float(value)
    if target is int:
        return int(value)
    return value


def _unwrap_optional(hint: Any) -> Any:
    args = [a for a in typing.get_args(hint) if a is not _NONE_TYPE]
    if len(args) == 1:
        return args[0]
    return hint
