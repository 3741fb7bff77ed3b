"""Scalar coercion of driver values into requested Python types."""

from __future__ import annotations

import types
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Dict, Optional, Type, TypeVar, Union, get_args, get_origin

from .errors import TypeConversionError

T = TypeVar("T")

_TRUE_STRINGS = {"1", "true", "t", "yes", "y", "on"}
_FALSE_STRINGS = {"0", "false", "f", "no", "n", "off"}


def convert_value(value: Any, required_type: Optional[Type[T]], *, column: Optional[str] = None) -> Any:
    """Coerce one database value to `required_type`.

    `None` (SQL NULL) is returned unchanged for every type. Values that are
    already instances of the requested type are returned as-is. `Optional[X]`
    annotations are unwrapped to `X`.

    Raises:
        TypeConversionError: The value cannot be represented as `required_type`.
    """

    if value is None or required_type is None or required_type is Any:
        return value

    target = unwrap_optional(required_type)
    if not isinstance(target, type):
        return value

    # bool subclasses int and datetime subclasses date.
    if isinstance(value, target) and not (
        (target is int and isinstance(value, bool))
        or (target is date and isinstance(value, datetime))
    ):
        return value

    if issubclass(target, Enum):
        return _convert_enum(value, target, column)

    converter = _CONVERTERS.get(target)
    if converter is None:
        raise TypeConversionError(value, target, column=column)
    try:
        return converter(value)
    except (TypeError, ValueError, ArithmeticError, InvalidOperation) as exc:
        raise TypeConversionError(value, target, column=column) from exc


def unwrap_optional(annotation: Any) -> Any:
    """Return `X` for `Optional[X]` / `X | None`, otherwise `annotation`."""

    origin = get_origin(annotation)
    if origin not in {Union, types.UnionType}:
        return annotation

    all_args = get_args(annotation)
    args = [arg for arg in all_args if arg is not type(None)]
    if len(args) == 1 and len(all_args) == 2:
        return args[0]
    return annotation


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (float, Decimal)):
        if value != int(value):
            raise ValueError("value has a fractional part")
        return int(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        value = bytes(value).decode("utf-8")
    if isinstance(value, str):
        return int(value.strip())
    if isinstance(value, int):
        return int(value)
    raise TypeError(f"unsupported source type {type(value).__name__}")


def _to_float(value: Any) -> float:
    if isinstance(value, (bytes, bytearray, memoryview)):
        value = bytes(value).decode("utf-8")
    if isinstance(value, (int, float, Decimal, str)):
        return float(value)
    raise TypeError(f"unsupported source type {type(value).__name__}")


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, (bytes, bytearray, memoryview)):
        value = bytes(value).decode("utf-8")
    if isinstance(value, (int, str)):
        return Decimal(value)
    raise TypeError(f"unsupported source type {type(value).__name__}")


def _to_str(value: Any) -> str:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8")
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


def _to_bool(value: Any) -> bool:
    if isinstance(value, (int, float, Decimal)):
        if value in (0, 1):
            return bool(value)
        raise ValueError("numeric booleans must be 0 or 1")
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise ValueError(f"not a boolean literal: {value!r}")
    raise TypeError(f"unsupported source type {type(value).__name__}")


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    raise TypeError(f"unsupported source type {type(value).__name__}")


def _to_datetime(value: Any) -> datetime:
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        return datetime.fromisoformat(value.strip())
    raise TypeError(f"unsupported source type {type(value).__name__}")


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        text = value.strip()
        if len(text) > 10:
            return datetime.fromisoformat(text).date()
        return date.fromisoformat(text)
    raise TypeError(f"unsupported source type {type(value).__name__}")


def _to_time(value: Any) -> time:
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, str):
        return time.fromisoformat(value.strip())
    raise TypeError(f"unsupported source type {type(value).__name__}")


def _convert_enum(value: Any, enum_type: Type[Enum], column: Optional[str]) -> Enum:
    try:
        return enum_type(value)
    except ValueError as exc:
        if isinstance(value, str) and value in enum_type.__members__:
            return enum_type[value]
        raise TypeConversionError(value, enum_type, column=column) from exc


_CONVERTERS: Dict[type, Callable[[Any], Any]] = {
    int: _to_int,
    float: _to_float,
    Decimal: _to_decimal,
    str: _to_str,
    bool: _to_bool,
    bytes: _to_bytes,
    datetime: _to_datetime,
    date: _to_date,
    time: _to_time,
}
