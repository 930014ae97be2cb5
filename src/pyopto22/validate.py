"""Validate and cast caller-supplied values before they are written to the controller."""

import math
from collections.abc import Sequence
from typing import Any

from .errors import InvalidValueError
from .types import BaseType, Category

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def validate_boolean(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise InvalidValueError(name, value)
    return value


def validate_integer(name: str, value: Any) -> int | bool:
    """
    Accept values exactly representable as a signed 32-bit integer.

    Booleans pass through unchanged; fractional, non-numeric or out-of-range
    input raises InvalidValueError.
    """
    if isinstance(value, bool):
        return value
    try:
        validated = int(value)
        exact = validated == float(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidValueError(name, value) from None
    if not exact or not INT32_MIN <= validated <= INT32_MAX:
        raise InvalidValueError(name, value)
    return validated


def validate_float(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidValueError(name, value)
    try:
        validated = float(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidValueError(name, value) from None
    # NaN and infinities have no JSON encoding
    if not math.isfinite(validated):
        raise InvalidValueError(name, value)
    return validated


def validate_string(name: str, value: Any) -> str:
    if value is None:
        return ""
    return str(value)


_SCALAR_VALIDATORS = {
    BaseType.BOOLEAN: validate_boolean,
    BaseType.INTEGER: validate_integer,
    BaseType.FLOAT: validate_float,
    BaseType.STRING: validate_string,
}


def validate_element(category: Category, name: str, value: Any) -> Any:
    """Validate one value against the base type of a category (scalar or table element)."""
    return _SCALAR_VALIDATORS[category.base_type](name, value)


def validate_sequence(category: Category, name: str, value: Any) -> list[Any]:
    """Validate a whole table; the first failing element aborts with its index in the name."""
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise InvalidValueError(name, value)
    return [validate_element(category, f"{name}[{i}]", v) for i, v in enumerate(value)]


def validate_value(category: Category, name: str, value: Any) -> Any:
    """Return a normalized, type-cast value for a write to the named variable."""
    if category.is_table:
        return validate_sequence(category, name, value)
    return validate_element(category, name, value)
