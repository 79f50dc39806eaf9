"""
Comparison operators for filtering records.

Equality comes in two flavours: loose (``==``, ``!=``) compares a number
with a numeric string by value, while strict (``===``, ``!==``) also
requires both sides to have the same type.
"""

from __future__ import annotations

import math
import operator as op
from enum import Enum
from typing import Any, Callable

from flatdata.core.exceptions import UnsupportedOperator


class FilterOperator(str, Enum):
    """Supported comparison operators."""

    EQUAL = "=="
    IDENTICAL = "==="
    NOT_EQUAL = "!="
    NOT_IDENTICAL = "!=="
    LESS_THAN = "<"
    LESS_THAN_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_THAN_EQUAL = ">="

    @classmethod
    def parse(cls, symbol: Any) -> "FilterOperator":
        """
        Look up an operator by its symbol.

        Raises:
            UnsupportedOperator: If ``symbol`` is not one of the eight operators.
        """
        if isinstance(symbol, cls):
            return symbol
        try:
            return cls(symbol)
        except ValueError:
            raise UnsupportedOperator(symbol) from None


def _to_number(value: Any) -> float | None:
    """Numeric view of a number or numeric string; None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return None if math.isnan(number) else number
    return None


def _truthy(value: Any) -> bool:
    """Truthiness for loose comparison; the string ``"0"`` is false."""
    if isinstance(value, str) and value == "0":
        return False
    return bool(value)


def loose_equals(left: Any, right: Any) -> bool:
    """
    Value equality across scalar types.

    - numbers and numeric strings compare numerically (``"10" == 10``);
    - a boolean compares by truthiness against anything, with ``"0"`` and
      ``""`` false;
    - ``None`` equals any falsy value.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return _truthy(left) == _truthy(right)
    if left is None or right is None:
        return not left and not right

    left_number = _to_number(left)
    right_number = _to_number(right)
    if left_number is not None and right_number is not None:
        if isinstance(left, str) and isinstance(right, str):
            return left == right or left_number == right_number
        return left_number == right_number

    return left == right


def strict_equals(left: Any, right: Any) -> bool:
    """Equality requiring identical types (``1 === 1.0`` is false)."""
    return type(left) is type(right) and left == right


def _ordered(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def evaluate(left: Any, right: Any) -> bool:
        left_number = _to_number(left)
        right_number = _to_number(right)
        if left_number is not None and right_number is not None:
            return compare(left_number, right_number)
        if isinstance(left, str) and isinstance(right, str):
            return compare(left, right)
        return False

    return evaluate


_COMPARATORS: dict[FilterOperator, Callable[[Any, Any], bool]] = {
    FilterOperator.EQUAL: loose_equals,
    FilterOperator.IDENTICAL: strict_equals,
    FilterOperator.NOT_EQUAL: lambda left, right: not loose_equals(left, right),
    FilterOperator.NOT_IDENTICAL: lambda left, right: not strict_equals(left, right),
    FilterOperator.LESS_THAN: _ordered(op.lt),
    FilterOperator.LESS_THAN_EQUAL: _ordered(op.le),
    FilterOperator.GREATER_THAN: _ordered(op.gt),
    FilterOperator.GREATER_THAN_EQUAL: _ordered(op.ge),
}


def compare(left: Any, operator: FilterOperator | str, right: Any) -> bool:
    """Evaluate ``left <operator> right``."""
    return _COMPARATORS[FilterOperator.parse(operator)](left, right)


def matches(record: Any, field: str, operator: FilterOperator | str, value: Any) -> bool:
    """
    Test one record against a filter.

    A record without ``field`` (or that is not a mapping) is compared as if
    the field held ``None``.
    """
    left = record.get(field) if isinstance(record, dict) else None
    return compare(left, operator, value)
