"""
Value model shared by every layer.

Repository content is plain Python data as produced by the parsers: scalars
(``str``, ``int``, ``float``, ``bool``, ``None``), ``list`` and ``dict``.
The aliases below document intent; ``kind_of`` gives the closed
classification that traversal code dispatches on.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Hashable, Iterable, Union

Scalar = Union[str, int, float, bool, None]
Value = Any  # Scalar | list[Value] | dict[str, Value]
RecordId = Hashable
Record = dict
RecordSet = dict


class _Missing:
    """Sentinel for "no value", distinct from a stored ``None``."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


class ValueKind(str, Enum):
    """Closed classification of a Value."""

    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def kind_of(value: Value) -> ValueKind:
    """Classify a value as scalar, sequence or mapping."""
    if isinstance(value, dict):
        return ValueKind.MAPPING
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    return ValueKind.SCALAR


def children(value: Value) -> Iterable[Value]:
    """Iterate the direct child values of a sequence or mapping."""
    kind = kind_of(value)
    if kind is ValueKind.MAPPING:
        return value.values()
    if kind is ValueKind.SEQUENCE:
        return iter(value)
    return ()


def normalize_id(record_id: RecordId) -> RecordId:
    """
    Normalize a record id for value-based comparison.

    Integer-like ids compare equal to their string form, so ``3``, ``3.0``
    and ``"3"`` all name the same record. Booleans are kept as-is and never
    match a number or a string.
    """
    if isinstance(record_id, bool):
        return record_id
    if isinstance(record_id, float) and record_id.is_integer():
        return str(int(record_id))
    if isinstance(record_id, (int, float)):
        return str(record_id)
    return record_id


def ids_equal(left: RecordId, right: RecordId) -> bool:
    """Compare two record ids by value rather than by type."""
    return normalize_id(left) == normalize_id(right)


def contains_id(ids: Iterable[RecordId], record_id: RecordId) -> bool:
    """Membership test for record ids using ``ids_equal``."""
    target = normalize_id(record_id)
    return any(normalize_id(candidate) == target for candidate in ids)


def find_record_key(records: RecordSet, record_id: RecordId) -> Any:
    """
    Find the key under which ``record_id`` is stored in a record set.

    Args:
        records: Mapping of record id to record body.
        record_id: Requested id, in either key scheme.

    Returns:
        The stored key, or ``MISSING`` if no key matches.
    """
    if isinstance(record_id, bool):
        return next((key for key in records if key is record_id), MISSING)

    try:
        if record_id in records:
            return record_id
    except TypeError:
        # unhashable id
        return MISSING

    target = normalize_id(record_id)
    for key in records:
        if normalize_id(key) == target:
            return key
    return MISSING
