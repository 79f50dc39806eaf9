"""
Fluent query cursor.

A cursor walks one query chain::

    service.query()
        .get_repository("project")   # REPOSITORY_SELECTED
        .filter("some_value", "<", 10)  # FILTERED
        .get_record(3)               # RECORD_SELECTED
        .get_property("name")        # PROPERTY_SELECTED
        .execute()

Cursors are immutable: every transition returns a new cursor and leaves the
previous one usable. Selecting a repository resets everything downstream.
"""

from __future__ import annotations

import copy
import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from flatdata.core.exceptions import (
    AlreadyScopedToRecord,
    InvalidStateTransition,
    PropertyNotFound,
    RecordNotFound,
)
from flatdata.core.values import (
    MISSING,
    RecordSet,
    Value,
    ValueKind,
    find_record_key,
    kind_of,
)
from flatdata.query.filters import FilterOperator, matches
from flatdata.relations.detector import is_relation_declaration

if TYPE_CHECKING:
    from flatdata.service import FlatDataService


class CursorState(str, Enum):
    """Position of a cursor in its query chain."""

    EMPTY = "empty"
    REPOSITORY_SELECTED = "repository_selected"
    FILTERED = "filtered"
    RECORD_SELECTED = "record_selected"
    PROPERTY_SELECTED = "property_selected"

    def __str__(self) -> str:
        return self.value


_RECORD_SCOPED = (CursorState.RECORD_SELECTED, CursorState.PROPERTY_SELECTED)


def _lookup(container: Value, name: Any) -> Any:
    """Read ``name`` off a mapping, or index a sequence with an int-like name."""
    kind = kind_of(container)
    if kind is ValueKind.MAPPING:
        key = find_record_key(container, name)
        return MISSING if key is MISSING else container[key]
    if kind is ValueKind.SEQUENCE:
        try:
            index = int(name)
        except (TypeError, ValueError):
            return MISSING
        if -len(container) <= index < len(container):
            return container[index]
    return MISSING


@dataclass(frozen=True)
class QueryCursor:
    """State of one query chain."""

    service: "FlatDataService" = field(repr=False, compare=False)
    state: CursorState = CursorState.EMPTY
    repository_name: Optional[str] = None
    records: Optional[RecordSet] = field(default=None, repr=False)
    filtered: Optional[RecordSet] = field(default=None, repr=False)
    record_id: Any = MISSING
    record: Any = field(default=MISSING, repr=False)
    property_path: tuple = ()
    property: Any = field(default=MISSING, repr=False)

    def get_repository(self, name: str) -> "QueryCursor":
        """
        Select a repository, loading its hydrated record set.

        Allowed from any state; discards any record, filter or property.

        Raises:
            RepositoryNotFound: If the repository (or a related one) is missing.
            MalformedRelationDeclaration: If hydration meets a bad declaration.
        """
        records = self.service.load_records(name)
        return QueryCursor(
            service=self.service,
            state=CursorState.REPOSITORY_SELECTED,
            repository_name=name,
            records=records,
        )

    def get_record(self, record_id: Any) -> "QueryCursor":
        """
        Select one record of the current (possibly filtered) record set.

        Raises:
            InvalidStateTransition: If no repository is selected or a record
                already is.
            RecordNotFound: If ``record_id`` is not in the current set.
        """
        if self.state not in (CursorState.REPOSITORY_SELECTED, CursorState.FILTERED):
            raise InvalidStateTransition(
                "get_record", self.state, reason="select a repository first"
            )

        source = self.filtered if self.filtered is not None else self.records
        key = find_record_key(source, record_id)
        if key is MISSING:
            raise RecordNotFound(record_id, self.repository_name)

        return dataclasses.replace(
            self,
            state=CursorState.RECORD_SELECTED,
            record_id=key,
            record=source[key],
        )

    def get_property(self, name: Any) -> "QueryCursor":
        """
        Read a property of the current record, or of the current property.

        The first call reads ``name`` off the record; later calls index into
        the previously selected value, so ``get_property("manager")
        .get_property("name")`` navigates nested data. A value that is still
        a relation declaration is resolved against its target repository.

        Raises:
            InvalidStateTransition: If no record is selected.
            PropertyNotFound: If ``name`` does not exist at this level.
            RepositoryNotFound: If an on-demand relation targets a missing
                repository.
        """
        if self.state not in _RECORD_SCOPED:
            raise InvalidStateTransition(
                "get_property", self.state, reason="fetch a record first"
            )

        base = self.record if self.state is CursorState.RECORD_SELECTED else self.property
        path = self.property_path + (name,)

        value = _lookup(base, name)
        if value is MISSING:
            raise PropertyNotFound(".".join(str(part) for part in path), self.record_id)

        if is_relation_declaration(value):
            value = self.service.resolve_relation(value)

        return dataclasses.replace(
            self,
            state=CursorState.PROPERTY_SELECTED,
            property_path=path,
            property=value,
        )

    def filter(self, field: str, operator: FilterOperator | str, value: Any) -> "QueryCursor":
        """
        Keep the repository's records whose ``field`` passes the comparison.

        Each call filters the full repository record set, not the result of
        a previous filter.

        Raises:
            AlreadyScopedToRecord: If a record is already selected.
            InvalidStateTransition: If no repository is selected.
            UnsupportedOperator: If ``operator`` is unknown.
        """
        if self.state in _RECORD_SCOPED:
            raise AlreadyScopedToRecord(self.state)
        if self.state is CursorState.EMPTY:
            raise InvalidStateTransition(
                "filter", self.state, reason="select a repository first"
            )

        operator = FilterOperator.parse(operator)
        filtered = {
            record_id: record
            for record_id, record in self.records.items()
            if matches(record, field, operator, value)
        }

        return dataclasses.replace(self, state=CursorState.FILTERED, filtered=filtered)

    def execute(self) -> Any:
        """
        Return the query result.

        Precedence: current property, current record, filtered records, all
        records. Returns None when nothing is selected. The result is a copy,
        so changing it leaves this cursor and its parents untouched.
        """
        if self.property is not MISSING:
            result = self.property
        elif self.record is not MISSING:
            result = self.record
        elif self.filtered is not None:
            result = self.filtered
        else:
            result = self.records
        return copy.deepcopy(result)
