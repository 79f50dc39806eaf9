"""
Relation declaration detection and parsing.

A relation declaration is a mapping with a ``repository`` key, embedded as
the value of a record field::

    manager:
      repository: user
      foreign_alias: managed_projects
      type: one
      values: [mr_admin]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from flatdata.core.exceptions import MalformedRelationDeclaration
from flatdata.core.values import Value, ValueKind, children, kind_of

REPOSITORY_KEY = "repository"
VALUES_KEY = "values"
FOREIGN_ALIAS_KEY = "foreign_alias"
TYPE_KEY = "type"

RELATION_ONE = "one"
RELATION_MANY = "many"


def is_relation_declaration(value: Value) -> bool:
    """True if ``value`` itself is a declaration (a mapping with ``repository``)."""
    return kind_of(value) is ValueKind.MAPPING and REPOSITORY_KEY in value


def has_relation_declaration(value: Value) -> bool:
    """
    Recursively search a value for a relation declaration.

    Non-mappings at the top level are never declarations. The search is
    depth-first over mapping and sequence children and stops at the first
    match.

    Args:
        value: Any repository value (a whole repository, a record, a field).

    Returns:
        True if a declaration exists anywhere in the subtree.
    """
    if kind_of(value) is not ValueKind.MAPPING:
        return False

    if REPOSITORY_KEY in value:
        return True

    return any(_search(child) for child in children(value))


def _search(value: Value) -> bool:
    kind = kind_of(value)
    if kind is ValueKind.MAPPING:
        return has_relation_declaration(value)
    if kind is ValueKind.SEQUENCE:
        return any(_search(child) for child in children(value))
    return False


@dataclass(frozen=True)
class RelationDeclaration:
    """Parsed relation declaration."""

    repository: str
    values: tuple
    foreign_alias: Optional[str] = None
    type: str = RELATION_MANY

    @classmethod
    def from_value(cls, value: Any) -> "RelationDeclaration":
        """
        Parse a declaration mapping.

        Raises:
            MalformedRelationDeclaration: If ``repository`` or ``values`` is
                missing, or ``values`` is a mapping.
        """
        if not is_relation_declaration(value):
            raise MalformedRelationDeclaration("missing 'repository'", value)

        repository = value[REPOSITORY_KEY]
        if repository is None or repository == "":
            raise MalformedRelationDeclaration("empty 'repository'", value)

        if VALUES_KEY not in value:
            raise MalformedRelationDeclaration("missing 'values'", value)

        raw_values = value[VALUES_KEY]
        kind = kind_of(raw_values)
        if kind is ValueKind.MAPPING:
            raise MalformedRelationDeclaration("'values' must be a sequence", value)
        if kind is ValueKind.SEQUENCE:
            ids = tuple(raw_values)
        elif raw_values is None:
            ids = ()
        else:
            ids = (raw_values,)

        # Only "one" collapses; any other type stays a mapping
        relation_type = value.get(TYPE_KEY) or RELATION_MANY

        return cls(
            repository=str(repository),
            values=ids,
            foreign_alias=value.get(FOREIGN_ALIAS_KEY) or None,
            type=relation_type,
        )


def strip_relation_declarations(record: Value) -> Value:
    """
    Return a shallow copy of a record without its relation fields.

    Any field whose value holds a declaration anywhere in its subtree is
    dropped. Non-mapping values are returned unchanged.
    """
    if kind_of(record) is not ValueKind.MAPPING:
        return record
    if not has_relation_declaration(record):
        return dict(record)
    return {
        field: field_value
        for field, field_value in record.items()
        if not has_relation_declaration(field_value)
    }
