"""Relation detection, hydration and staging."""

from flatdata.relations.detector import (
    RelationDeclaration,
    has_relation_declaration,
    is_relation_declaration,
    strip_relation_declarations,
)
from flatdata.relations.hydrator import RELATION_PROPERTIES_KEY, RelationHydrator
from flatdata.relations.stager import stage

__all__ = [
    "RELATION_PROPERTIES_KEY",
    "RelationDeclaration",
    "RelationHydrator",
    "has_relation_declaration",
    "is_relation_declaration",
    "stage",
    "strip_relation_declarations",
]
