"""
Relation hydration.

Resolves relation declarations into embedded record data in two passes:

1. Local: fields of the repository's own records that declare a relation
   are replaced by ``{related id: related record}`` loaded from the target
   repository.
2. Foreign: every repository in the directory (the current one included) is
   scanned for declarations that point back at the current repository with
   a ``foreign_alias``; each referenced record gains that alias field holding
   the declaring records, stripped of their own relation fields.

Resolution is one hop deep. Records embedded from another repository keep
their own declarations unexpanded, and foreign embeds drop them entirely, so
no cycle can form.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from flatdata.core.values import RecordSet, ValueKind, contains_id, kind_of
from flatdata.relations.detector import (
    REPOSITORY_KEY,
    TYPE_KEY,
    RelationDeclaration,
    has_relation_declaration,
    is_relation_declaration,
    strip_relation_declarations,
)
from flatdata.repositories.loader import RepositoryLoader

logger = logging.getLogger(__name__)

RELATION_PROPERTIES_KEY = "_relation_properties"
SOURCE_LOCAL = "local"
SOURCE_FOREIGN = "foreign"


def add_relation_property(
    record: dict, prop: str, source: str, relation_type: str | None
) -> None:
    """Record that ``prop`` of ``record`` was populated by hydration."""
    entries = record.setdefault(RELATION_PROPERTIES_KEY, [])
    entry = {"property": prop, "source": source, "type": relation_type}
    if entry not in entries:
        entries.append(entry)


def resolve_declaration(
    declaration: RelationDeclaration, target_records: RecordSet
) -> dict:
    """
    Select the records a declaration references.

    Ids missing from the target repository are dropped silently. The result
    keeps the target repository's order and holds copies of the bodies.
    """
    return {
        record_id: copy.deepcopy(body)
        for record_id, body in target_records.items()
        if contains_id(declaration.values, record_id)
    }


class RelationHydrator:
    """
    Resolves local and foreign relations for one repository.

    Example:
        >>> hydrator = RelationHydrator(loader)
        >>> records = hydrator.hydrate("project", loader.load_raw("project"))
        >>> records["real_project_1"]["manager"]["mr_admin"]["name"]
        'Mr. Admin'
    """

    def __init__(
        self,
        loader: RepositoryLoader,
        hydrate_local: bool = True,
        hydrate_foreign: bool = True,
    ):
        self.loader = loader
        self.hydrate_local = hydrate_local
        self.hydrate_foreign = hydrate_foreign

    def hydrate(self, repository_name: str, records: RecordSet) -> RecordSet:
        """
        Run the local pass, then the foreign pass, on ``records`` in place.

        Args:
            repository_name: Name of the repository ``records`` was loaded from.
            records: Raw record set; mutated and returned.

        Returns:
            The hydrated record set (same object as ``records``).

        Raises:
            RepositoryNotFound: If a related repository is missing.
            MalformedRelationDeclaration: If a relevant declaration is malformed.
        """
        # Related repositories loaded during this call, by name
        loaded: dict[str, RecordSet] = {}

        if self.hydrate_local:
            records = self.hydrate_local_relations(records, loaded)
        if self.hydrate_foreign:
            records = self.hydrate_foreign_relations(repository_name, records, loaded)
        return records

    def _load(self, name: str, loaded: dict[str, RecordSet]) -> RecordSet:
        if name not in loaded:
            loaded[name] = self.loader.load_raw(name)
        return loaded[name]

    def hydrate_local_relations(
        self, records: RecordSet, loaded: dict[str, RecordSet] | None = None
    ) -> RecordSet:
        """
        Replace every local relation declaration with the records it names.

        The owning record also gets a ``type`` field holding the declared
        relation type.
        """
        if loaded is None:
            loaded = {}

        # Only walk the records if a declaration exists somewhere within
        if not has_relation_declaration(records):
            return records

        resolved_count = 0
        for record in records.values():
            if kind_of(record) is not ValueKind.MAPPING:
                continue

            for field, value in list(record.items()):
                if not is_relation_declaration(value):
                    continue

                declaration = RelationDeclaration.from_value(value)
                target_records = self._load(declaration.repository, loaded)

                record[field] = resolve_declaration(declaration, target_records)
                add_relation_property(record, field, SOURCE_LOCAL, declaration.type)
                record[TYPE_KEY] = declaration.type
                resolved_count += 1

        logger.debug("Resolved %d local relation(s)", resolved_count)
        return records

    def hydrate_foreign_relations(
        self,
        repository_name: str,
        records: RecordSet,
        loaded: dict[str, RecordSet] | None = None,
    ) -> RecordSet:
        """Embed records of other repositories that point here via ``foreign_alias``."""
        if loaded is None:
            loaded = {}

        embedded_count = 0
        for foreign_name in self.loader.list_repository_names():
            foreign_records = self._load(foreign_name, loaded)

            if not has_relation_declaration(foreign_records):
                continue

            for foreign_id, foreign_record in foreign_records.items():
                if kind_of(foreign_record) is not ValueKind.MAPPING:
                    continue

                for value in foreign_record.values():
                    if not is_relation_declaration(value):
                        continue
                    if value[REPOSITORY_KEY] != repository_name:
                        continue

                    declaration = RelationDeclaration.from_value(value)
                    if not declaration.foreign_alias:
                        continue

                    embedded_count += self._embed_foreign(
                        records, declaration, foreign_id, foreign_record
                    )

        logger.debug(
            "Embedded %d foreign record(s) into %s", embedded_count, repository_name
        )
        return records

    def _embed_foreign(
        self,
        records: RecordSet,
        declaration: RelationDeclaration,
        foreign_id: Any,
        foreign_record: dict,
    ) -> int:
        alias = declaration.foreign_alias
        embedded = 0

        for record_id, record in records.items():
            if kind_of(record) is not ValueKind.MAPPING:
                continue
            if not contains_id(declaration.values, record_id):
                continue

            if kind_of(record.get(alias)) is not ValueKind.MAPPING:
                record[alias] = {}
            record[alias][foreign_id] = copy.deepcopy(
                strip_relation_declarations(foreign_record)
            )
            add_relation_property(record, alias, SOURCE_FOREIGN, None)
            embedded += 1

        return embedded
