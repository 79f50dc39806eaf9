"""Post-hydration staging: one-to-one collapse."""

from __future__ import annotations

import logging

from flatdata.core.values import RecordSet, ValueKind, kind_of
from flatdata.relations.detector import RELATION_ONE
from flatdata.relations.hydrator import RELATION_PROPERTIES_KEY

logger = logging.getLogger(__name__)


def stage(records: RecordSet) -> RecordSet:
    """
    Collapse singleton one-to-one relations, in place.

    A relation declared with ``type: one`` that resolved to exactly one
    record becomes that record's body instead of ``{id: body}``. Relations
    resolving to zero or several records, and relations without a declared
    type, stay mappings. The ``_relation_properties`` metadata is consumed
    and removed.

    Args:
        records: Hydrated record set.

    Returns:
        The same record set.
    """
    collapsed = 0
    for record in records.values():
        if kind_of(record) is not ValueKind.MAPPING:
            continue

        entries = record.pop(RELATION_PROPERTIES_KEY, None)
        if not entries:
            continue

        for entry in entries:
            if entry.get("type") != RELATION_ONE:
                continue

            prop = entry["property"]
            resolved = record.get(prop)
            if kind_of(resolved) is ValueKind.MAPPING and len(resolved) == 1:
                record[prop] = next(iter(resolved.values()))
                collapsed += 1

    if collapsed:
        logger.debug("Collapsed %d one-to-one relation(s)", collapsed)
    return records
