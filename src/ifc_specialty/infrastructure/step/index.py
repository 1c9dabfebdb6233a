"""Entity Index.

Turns the text of a STEP physical file into an id -> record lookup with
secondary indexes by entity type and by referenced id.
"""
from __future__ import annotations

import re
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterator

from ifc_specialty.domain.models.analysis import ResolutionDiagnostics
from ifc_specialty.infrastructure.step.tokens import (
    bounded_references,
    parens_balanced,
    type_tag,
)
from ifc_specialty.shared.logging import get_logger

logger = get_logger(__name__)

_RECORD_LINE = re.compile(r"^#(\d+)\s*=\s*(.+)$")

# Only relationship records feed the reverse index
RELATIONSHIP_PREFIX = "IFCREL"


@dataclass(frozen=True)
class EntityRecord:
    """One ``#id = TYPE(args)`` statement.

    Attributes:
        id: Numeric instance id
        type_name: Upper-case entity type ("" if the body has no type tag)
        body: Record body after ``=`` without the trailing ``;``
    """

    id: int
    type_name: str
    body: str

    def is_type(self, type_name: str) -> bool:
        """Check the exact entity type."""
        return self.type_name == type_name


@dataclass
class EntityIndex:
    """Indexed entity records of one file.

    Build with :meth:`from_text`. Records, type buckets and reverse
    references all iterate in file order.
    """

    records: dict[int, EntityRecord] = field(default_factory=dict)
    by_type: dict[str, list[int]] = field(default_factory=dict)
    referenced_by: dict[int, list[int]] = field(default_factory=dict)
    diagnostics: ResolutionDiagnostics = field(default_factory=ResolutionDiagnostics)

    @classmethod
    def from_text(cls, content: str) -> EntityIndex:
        """Index raw file text.

        Lines that are not single-line ``#id = BODY`` records are skipped
        and counted. A record whose parentheses do not balance spans several
        lines; it is counted but not indexed.

        Args:
            content: Full STEP file text

        Returns:
            Populated EntityIndex
        """
        index = cls()
        diagnostics = index.diagnostics

        for raw_line in content.splitlines():
            line = raw_line.strip()
            if not line:
                continue

            match = _RECORD_LINE.match(line)
            if not match:
                diagnostics.skipped_lines += 1
                continue

            body = match.group(2).rstrip()
            if body.endswith(";"):
                body = body[:-1].rstrip()

            if not parens_balanced(body):
                diagnostics.continued_records += 1
                continue

            entity_id = int(match.group(1))
            index.records[entity_id] = EntityRecord(
                id=entity_id,
                type_name=type_tag(body) or "",
                body=body,
            )

        index._build_secondary_indexes()

        if diagnostics.continued_records:
            logger.warning(
                "Multi-line records are not supported and were skipped",
                continued_records=diagnostics.continued_records,
            )

        logger.debug(
            "Indexed entities",
            records=len(index.records),
            types=len(index.by_type),
            skipped_lines=diagnostics.skipped_lines,
        )
        return index

    def _build_secondary_indexes(self) -> None:
        by_type: dict[str, list[int]] = defaultdict(list)
        referenced_by: dict[int, list[int]] = defaultdict(list)

        for record in self.records.values():
            if not record.type_name:
                continue
            by_type[record.type_name].append(record.id)

            if record.type_name.startswith(RELATIONSHIP_PREFIX):
                for target in dict.fromkeys(bounded_references(record.body)):
                    referenced_by[target].append(record.id)

        self.by_type = dict(by_type)
        self.referenced_by = dict(referenced_by)

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self.records

    def get(self, entity_id: int | None) -> EntityRecord | None:
        """Get a record by id, or None if absent."""
        if entity_id is None:
            return None
        return self.records.get(entity_id)

    def of_type(self, type_name: str) -> Iterator[EntityRecord]:
        """Iterate records of an exact entity type in file order."""
        for entity_id in self.by_type.get(type_name, []):
            yield self.records[entity_id]

    def relationships_for(self, entity_id: int, type_name: str) -> Iterator[EntityRecord]:
        """Iterate relationship records of a type that reference an entity.

        Args:
            entity_id: Referenced entity id
            type_name: Relationship type (e.g., "IFCRELASSOCIATESMATERIAL")

        Yields:
            Matching relationship records in file order
        """
        for rel_id in self.referenced_by.get(entity_id, []):
            record = self.records[rel_id]
            if record.type_name == type_name:
                yield record

    def __iter__(self) -> Iterator[EntityRecord]:
        return iter(self.records.values())
