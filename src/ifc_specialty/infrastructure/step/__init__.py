"""STEP Infrastructure.

Dependency-free reader for IFC STEP physical files: entity index,
specialty detection, relationship resolution and element extraction.
"""
from __future__ import annotations

from ifc_specialty.infrastructure.step.detector import (
    count_indicators,
    detect_specialty,
    detect_specialty_from_text,
)
from ifc_specialty.infrastructure.step.extractor import (
    QuantityExtractor,
    extract_elements,
    is_target_entity,
)
from ifc_specialty.infrastructure.step.index import EntityIndex, EntityRecord
from ifc_specialty.infrastructure.step.resolver import (
    RelationshipResolver,
    ResolvedDefinitions,
)

__all__ = [
    # Index
    "EntityIndex",
    "EntityRecord",
    # Detection
    "count_indicators",
    "detect_specialty",
    "detect_specialty_from_text",
    # Resolution / extraction
    "RelationshipResolver",
    "ResolvedDefinitions",
    "QuantityExtractor",
    "extract_elements",
    "is_target_entity",
]
