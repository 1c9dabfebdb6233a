"""Specialty Detector.

Classifies the engineering discipline of an IFC file from the entity
types that dominate it.
"""
from __future__ import annotations

from ifc_specialty.domain.value_objects.specialty import SPECIALTY_INDICATORS, Specialty
from ifc_specialty.infrastructure.step.index import EntityIndex


def count_indicators(index: EntityIndex) -> dict[Specialty, int]:
    """Count indicator entity types per specialty.

    Every matching pattern of a specialty adds one per record.

    Args:
        index: Indexed file

    Returns:
        Occurrence count per detectable specialty, in enumeration order
    """
    counts = {specialty: 0 for specialty in Specialty.detectable()}

    for type_name, ids in index.by_type.items():
        occurrences = len(ids)
        for specialty, patterns in SPECIALTY_INDICATORS.items():
            for pattern in patterns:
                if pattern.search(type_name):
                    counts[specialty] += occurrences

    return counts


def detect_specialty(index: EntityIndex) -> Specialty:
    """Detect the primary specialty of a file.

    The specialty with the strictly highest count wins; on a tie the first
    in enumeration order keeps it. No indicator at all gives UNKNOWN.

    Args:
        index: Indexed file

    Returns:
        Detected specialty
    """
    best = Specialty.UNKNOWN
    best_count = 0
    for specialty, count in count_indicators(index).items():
        if count > best_count:
            best = specialty
            best_count = count
    return best


def detect_specialty_from_text(content: str) -> Specialty:
    """Index raw file text and detect its specialty."""
    return detect_specialty(EntityIndex.from_text(content))
