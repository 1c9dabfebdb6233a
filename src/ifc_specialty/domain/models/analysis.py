"""Specialty Analysis Result Domain Entity.

The bundle produced for one IFC file: detected specialty, element
records, WBS chapters, optimization findings and summary statistics.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from ifc_specialty.domain.models.element import ElementRecord
from ifc_specialty.domain.models.finding import OptimizationFinding
from ifc_specialty.domain.models.wbs import WbsChapter
from ifc_specialty.domain.value_objects.specialty import Specialty


@dataclass
class ResolutionDiagnostics:
    """Counters for data silently skipped while reading a file.

    Attributes:
        skipped_lines: Non-empty lines that are not ``#id = BODY`` records
        continued_records: Records spanning several lines (not indexed)
        unresolved_references: Relationship targets missing from the file
        unrecognized_property_values: Property values with no known wrapper
        rejected_quantity_values: Quantity values outside the plausible range
    """

    skipped_lines: int = 0
    continued_records: int = 0
    unresolved_references: int = 0
    unrecognized_property_values: int = 0
    rejected_quantity_values: int = 0

    @property
    def total(self) -> int:
        """Total number of skips."""
        return sum(asdict(self).values())

    def to_dict(self) -> dict[str, int]:
        """Convert to a JSON-ready dict."""
        return asdict(self)


@dataclass(frozen=True)
class AnalysisSummary:
    """Summary statistics over the element records of one file."""

    total_elements: int = 0
    elements_by_type: dict[str, int] = field(default_factory=dict)
    total_area: float | None = None
    total_volume: float | None = None
    total_length: float | None = None
    storeys: tuple[str, ...] = ()
    materials_used: tuple[str, ...] = ()

    @classmethod
    def from_elements(cls, elements: list[ElementRecord]) -> AnalysisSummary:
        """Compute summary statistics.

        Totals are absent when zero and rounded to 2 decimals otherwise.
        """
        by_type: dict[str, int] = {}
        storeys: set[str] = set()
        materials: set[str] = set()
        area = volume = length = 0.0

        for element in elements:
            by_type[element.entity_type] = by_type.get(element.entity_type, 0) + 1
            if element.storey:
                storeys.add(element.storey)
            materials.update(element.materials)
            area += element.quantities.area or 0.0
            volume += element.quantities.volume or 0.0
            length += element.quantities.length or 0.0

        return cls(
            total_elements=len(elements),
            elements_by_type=by_type,
            total_area=round(area, 2) if area > 0 else None,
            total_volume=round(volume, 2) if volume > 0 else None,
            total_length=round(length, 2) if length > 0 else None,
            storeys=tuple(sorted(storeys)),
            materials_used=tuple(sorted(materials)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dict."""
        return {
            "total_elements": self.total_elements,
            "elements_by_type": dict(self.elements_by_type),
            "total_area": self.total_area,
            "total_volume": self.total_volume,
            "total_length": self.total_length,
            "storeys": list(self.storeys),
            "materials_used": list(self.materials_used),
        }


@dataclass(frozen=True)
class SpecialtyAnalysisResult:
    """Analysis result for a single IFC file.

    Consumers must treat the contained lists as read-only; the project
    assembler copies chapters before merging them.
    """

    specialty: Specialty
    elements: tuple[ElementRecord, ...] = ()
    chapters: tuple[WbsChapter, ...] = ()
    findings: tuple[OptimizationFinding, ...] = ()
    summary: AnalysisSummary = field(default_factory=AnalysisSummary)
    diagnostics: ResolutionDiagnostics = field(default_factory=ResolutionDiagnostics)

    def to_dict(self, include_elements: bool = True) -> dict[str, Any]:
        """Convert to a JSON-ready dict.

        Args:
            include_elements: Include the full element records

        Returns:
            Serializable dict
        """
        data: dict[str, Any] = {
            "specialty": self.specialty.value,
            "chapters": [c.to_dict() for c in self.chapters],
            "findings": [f.to_dict() for f in self.findings],
            "summary": self.summary.to_dict(),
            "diagnostics": self.diagnostics.to_dict(),
        }
        if include_elements:
            data["elements"] = [e.to_dict() for e in self.elements]
        return data
