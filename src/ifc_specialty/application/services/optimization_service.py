"""Optimization Service.

Heuristic design-optimization findings per specialty: standardization of
wall thicknesses, window/door/column sizes, long beam spans, concrete
volume and building-services coordination counts.
"""
from __future__ import annotations

from collections import Counter

from ifc_specialty.domain.models.element import ElementRecord
from ifc_specialty.domain.models.finding import (
    FindingSeverity,
    FindingType,
    OptimizationFinding,
)
from ifc_specialty.domain.value_objects.specialty import Specialty
from ifc_specialty.shared.logging import get_logger

logger = get_logger(__name__)

# Thresholds (fixed, no calibration)
MAX_WALL_THICKNESSES = 4
MAX_WINDOW_SIZES = 6
MIN_WINDOWS_FOR_SIZE_CHECK = 8
MAX_DOOR_SIZES = 4
MAX_COLUMN_SECTIONS = 5
LONG_BEAM_SPAN = 8.0

CONCRETE_TYPES = ("IFCBEAM", "IFCCOLUMN", "IFCSLAB", "IFCFOOTING")


def size_key(element: ElementRecord) -> str | None:
    """Opening size key in centimetres (e.g., "120×140")."""
    width = element.quantities.width
    height = element.quantities.height
    if not width or not height:
        return None
    return f"{width * 100:.0f}×{height * 100:.0f}"


def _references(elements: list[ElementRecord]) -> tuple[str, ...]:
    return tuple(e.reference for e in elements)


class OptimizationService:
    """Service for finding design-optimization opportunities."""

    def analyze(
        self,
        elements: list[ElementRecord],
        specialty: Specialty,
    ) -> list[OptimizationFinding]:
        """Run the heuristics of a specialty.

        Args:
            elements: Element records of one file
            specialty: Detected specialty

        Returns:
            List of findings (empty for specialties without rules)
        """
        findings: list[OptimizationFinding] = []

        if specialty is Specialty.ARCHITECTURE:
            findings.extend(self._check_architecture(elements))
        elif specialty is Specialty.STRUCTURE:
            findings.extend(self._check_structure(elements))
        elif specialty.is_mep:
            findings.extend(self._check_services(elements, specialty))

        logger.debug(
            "Optimization analysis completed",
            specialty=specialty.value,
            findings=len(findings),
        )
        return findings

    # =========================================================================
    # Architecture
    # =========================================================================

    def _check_architecture(self, elements: list[ElementRecord]) -> list[OptimizationFinding]:
        findings: list[OptimizationFinding] = []

        walls = [e for e in elements if e.is_a("WALL")]
        thicknesses: dict[int, None] = {}
        for wall in walls:
            if wall.quantities.thickness:
                thicknesses[round(wall.quantities.thickness * 100)] = None
        if len(thicknesses) > MAX_WALL_THICKNESSES:
            listed = ", ".join(f"{t}cm" for t in thicknesses)
            findings.append(OptimizationFinding(
                type=FindingType.STANDARDIZATION,
                severity=FindingSeverity.SUGGESTION,
                title=f"{len(thicknesses)} different wall thicknesses",
                description=(
                    f"{len(thicknesses)} distinct wall thicknesses were found ({listed}). "
                    "Consider normalizing them to reduce variants and simplify purchasing."
                ),
                affected_elements=_references(walls),
                potential_savings="3-5% on masonry materials",
            ))

        windows = [e for e in elements if e.is_a("WINDOW")]
        window_sizes = Counter(k for k in map(size_key, windows) if k)
        if len(window_sizes) > MAX_WINDOW_SIZES and len(windows) > MIN_WINDOWS_FOR_SIZE_CHECK:
            findings.append(OptimizationFinding(
                type=FindingType.STANDARDIZATION,
                severity=FindingSeverity.SUGGESTION,
                title=f"{len(window_sizes)} different window sizes ({len(windows)} windows)",
                description=(
                    "Many window size variants make the project more expensive: each "
                    "variant is priced as a separate composite item. Consider "
                    "normalizing to 3-5 standard sizes."
                ),
                affected_elements=_references(windows),
                potential_savings="5-15% on window frames (series vs. made-to-measure)",
            ))

        doors = [e for e in elements if e.is_a("DOOR")]
        door_sizes = Counter(k for k in map(size_key, doors) if k)
        if len(door_sizes) > MAX_DOOR_SIZES:
            findings.append(OptimizationFinding(
                type=FindingType.STANDARDIZATION,
                severity=FindingSeverity.INFO,
                title=f"{len(door_sizes)} different door sizes",
                description=(
                    "Doors with standard dimensions (80×210cm) are cheaper than "
                    "made-to-measure doors."
                ),
                affected_elements=_references(doors),
            ))

        return findings

    # =========================================================================
    # Structure
    # =========================================================================

    def _check_structure(self, elements: list[ElementRecord]) -> list[OptimizationFinding]:
        findings: list[OptimizationFinding] = []

        columns = [e for e in elements if e.is_a("COLUMN")]
        sections = Counter(c.name or "unknown" for c in columns)
        if len(sections) > MAX_COLUMN_SECTIONS:
            findings.append(OptimizationFinding(
                type=FindingType.STANDARDIZATION,
                severity=FindingSeverity.SUGGESTION,
                title=f"{len(sections)} different column sections",
                description=(
                    "Many column section variants increase formwork costs. "
                    "Consider unifying sections where possible."
                ),
                affected_elements=_references(columns),
                potential_savings="5-10% on formwork (mould reuse)",
            ))

        for beam in (e for e in elements if e.is_a("BEAM")):
            span = beam.quantities.length
            if span and span > LONG_BEAM_SPAN:
                findings.append(OptimizationFinding(
                    type=FindingType.SIZING,
                    severity=FindingSeverity.WARNING,
                    title=f"Beam with {span:.1f}m span ({beam.name})",
                    description=(
                        "Spans above 8m may benefit from pre-stressing or composite "
                        "(steel-concrete) construction. Check sizing and alternatives."
                    ),
                    affected_elements=(beam.reference,),
                ))

        concrete_volume = sum(
            e.quantities.volume or 0.0
            for e in elements
            if any(t in e.entity_type for t in CONCRETE_TYPES)
        )
        if concrete_volume > 0:
            findings.append(OptimizationFinding(
                type=FindingType.COST,
                severity=FindingSeverity.INFO,
                title=f"Estimated total concrete volume: {concrete_volume:.1f} m³",
                description=(
                    "Based on the structural elements of the model. Check per "
                    "concrete class and reinforcement ratio."
                ),
            ))

        return findings

    # =========================================================================
    # Building services
    # =========================================================================

    def _check_services(
        self,
        elements: list[ElementRecord],
        specialty: Specialty,
    ) -> list[OptimizationFinding]:
        findings: list[OptimizationFinding] = [
            OptimizationFinding(
                type=FindingType.COORDINATION,
                severity=FindingSeverity.INFO,
                title=f"{len(elements)} MEP elements detected in the {specialty.value} specialty",
                description=(
                    "Elements extracted from the model for coordination checks "
                    "and bill of quantities."
                ),
            )
        ]

        if specialty is Specialty.PLUMBING:
            diameters: Counter[str] = Counter()
            for pipe in (e for e in elements if e.is_a("PIPE")):
                diameter = pipe.attributes.nominal_diameter
                if diameter is not None:
                    diameters[f"Ø{round(diameter * 1000)}mm"] += 1
            if diameters:
                listed = ", ".join(f"{k}({v})" for k, v in diameters.items())
                findings.append(OptimizationFinding(
                    type=FindingType.COORDINATION,
                    severity=FindingSeverity.INFO,
                    title=f"Piping: {listed}",
                    description=(
                        "Pipe diameters detected in the model. Check sizing against "
                        "the water supply and drainage regulations."
                    ),
                ))

        terminals = sum(
            1 for e in elements
            if e.is_a("SANITARYTERMINAL") or e.is_a("FLOWTERMINAL")
        )
        if terminals > 0:
            findings.append(OptimizationFinding(
                type=FindingType.COORDINATION,
                severity=FindingSeverity.INFO,
                title=f"{terminals} sanitary/hydraulic terminals",
                description=(
                    "Fixtures and terminals detected in the model, to be mapped to "
                    "bill of quantities items."
                ),
            ))

        return findings
