"""Optimization Finding Domain Entity."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class FindingType(str, Enum):
    """Kind of design-optimization finding."""

    STANDARDIZATION = "standardization"
    REDUNDANCY = "redundancy"
    SIZING = "sizing"
    MATERIAL = "material"
    COORDINATION = "coordination"
    COST = "cost"


class FindingSeverity(str, Enum):
    """Finding severity."""

    INFO = "info"
    SUGGESTION = "suggestion"
    WARNING = "warning"


@dataclass(frozen=True)
class OptimizationFinding:
    """A heuristic design-optimization finding.

    Attributes:
        type: Finding kind
        severity: Finding severity
        title: Short headline
        description: Human-readable explanation
        affected_elements: GlobalIds (or names) of the elements involved
        potential_savings: Optional savings estimate (e.g., "5-10% formwork")
    """

    type: FindingType
    severity: FindingSeverity
    title: str
    description: str
    affected_elements: tuple[str, ...] = ()
    potential_savings: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dict."""
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "title": self.title,
            "description": self.description,
            "affected_elements": list(self.affected_elements),
            "potential_savings": self.potential_savings,
        }
