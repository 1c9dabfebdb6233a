"""Domain Models (Entities)."""
from __future__ import annotations

from ifc_specialty.domain.models.analysis import (
    AnalysisSummary,
    ResolutionDiagnostics,
    SpecialtyAnalysisResult,
)
from ifc_specialty.domain.models.element import (
    ElementAttributes,
    ElementKind,
    ElementRecord,
    Quantities,
)
from ifc_specialty.domain.models.finding import (
    FindingSeverity,
    FindingType,
    OptimizationFinding,
)
from ifc_specialty.domain.models.wbs import (
    BuildingType,
    WbsArticle,
    WbsChapter,
    WbsProject,
    WbsSubChapter,
)

__all__ = [
    "AnalysisSummary",
    "BuildingType",
    "ElementAttributes",
    "ElementKind",
    "ElementRecord",
    "FindingSeverity",
    "FindingType",
    "OptimizationFinding",
    "Quantities",
    "ResolutionDiagnostics",
    "SpecialtyAnalysisResult",
    "WbsArticle",
    "WbsChapter",
    "WbsProject",
    "WbsSubChapter",
]
