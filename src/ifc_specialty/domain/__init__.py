"""Domain Layer.

Contains the element records, WBS structures, findings and value objects.
This layer has NO external dependencies (no parsers, no frameworks).
"""
from __future__ import annotations

from ifc_specialty.domain.exceptions import (
    AnalysisError,
    BatchLimitError,
    DomainError,
    EmptyAnalysisSetError,
    InvalidStepFileError,
    ValidationError,
)
from ifc_specialty.domain.models import (
    AnalysisSummary,
    BuildingType,
    ElementAttributes,
    ElementKind,
    ElementRecord,
    FindingSeverity,
    FindingType,
    OptimizationFinding,
    Quantities,
    ResolutionDiagnostics,
    SpecialtyAnalysisResult,
    WbsArticle,
    WbsChapter,
    WbsProject,
    WbsSubChapter,
)
from ifc_specialty.domain.value_objects import SPECIALTY_INDICATORS, Specialty

__all__ = [
    # Exceptions
    "DomainError",
    "ValidationError",
    "AnalysisError",
    "EmptyAnalysisSetError",
    "InvalidStepFileError",
    "BatchLimitError",
    # Models
    "ElementRecord",
    "ElementKind",
    "ElementAttributes",
    "Quantities",
    "OptimizationFinding",
    "FindingType",
    "FindingSeverity",
    "WbsArticle",
    "WbsSubChapter",
    "WbsChapter",
    "WbsProject",
    "BuildingType",
    "AnalysisSummary",
    "ResolutionDiagnostics",
    "SpecialtyAnalysisResult",
    # Value Objects
    "Specialty",
    "SPECIALTY_INDICATORS",
]
