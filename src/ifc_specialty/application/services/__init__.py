"""Application services.

All analysis services for IFC specialty files.
"""
from __future__ import annotations

# Re-export services for convenient imports
# These will be available as:
#   from ifc_specialty.application.services import WbsService

__all__ = [
    "BatchAnalysisService",
    "OptimizationService",
    "ProjectAssembler",
    "SpecialtyAnalysisService",
    "WbsService",
]


def __getattr__(name: str):
    """Lazy imports for services."""
    if name == "BatchAnalysisService":
        from ifc_specialty.application.services.batch_service import BatchAnalysisService
        return BatchAnalysisService
    elif name == "OptimizationService":
        from ifc_specialty.application.services.optimization_service import OptimizationService
        return OptimizationService
    elif name == "ProjectAssembler":
        from ifc_specialty.application.services.project_assembler import ProjectAssembler
        return ProjectAssembler
    elif name == "SpecialtyAnalysisService":
        from ifc_specialty.application.services.analysis_service import SpecialtyAnalysisService
        return SpecialtyAnalysisService
    elif name == "WbsService":
        from ifc_specialty.application.services.wbs_service import WbsService
        return WbsService
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
