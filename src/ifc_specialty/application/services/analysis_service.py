"""Specialty Analysis Service.

Full per-file pipeline: index the entity records, detect the specialty,
extract element records, then derive WBS chapters and optimization
findings. A pure function of the file text.
"""
from __future__ import annotations

from ifc_specialty.application.services.optimization_service import OptimizationService
from ifc_specialty.application.services.wbs_service import WbsService
from ifc_specialty.domain.models.analysis import AnalysisSummary, SpecialtyAnalysisResult
from ifc_specialty.infrastructure.step.detector import detect_specialty
from ifc_specialty.infrastructure.step.extractor import QuantityExtractor
from ifc_specialty.infrastructure.step.index import EntityIndex
from ifc_specialty.shared.logging import get_logger

logger = get_logger(__name__)


class SpecialtyAnalysisService:
    """Service for analyzing a single IFC file."""

    def __init__(
        self,
        wbs_service: WbsService | None = None,
        optimization_service: OptimizationService | None = None,
    ) -> None:
        """Initialize service."""
        self._wbs = wbs_service or WbsService()
        self._optimization = optimization_service or OptimizationService()

    def analyze(self, content: str, file_name: str | None = None) -> SpecialtyAnalysisResult:
        """Analyze the text of one IFC file.

        Never raises on malformed content; unreadable parts are skipped and
        counted in the result diagnostics.

        Args:
            content: Full STEP file text
            file_name: Optional file name for logging

        Returns:
            SpecialtyAnalysisResult
        """
        index = EntityIndex.from_text(content)
        specialty = detect_specialty(index)

        extractor = QuantityExtractor(index)
        elements = extractor.extract()
        chapters = self._wbs.generate(elements, specialty)
        findings = self._optimization.analyze(elements, specialty)

        result = SpecialtyAnalysisResult(
            specialty=specialty,
            elements=tuple(elements),
            chapters=tuple(chapters),
            findings=tuple(findings),
            summary=AnalysisSummary.from_elements(elements),
            diagnostics=extractor.diagnostics,
        )

        logger.info(
            "IFC file analyzed",
            file_name=file_name,
            specialty=specialty.value,
            records=len(index),
            elements=len(elements),
            chapters=len(chapters),
            findings=len(findings),
            skipped=result.diagnostics.total,
        )
        return result


def analyze_specialty(content: str, file_name: str | None = None) -> SpecialtyAnalysisResult:
    """Analyze one IFC file with default services."""
    return SpecialtyAnalysisService().analyze(content, file_name=file_name)
