"""Project Assembler.

Merges the per-file analyses of several specialties into one WBS project
and derives project metadata from the union of their element records.
"""
from __future__ import annotations

import copy
import hashlib
from collections.abc import Sequence
from datetime import date

from ifc_specialty.domain.exceptions import EmptyAnalysisSetError
from ifc_specialty.domain.models.analysis import SpecialtyAnalysisResult
from ifc_specialty.domain.models.element import ElementRecord
from ifc_specialty.domain.models.wbs import (
    BuildingType,
    WbsChapter,
    WbsProject,
    WbsSubChapter,
)
from ifc_specialty.shared.logging import get_logger
from ifc_specialty.shared.result import Result, err, ok

logger = get_logger(__name__)

CLASSIFICATION = "ProNIC"

_RESIDENTIAL_MARKERS = ("residential",)
_COMMERCIAL_MARKERS = ("commercial", "office")


def merge_chapters(analyses: Sequence[SpecialtyAnalysisResult]) -> list[WbsChapter]:
    """Merge chapters of several analyses by code.

    Subchapters with the same code are merged; an article is appended only
    if its code is not already present (first occurrence wins). Inputs are
    copied, never mutated.

    Args:
        analyses: Per-file analyses in input order

    Returns:
        Chapters and subchapters sorted by code
    """
    chapters: dict[str, WbsChapter] = {}

    for analysis in analyses:
        for incoming in analysis.chapters:
            existing = chapters.get(incoming.code)
            if existing is None:
                chapters[incoming.code] = copy.deepcopy(incoming)
                continue

            subs: dict[str, WbsSubChapter] = {s.code: s for s in existing.sub_chapters}
            for incoming_sub in incoming.sub_chapters:
                existing_sub = subs.get(incoming_sub.code)
                if existing_sub is None:
                    subs[incoming_sub.code] = copy.deepcopy(incoming_sub)
                    continue
                codes = existing_sub.article_codes
                for article in incoming_sub.articles:
                    if article.code not in codes:
                        existing_sub.articles.append(copy.deepcopy(article))
                        codes.add(article.code)
            existing.sub_chapters = list(subs.values())

    result = sorted(chapters.values(), key=lambda c: c.code)
    for chapter in result:
        chapter.sub_chapters.sort(key=lambda s: s.code)
    return result


def guess_building_type(elements: Sequence[ElementRecord]) -> BuildingType | None:
    """Guess the building type from occupancy indicators.

    Doors and windows, or a residential occupancy, indicate residential use;
    a commercial or office occupancy indicates commercial use.
    """
    residential = False
    commercial = False
    for element in elements:
        occupancy = (element.attributes.occupancy_type or "").lower()
        if (
            "DOOR" in element.entity_type
            or "WINDOW" in element.entity_type
            or any(m in occupancy for m in _RESIDENTIAL_MARKERS)
        ):
            residential = True
        if any(m in occupancy for m in _COMMERCIAL_MARKERS):
            commercial = True

    if residential and commercial:
        return BuildingType.MIXED
    if residential:
        return BuildingType.RESIDENTIAL
    if commercial:
        return BuildingType.COMMERCIAL
    return None


def project_id_for(analyses: Sequence[SpecialtyAnalysisResult], chapters: Sequence[WbsChapter]) -> str:
    """Derive a stable project id from the specialties and article codes."""
    digest = hashlib.sha256()
    for analysis in analyses:
        digest.update(analysis.specialty.value.encode())
        digest.update(b"|")
    for chapter in chapters:
        for sub in chapter.sub_chapters:
            for article in sub.articles:
                digest.update(article.code.encode())
                digest.update(b",")
    return f"ifc-{digest.hexdigest()[:16]}"


class ProjectAssembler:
    """Assembles per-file analyses into a WBS project."""

    def assemble(
        self,
        analyses: Sequence[SpecialtyAnalysisResult],
        project_name: str | None = None,
        start_date: date | None = None,
        project_id: str | None = None,
    ) -> Result[WbsProject, EmptyAnalysisSetError]:
        """Merge analyses into one project.

        Args:
            analyses: Per-file analyses, one per specialty file
            project_name: Optional name (default from the specialty mix)
            start_date: Planned start date (default today)
            project_id: Optional id (default derived from the content)

        Returns:
            Success with the WbsProject, or Failure(EmptyAnalysisSetError)
            when no analyses were supplied
        """
        if not analyses:
            logger.warning("Project assembly called without analyses")
            return err(EmptyAnalysisSetError())

        chapters = merge_chapters(analyses)
        elements = [e for a in analyses for e in a.elements]

        storeys = {e.storey for e in elements if e.storey}
        slab_area = sum(e.quantities.area or 0.0 for e in elements if "SLAB" in e.entity_type)
        elevations = [
            e.attributes.elevation
            for e in elements
            if e.attributes.elevation is not None and e.attributes.elevation > 0
        ]

        name = project_name or "IFC project ({})".format(
            " + ".join(a.specialty.abbreviation for a in analyses)
        )

        project = WbsProject(
            id=project_id or project_id_for(analyses, chapters),
            name=name,
            classification=CLASSIFICATION,
            start_date=start_date or date.today(),
            chapters=chapters,
            gross_floor_area=float(round(slab_area)) if slab_area > 0 else None,
            number_of_floors=len(storeys) or None,
            building_height=round(max(elevations), 1) if elevations else None,
            building_type=guess_building_type(elements),
        )

        logger.info(
            "WBS project assembled",
            project_id=project.id,
            analyses=len(analyses),
            chapters=len(chapters),
            articles=project.article_count,
        )
        return ok(project)

    def assemble_or_raise(
        self,
        analyses: Sequence[SpecialtyAnalysisResult],
        project_name: str | None = None,
        start_date: date | None = None,
        project_id: str | None = None,
    ) -> WbsProject:
        """Merge analyses into one project, raising on failure.

        Raises:
            EmptyAnalysisSetError: If no analyses were supplied
        """
        return self.assemble(analyses, project_name, start_date, project_id).unwrap()
