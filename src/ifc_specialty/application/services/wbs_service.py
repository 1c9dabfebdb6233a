"""WBS Service.

Maps extracted element records into fixed-code WBS chapters per specialty
(ProNIC chapter coding). Every generated article has a non-zero quantity:
measured values are summed where available, otherwise a per-element
default is used and the article is flagged as estimated.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from ifc_specialty.domain.models.element import ElementKind, ElementRecord
from ifc_specialty.domain.models.wbs import WbsArticle, WbsChapter, WbsSubChapter
from ifc_specialty.domain.value_objects.specialty import Specialty
from ifc_specialty.shared.logging import get_logger

logger = get_logger(__name__)

# Per-element defaults
DEFAULT_WALL_AREA = 15.0
DEFAULT_WINDOW_WIDTH = 1.2
DEFAULT_WINDOW_HEIGHT = 1.4
DEFAULT_SLAB_AREA = 80.0
DEFAULT_ROOF_AREA = 80.0
DEFAULT_STAIR_AREA = 6.0
DEFAULT_FOOTING_VOLUME = 1.2

# Linear structural elements
ASSUMED_STOREY_HEIGHT = 3.0
ASSUMED_BEAM_SPAN = 5.0
MAX_COLUMN_HEIGHT = 6.0
MAX_BEAM_SPAN = 12.0
DEFAULT_COLUMN_SECTION = (0.25, 0.25)
DEFAULT_BEAM_SECTION = (0.25, 0.50)

CHAPTER_NAMES: dict[str, str] = {
    "04": "Foundations",
    "06": "Reinforced concrete structures",
    "08": "Masonry",
    "09": "Roofing",
    "13": "Floors",
    "15": "Windows and exterior doors",
    "17": "Carpentry",
    "20": "Water supply installations",
    "22": "Gas installations",
    "23": "Electrical installations",
    "24": "Telecommunications installations",
    "25": "HVAC and ventilation",
    "27": "Fire safety installations",
}


@dataclass
class MeasuredQuantity:
    """Aggregated quantity with its estimation flag."""

    value: float
    estimated: bool = False


def sum_or_default(
    elements: list[ElementRecord],
    measure: Callable[[ElementRecord], float | None],
    default_per_element: float,
    ndigits: int = 2,
) -> MeasuredQuantity:
    """Sum a measured quantity, falling back to a per-element default.

    Args:
        elements: Elements of one group
        measure: Function reading the quantity of an element
        default_per_element: Default used when nothing was measured
        ndigits: Rounding digits

    Returns:
        MeasuredQuantity (estimated when the default was used)
    """
    total = round(sum(measure(e) or 0.0 for e in elements), ndigits)
    if total > 0:
        return MeasuredQuantity(total)
    return MeasuredQuantity(round(len(elements) * default_per_element, ndigits), estimated=True)


def linear_length(
    elements: list[ElementRecord],
    default_section: tuple[float, float],
    assumed_length: float,
    cap: float,
) -> MeasuredQuantity:
    """Estimate the total length of columns or beams.

    Each element contributes its measured length, else volume divided by
    its cross-section, else the assumed length; each contribution is
    capped.

    Args:
        elements: Columns or beams
        default_section: (width, depth) used when no section is known
        assumed_length: Typical storey height or beam span
        cap: Maximum plausible length per element

    Returns:
        Total length in metres, rounded to 1 decimal
    """
    total = 0.0
    estimated = False
    for element in elements:
        q = element.quantities
        width = q.width or default_section[0]
        depth = q.depth or default_section[1]
        if q.length:
            length = q.length
            estimated = estimated or "length" in element.estimated
        elif q.volume and width > 0 and depth > 0:
            length = q.volume / (width * depth)
            estimated = estimated or "volume" in element.estimated
        else:
            length = assumed_length
            estimated = True
        total += min(length, cap)

    total = round(total, 1)
    if total > 0:
        return MeasuredQuantity(total, estimated)
    return MeasuredQuantity(len(elements) * assumed_length, estimated=True)


def _global_ids(elements: Iterable[ElementRecord]) -> list[str]:
    return [e.global_id for e in elements if e.global_id]


@dataclass
class _ChapterBuilder:
    """Collects articles into chapters and subchapters by code."""

    chapters: dict[str, WbsChapter] = field(default_factory=dict)

    def add(self, sub_code: str, sub_name: str, article: WbsArticle) -> None:
        chapter_code = sub_code.split(".")[0]
        chapter = self.chapters.get(chapter_code)
        if chapter is None:
            chapter = WbsChapter(code=chapter_code, name=CHAPTER_NAMES.get(chapter_code, chapter_code))
            self.chapters[chapter_code] = chapter

        for sub in chapter.sub_chapters:
            if sub.code == sub_code:
                break
        else:
            sub = WbsSubChapter(code=sub_code, name=sub_name)
            chapter.sub_chapters.append(sub)

        if article.code not in sub.article_codes:
            sub.articles.append(article)

    def build(self) -> list[WbsChapter]:
        return list(self.chapters.values())


class WbsService:
    """Service for generating WBS chapters from element records."""

    def generate(
        self,
        elements: list[ElementRecord],
        specialty: Specialty,
    ) -> list[WbsChapter]:
        """Generate the WBS chapters of one file.

        Args:
            elements: Element records of one file
            specialty: Detected specialty

        Returns:
            Chapters in generation order (empty for UNKNOWN)
        """
        groups: dict[ElementKind, list[ElementRecord]] = {}
        for element in elements:
            groups.setdefault(element.kind, []).append(element)

        builder = _ChapterBuilder()
        generator = self._generators().get(specialty)
        if generator is not None:
            generator(groups, builder)

        chapters = builder.build()
        logger.debug(
            "WBS generated",
            specialty=specialty.value,
            chapters=len(chapters),
            articles=sum(c.article_count for c in chapters),
        )
        return chapters

    def _generators(
        self,
    ) -> dict[Specialty, Callable[[dict[ElementKind, list[ElementRecord]], _ChapterBuilder], None]]:
        return {
            Specialty.ARCHITECTURE: self._architecture,
            Specialty.STRUCTURE: self._structure,
            Specialty.PLUMBING: self._plumbing,
            Specialty.ELECTRICAL: self._electrical,
            Specialty.HVAC: self._hvac,
            Specialty.FIRE_SAFETY: self._fire_safety,
            Specialty.TELECOM: self._telecom,
            Specialty.GAS: self._gas,
        }

    # =========================================================================
    # Architecture
    # =========================================================================

    def _architecture(
        self,
        groups: dict[ElementKind, list[ElementRecord]],
        builder: _ChapterBuilder,
    ) -> None:
        walls = groups.get(ElementKind.WALL, [])
        exterior = [w for w in walls if w.attributes.is_external is True]
        interior = [w for w in walls if w.attributes.is_external is not True]

        if exterior:
            qty = sum_or_default(exterior, lambda e: e.quantities.area, DEFAULT_WALL_AREA)
            builder.add("08.01", "Exterior walls (from IFC model)", WbsArticle(
                code="08.01.001",
                description=f"Exterior masonry ({len(exterior)} walls from the model)",
                unit="m2",
                quantity=qty.value,
                keynote="B20",
                element_ids=_global_ids(exterior),
                tags=["masonry", "exterior", "brick"],
                estimated=qty.estimated,
            ))
        if interior:
            qty = sum_or_default(interior, lambda e: e.quantities.area, DEFAULT_WALL_AREA)
            builder.add("08.02", "Interior walls (from IFC model)", WbsArticle(
                code="08.02.001",
                description=f"Interior masonry / partitions ({len(interior)} walls from the model)",
                unit="m2",
                quantity=qty.value,
                keynote="C10",
                element_ids=_global_ids(interior),
                tags=["masonry", "interior", "partition"],
                estimated=qty.estimated,
            ))

        windows = groups.get(ElementKind.WINDOW, [])
        if windows:
            self._windows(windows, builder)

        doors = groups.get(ElementKind.DOOR, [])
        if doors:
            builder.add("17.01", "Doors (from IFC model)", WbsArticle(
                code="17.01.001",
                description=f"Interior doors with frame and hardware ({len(doors)} from the model)",
                unit="Ud",
                quantity=float(len(doors)),
                keynote="C20",
                element_ids=_global_ids(doors),
                tags=["door", "interior", "timber"],
            ))

        slabs = groups.get(ElementKind.SLAB, [])
        if slabs:
            qty = sum_or_default(slabs, lambda e: e.quantities.area, DEFAULT_SLAB_AREA, ndigits=0)
            builder.add("13.01", "Floors (from IFC model)", WbsArticle(
                code="13.01.001",
                description=f"Levelling screed and floor finish ({len(slabs)} slabs, {qty.value:.0f} m²)",
                unit="m2",
                quantity=qty.value,
                keynote="C30",
                element_ids=_global_ids(slabs),
                tags=["floor", "slab", "screed"],
                estimated=qty.estimated,
            ))

        roofs = groups.get(ElementKind.ROOF, [])
        if roofs:
            qty = sum_or_default(roofs, lambda e: e.quantities.area, DEFAULT_ROOF_AREA, ndigits=0)
            builder.add("09.01", "Roof (from IFC model)", WbsArticle(
                code="09.01.001",
                description=f"Roof ({len(roofs)} elements, {qty.value:.0f} m²)",
                unit="m2",
                quantity=qty.value,
                keynote="B30",
                element_ids=_global_ids(roofs),
                tags=["roof", "roofing"],
                estimated=qty.estimated,
            ))

        stairs = groups.get(ElementKind.STAIR, [])
        if stairs:
            qty = sum_or_default(stairs, lambda e: e.quantities.area, DEFAULT_STAIR_AREA)
            builder.add("06.03", "Stairs (from IFC model)", WbsArticle(
                code="06.03.001",
                description=f"Reinforced concrete stair ({len(stairs)} flights from the model)",
                unit="m2",
                quantity=qty.value,
                keynote="B10",
                element_ids=_global_ids(stairs),
                tags=["stair", "concrete"],
                estimated=qty.estimated,
            ))

    def _windows(self, windows: list[ElementRecord], builder: _ChapterBuilder) -> None:
        """One article per window size, in order of first appearance."""
        size_groups: dict[str, list[ElementRecord]] = {}
        areas: dict[str, float] = {}
        estimated: dict[str, bool] = {}

        for window in windows:
            q = window.quantities
            width = q.width or DEFAULT_WINDOW_WIDTH
            height = q.height or DEFAULT_WINDOW_HEIGHT
            key = f"{width * 100:.0f}×{height * 100:.0f}"
            size_groups.setdefault(key, []).append(window)
            areas[key] = areas.get(key, 0.0) + (q.area or width * height)
            estimated[key] = estimated.get(key, False) or not q.area

        for number, (size, group) in enumerate(size_groups.items(), start=1):
            builder.add("15.01", "Windows (from IFC model)", WbsArticle(
                code=f"15.01.{number:03d}",
                description=(
                    f"Aluminium window with thermal break and double glazing "
                    f"({size}cm) × {len(group)} pcs"
                ),
                unit="m2",
                quantity=round(areas[size], 2),
                keynote="B20",
                element_ids=_global_ids(group),
                tags=["window", "aluminium", "glazing", size],
                estimated=estimated[size],
            ))

    # =========================================================================
    # Structure
    # =========================================================================

    def _structure(
        self,
        groups: dict[ElementKind, list[ElementRecord]],
        builder: _ChapterBuilder,
    ) -> None:
        columns = groups.get(ElementKind.COLUMN, [])
        if columns:
            qty = linear_length(columns, DEFAULT_COLUMN_SECTION, ASSUMED_STOREY_HEIGHT, MAX_COLUMN_HEIGHT)
            builder.add("06.01", "Columns (from IFC model)", WbsArticle(
                code="06.01.001",
                description=(
                    f"Rectangular reinforced concrete column C25/30, various sizes "
                    f"({len(columns)} columns from the BIM model)"
                ),
                unit="m",
                quantity=qty.value,
                keynote="B10",
                element_ids=_global_ids(columns),
                tags=["column", "concrete", "structure", "C25/30"],
                estimated=qty.estimated,
            ))

        beams = groups.get(ElementKind.BEAM, [])
        if beams:
            qty = linear_length(beams, DEFAULT_BEAM_SECTION, ASSUMED_BEAM_SPAN, MAX_BEAM_SPAN)
            builder.add("06.02", "Beams (from IFC model)", WbsArticle(
                code="06.02.001",
                description=(
                    f"Reinforced concrete beam C25/30, various sizes "
                    f"({len(beams)} beams from the BIM model)"
                ),
                unit="m",
                quantity=qty.value,
                keynote="B10",
                element_ids=_global_ids(beams),
                tags=["beam", "concrete", "structure", "C25/30"],
                estimated=qty.estimated,
            ))

        slabs = groups.get(ElementKind.SLAB, [])
        if slabs:
            qty = sum_or_default(slabs, lambda e: e.quantities.area, DEFAULT_SLAB_AREA, ndigits=0)
            builder.add("06.04", "Slabs (from IFC model)", WbsArticle(
                code="06.04.001",
                description=(
                    f"Lightweight reinforced concrete slab C25/30, horizontal "
                    f"({len(slabs)} slabs from the BIM model, {qty.value:.0f} m²)"
                ),
                unit="m2",
                quantity=qty.value,
                keynote="B10",
                element_ids=_global_ids(slabs),
                tags=["slab", "concrete", "structure", "C25/30"],
                estimated=qty.estimated,
            ))

        footings = groups.get(ElementKind.FOOTING, [])
        if footings:
            qty = sum_or_default(footings, lambda e: e.quantities.volume, DEFAULT_FOOTING_VOLUME)
            builder.add("04.01", "Footings (from IFC model)", WbsArticle(
                code="04.01.001",
                description=f"Reinforced concrete pad footing C25/30 ({len(footings)} from the model)",
                unit="m3",
                quantity=qty.value,
                keynote="A20",
                element_ids=_global_ids(footings),
                tags=["footing", "foundation", "concrete"],
                estimated=qty.estimated,
            ))

    # =========================================================================
    # Building services
    # =========================================================================

    @staticmethod
    def _count_article(
        code: str,
        label: str,
        elements: list[ElementRecord],
        keynote: str,
        tags: list[str],
    ) -> WbsArticle:
        return WbsArticle(
            code=code,
            description=f"{label} ({len(elements)} from the model)",
            unit="Ud",
            quantity=float(len(elements)),
            keynote=keynote,
            element_ids=_global_ids(elements),
            tags=tags,
        )

    @staticmethod
    def _network_article(
        code: str,
        label: str,
        segments: list[ElementRecord],
        keynote: str,
        tags: list[str],
    ) -> WbsArticle:
        """Lump-sum article for a pipe network."""
        total_length = sum(s.quantities.length or 0.0 for s in segments)
        measured = f"{total_length:.0f}m" if total_length > 0 else "measure in model"
        return WbsArticle(
            code=code,
            description=f"{label} ({len(segments)} segments, {measured})",
            unit="Ud",
            quantity=1.0,
            keynote=keynote,
            element_ids=_global_ids(segments),
            tags=tags,
        )

    def _plumbing(
        self,
        groups: dict[ElementKind, list[ElementRecord]],
        builder: _ChapterBuilder,
    ) -> None:
        sub = ("20.01", "Network and equipment (from IFC model)")
        pipes = groups.get(ElementKind.PIPE, []) + groups.get(ElementKind.FLOW_SEGMENT, [])
        if pipes:
            builder.add(*sub, self._network_article(
                "20.01.001", "Piping network", pipes, "D10", ["piping", "water", "network"],
            ))

        terminals = (
            groups.get(ElementKind.SANITARY_TERMINAL, [])
            + groups.get(ElementKind.FLOW_TERMINAL, [])
        )
        by_name: dict[str, list[ElementRecord]] = {}
        for terminal in terminals:
            by_name.setdefault(terminal.name.lower(), []).append(terminal)

        for number, (name, group) in enumerate(by_name.items(), start=2):
            builder.add(*sub, WbsArticle(
                code=f"20.01.{number:03d}",
                description=f"{name} (×{len(group)})",
                unit="Ud",
                quantity=float(len(group)),
                keynote="D10",
                element_ids=_global_ids(group),
                tags=["fixture", "sanitary", name],
            ))

    def _electrical(
        self,
        groups: dict[ElementKind, list[ElementRecord]],
        builder: _ChapterBuilder,
    ) -> None:
        sub = ("23.01", "Electrical installation (from IFC model)")
        catalog = [
            ("23.01.001", "Distribution boards", ElementKind.DISTRIBUTION_BOARD, ["board", "electrical"]),
            ("23.01.002", "Light fixtures", ElementKind.LIGHT_FIXTURE, ["light", "lighting"]),
            ("23.01.003", "Socket outlets", ElementKind.OUTLET, ["outlet", "electrical"]),
            ("23.01.004", "Switches", ElementKind.SWITCH, ["switch"]),
        ]
        for code, label, kind, tags in catalog:
            elements = groups.get(kind, [])
            if elements:
                builder.add(*sub, self._count_article(code, label, elements, "D20", tags))

    def _hvac(
        self,
        groups: dict[ElementKind, list[ElementRecord]],
        builder: _ChapterBuilder,
    ) -> None:
        sub = ("25.01", "HVAC (from IFC model)")
        ducts = groups.get(ElementKind.DUCT, []) + groups.get(ElementKind.DUCT_FITTING, [])
        if ducts:
            builder.add(*sub, self._network_article(
                "25.01.001", "HVAC ductwork", ducts, "25", ["duct", "HVAC", "ventilation"],
            ))

        terminals = groups.get(ElementKind.AIR_TERMINAL, [])
        if terminals:
            builder.add(*sub, self._count_article(
                "25.01.002", "Diffusers/grilles", terminals, "25", ["diffuser", "grille", "HVAC"],
            ))

        equipment = groups.get(ElementKind.UNITARY_EQUIPMENT, [])
        if equipment:
            builder.add(*sub, self._count_article(
                "25.01.003", "HVAC equipment", equipment, "25", ["equipment", "HVAC", "unit"],
            ))

    def _fire_safety(
        self,
        groups: dict[ElementKind, list[ElementRecord]],
        builder: _ChapterBuilder,
    ) -> None:
        sub = ("27.01", "Fire safety (from IFC model)")
        catalog = [
            ("27.01.001", "Fire suppression terminals", ElementKind.FIRE_SUPPRESSION_TERMINAL,
             ["sprinkler", "fire", "suppression"]),
            ("27.01.002", "Fire alarm devices", ElementKind.ALARM, ["alarm", "fire"]),
            ("27.01.003", "Detectors", ElementKind.SENSOR, ["detector", "sensor", "fire"]),
        ]
        for code, label, kind, tags in catalog:
            elements = groups.get(kind, [])
            if elements:
                builder.add(*sub, self._count_article(code, label, elements, "D40", tags))

    def _telecom(
        self,
        groups: dict[ElementKind, list[ElementRecord]],
        builder: _ChapterBuilder,
    ) -> None:
        sub = ("24.01", "Telecommunications (from IFC model)")
        appliances = (
            groups.get(ElementKind.COMMUNICATIONS_APPLIANCE, [])
            + groups.get(ElementKind.AUDIO_VISUAL_APPLIANCE, [])
        )
        if appliances:
            builder.add(*sub, self._count_article(
                "24.01.001", "Telecommunications outlets and appliances", appliances, "D50",
                ["telecom", "outlet", "appliance"],
            ))
        cables = groups.get(ElementKind.CABLE, [])
        if cables:
            builder.add(*sub, self._network_article(
                "24.01.002", "Telecommunications cabling", cables, "D50", ["telecom", "cable"],
            ))

    def _gas(
        self,
        groups: dict[ElementKind, list[ElementRecord]],
        builder: _ChapterBuilder,
    ) -> None:
        sub = ("22.01", "Gas installation (from IFC model)")
        pipes = groups.get(ElementKind.PIPE, []) + groups.get(ElementKind.FLOW_SEGMENT, [])
        if pipes:
            builder.add(*sub, self._network_article(
                "22.01.001", "Gas piping network", pipes, "D20", ["gas", "piping", "network"],
            ))
        burners = groups.get(ElementKind.BURNER, [])
        if burners:
            builder.add(*sub, self._count_article(
                "22.01.002", "Gas appliances", burners, "D20", ["gas", "burner", "appliance"],
            ))
