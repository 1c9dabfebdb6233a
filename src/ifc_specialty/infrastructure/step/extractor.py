"""Quantity/Property Extractor.

Builds one ElementRecord per element of interest by composing the entity
index with the relationship resolver, then fills in dimensions that can
be inferred from the record itself.
"""
from __future__ import annotations

import re

from ifc_specialty.domain.models.analysis import ResolutionDiagnostics
from ifc_specialty.domain.models.element import (
    ElementAttributes,
    ElementKind,
    ElementRecord,
    Quantities,
    Scalar,
)
from ifc_specialty.infrastructure.step.index import EntityIndex, EntityRecord
from ifc_specialty.infrastructure.step.resolver import RelationshipResolver
from ifc_specialty.infrastructure.step.tokens import (
    decode_step_text,
    numeric_literals,
    quoted_strings,
)

# Entity type prefixes extracted as elements
TARGET_ENTITIES: tuple[str, ...] = (
    # Architecture
    "IFCWALL", "IFCWALLSTANDARDCASE", "IFCWINDOW", "IFCDOOR",
    "IFCSLAB", "IFCROOF", "IFCSTAIR", "IFCSTAIRFLIGHT",
    "IFCRAILING", "IFCCOVERING", "IFCCURTAINWALL",
    "IFCSPACE", "IFCRAMP", "IFCRAMPFLIGHT",
    # Structure
    "IFCBEAM", "IFCCOLUMN", "IFCFOOTING", "IFCPILE",
    "IFCMEMBER", "IFCPLATE",
    # Building services
    "IFCPIPESEGMENT", "IFCPIPEFITTING", "IFCSANITARYTERMINAL",
    "IFCFLOWTERMINAL", "IFCFLOWSEGMENT",
    "IFCCABLESEGMENT", "IFCELECTRICDISTRIBUTIONBOARD",
    "IFCLIGHTFIXTURE", "IFCOUTLET", "IFCSWITCHINGDEVICE",
    "IFCDUCTSEGMENT", "IFCDUCTFITTING", "IFCAIRTERMINAL",
    "IFCUNITARYEQUIPMENT",
    "IFCFIRESUPPRESSIONTERMINAL", "IFCALARM", "IFCSENSOR",
    "IFCCOMMUNICATIONSAPPLIANCE", "IFCAUDIOVISUALAPPLIANCE", "IFCBURNER",
)

# Window/door dimension bounds in metres (exclusive)
OPENING_DIMENSION_RANGE = (0.0, 10.0)

# Vendor section token in family names, e.g. "Concrete-Rectangular:250 x 450mm:312"
_SECTION_TOKEN = re.compile(r":(\d+)\s*[xX×]\s*(\d+)\s*mm", re.IGNORECASE)

_SECTION_KINDS = frozenset({
    ElementKind.COLUMN,
    ElementKind.BEAM,
    ElementKind.MEMBER,
    ElementKind.FOOTING,
    ElementKind.WALL,
})

ASSUMED_STOREY_HEIGHT = 3.0
ASSUMED_BEAM_SPAN = 5.0
MAX_COLUMN_HEIGHT = 6.0
MAX_BEAM_SPAN = 12.0


def is_target_entity(type_name: str) -> bool:
    """Check whether an entity type is extracted as an element.

    Type templates (IFCCOLUMNTYPE, IFCWALLTYPE, ...) are not elements.
    """
    if type_name.endswith("TYPE"):
        return False
    return type_name.startswith(TARGET_ENTITIES)


def parse_section(name: str) -> tuple[float, float] | None:
    """Parse a "WIDTHxDEPTHmm" section token from an element name.

    Args:
        name: Decoded element name

    Returns:
        (width, depth) in metres, or None
    """
    match = _SECTION_TOKEN.search(name)
    if not match:
        return None
    return int(match.group(1)) / 1000, int(match.group(2)) / 1000


def _number(value: Scalar | None) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _flag(value: Scalar | None) -> bool | None:
    return value if isinstance(value, bool) else None


def build_attributes(properties: dict[str, Scalar]) -> ElementAttributes:
    """Capture well-known properties as typed attributes.

    Args:
        properties: Flat property map of an element

    Returns:
        ElementAttributes with the properties that are present
    """
    thermal = _number(properties.get("ThermalTransmittance"))
    solar = _number(properties.get("SolarHeatGainCoefficient"))
    if solar is None:
        solar = _number(properties.get("GValue"))
    diameter = _number(properties.get("NominalDiameter"))
    if diameter is None:
        diameter = _number(properties.get("Diameter"))

    fire_rating = properties.get("FireRating")
    acoustic = properties.get("AcousticRating")
    occupancy = properties.get("OccupancyType")

    return ElementAttributes(
        is_external=_flag(properties.get("IsExternal")),
        load_bearing=_flag(properties.get("LoadBearing")),
        thermal_transmittance=thermal if thermal and thermal > 0 else None,
        fire_rating=str(fire_rating) if fire_rating not in (None, "", False) else None,
        acoustic_rating=None if acoustic is None or isinstance(acoustic, bool) else acoustic,
        handicap_accessible=_flag(properties.get("HandicapAccessible")),
        solar_factor=solar if solar and solar > 0 else None,
        nominal_diameter=diameter if diameter and diameter > 0 else None,
        elevation=_number(properties.get("Elevation")),
        occupancy_type=occupancy if isinstance(occupancy, str) and occupancy else None,
    )


class QuantityExtractor:
    """Extracts element records from an indexed file."""

    def __init__(self, index: EntityIndex, diagnostics: ResolutionDiagnostics | None = None) -> None:
        """Initialize extractor.

        Args:
            index: Indexed file
            diagnostics: Counters to update (defaults to the index's own)
        """
        self._index = index
        self._resolver = RelationshipResolver(index, diagnostics)

    @property
    def diagnostics(self) -> ResolutionDiagnostics:
        """Skip counters."""
        return self._resolver.diagnostics

    def extract(self) -> list[ElementRecord]:
        """Extract all element records in file order."""
        return [
            self.extract_record(record)
            for record in self._index
            if record.type_name and is_target_entity(record.type_name)
        ]

    def extract_record(self, record: EntityRecord) -> ElementRecord:
        """Build the element record for one entity.

        Args:
            record: Entity record of a target type

        Returns:
            Resolved ElementRecord
        """
        tokens = quoted_strings(record.body)
        global_id = tokens[0] if tokens else None
        name = decode_step_text(tokens[1]) if len(tokens) > 1 and tokens[1] else record.type_name
        kind = ElementKind.from_entity_type(record.type_name)

        definitions = self._resolver.definitions(record.id)
        quantities: dict[str, float] = {}
        estimated: list[str] = []

        if kind in (ElementKind.WINDOW, ElementKind.DOOR):
            quantities.update(self._opening_dimensions(record.body))

        # Measured quantities override values read from the record itself
        quantities.update(definitions.quantities)

        thickness = None
        for key in ("Width", "Thickness", "NominalThickness"):
            thickness = _number(definitions.properties.get(key))
            if thickness is not None:
                break
        if thickness is not None and thickness >= 0:
            quantities["thickness"] = thickness

        if kind in _SECTION_KINDS:
            estimated = self._apply_section(kind, name, quantities)

        return ElementRecord(
            entity_id=record.id,
            entity_type=record.type_name,
            kind=kind,
            name=name,
            global_id=global_id or None,
            properties=definitions.properties,
            property_sets=definitions.property_sets,
            quantities=Quantities(**quantities),
            attributes=build_attributes(definitions.properties),
            materials=tuple(self._resolver.materials(record.id)),
            classification=self._resolver.classification(record.id),
            storey=self._resolver.storey(record.id),
            estimated=tuple(estimated),
        )

    @staticmethod
    def _opening_dimensions(body: str) -> dict[str, float]:
        """Read width/height from the last two numeric literals of a window or door."""
        numbers = numeric_literals(body)
        if len(numbers) < 2:
            return {}

        low, high = OPENING_DIMENSION_RANGE
        width, height = numbers[-2], numbers[-1]
        dims: dict[str, float] = {}
        if low < width < high:
            dims["width"] = width
        if low < height < high:
            dims["height"] = height
        if "width" in dims and "height" in dims:
            dims["area"] = round(width * height, 2)
        return dims

    @staticmethod
    def _apply_section(kind: ElementKind, name: str, quantities: dict[str, float]) -> list[str]:
        """Apply a section token from the name.

        With a resolved volume the effective length is back-calculated and
        capped; otherwise the volume is estimated from a typical length.

        Returns:
            Names of the inferred quantities
        """
        section = parse_section(name)
        if section is None:
            return []

        width, depth = section
        quantities.setdefault("width", width)
        quantities.setdefault("depth", depth)
        if width <= 0 or depth <= 0:
            return []

        is_column = kind is ElementKind.COLUMN
        volume = quantities.get("volume")
        if volume:
            if "length" in quantities:
                return []
            cap = MAX_COLUMN_HEIGHT if is_column else MAX_BEAM_SPAN
            quantities["length"] = round(min(volume / (width * depth), cap), 3)
            return ["length"]

        typical = ASSUMED_STOREY_HEIGHT if is_column else ASSUMED_BEAM_SPAN
        quantities["volume"] = round(width * depth * typical, 3)
        return ["volume"]


def extract_elements(index: EntityIndex) -> list[ElementRecord]:
    """Extract all element records from an indexed file."""
    return QuantityExtractor(index).extract()
