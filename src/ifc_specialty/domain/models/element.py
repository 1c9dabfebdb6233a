"""Element Record Domain Entity.

A building element (wall, beam, pipe, ...) resolved from a flat IFC/STEP
entity graph, with its properties, quantities, materials and containment.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

Scalar = str | int | float | bool


class ElementKind(str, Enum):
    """Element kind derived from the IFC entity type."""

    WALL = "wall"
    WINDOW = "window"
    DOOR = "door"
    SLAB = "slab"
    ROOF = "roof"
    STAIR = "stair"
    RAMP = "ramp"
    RAILING = "railing"
    COVERING = "covering"
    CURTAIN_WALL = "curtain_wall"
    SPACE = "space"
    BEAM = "beam"
    COLUMN = "column"
    FOOTING = "footing"
    PILE = "pile"
    MEMBER = "member"
    PLATE = "plate"
    PIPE = "pipe"
    PIPE_FITTING = "pipe_fitting"
    SANITARY_TERMINAL = "sanitary_terminal"
    FLOW_TERMINAL = "flow_terminal"
    FLOW_SEGMENT = "flow_segment"
    CABLE = "cable"
    DISTRIBUTION_BOARD = "distribution_board"
    LIGHT_FIXTURE = "light_fixture"
    OUTLET = "outlet"
    SWITCH = "switch"
    DUCT = "duct"
    DUCT_FITTING = "duct_fitting"
    AIR_TERMINAL = "air_terminal"
    UNITARY_EQUIPMENT = "unitary_equipment"
    FIRE_SUPPRESSION_TERMINAL = "fire_suppression_terminal"
    ALARM = "alarm"
    SENSOR = "sensor"
    COMMUNICATIONS_APPLIANCE = "communications_appliance"
    AUDIO_VISUAL_APPLIANCE = "audio_visual_appliance"
    BURNER = "burner"
    OTHER = "other"

    @classmethod
    def from_entity_type(cls, entity_type: str) -> ElementKind:
        """Map an upper-case IFC entity type to a kind.

        Longest matching prefix wins, so IFCWALLSTANDARDCASE is a wall and
        IFCCURTAINWALL is a curtain wall.

        Args:
            entity_type: STEP entity type tag (e.g., "IFCWALLSTANDARDCASE")

        Returns:
            Corresponding ElementKind
        """
        upper = entity_type.upper()
        for prefix, kind in _KIND_PREFIXES:
            if upper.startswith(prefix):
                return kind
        return cls.OTHER


_KIND_PREFIXES: list[tuple[str, ElementKind]] = sorted(
    [
        ("IFCWALL", ElementKind.WALL),
        ("IFCWINDOW", ElementKind.WINDOW),
        ("IFCDOOR", ElementKind.DOOR),
        ("IFCSLAB", ElementKind.SLAB),
        ("IFCROOF", ElementKind.ROOF),
        ("IFCSTAIR", ElementKind.STAIR),
        ("IFCRAMP", ElementKind.RAMP),
        ("IFCRAILING", ElementKind.RAILING),
        ("IFCCOVERING", ElementKind.COVERING),
        ("IFCCURTAINWALL", ElementKind.CURTAIN_WALL),
        ("IFCSPACE", ElementKind.SPACE),
        ("IFCBEAM", ElementKind.BEAM),
        ("IFCCOLUMN", ElementKind.COLUMN),
        ("IFCFOOTING", ElementKind.FOOTING),
        ("IFCPILE", ElementKind.PILE),
        ("IFCMEMBER", ElementKind.MEMBER),
        ("IFCPLATE", ElementKind.PLATE),
        ("IFCPIPESEGMENT", ElementKind.PIPE),
        ("IFCPIPEFITTING", ElementKind.PIPE_FITTING),
        ("IFCSANITARYTERMINAL", ElementKind.SANITARY_TERMINAL),
        ("IFCFLOWTERMINAL", ElementKind.FLOW_TERMINAL),
        ("IFCFLOWSEGMENT", ElementKind.FLOW_SEGMENT),
        ("IFCCABLESEGMENT", ElementKind.CABLE),
        ("IFCCABLECARRIERSEGMENT", ElementKind.CABLE),
        ("IFCELECTRICDISTRIBUTIONBOARD", ElementKind.DISTRIBUTION_BOARD),
        ("IFCLIGHTFIXTURE", ElementKind.LIGHT_FIXTURE),
        ("IFCOUTLET", ElementKind.OUTLET),
        ("IFCSWITCHINGDEVICE", ElementKind.SWITCH),
        ("IFCDUCTSEGMENT", ElementKind.DUCT),
        ("IFCDUCTFITTING", ElementKind.DUCT_FITTING),
        ("IFCAIRTERMINAL", ElementKind.AIR_TERMINAL),
        ("IFCUNITARYEQUIPMENT", ElementKind.UNITARY_EQUIPMENT),
        ("IFCFIRESUPPRESSIONTERMINAL", ElementKind.FIRE_SUPPRESSION_TERMINAL),
        ("IFCALARM", ElementKind.ALARM),
        ("IFCSENSOR", ElementKind.SENSOR),
        ("IFCCOMMUNICATIONSAPPLIANCE", ElementKind.COMMUNICATIONS_APPLIANCE),
        ("IFCAUDIOVISUALAPPLIANCE", ElementKind.AUDIO_VISUAL_APPLIANCE),
        ("IFCBURNER", ElementKind.BURNER),
    ],
    key=lambda item: len(item[0]),
    reverse=True,
)


@dataclass(frozen=True)
class Quantities:
    """Measured or inferred quantities in SI units (m, m², m³, kg).

    Every populated field is non-negative.
    """

    area: float | None = None
    volume: float | None = None
    length: float | None = None
    width: float | None = None
    depth: float | None = None
    height: float | None = None
    thickness: float | None = None
    weight: float | None = None

    def __post_init__(self) -> None:
        """Reject negative quantities."""
        for name, value in self.populated().items():
            if value < 0:
                raise ValueError(f"Quantity '{name}' cannot be negative: {value}")

    def populated(self) -> dict[str, float]:
        """Get only the quantities that have a value."""
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class ElementAttributes:
    """Typed well-known attributes captured from property sets.

    All optional; absence means the model did not carry the property.
    """

    is_external: bool | None = None
    load_bearing: bool | None = None
    thermal_transmittance: float | None = None
    fire_rating: str | None = None
    acoustic_rating: str | float | None = None
    handicap_accessible: bool | None = None
    solar_factor: float | None = None
    nominal_diameter: float | None = None
    elevation: float | None = None
    occupancy_type: str | None = None


@dataclass(frozen=True)
class ElementRecord:
    """Element Record Domain Entity.

    One resolved building element from an IFC file.

    Attributes:
        entity_id: STEP instance id (the number after ``#``)
        entity_type: STEP entity type (e.g., "IFCWALL")
        kind: Element kind derived from the entity type
        name: Decoded display name
        global_id: IFC GlobalId, when present
        properties: Flat property map (later property sets override earlier)
        property_sets: Properties keyed by property set name
        quantities: Measured/inferred quantities
        attributes: Typed well-known attributes
        materials: Material names in association order
        classification: Classification reference code (keynote)
        storey: Name of the containing building storey
        estimated: Names of quantities that were inferred, not measured
    """

    entity_id: int
    entity_type: str
    kind: ElementKind
    name: str
    global_id: str | None = None
    properties: dict[str, Scalar] = field(default_factory=dict)
    property_sets: dict[str, dict[str, Scalar]] = field(default_factory=dict)
    quantities: Quantities = field(default_factory=Quantities)
    attributes: ElementAttributes = field(default_factory=ElementAttributes)
    materials: tuple[str, ...] = ()
    classification: str | None = None
    storey: str | None = None
    estimated: tuple[str, ...] = ()

    @property
    def reference(self) -> str:
        """Identifier used when pointing back at this element."""
        return self.global_id or self.name

    def is_a(self, fragment: str) -> bool:
        """Check whether the entity type contains a type fragment.

        Args:
            fragment: Upper-case type fragment (e.g., "WALL", "IFCBEAM")

        Returns:
            True if the entity type contains the fragment
        """
        return fragment.upper() in self.entity_type

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dict."""
        data = asdict(self)
        data["kind"] = self.kind.value
        data["materials"] = list(self.materials)
        data["estimated"] = list(self.estimated)
        data["quantities"] = self.quantities.populated()
        data["attributes"] = {
            k: v for k, v in asdict(self.attributes).items() if v is not None
        }
        return data
