"""Pytest configuration and fixtures."""
from __future__ import annotations

from collections.abc import Iterable

import pytest

from ifc_specialty.domain.models.element import (
    ElementAttributes,
    ElementKind,
    ElementRecord,
    Quantities,
)
from ifc_specialty.shared.config import Settings

STEP_HEADER = """ISO-10303-21;
HEADER;
FILE_DESCRIPTION(('ViewDefinition [CoordinationView]'),'2;1');
FILE_NAME('model.ifc','2024-01-01T00:00:00',(''),(''),'','','');
FILE_SCHEMA(('IFC2X3'));
ENDSEC;
DATA;"""

STEP_FOOTER = """ENDSEC;
END-ISO-10303-21;"""

HEADER_LINE_COUNT = 9


class StepBuilder:
    """Builds single-line STEP files for tests.

    Record #1 is an owner history so that every relationship written by
    the builder resolves completely.
    """

    def __init__(self) -> None:
        self._records: list[str] = []
        self._next_id = 1
        self.add("IFCOWNERHISTORY(#2,#3,$,.ADDED.,$,$,$,0)")

    def add(self, body: str) -> int:
        """Append a record and return its id."""
        entity_id = self._next_id
        self._next_id += 1
        self._records.append(f"#{entity_id}= {body};")
        return entity_id

    @staticmethod
    def guid(entity_id: int) -> str:
        return f"G{entity_id:021d}"

    def _guid_next(self) -> str:
        return self.guid(self._next_id)

    @staticmethod
    def refs(ids: Iterable[int]) -> str:
        return "(" + ",".join(f"#{i}" for i in ids) + ")"

    # Elements

    def element(self, entity_type: str, name: str, tail: str = "") -> int:
        """Add an element with the usual (GlobalId, OwnerHistory, Name, ...) layout."""
        suffix = f",{tail}" if tail else ""
        return self.add(f"{entity_type}('{self._guid_next()}',#1,'{name}',$,$,$,$,'tag'{suffix})")

    def window(self, name: str, width: float, height: float, entity_type: str = "IFCWINDOW") -> int:
        return self.element(entity_type, name, f"{width},{height}")

    # Relationships

    def quantity_set(self, element_id: int, *quantities: str, name: str = "BaseQuantities") -> int:
        """Attach quantity records (e.g. "IFCQUANTITYAREA('NetSideArea',$,$,12.5)")."""
        member_ids = [self.add(q) for q in quantities]
        qto = self.add(f"IFCELEMENTQUANTITY('{self._guid_next()}',#1,'{name}',$,'',{self.refs(member_ids)})")
        self.add(f"IFCRELDEFINESBYPROPERTIES('{self._guid_next()}',#1,$,$,(#{element_id}),#{qto})")
        return qto

    def property_set(self, element_id: int, name: str, properties: dict[str, str]) -> int:
        """Attach a property set; values are raw wrappers (e.g. "IFCBOOLEAN(.T.)")."""
        prop_ids = [
            self.add(f"IFCPROPERTYSINGLEVALUE('{key}',$,{value},$)")
            for key, value in properties.items()
        ]
        pset = self.add(f"IFCPROPERTYSET('{self._guid_next()}',#1,'{name}',$,{self.refs(prop_ids)})")
        self.add(f"IFCRELDEFINESBYPROPERTIES('{self._guid_next()}',#1,$,$,(#{element_id}),#{pset})")
        return pset

    def material(self, element_ids: Iterable[int], name: str) -> int:
        material = self.add(f"IFCMATERIAL('{name}')")
        self.add(
            f"IFCRELASSOCIATESMATERIAL('{self._guid_next()}',#1,$,$,{self.refs(element_ids)},#{material})"
        )
        return material

    def layered_material(self, element_ids: Iterable[int], names: list[str]) -> int:
        layers = []
        for name in names:
            material = self.add(f"IFCMATERIAL('{name}')")
            layers.append(self.add(f"IFCMATERIALLAYER(#{material},0.1,$)"))
        layer_set = self.add(f"IFCMATERIALLAYERSET({self.refs(layers)},'Layered')")
        usage = self.add(f"IFCMATERIALLAYERSETUSAGE(#{layer_set},.AXIS2.,.POSITIVE.,0.)")
        self.add(
            f"IFCRELASSOCIATESMATERIAL('{self._guid_next()}',#1,$,$,{self.refs(element_ids)},#{usage})"
        )
        return usage

    def classification(self, element_ids: Iterable[int], code: str) -> int:
        reference = self.add(f"IFCCLASSIFICATIONREFERENCE('keynotes.txt','{code}','Keynote',$)")
        self.add(
            f"IFCRELASSOCIATESCLASSIFICATION('{self._guid_next()}',#1,$,$,{self.refs(element_ids)},#{reference})"
        )
        return reference

    def storey(self, name: str, element_ids: Iterable[int], elevation: float = 0.0) -> int:
        storey = self.add(
            f"IFCBUILDINGSTOREY('{self._guid_next()}',#1,'{name}',$,$,$,$,$,.ELEMENT.,{elevation})"
        )
        self.add(
            f"IFCRELCONTAINEDINSPATIALSTRUCTURE('{self._guid_next()}',#1,$,$,{self.refs(element_ids)},#{storey})"
        )
        return storey

    def text(self, header: bool = True) -> str:
        """Render the file."""
        body = "\n".join(self._records)
        if not header:
            return body + "\n"
        return f"{STEP_HEADER}\n{body}\n{STEP_FOOTER}\n"


def exterior_walls_file(count: int = 3, area: float = 12.5) -> str:
    """Architecture file with exterior walls of a given net side area."""
    builder = StepBuilder()
    for n in range(count):
        wall = builder.element("IFCWALL", f"Exterior wall {n + 1}")
        builder.property_set(wall, "Pset_WallCommon", {"IsExternal": "IFCBOOLEAN(.T.)"})
        builder.quantity_set(wall, f"IFCQUANTITYAREA('NetSideArea',$,$,{area})")
    return builder.text()


def structure_file() -> str:
    """Structure file with columns, a long beam, a footing and a slab."""
    builder = StepBuilder()
    columns = [
        builder.element("IFCCOLUMN", "Concrete-Rectangular-Column:300 x 300mm:1001"),
        builder.element("IFCCOLUMN", "Concrete-Rectangular-Column:300 x 300mm:1002"),
    ]
    beam = builder.element("IFCBEAM", "Concrete-Rectangular Beam:250 x 500mm:2001")
    builder.quantity_set(beam, "IFCQUANTITYVOLUME('NetVolume',$,$,1.25)")
    footing = builder.element("IFCFOOTING", "Footing-Rectangular:1200 x 1200mm:3001")
    builder.quantity_set(footing, "IFCQUANTITYVOLUME('NetVolume',$,$,0.864)")
    slab = builder.element("IFCSLAB", "Floor:Concrete 200mm")
    builder.quantity_set(slab, "IFCQUANTITYAREA('GrossArea',$,$,120.0)")
    builder.material([*columns, beam, footing, slab], "Concrete C25/30")
    builder.storey("Piso 0", [*columns, beam, footing, slab])
    return builder.text()


@pytest.fixture
def step_builder() -> StepBuilder:
    """Empty STEP file builder."""
    return StepBuilder()


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with small batch limits."""
    return Settings(
        log_level="DEBUG",
        batch_max_files=3,
        batch_max_total_mb=1,
        require_step_header=True,
    )


def make_element(
    entity_type: str,
    name: str = "Element",
    entity_id: int = 1,
    attributes: ElementAttributes | None = None,
    storey: str | None = None,
    **quantities: float,
) -> ElementRecord:
    """Element record built directly, without a STEP file."""
    return ElementRecord(
        entity_id=entity_id,
        entity_type=entity_type,
        kind=ElementKind.from_entity_type(entity_type),
        name=name,
        global_id=f"G{entity_id:04d}",
        quantities=Quantities(**quantities),
        attributes=attributes or ElementAttributes(),
        storey=storey,
    )
