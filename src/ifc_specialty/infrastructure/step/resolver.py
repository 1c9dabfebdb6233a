"""Relationship Resolver.

Follows relationship records from an element to its property sets,
quantity sets, materials, classification reference and containing storey.

Missing targets and unknown value kinds are skipped and counted in the
shared ResolutionDiagnostics; nothing here raises.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field

from ifc_specialty.domain.models.analysis import ResolutionDiagnostics
from ifc_specialty.domain.models.element import Scalar
from ifc_specialty.infrastructure.step.index import EntityIndex, EntityRecord
from ifc_specialty.infrastructure.step.tokens import (
    decode_step_text,
    first_in_range,
    last_reference,
    quoted_at,
    references,
    unescape_quotes,
)

REL_DEFINES_BY_PROPERTIES = "IFCRELDEFINESBYPROPERTIES"
REL_ASSOCIATES_MATERIAL = "IFCRELASSOCIATESMATERIAL"
REL_ASSOCIATES_CLASSIFICATION = "IFCRELASSOCIATESCLASSIFICATION"
REL_CONTAINED_IN_SPATIAL_STRUCTURE = "IFCRELCONTAINEDINSPATIALSTRUCTURE"

# Plausible quantity ranges (exclusive); anything outside is a decode artifact
QUANTITY_RANGE = (0.0, 100_000.0)
WEIGHT_RANGE = (0.0, 1_000_000.0)

_NUM = r"(-?\d+(?:\.\d*)?(?:[eE][+-]?\d+)?)"

# Value wrappers in priority order; the first one found in the record wins
_VALUE_WRAPPERS: list[tuple[str, re.Pattern[str]]] = [
    ("real", re.compile(rf"\bIFCREAL\(\s*{_NUM}\s*\)")),
    ("boolean", re.compile(r"\bIFCBOOLEAN\(\s*\.(\w+)\.\s*\)")),
    ("label", re.compile(r"\bIFCLABEL\('((?:[^']|'')*)'\)")),
    ("text", re.compile(r"\bIFCTEXT\('((?:[^']|'')*)'\)")),
    ("integer", re.compile(r"\bIFCINTEGER\(\s*(-?\d+)\s*\)")),
    ("thermal", re.compile(rf"\bIFCTHERMALTRANSMITTANCEMEASURE\(\s*{_NUM}\s*\)")),
    ("length", re.compile(rf"\bIFCPOSITIVELENGTHMEASURE\(\s*{_NUM}\s*\)")),
    ("area", re.compile(rf"\bIFCAREAMEASURE\(\s*{_NUM}\s*\)")),
]

_TRUE_FLAGS = frozenset({"T", "TRUE"})

_MATERIAL_PART_TYPES = frozenset({
    "IFCMATERIALLAYER",
    "IFCMATERIALCONSTITUENT",
    "IFCMATERIALPROFILE",
})
_MATERIAL_SET_TYPES = frozenset({
    "IFCMATERIALLAYERSET",
    "IFCMATERIALLIST",
    "IFCMATERIALCONSTITUENTSET",
    "IFCMATERIALPROFILESET",
})
_MATERIAL_USAGE_TYPES = frozenset({
    "IFCMATERIALLAYERSETUSAGE",
    "IFCMATERIALPROFILESETUSAGE",
})


@dataclass
class ResolvedDefinitions:
    """Properties and quantities attached to one element."""

    properties: dict[str, Scalar] = field(default_factory=dict)
    property_sets: dict[str, dict[str, Scalar]] = field(default_factory=dict)
    quantities: dict[str, float] = field(default_factory=dict)


def parse_property_value(body: str) -> Scalar | None:
    """Decode the value of an IFCPROPERTYSINGLEVALUE record.

    Args:
        body: Property record body

    Returns:
        Decoded scalar, or None if no known wrapper is present
    """
    for kind, pattern in _VALUE_WRAPPERS:
        match = pattern.search(body)
        if not match:
            continue
        raw = match.group(1)
        if kind == "boolean":
            return raw.upper() in _TRUE_FLAGS
        if kind in ("label", "text"):
            return decode_step_text(unescape_quotes(raw))
        if kind == "integer":
            return int(raw)
        return float(raw)
    return None


def _length_field(label: str) -> str:
    lowered = label.lower()
    for name in ("width", "height", "depth"):
        if name in lowered:
            return name
    return "length"


class RelationshipResolver:
    """Resolves relationship records for elements of one indexed file."""

    def __init__(
        self,
        index: EntityIndex,
        diagnostics: ResolutionDiagnostics | None = None,
    ) -> None:
        """Initialize resolver.

        Args:
            index: Indexed file
            diagnostics: Counters to update (defaults to the index's own)
        """
        self._index = index
        self._diagnostics = diagnostics or index.diagnostics

    @property
    def diagnostics(self) -> ResolutionDiagnostics:
        """Skip counters."""
        return self._diagnostics

    def _relating(self, entity_id: int, rel_type: str) -> list[EntityRecord]:
        """Get the relating records of all relationships of a type."""
        targets: list[EntityRecord] = []
        for rel in self._index.relationships_for(entity_id, rel_type):
            target = self._index.get(last_reference(rel.body))
            if target is None:
                self._diagnostics.unresolved_references += 1
                continue
            targets.append(target)
        return targets

    # =========================================================================
    # Property and quantity sets
    # =========================================================================

    def definitions(self, entity_id: int) -> ResolvedDefinitions:
        """Resolve property sets and quantity sets of an element.

        Args:
            entity_id: Element id

        Returns:
            Properties (later sets override earlier), per-set properties
            and quantities
        """
        resolved = ResolvedDefinitions()

        for definition in self._relating(entity_id, REL_DEFINES_BY_PROPERTIES):
            if definition.type_name == "IFCELEMENTQUANTITY":
                self._read_quantity_set(definition, resolved.quantities)
            elif definition.type_name == "IFCPROPERTYSET":
                self._read_property_set(definition, resolved)

        return resolved

    def _members(self, record: EntityRecord) -> list[EntityRecord]:
        members: list[EntityRecord] = []
        for ref in references(record.body):
            member = self._index.get(ref)
            if member is None:
                self._diagnostics.unresolved_references += 1
                continue
            members.append(member)
        return members

    def _read_quantity_set(self, qto: EntityRecord, quantities: dict[str, float]) -> None:
        for member in self._members(qto):
            kind = member.type_name
            if kind not in (
                "IFCQUANTITYAREA",
                "IFCQUANTITYVOLUME",
                "IFCQUANTITYLENGTH",
                "IFCQUANTITYWEIGHT",
            ):
                continue

            low, high = WEIGHT_RANGE if kind == "IFCQUANTITYWEIGHT" else QUANTITY_RANGE
            value = first_in_range(member.body, low, high)
            if value is None:
                self._diagnostics.rejected_quantity_values += 1
                continue

            label = quoted_at(member.body, 0) or ""
            if kind == "IFCQUANTITYAREA":
                # Net area takes precedence over gross
                if "net" in label.lower() or "area" not in quantities:
                    quantities["area"] = value
            elif kind == "IFCQUANTITYVOLUME":
                quantities["volume"] = value
            elif kind == "IFCQUANTITYWEIGHT":
                quantities["weight"] = value
            else:
                quantities[_length_field(label)] = value

    def _read_property_set(self, pset: EntityRecord, resolved: ResolvedDefinitions) -> None:
        pset_name = decode_step_text(quoted_at(pset.body, 1, 0) or "")
        pset_properties: dict[str, Scalar] = {}

        for member in self._members(pset):
            if member.type_name != "IFCPROPERTYSINGLEVALUE":
                continue
            prop_name = quoted_at(member.body, 0)
            if not prop_name:
                continue

            value = parse_property_value(member.body)
            if value is None:
                self._diagnostics.unrecognized_property_values += 1
                continue

            prop_name = decode_step_text(prop_name)
            resolved.properties[prop_name] = value
            pset_properties[prop_name] = value

        if pset_name and pset_properties:
            resolved.property_sets.setdefault(pset_name, {}).update(pset_properties)

    # =========================================================================
    # Materials, classification, containment
    # =========================================================================

    def materials(self, entity_id: int) -> list[str]:
        """Resolve material names of an element.

        Follows layer set usages, layer/profile sets, material lists and
        constituent sets down to the underlying IFCMATERIAL records.

        Args:
            entity_id: Element id

        Returns:
            Distinct material names in association order
        """
        names: list[str] = []
        for target in self._relating(entity_id, REL_ASSOCIATES_MATERIAL):
            names.extend(self._material_names(target))
        return list(dict.fromkeys(names))

    def _material_names(self, record: EntityRecord) -> list[str]:
        kind = record.type_name

        if kind == "IFCMATERIAL":
            name = quoted_at(record.body, 0)
            return [decode_step_text(name)] if name else []

        if kind in _MATERIAL_USAGE_TYPES:
            refs = references(record.body)
            material_set = self._index.get(refs[0]) if refs else None
            if material_set is None:
                self._diagnostics.unresolved_references += 1
                return []
            if material_set.type_name in _MATERIAL_SET_TYPES:
                return self._material_names(material_set)
            return []

        if kind in _MATERIAL_SET_TYPES:
            names: list[str] = []
            for member in self._members(record):
                if member.type_name == "IFCMATERIAL":
                    names.extend(self._material_names(member))
                elif member.type_name in _MATERIAL_PART_TYPES:
                    names.extend(self._material_of_part(member))
            return names

        if kind in _MATERIAL_PART_TYPES:
            return self._material_of_part(record)

        return []

    def _material_of_part(self, part: EntityRecord) -> list[str]:
        for ref in references(part.body):
            material = self._index.get(ref)
            if material is not None and material.type_name == "IFCMATERIAL":
                return self._material_names(material)
        return []

    def classification(self, entity_id: int) -> str | None:
        """Resolve the classification reference code (keynote) of an element."""
        code: str | None = None
        for target in self._relating(entity_id, REL_ASSOCIATES_CLASSIFICATION):
            if target.type_name != "IFCCLASSIFICATIONREFERENCE":
                continue
            value = quoted_at(target.body, 1, 0)
            if value is not None:
                code = decode_step_text(value)
        return code

    def storey(self, entity_id: int) -> str | None:
        """Resolve the name of the building storey containing an element."""
        name: str | None = None
        for target in self._relating(entity_id, REL_CONTAINED_IN_SPATIAL_STRUCTURE):
            if target.type_name != "IFCBUILDINGSTOREY":
                continue
            raw = quoted_at(target.body, 1) or quoted_at(target.body, 0)
            if raw:
                name = decode_step_text(raw)
        return name
