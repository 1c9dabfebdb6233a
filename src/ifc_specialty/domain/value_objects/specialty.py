"""Specialty Value Object.

An engineering discipline (trade) that an IFC export file belongs to.
"""
from __future__ import annotations

import re
from enum import Enum


class Specialty(str, Enum):
    """Engineering discipline of an IFC file.

    Member order is the tie-break order used by specialty detection.
    """

    ARCHITECTURE = "architecture"
    STRUCTURE = "structure"
    PLUMBING = "plumbing"
    ELECTRICAL = "electrical"
    HVAC = "hvac"
    FIRE_SAFETY = "fire_safety"
    TELECOM = "telecom"
    GAS = "gas"
    UNKNOWN = "unknown"

    @property
    def abbreviation(self) -> str:
        """Short Portuguese trade label used in project names."""
        return _ABBREVIATIONS[self]

    @property
    def is_mep(self) -> bool:
        """Whether this is a building-services discipline."""
        return self in (Specialty.PLUMBING, Specialty.ELECTRICAL, Specialty.HVAC)

    @classmethod
    def detectable(cls) -> list[Specialty]:
        """All specialties that have indicator entity types."""
        return [s for s in cls if s is not cls.UNKNOWN]


_ABBREVIATIONS: dict[Specialty, str] = {
    Specialty.ARCHITECTURE: "ARQ",
    Specialty.STRUCTURE: "EST",
    Specialty.PLUMBING: "ÁGUAS",
    Specialty.ELECTRICAL: "ELET",
    Specialty.HVAC: "AVAC",
    Specialty.FIRE_SAFETY: "SCIE",
    Specialty.TELECOM: "ITED",
    Specialty.GAS: "GÁS",
    Specialty.UNKNOWN: "?",
}


def _patterns(*sources: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(src, re.IGNORECASE) for src in sources)


# Entity type patterns that indicate each specialty
SPECIALTY_INDICATORS: dict[Specialty, tuple[re.Pattern[str], ...]] = {
    Specialty.ARCHITECTURE: _patterns(
        "IFCWALL", "IFCWINDOW", "IFCDOOR", "IFCROOF", "IFCCOVERING",
        "IFCCURTAINWALL", "IFCSTAIR", "IFCRAILING", "IFCFURNISHINGELEMENT",
    ),
    Specialty.STRUCTURE: _patterns(
        "IFCBEAM", "IFCCOLUMN", "IFCFOOTING", "IFCPILE",
        "IFCREINFORCINGBAR", "IFCREINFORCINGMESH", "IFCTENDON",
        "IFCSTRUCTURALCURVECONNECTION", "IFCSTRUCTURALSURFACECONNECTION",
    ),
    Specialty.PLUMBING: _patterns(
        "IFCPIPESEGMENT", "IFCPIPEFITTING", "IFCSANITARYTERMINAL",
        "IFCFLOWSTORAGE", "IFCVALVE", "IFCPUMP",
    ),
    Specialty.ELECTRICAL: _patterns(
        "IFCCABLESEGMENT", "IFCCABLECARRIERSEGMENT", "IFCELECTRICDISTRIBUTIONBOARD",
        "IFCLIGHTFIXTURE", "IFCOUTLET", "IFCSWITCHINGDEVICE",
        "IFCELECTRICAPPLIANCE", "IFCJUNCTIONBOX",
    ),
    Specialty.HVAC: _patterns(
        "IFCDUCTSEGMENT", "IFCDUCTFITTING", "IFCAIRTERMINAL",
        "IFCUNITARYEQUIPMENT", "IFCCOIL", "IFCFAN", "IFCCHILLER",
        "IFCBOILER", "IFCHEATEXCHANGER",
    ),
    Specialty.FIRE_SAFETY: _patterns(
        "IFCFIRESUPPRESSIONTERMINAL", "IFCALARM", "IFCSENSOR.*SMOKE",
        "IFCFLOWINSTRUMENT",
    ),
    Specialty.TELECOM: _patterns(
        "IFCCOMMUNICATIONSAPPLIANCE", "IFCAUDIOVISUALAPPLIANCE",
    ),
    Specialty.GAS: _patterns(
        "IFCBURNER",
    ),
}
