"""Work-Breakdown Structure Domain Entities.

Coded hierarchy used for costing and scheduling:
chapter "08" -> subchapter "08.01" -> article "08.01.001".
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any


class BuildingType(str, Enum):
    """Building type guessed from occupancy indicators."""

    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    MIXED = "mixed"


@dataclass
class WbsArticle:
    """Single measured WBS article.

    Attributes:
        code: Article code (e.g., "08.01.001")
        description: Article description
        unit: Measurement unit (m, m2, m3, Ud)
        quantity: Measured or estimated quantity
        keynote: Pricing catalog classification code
        element_ids: GlobalIds of the contributing elements
        tags: Search tags for downstream cost matching
        estimated: True when a per-element default replaced a measurement
    """

    code: str
    description: str
    unit: str
    quantity: float
    keynote: str | None = None
    element_ids: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    estimated: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dict."""
        return {
            "code": self.code,
            "description": self.description,
            "unit": self.unit,
            "quantity": self.quantity,
            "keynote": self.keynote,
            "element_ids": list(self.element_ids),
            "tags": list(self.tags),
            "estimated": self.estimated,
        }


@dataclass
class WbsSubChapter:
    """WBS subchapter holding articles with unique codes."""

    code: str
    name: str
    articles: list[WbsArticle] = field(default_factory=list)

    @property
    def article_codes(self) -> set[str]:
        """Codes of the contained articles."""
        return {a.code for a in self.articles}

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dict."""
        return {
            "code": self.code,
            "name": self.name,
            "articles": [a.to_dict() for a in self.articles],
        }


@dataclass
class WbsChapter:
    """WBS chapter holding subchapters with unique codes."""

    code: str
    name: str
    sub_chapters: list[WbsSubChapter] = field(default_factory=list)

    @property
    def article_count(self) -> int:
        """Number of articles in all subchapters."""
        return sum(len(s.articles) for s in self.sub_chapters)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dict."""
        return {
            "code": self.code,
            "name": self.name,
            "sub_chapters": [s.to_dict() for s in self.sub_chapters],
        }


@dataclass
class WbsProject:
    """Consolidated multi-specialty WBS project.

    Attributes:
        id: Project identifier
        name: Project name
        classification: Classification system of the chapter codes
        start_date: Planned start date
        chapters: Chapters sorted by code
        gross_floor_area: Sum of slab areas (m²)
        number_of_floors: Number of distinct storeys
        building_height: Maximum resolved elevation (m)
        building_type: Guessed building type
    """

    id: str
    name: str
    classification: str
    start_date: date
    chapters: list[WbsChapter] = field(default_factory=list)
    gross_floor_area: float | None = None
    number_of_floors: int | None = None
    building_height: float | None = None
    building_type: BuildingType | None = None

    @property
    def article_count(self) -> int:
        """Number of articles across the project."""
        return sum(c.article_count for c in self.chapters)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dict."""
        return {
            "id": self.id,
            "name": self.name,
            "classification": self.classification,
            "start_date": self.start_date.isoformat(),
            "chapters": [c.to_dict() for c in self.chapters],
            "gross_floor_area": self.gross_floor_area,
            "number_of_floors": self.number_of_floors,
            "building_height": self.building_height,
            "building_type": self.building_type.value if self.building_type else None,
        }
