"""Domain Value Objects.

Immutable objects that represent domain concepts without identity.
"""
from __future__ import annotations

from ifc_specialty.domain.value_objects.specialty import (
    SPECIALTY_INDICATORS,
    Specialty,
)

__all__ = [
    "Specialty",
    "SPECIALTY_INDICATORS",
]
