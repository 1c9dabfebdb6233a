"""IFC Specialty Analyzer.

Reads IFC (STEP) exports per engineering specialty and turns them into
element quantities, optimization findings and a ProNIC-coded WBS project.
"""
from __future__ import annotations

__version__ = "0.1.0"
__author__ = "IFC-Specialty Team"

# Re-export main entry point
from ifc_specialty.presentation import main

__all__ = ["main", "__version__"]
