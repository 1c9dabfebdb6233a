"""Presentation layer.

MCP server and HTTP API adapters over the application services.
"""
from __future__ import annotations

from ifc_specialty.presentation.server import main

__all__ = ["main"]
