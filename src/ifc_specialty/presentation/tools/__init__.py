"""MCP Tools registration.

All tool modules register their tools with the MCP server.
"""
from __future__ import annotations

from mcp.server import Server

from ifc_specialty.presentation.tools.analysis_tools import register_analysis_tools


def register_all_tools(server: Server) -> None:
    """Register every tool module with the server."""
    register_analysis_tools(server)


__all__ = [
    "register_all_tools",
    "register_analysis_tools",
]
