"""IFC Specialty MCP Server.

MCP server (stdio transport) exposing the analysis tools.
"""
from __future__ import annotations

import asyncio

from mcp.server import Server
from mcp.server.stdio import stdio_server

from ifc_specialty.presentation.tools import register_all_tools
from ifc_specialty.shared.config import get_settings
from ifc_specialty.shared.logging import configure_logging, get_logger

logger = get_logger(__name__)


def create_server() -> Server:
    """Create and configure the MCP server.

    Returns:
        Configured MCP Server instance
    """
    server = Server(get_settings().app_name)

    # Register all tools
    register_all_tools(server)

    return server


async def run_server() -> None:
    """Run the MCP server."""
    configure_logging()
    settings = get_settings()
    server = create_server()

    logger.info("Starting IFC Specialty MCP Server", version=settings.app_version)
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    finally:
        logger.info("IFC Specialty MCP Server stopped")


def main() -> None:
    """Entry point for the MCP server."""
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
