"""Analysis MCP Tools.

Tools for detecting the specialty of IFC files, analyzing them and
assembling a multi-specialty WBS project.
"""
from __future__ import annotations

import asyncio
import json
from datetime import date
from pathlib import Path
from typing import Any

from mcp.server import Server
from mcp.types import TextContent, Tool

from ifc_specialty.application.services.analysis_service import SpecialtyAnalysisService
from ifc_specialty.application.services.batch_service import (
    AnalysisRequest,
    BatchAnalysisService,
    read_text_file,
)
from ifc_specialty.application.services.project_assembler import ProjectAssembler
from ifc_specialty.domain.exceptions import DomainError
from ifc_specialty.infrastructure.step.detector import count_indicators, detect_specialty
from ifc_specialty.infrastructure.step.index import EntityIndex
from ifc_specialty.presentation.validation import check_batch_limits, validate_ifc_file
from ifc_specialty.shared.config import get_settings
from ifc_specialty.shared.logging import get_logger

logger = get_logger(__name__)


def register_analysis_tools(server: Server) -> None:
    """Register analysis MCP tools.

    Args:
        server: MCP Server instance
    """

    @server.list_tools()
    async def list_analysis_tools() -> list[Tool]:
        """List available analysis tools."""
        return [
            Tool(
                name="ifc_detect_specialty",
                description=(
                    "Detect the engineering specialty (architecture, structure, plumbing, "
                    "electrical, HVAC, fire safety, telecom, gas) of an IFC file."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "file_path": {
                            "type": "string",
                            "description": "Path to the IFC file",
                        },
                    },
                    "required": ["file_path"],
                },
            ),
            Tool(
                name="ifc_analyze_file",
                description=(
                    "Analyze one IFC file: element quantities, WBS chapters, "
                    "optimization findings and summary statistics."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "file_path": {
                            "type": "string",
                            "description": "Path to the IFC file",
                        },
                        "include_elements": {
                            "type": "boolean",
                            "description": "Include every element record in the output",
                            "default": False,
                        },
                    },
                    "required": ["file_path"],
                },
            ),
            Tool(
                name="ifc_analyze_batch",
                description=(
                    "Analyze several IFC files one after another. Failed files are "
                    "reported next to successful ones."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "file_paths": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "Paths to the IFC files",
                        },
                    },
                    "required": ["file_paths"],
                },
            ),
            Tool(
                name="ifc_build_wbs_project",
                description=(
                    "Analyze one IFC file per specialty and merge them into a single "
                    "WBS project with derived project metadata."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "file_paths": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "Paths to the IFC files (one per specialty)",
                        },
                        "project_name": {
                            "type": "string",
                            "description": "Optional project name (defaults to the specialty mix)",
                        },
                        "start_date": {
                            "type": "string",
                            "description": "Planned start date (YYYY-MM-DD, defaults to today)",
                        },
                    },
                    "required": ["file_paths"],
                },
            ),
        ]

    @server.call_tool()
    async def call_analysis_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle analysis tool calls."""
        try:
            if name == "ifc_detect_specialty":
                return await _detect_specialty(arguments)
            elif name == "ifc_analyze_file":
                return await _analyze_file(arguments)
            elif name == "ifc_analyze_batch":
                return await _analyze_batch(arguments)
            elif name == "ifc_build_wbs_project":
                return await _build_wbs_project(arguments)
            else:
                return [TextContent(type="text", text=f"Unknown tool: {name}")]
        except DomainError as e:
            logger.warning("Tool input rejected", tool=name, error=str(e))
            return _json({"status": "error", "error": e.message, "details": e.details})
        except Exception as e:
            logger.error("Tool error", tool=name, error=str(e))
            return [TextContent(type="text", text=f"Error: {str(e)}")]


def _json(data: dict[str, Any]) -> list[TextContent]:
    return [TextContent(type="text", text=json.dumps(data, indent=2, ensure_ascii=False))]


def _read_checked(path: Path) -> str:
    """Read an IFC file and check it looks like STEP.

    Raises:
        FileNotFoundError: If the path does not exist
        InvalidStepFileError: If the extension or the STEP header is wrong
    """
    content = read_text_file(path)
    validate_ifc_file(path.name, content, get_settings())
    return content


async def _read_ifc(path_value: str) -> tuple[str, str]:
    """Read and validate one IFC file.

    Returns:
        (file name, content)
    """
    file_path = Path(path_value)
    content = await asyncio.to_thread(_read_checked, file_path)
    return file_path.name, content


def _batch_requests(paths: list[str]) -> list[AnalysisRequest]:
    """Check the batch limits and create one path request per file.

    Files are not read here; each is read when its turn in the batch comes.
    """
    files = [Path(p) for p in paths]
    sizes = [f.stat().st_size for f in files if f.is_file()]
    check_batch_limits(len(files), sum(sizes), get_settings())
    return [AnalysisRequest.for_path(f) for f in files]


def _batch_service() -> BatchAnalysisService:
    return BatchAnalysisService(reader=_read_checked)


async def _detect_specialty(args: dict[str, Any]) -> list[TextContent]:
    """Detect the specialty of a file."""
    file_name, content = await _read_ifc(args["file_path"])

    index = await asyncio.to_thread(EntityIndex.from_text, content)
    counts = count_indicators(index)
    specialty = detect_specialty(index)

    return _json({
        "file_name": file_name,
        "specialty": specialty.value,
        "abbreviation": specialty.abbreviation,
        "indicator_counts": {s.value: c for s, c in counts.items() if c > 0},
        "entity_count": len(index),
    })


async def _analyze_file(args: dict[str, Any]) -> list[TextContent]:
    """Analyze one file."""
    file_name, content = await _read_ifc(args["file_path"])
    include_elements = args.get("include_elements", False)

    service = SpecialtyAnalysisService()
    result = await asyncio.to_thread(service.analyze, content, file_name)

    data = result.to_dict(include_elements=include_elements)
    data["file_name"] = file_name
    return _json(data)


async def _analyze_batch(args: dict[str, Any]) -> list[TextContent]:
    """Analyze several files sequentially."""
    requests = _batch_requests(args["file_paths"])
    batch = await _batch_service().run(requests)

    return _json({
        "total": len(batch.responses),
        "failed": len(batch.failures),
        "responses": [r.to_dict() for r in batch.responses],
    })


async def _build_wbs_project(args: dict[str, Any]) -> list[TextContent]:
    """Analyze files and assemble a WBS project."""
    requests = _batch_requests(args["file_paths"])
    start_date = date.fromisoformat(args["start_date"]) if args.get("start_date") else None

    batch = await _batch_service().run(requests)
    result = ProjectAssembler().assemble(
        batch.results,
        project_name=args.get("project_name"),
        start_date=start_date,
    )
    if result.is_failure():
        return _json({
            "status": "error",
            "error": str(result.error),
            "failed_files": [r.to_dict() for r in batch.failures],
        })

    project = result.unwrap()
    return _json({
        "status": "success",
        "file_names": [r.file_name for r in batch.successes],
        "failed_files": [r.to_dict() for r in batch.failures],
        "project": project.to_dict(),
    })
