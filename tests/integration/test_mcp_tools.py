"""Tests for the MCP analysis tools."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from conftest import exterior_walls_file, structure_file
from mcp.types import TextContent

from ifc_specialty.domain.exceptions import InvalidStepFileError
from ifc_specialty.presentation.server import create_server
from ifc_specialty.presentation.tools import analysis_tools


def write_ifc(directory: Path, name: str, content: str) -> str:
    path = directory / name
    path.write_text(content, encoding="utf-8")
    return str(path)


def payload(contents: list[TextContent]) -> dict:
    assert len(contents) == 1
    return json.loads(contents[0].text)


class TestAnalysisTools:
    """Tests for the tool handlers."""

    @pytest.mark.asyncio
    async def test_detect_specialty(self, tmp_path: Path) -> None:
        """Test specialty detection of a file."""
        path = write_ifc(tmp_path, "est.ifc", structure_file())

        data = payload(await analysis_tools._detect_specialty({"file_path": path}))

        assert data["file_name"] == "est.ifc"
        assert data["specialty"] == "structure"
        assert data["abbreviation"] == "EST"
        assert data["indicator_counts"]["structure"] == 4

    @pytest.mark.asyncio
    async def test_analyze_file(self, tmp_path: Path) -> None:
        """Test single-file analysis output."""
        path = write_ifc(tmp_path, "arq.ifc", exterior_walls_file())

        data = payload(await analysis_tools._analyze_file({"file_path": path}))

        assert data["specialty"] == "architecture"
        assert data["chapters"][0]["sub_chapters"][0]["articles"][0]["quantity"] == 37.5
        assert "elements" not in data

    @pytest.mark.asyncio
    async def test_analyze_file_with_elements(self, tmp_path: Path) -> None:
        """Test element records in the output."""
        path = write_ifc(tmp_path, "arq.ifc", exterior_walls_file(count=2))

        data = payload(await analysis_tools._analyze_file(
            {"file_path": path, "include_elements": True}
        ))
        assert len(data["elements"]) == 2

    @pytest.mark.asyncio
    async def test_analyze_batch(self, tmp_path: Path) -> None:
        """Test batch analysis output."""
        paths = [
            write_ifc(tmp_path, "arq.ifc", exterior_walls_file()),
            write_ifc(tmp_path, "est.ifc", structure_file()),
        ]

        data = payload(await analysis_tools._analyze_batch({"file_paths": paths}))

        assert data["total"] == 2
        assert data["failed"] == 0
        assert [r["file_name"] for r in data["responses"]] == ["arq.ifc", "est.ifc"]

    @pytest.mark.asyncio
    async def test_analyze_batch_with_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file is reported and the other files are analyzed."""
        paths = [
            write_ifc(tmp_path, "arq.ifc", exterior_walls_file()),
            str(tmp_path / "gone.ifc"),
            write_ifc(tmp_path, "est.ifc", structure_file()),
        ]

        data = payload(await analysis_tools._analyze_batch({"file_paths": paths}))

        assert data["total"] == 3
        assert data["failed"] == 1
        arq, gone, est = data["responses"]
        assert arq["success"] is True
        assert est["result"]["specialty"] == "structure"
        assert gone["file_name"] == "gone.ifc"
        assert gone["success"] is False
        assert gone["error"].startswith("Failed to read file: File not found")

    @pytest.mark.asyncio
    async def test_analyze_batch_with_non_step_file(self, tmp_path: Path) -> None:
        """Test a file without STEP header fails on its own."""
        paths = [
            write_ifc(tmp_path, "notes.ifc", "just some notes\n"),
            write_ifc(tmp_path, "arq.ifc", exterior_walls_file()),
        ]

        data = payload(await analysis_tools._analyze_batch({"file_paths": paths}))

        notes, arq = data["responses"]
        assert notes["success"] is False
        assert "Not a valid IFC/STEP file: notes.ifc" in notes["error"]
        assert arq["result"]["specialty"] == "architecture"

    @pytest.mark.asyncio
    async def test_build_wbs_project_skips_missing_file(self, tmp_path: Path) -> None:
        """Test project assembly goes on without an unreadable file."""
        paths = [
            str(tmp_path / "gone.ifc"),
            write_ifc(tmp_path, "arq.ifc", exterior_walls_file()),
        ]

        data = payload(await analysis_tools._build_wbs_project({
            "file_paths": paths,
            "start_date": "2025-09-01",
        }))

        assert data["status"] == "success"
        assert data["file_names"] == ["arq.ifc"]
        assert [f["file_name"] for f in data["failed_files"]] == ["gone.ifc"]
        assert [c["code"] for c in data["project"]["chapters"]] == ["08"]

    @pytest.mark.asyncio
    async def test_build_wbs_project(self, tmp_path: Path) -> None:
        """Test project assembly from two files."""
        paths = [
            write_ifc(tmp_path, "arq.ifc", exterior_walls_file()),
            write_ifc(tmp_path, "est.ifc", structure_file()),
        ]

        data = payload(await analysis_tools._build_wbs_project({
            "file_paths": paths,
            "project_name": "Moradia T3",
            "start_date": "2025-09-01",
        }))

        assert data["status"] == "success"
        assert data["project"]["name"] == "Moradia T3"
        assert data["project"]["start_date"] == "2025-09-01"
        assert data["project"]["classification"] == "ProNIC"

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing path raises."""
        with pytest.raises(FileNotFoundError):
            await analysis_tools._analyze_file({"file_path": str(tmp_path / "none.ifc")})

    @pytest.mark.asyncio
    async def test_not_a_step_file(self, tmp_path: Path) -> None:
        """Test a file without STEP header is rejected."""
        path = write_ifc(tmp_path, "notes.ifc", "just some notes\n")
        with pytest.raises(InvalidStepFileError):
            await analysis_tools._detect_specialty({"file_path": path})


class TestServer:
    """Tests for server creation."""

    def test_create_server(self) -> None:
        """Test the server is created with the application name."""
        server = create_server()
        assert server.name == "ifc_specialty"
