"""Unit tests for the batch analysis service."""
from __future__ import annotations

from pathlib import Path

import pytest
from conftest import exterior_walls_file, structure_file

from ifc_specialty.application.services.analysis_service import SpecialtyAnalysisService
from ifc_specialty.application.services.batch_service import (
    AnalysisRequest,
    BatchAnalysisService,
    CancellationToken,
    read_text_file,
)
from ifc_specialty.domain.exceptions import InvalidStepFileError
from ifc_specialty.domain.models.analysis import SpecialtyAnalysisResult
from ifc_specialty.domain.value_objects.specialty import Specialty


class FailingAnalysisService(SpecialtyAnalysisService):
    """Analysis service that fails on a marker in the content."""

    def analyze(self, content: str, file_name: str | None = None) -> SpecialtyAnalysisResult:
        if "BROKEN" in content:
            raise RuntimeError("cannot read model")
        return super().analyze(content, file_name)


class CancellingAnalysisService(SpecialtyAnalysisService):
    """Analysis service that cancels the batch during the first file."""

    def __init__(self, token: CancellationToken) -> None:
        super().__init__()
        self.token = token
        self.calls = 0

    def analyze(self, content: str, file_name: str | None = None) -> SpecialtyAnalysisResult:
        self.calls += 1
        self.token.cancel()
        return super().analyze(content, file_name)


class RecordingAnalysisService(SpecialtyAnalysisService):
    """Analysis service that records the files it analyzes."""

    def __init__(self, events: list[str]) -> None:
        super().__init__()
        self.events = events

    def analyze(self, content: str, file_name: str | None = None) -> SpecialtyAnalysisResult:
        self.events.append(f"analyze {file_name}")
        return super().analyze(content, file_name)


def requests_for(*contents: str) -> list[AnalysisRequest]:
    return [
        AnalysisRequest(request_id=f"r{n}", file_name=f"model{n}.ifc", content=content)
        for n, content in enumerate(contents)
    ]


class TestHandle:
    """Tests for BatchAnalysisService.handle."""

    def test_success_response(self) -> None:
        """Test a readable file gives a successful response."""
        request = requests_for(exterior_walls_file())[0]
        response = BatchAnalysisService().handle(request)

        assert response.success is True
        assert response.request_id == "r0"
        assert response.result.specialty is Specialty.ARCHITECTURE
        assert response.error is None

    def test_failure_response(self) -> None:
        """Test an exception becomes a failed response."""
        service = BatchAnalysisService(FailingAnalysisService())
        response = service.handle(requests_for("BROKEN")[0])

        assert response.success is False
        assert response.result is None
        assert response.error == "cannot read model"
        assert response.to_dict() == {
            "request_id": "r0",
            "file_name": "model0.ifc",
            "success": False,
            "error": "cannot read model",
        }


class TestPathRequests:
    """Tests for requests that read their file when handled."""

    def test_for_path(self, tmp_path: Path) -> None:
        """Test a path request is named after the file and has no content yet."""
        request = AnalysisRequest.for_path(tmp_path / "arq.ifc", request_id="r0")

        assert request.file_name == "arq.ifc"
        assert request.content is None
        assert request.path == tmp_path / "arq.ifc"

    def test_reads_file_when_handled(self, tmp_path: Path) -> None:
        """Test the file text is read by handle."""
        path = tmp_path / "arq.ifc"
        path.write_text(exterior_walls_file(), encoding="utf-8")

        response = BatchAnalysisService().handle(AnalysisRequest.for_path(path))

        assert response.success is True
        assert response.result.specialty is Specialty.ARCHITECTURE

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file gives a failed response instead of raising."""
        response = BatchAnalysisService().handle(
            AnalysisRequest.for_path(tmp_path / "gone.ifc", request_id="r1")
        )

        assert response.success is False
        assert response.request_id == "r1"
        assert response.error.startswith("Failed to read file: File not found")

    def test_reader_rejection(self, tmp_path: Path) -> None:
        """Test a domain error raised by the reader fails only that file."""

        def reject(path: Path) -> str:
            raise InvalidStepFileError(path.name, "STEP header not found")

        response = BatchAnalysisService(reader=reject).handle(
            AnalysisRequest.for_path(tmp_path / "notes.ifc")
        )

        assert response.success is False
        assert "Not a valid IFC/STEP file: notes.ifc" in response.error

    def test_request_without_source(self) -> None:
        """Test a request with neither content nor path fails."""
        response = BatchAnalysisService().handle(AnalysisRequest("r0", "model.ifc"))

        assert response.success is False
        assert response.error.startswith("Failed to read file")

    @pytest.mark.asyncio
    async def test_files_read_one_at_a_time(self, tmp_path: Path) -> None:
        """Test each file is read only when its turn comes."""
        paths = []
        for name, content in (("arq.ifc", exterior_walls_file()), ("est.ifc", structure_file())):
            path = tmp_path / name
            path.write_text(content, encoding="utf-8")
            paths.append(path)
        paths.insert(1, tmp_path / "gone.ifc")

        reads: list[str] = []
        analysis = RecordingAnalysisService(reads)

        def reader(path: Path) -> str:
            reads.append(f"read {path.name}")
            return read_text_file(path)

        batch = await BatchAnalysisService(analysis, reader=reader).run(
            [AnalysisRequest.for_path(p) for p in paths]
        )

        assert reads == [
            "read arq.ifc",
            "analyze arq.ifc",
            "read gone.ifc",
            "read est.ifc",
            "analyze est.ifc",
        ]
        assert [r.success for r in batch.responses] == [True, False, True]


class TestRun:
    """Tests for BatchAnalysisService.run."""

    @pytest.mark.asyncio
    async def test_responses_in_request_order(self) -> None:
        """Test one response per request, in order."""
        batch = await BatchAnalysisService().run(
            requests_for(exterior_walls_file(), structure_file())
        )

        assert [r.request_id for r in batch.responses] == ["r0", "r1"]
        assert [r.specialty for r in batch.results] == [Specialty.ARCHITECTURE, Specialty.STRUCTURE]
        assert batch.cancelled is False

    @pytest.mark.asyncio
    async def test_failure_does_not_stop_batch(self) -> None:
        """Test a failed file is reported next to successful ones."""
        service = BatchAnalysisService(FailingAnalysisService())
        batch = await service.run(requests_for("BROKEN", exterior_walls_file()))

        assert len(batch.failures) == 1
        assert len(batch.successes) == 1
        assert batch.failures[0].file_name == "model0.ifc"
        assert len(batch.results) == 1

    @pytest.mark.asyncio
    async def test_cancel_before_start(self) -> None:
        """Test a cancelled token processes nothing."""
        token = CancellationToken()
        token.cancel()

        batch = await BatchAnalysisService().run(requests_for(exterior_walls_file()), token)

        assert batch.responses == []
        assert batch.cancelled is True

    @pytest.mark.asyncio
    async def test_cancel_between_files(self) -> None:
        """Test cancelling finishes the current file and skips the rest."""
        token = CancellationToken()
        analysis = CancellingAnalysisService(token)

        batch = await BatchAnalysisService(analysis).run(
            requests_for(exterior_walls_file(), structure_file()), token
        )

        assert analysis.calls == 1
        assert len(batch.responses) == 1
        assert batch.responses[0].success is True
        assert batch.cancelled is True

    @pytest.mark.asyncio
    async def test_empty_batch(self) -> None:
        """Test an empty request list."""
        batch = await BatchAnalysisService().run([])
        assert batch.responses == []
        assert batch.cancelled is False
