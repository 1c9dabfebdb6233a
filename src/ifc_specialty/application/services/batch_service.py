"""Batch Analysis Service.

Worker boundary for analyzing several IFC files: one request (file name +
content or path) yields one response (result or error) with the same
request id. Files are read and analyzed one at a time on a worker thread,
so peak memory stays around one file's text plus its derived structures.
"""
from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from uuid import uuid4

from ifc_specialty.application.services.analysis_service import SpecialtyAnalysisService
from ifc_specialty.domain.exceptions import DomainError, ValidationError
from ifc_specialty.domain.models.analysis import SpecialtyAnalysisResult
from ifc_specialty.shared.logging import get_logger

logger = get_logger(__name__)

ContentReader = Callable[[Path], str]


def read_text_file(path: Path) -> str:
    """Read an IFC file as text.

    Raises:
        FileNotFoundError: If the path does not exist
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return path.read_text(encoding="utf-8", errors="replace")


@dataclass(frozen=True)
class AnalysisRequest:
    """Request to analyze one file.

    Carries the file text, or a path that is only read when the request
    is handled.
    """

    request_id: str
    file_name: str
    content: str | None = None
    path: Path | None = None

    @classmethod
    def for_path(cls, path: Path, request_id: str | None = None) -> AnalysisRequest:
        """Create a request that reads its content from a file."""
        return cls(request_id=request_id or str(uuid4()), file_name=path.name, path=path)


@dataclass(frozen=True)
class AnalysisResponse:
    """Outcome of one analysis request."""

    request_id: str
    file_name: str
    success: bool
    result: SpecialtyAnalysisResult | None = None
    error: str | None = None

    def to_dict(self, include_elements: bool = False) -> dict[str, Any]:
        """Convert to a JSON-ready dict."""
        data: dict[str, Any] = {
            "request_id": self.request_id,
            "file_name": self.file_name,
            "success": self.success,
        }
        if self.result is not None:
            data["result"] = self.result.to_dict(include_elements=include_elements)
        if self.error is not None:
            data["error"] = self.error
        return data


class CancellationToken:
    """Cooperative cancellation for a batch.

    Cancelling does not interrupt the file being analyzed; it only keeps
    the next file from starting.
    """

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        """Request cancellation."""
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        """Whether cancellation was requested."""
        return self._cancelled


@dataclass
class BatchResult:
    """Responses of a batch, in request order."""

    responses: list[AnalysisResponse] = field(default_factory=list)
    cancelled: bool = False

    @property
    def successes(self) -> list[AnalysisResponse]:
        """Successful responses."""
        return [r for r in self.responses if r.success]

    @property
    def failures(self) -> list[AnalysisResponse]:
        """Failed responses."""
        return [r for r in self.responses if not r.success]

    @property
    def results(self) -> list[SpecialtyAnalysisResult]:
        """Analysis results of the successful responses."""
        return [r.result for r in self.responses if r.result is not None]


class BatchAnalysisService:
    """Service for analyzing several files sequentially."""

    def __init__(
        self,
        analysis_service: SpecialtyAnalysisService | None = None,
        reader: ContentReader | None = None,
    ) -> None:
        """Initialize service.

        Args:
            analysis_service: Per-file analysis
            reader: Reads the text of path requests (may validate it too)
        """
        self._analysis = analysis_service or SpecialtyAnalysisService()
        self._reader = reader or read_text_file

    def _content(self, request: AnalysisRequest) -> str:
        if request.content is not None:
            return request.content
        if request.path is None:
            raise ValidationError("request", "neither content nor path given", request.request_id)
        return self._reader(request.path)

    def handle(self, request: AnalysisRequest) -> AnalysisResponse:
        """Read and analyze one request, capturing any failure in the response.

        Args:
            request: Analysis request

        Returns:
            AnalysisResponse with the result or the error message
        """
        try:
            content = self._content(request)
        except (OSError, DomainError) as e:
            logger.warning(
                "IFC file could not be read",
                request_id=request.request_id,
                file_name=request.file_name,
                error=str(e),
            )
            return AnalysisResponse(
                request_id=request.request_id,
                file_name=request.file_name,
                success=False,
                error=f"Failed to read file: {e}",
            )

        try:
            result = self._analysis.analyze(content, file_name=request.file_name)
        except Exception as e:
            logger.warning(
                "IFC file analysis failed",
                request_id=request.request_id,
                file_name=request.file_name,
                error=str(e),
            )
            return AnalysisResponse(
                request_id=request.request_id,
                file_name=request.file_name,
                success=False,
                error=str(e) or type(e).__name__,
            )

        return AnalysisResponse(
            request_id=request.request_id,
            file_name=request.file_name,
            success=True,
            result=result,
        )

    async def run(
        self,
        requests: Sequence[AnalysisRequest],
        token: CancellationToken | None = None,
    ) -> BatchResult:
        """Read and analyze requests one after another on a worker thread.

        Args:
            requests: Requests in processing order
            token: Optional cancellation token, checked before each file

        Returns:
            BatchResult with one response per processed request
        """
        batch = BatchResult()

        for position, request in enumerate(requests):
            if token is not None and token.cancelled:
                batch.cancelled = True
                logger.info(
                    "Batch cancelled",
                    processed=position,
                    remaining=len(requests) - position,
                )
                break
            response = await asyncio.to_thread(self.handle, request)
            batch.responses.append(response)

        logger.info(
            "Batch completed",
            files=len(batch.responses),
            failed=len(batch.failures),
            cancelled=batch.cancelled,
        )
        return batch
