"""Input validation shared by the MCP tools and the HTTP API."""
from __future__ import annotations

from ifc_specialty.domain.exceptions import (
    BatchLimitError,
    InvalidStepFileError,
    ValidationError,
)
from ifc_specialty.shared.config import Settings

STEP_HEADER = "ISO-10303-21"
HEADER_WINDOW = 500


def check_batch_limits(file_count: int, total_bytes: int, settings: Settings) -> None:
    """Validate batch size limits.

    Raises:
        ValidationError: If no files were supplied
        BatchLimitError: If the file count or total size is over the limit
    """
    if file_count == 0:
        raise ValidationError("files", "no IFC files supplied", file_count)
    if file_count > settings.batch_max_files:
        raise BatchLimitError("files", file_count, settings.batch_max_files)
    if total_bytes > settings.batch_max_total_bytes:
        raise BatchLimitError("total_bytes", total_bytes, settings.batch_max_total_bytes)


def validate_ifc_file(file_name: str, content: str, settings: Settings) -> None:
    """Validate that a file looks like an IFC STEP file.

    Args:
        file_name: Original file name
        content: Decoded file text
        settings: Application settings

    Raises:
        InvalidStepFileError: If the extension or the STEP header is wrong
    """
    if not file_name.lower().endswith(".ifc"):
        raise InvalidStepFileError(file_name, "extension is not .ifc")
    if settings.require_step_header and STEP_HEADER not in content[:HEADER_WINDOW]:
        raise InvalidStepFileError(file_name, "STEP header not found")
