"""IFC Analysis API Routes."""
from __future__ import annotations

import asyncio
from uuid import uuid4

from fastapi import APIRouter, File, HTTPException, UploadFile

from ifc_specialty.application.services.batch_service import (
    AnalysisRequest,
    BatchAnalysisService,
)
from ifc_specialty.application.services.project_assembler import ProjectAssembler
from ifc_specialty.domain.exceptions import (
    BatchLimitError,
    InvalidStepFileError,
    ValidationError,
)
from ifc_specialty.infrastructure.step.detector import count_indicators, detect_specialty
from ifc_specialty.infrastructure.step.index import EntityIndex
from ifc_specialty.presentation.validation import check_batch_limits, validate_ifc_file
from ifc_specialty.shared.config import get_settings
from ifc_specialty.shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


async def _read_upload(upload: UploadFile) -> tuple[str, str]:
    """Read an upload as text and validate it.

    Raises:
        HTTPException: 400 if the file is not an IFC STEP file
    """
    file_name = upload.filename or ""
    raw = await upload.read()
    content = raw.decode("utf-8", errors="replace")
    try:
        validate_ifc_file(file_name, content, get_settings())
    except InvalidStepFileError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return file_name, content


@router.post("/ifc/analyze")
async def analyze_ifc(
    files: list[UploadFile] = File(...),
    include_elements: bool = False,
) -> dict:
    """Analyze uploaded IFC files (one per specialty).

    Args:
        files: Uploaded IFC files (multipart field ``files``)
        include_elements: Include every element record in the output

    Returns:
        Per-file analyses and the assembled WBS project
    """
    settings = get_settings()
    total_bytes = sum(f.size or 0 for f in files)
    try:
        check_batch_limits(len(files), total_bytes, settings)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except BatchLimitError as e:
        status_code = 413 if e.limit == "total_bytes" else 400
        raise HTTPException(status_code=status_code, detail=str(e)) from e

    requests: list[AnalysisRequest] = []
    for upload in files:
        file_name, content = await _read_upload(upload)
        requests.append(AnalysisRequest(
            request_id=str(uuid4()),
            file_name=file_name,
            content=content,
        ))

    batch = await BatchAnalysisService().run(requests)
    project = ProjectAssembler().assemble(batch.results).unwrap_or(None)

    logger.info(
        "IFC analysis request completed",
        files=len(requests),
        failed=len(batch.failures),
    )

    return {
        "file_names": [r.file_name for r in batch.successes],
        "analyses": [
            r.result.to_dict(include_elements=include_elements)
            for r in batch.successes
            if r.result is not None
        ],
        "failures": [r.to_dict() for r in batch.failures],
        "project": project.to_dict() if project else None,
    }


@router.post("/ifc/detect")
async def detect_ifc_specialty(file: UploadFile = File(...)) -> dict:
    """Detect the specialty of one uploaded IFC file.

    Args:
        file: Uploaded IFC file

    Returns:
        Detected specialty and indicator counts
    """
    file_name, content = await _read_upload(file)

    index = await asyncio.to_thread(EntityIndex.from_text, content)
    specialty = detect_specialty(index)

    return {
        "file_name": file_name,
        "specialty": specialty.value,
        "abbreviation": specialty.abbreviation,
        "indicator_counts": {s.value: c for s, c in count_indicators(index).items() if c > 0},
    }
