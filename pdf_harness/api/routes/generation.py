"""
Generation Routes
=================

Library listing, single-adapter generation and the run-every-adapter report.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from pdf_harness.api.dependencies import get_runtime
from pdf_harness.config.logging import get_logger
from pdf_harness.core.errors import UnknownAdapter
from pdf_harness.core.rendering.registry import AdapterRegistry
from pdf_harness.core.rendering.runtime import RenderingRuntime
from pdf_harness.models.schemas import (
    GenerateAllRequest,
    GenerateAllResponse,
    GenerateRequest,
    GenerationErrorResponse,
    GenerationReport,
    LibrariesResponse,
    RenderFailure,
    RenderRequest,
    UnknownLibraryResponse,
)

logger = get_logger(__name__)

router = APIRouter(tags=["Generation"])


def _bad_request(content: dict) -> JSONResponse:
    return JSONResponse(status_code=400, content=content)


def _messages(error: ValidationError) -> list:
    return [detail["msg"] for detail in error.errors()]


@router.get("/libraries", response_model=LibrariesResponse)
async def list_libraries(runtime: RenderingRuntime = Depends(get_runtime)) -> LibrariesResponse:
    """Every registered adapter with its description and family."""
    return LibrariesResponse(libraries=runtime.registry.describe())


@router.post(
    "/generate",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "Generated PDF"},
        400: {"model": UnknownLibraryResponse},
        500: {"model": GenerationErrorResponse},
    },
)
async def generate_pdf(
    payload: Optional[GenerateRequest] = None,
    runtime: RenderingRuntime = Depends(get_runtime),
) -> Response:
    """
    Generate a PDF with one library.

    Returns the PDF bytes with X-Generation-Time and X-File-Size headers,
    or a JSON failure body.
    """
    if payload is None or not payload.library:
        return _bad_request({"error": "Library name is required"})

    try:
        adapter_id = AdapterRegistry.parse(payload.library)
    except UnknownAdapter as e:
        logger.info("Unknown library requested", library=payload.library)
        return _bad_request(
            UnknownLibraryResponse(error=str(e), available=e.available).model_dump()
        )

    try:
        request = RenderRequest.model_validate(payload.data or {})
    except ValidationError as e:
        return _bad_request({"error": "Invalid render data", "details": _messages(e)})

    logger.info("Generation requested", library=adapter_id.value)
    result = await runtime.generate(adapter_id, request)

    if isinstance(result, RenderFailure):
        body = GenerationErrorResponse(
            details=result.reason, library=result.library, generation_time=result.elapsed_ms
        )
        return JSONResponse(status_code=500, content=body.model_dump(by_alias=True))

    return Response(
        content=result.pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{result.library}-output.pdf"',
            "X-Generation-Time": str(result.elapsed_ms),
            "X-File-Size": str(result.byte_length),
        },
    )


@router.post("/generate-all", response_model=GenerateAllResponse)
async def generate_all(
    payload: Optional[GenerateAllRequest] = None,
    runtime: RenderingRuntime = Depends(get_runtime),
) -> JSONResponse:
    """Run every adapter in turn and report per-adapter outcomes with a summary."""
    try:
        request = RenderRequest.model_validate((payload.data if payload else None) or {})
    except ValidationError as e:
        return _bad_request({"error": "Invalid render data", "details": _messages(e)})

    results = await runtime.generate_all(request)
    response = GenerateAllResponse.from_reports(
        [GenerationReport.from_result(result) for result in results]
    )

    logger.info(
        "Generate-all completed",
        total=response.summary.total,
        successful=response.summary.successful,
        failed=response.summary.failed,
    )
    return JSONResponse(content=response.model_dump(mode="json", by_alias=True))
