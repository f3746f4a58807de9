"""
FastAPI Application
==================

Main FastAPI application exposing the PDF generation adapters over HTTP.
"""

from contextlib import asynccontextmanager
import uuid
from typing import Any, AsyncGenerator, Dict, Optional, Tuple, Type

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from pdf_harness.api.routes.generation import router as generation_router
from pdf_harness.api.routes.health import router as health_router
from pdf_harness.config.logging import get_logger
from pdf_harness.config.settings import get_settings
from pdf_harness.core.errors import (
    AssetNotFound,
    ContextCreationFailure,
    EngineStartFailure,
    LoadTimeout,
    PDFGenerationError,
    RendererBusy,
    UnknownAdapter,
)
from pdf_harness.core.rendering.runtime import RenderingRuntime
from pdf_harness.models.schemas import ErrorResponse

logger = get_logger(__name__)

# Exception class -> (error code, status code, user message)
ERROR_MAPPING: Dict[Type[PDFGenerationError], Tuple[str, int, str]] = {
    EngineStartFailure: (
        "ENGINE_START_FAILED",
        503,
        "Failed to launch browser engine. Service temporarily unavailable.",
    ),
    ContextCreationFailure: (
        "CONTEXT_CREATION_FAILED",
        503,
        "Failed to open a rendering context. Service temporarily unavailable.",
    ),
    RendererBusy: (
        "RENDERER_BUSY",
        503,
        "All rendering contexts are busy. Please try again in a moment.",
    ),
    LoadTimeout: ("LOAD_TIMEOUT", 504, "Document loading timed out. Please try again."),
    UnknownAdapter: ("UNKNOWN_LIBRARY", 400, "Unknown library."),
    AssetNotFound: ("ASSET_NOT_FOUND", 500, "A required template asset is missing."),
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("Starting FastAPI application")
    try:
        yield
    finally:
        logger.info("Shutting down FastAPI application")
        await app.state.runtime.shutdown()


def create_app(runtime: Optional[RenderingRuntime] = None) -> FastAPI:
    """
    Application factory.

    Args:
        runtime: Rendering runtime to serve; built from settings when omitted

    Returns:
        FastAPI application instance
    """
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Compare PDF generation libraries behind one adapter contract",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.runtime = runtime or RenderingRuntime.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_hosts,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["X-Generation-Time", "X-File-Size", "X-Request-ID", "Content-Disposition"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Request ID middleware
    @app.middleware("http")
    async def add_request_id(request: Request, call_next: Any) -> Any:
        """Add request ID to all requests."""
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(HTTPException)
    async def custom_http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        """Custom HTTP exception handler with structured error response."""
        error_response = ErrorResponse(
            error=str(exc.detail),
            error_code=str(exc.status_code),
            details=None,
            request_id=getattr(request.state, "request_id", None),
        )

        logger.error(
            "HTTP exception",
            status_code=exc.status_code,
            detail=exc.detail,
            request_id=error_response.request_id,
        )

        return JSONResponse(
            status_code=exc.status_code, content=error_response.model_dump(mode="json")
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed request bodies are caller errors: 400 with the validation messages."""
        details = [error["msg"] for error in exc.errors()]

        logger.warning(
            "Invalid request body",
            path=request.url.path,
            details=details,
            request_id=getattr(request.state, "request_id", None),
        )

        return JSONResponse(
            status_code=400, content={"error": "Invalid request body", "details": details}
        )

    @app.exception_handler(PDFGenerationError)
    async def generation_exception_handler(
        request: Request, exc: PDFGenerationError
    ) -> JSONResponse:
        """Handle generation errors that escape a route with specific error codes."""
        error_code, status_code, user_message = ERROR_MAPPING.get(
            type(exc),
            ("PDF_GENERATION_ERROR", 500, "PDF generation failed due to an internal error."),
        )

        error_response = ErrorResponse(
            error=user_message,
            error_code=error_code,
            details={"message": str(exc)} if settings.debug else None,
            request_id=getattr(request.state, "request_id", None),
        )

        logger.error(
            "PDF generation error",
            error_code=error_code,
            error_message=str(exc),
            request_id=error_response.request_id,
        )

        return JSONResponse(status_code=status_code, content=error_response.model_dump(mode="json"))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """General exception handler for unexpected errors."""
        error_response = ErrorResponse(
            error="Internal server error",
            error_code="INTERNAL_ERROR",
            details={"exception": str(exc)} if settings.debug else None,
            request_id=getattr(request.state, "request_id", None),
        )

        logger.error(
            "Unhandled exception",
            exception=str(exc),
            request_id=error_response.request_id,
            exc_info=True,
        )

        return JSONResponse(status_code=500, content=error_response.model_dump(mode="json"))

    app.include_router(health_router)
    app.include_router(generation_router)

    @app.get("/", tags=["General"])
    async def root() -> Dict[str, Any]:
        """Root endpoint with basic API information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs_url": "/docs" if settings.debug else None,
            "health_check": "/health",
            "endpoints": {
                "renderer_health": "GET /health/renderers",
                "libraries": "GET /libraries",
                "generate": "POST /generate",
                "generate_all": "POST /generate-all",
            },
        }

    return app


app = create_app()


def run_development_server() -> None:
    """Run the API server."""
    settings = get_settings()
    uvicorn.run(
        "pdf_harness.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug and settings.environment == "development",
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    run_development_server()
