"""
Pydantic Models and Schemas
===========================

Core data models for render requests, render results, API requests/responses
and benchmark summaries. All models include validation and type hints.
"""

from typing import Annotated, Optional, List, Dict, Any, Union, Literal
from datetime import date, datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


# Enums
class AdapterFamily(str, Enum):
    """How an adapter produces its bytes."""
    ENGINE = "engine"
    IN_PROCESS = "in_process"


class EngineKind(str, Enum):
    """Browser automation engines driven by engine-backed adapters."""
    PLAYWRIGHT = "playwright"
    PYPPETEER = "pyppeteer"


class AssetMode(str, Enum):
    """How engine-backed adapters hand assets to the browser."""
    EMBEDDED = "embedded"
    BASE_URL = "base_url"


class AdapterId(str, Enum):
    """Closed set of registered generation adapters."""
    PLAYWRIGHT_BASE64 = "playwright-base64"
    PLAYWRIGHT_BASEURL = "playwright-baseurl"
    PYPPETEER_BASE64 = "pyppeteer-base64"
    PYPPETEER_BASEURL = "pyppeteer-baseurl"
    REPORTLAB_CANVAS = "reportlab-canvas"
    REPORTLAB_PLATYPUS = "reportlab-platypus"
    FPDF2 = "fpdf2"

    @property
    def family(self) -> AdapterFamily:
        return _CAPABILITIES[self][0]

    @property
    def engine(self) -> Optional[EngineKind]:
        return _CAPABILITIES[self][1]

    @property
    def asset_mode(self) -> Optional[AssetMode]:
        return _CAPABILITIES[self][2]

    @property
    def description(self) -> str:
        return _CAPABILITIES[self][3]

    @classmethod
    def names(cls) -> List[str]:
        return [member.value for member in cls]


_CAPABILITIES: Dict[AdapterId, tuple] = {
    AdapterId.PLAYWRIGHT_BASE64: (
        AdapterFamily.ENGINE, EngineKind.PLAYWRIGHT, AssetMode.EMBEDDED,
        "Playwright with base64 data URIs (assets embedded)",
    ),
    AdapterId.PLAYWRIGHT_BASEURL: (
        AdapterFamily.ENGINE, EngineKind.PLAYWRIGHT, AssetMode.BASE_URL,
        "Playwright with file paths resolved against a base URL",
    ),
    AdapterId.PYPPETEER_BASE64: (
        AdapterFamily.ENGINE, EngineKind.PYPPETEER, AssetMode.EMBEDDED,
        "pyppeteer with base64 data URIs (assets embedded)",
    ),
    AdapterId.PYPPETEER_BASEURL: (
        AdapterFamily.ENGINE, EngineKind.PYPPETEER, AssetMode.BASE_URL,
        "pyppeteer with file paths resolved against a base URL",
    ),
    AdapterId.REPORTLAB_CANVAS: (
        AdapterFamily.IN_PROCESS, None, None,
        "ReportLab canvas: low-level programmatic drawing",
    ),
    AdapterId.REPORTLAB_PLATYPUS: (
        AdapterFamily.IN_PROCESS, None, None,
        "ReportLab Platypus: declarative flowable documents",
    ),
    AdapterId.FPDF2: (
        AdapterFamily.IN_PROCESS, None, None,
        "fpdf2: lightweight page-level PDF writer",
    ),
}


def _today() -> str:
    return date.today().strftime("%m/%d/%Y")


# Render Models
class RenderRequest(BaseModel):
    """Immutable set of named string fields substituted into the document."""
    date: str = Field(default_factory=_today, description="Document date")
    patient_name: str = Field("John Doe", alias="patientName", description="Patient name")
    patient_dob: str = Field("01/01/1990", alias="patientDOB", description="Patient date of birth")
    medication_name: str = Field(
        "Sample Medication", alias="medicationName", description="Medication name"
    )
    dosage: str = Field("10mg", description="Dosage")
    instructions: str = Field("Take once daily", description="Usage instructions")

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data: Any) -> Any:
        """Blank or null fields fall back to their defaults; scalars become strings."""
        if not isinstance(data, dict):
            return data
        cleaned: Dict[str, str] = {}
        for key, value in data.items():
            if value is None:
                continue
            if isinstance(value, (dict, list)):
                raise ValueError(f"Field {key} must be a string, not {type(value).__name__}")
            text = value if isinstance(value, str) else str(value)
            if not text.strip():
                continue
            cleaned[key] = text
        return cleaned

    def template_variables(self) -> Dict[str, str]:
        """Template-facing variables keyed by their camelCase names."""
        return self.model_dump(by_alias=True)


class RenderSuccess(BaseModel):
    """Successful adapter outcome."""
    outcome: Literal["success"] = "success"
    library: str = Field(..., description="Adapter name")
    pdf_bytes: bytes = Field(..., description="PDF binary data", exclude=True)
    elapsed_ms: int = Field(..., ge=0, description="Generation time in milliseconds")
    method: Optional[str] = Field(None, description="How assets were delivered")
    notes: Optional[str] = Field(None, description="Human readable remarks")
    output_path: Optional[str] = Field(None, description="Where the PDF was persisted")

    model_config = ConfigDict(frozen=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def byte_length(self) -> int:
        return len(self.pdf_bytes)

    @property
    def success(self) -> bool:
        return True


class RenderFailure(BaseModel):
    """Failed adapter outcome."""
    outcome: Literal["failure"] = "failure"
    library: str = Field(..., description="Adapter name")
    reason: str = Field(..., min_length=1, description="Human readable failure reason")
    elapsed_ms: int = Field(..., ge=0, description="Time spent before failing")
    error_type: Optional[str] = Field(None, description="Exception class name")

    model_config = ConfigDict(frozen=True)

    @property
    def success(self) -> bool:
        return False


RenderResult = Annotated[Union[RenderSuccess, RenderFailure], Field(discriminator="outcome")]


# API Request/Response Models
class GenerateRequest(BaseModel):
    """Request model for single-adapter generation."""
    library: Optional[str] = Field(None, description="Adapter name")
    data: Optional[Dict[str, Any]] = Field(None, description="Render request fields")


class GenerateAllRequest(BaseModel):
    """Request model for running every adapter."""
    data: Optional[Dict[str, Any]] = Field(None, description="Render request fields")


class LibraryInfo(BaseModel):
    """Description of one registered adapter."""
    name: str
    description: str
    family: AdapterFamily


class LibrariesResponse(BaseModel):
    libraries: List[LibraryInfo]


class GenerationReport(BaseModel):
    """One adapter's entry in a run-all or generate-all report."""
    library: str
    success: bool
    generation_time: int = Field(..., alias="generationTime")
    file_size: Optional[int] = Field(None, alias="fileSize")
    output_path: Optional[str] = Field(None, alias="outputPath")
    method: Optional[str] = None
    notes: Optional[str] = None
    error: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_result(cls, result: Union[RenderSuccess, RenderFailure]) -> "GenerationReport":
        if isinstance(result, RenderSuccess):
            return cls(
                library=result.library,
                success=True,
                generation_time=result.elapsed_ms,
                file_size=result.byte_length,
                output_path=result.output_path,
                method=result.method,
                notes=result.notes,
            )
        return cls(
            library=result.library,
            success=False,
            generation_time=result.elapsed_ms,
            error=result.reason,
        )


class GenerationSummary(BaseModel):
    total: int = Field(..., ge=0)
    successful: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)


class GenerateAllResponse(BaseModel):
    """Response model for the all-adapters endpoint."""
    results: List[GenerationReport]
    summary: GenerationSummary

    @classmethod
    def from_reports(cls, reports: List[GenerationReport]) -> "GenerateAllResponse":
        successful = sum(1 for report in reports if report.success)
        return cls(
            results=reports,
            summary=GenerationSummary(
                total=len(reports), successful=successful, failed=len(reports) - successful
            ),
        )


# Health Check Models
class HealthStatus(BaseModel):
    """Process health and runtime information."""
    status: Literal["ok", "degraded"] = Field(..., description="Overall status")
    version: str = Field(..., description="Application version")
    architecture: str = Field(..., description="Machine architecture")
    platform: str = Field(..., description="Operating system platform")
    runtime_version: str = Field(..., alias="runtimeVersion", description="Python version")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="Check timestamp"
    )
    memory_usage: Optional[float] = Field(None, alias="memoryUsage", description="RSS in MB")

    model_config = ConfigDict(populate_by_name=True)


class SessionHealth(BaseModel):
    """Result of one renderer session health check."""
    engine: str
    healthy: bool
    detail: str
    state: str
    launch_count: int = Field(0, alias="launchCount")
    active_contexts: int = Field(0, alias="activeContexts")

    model_config = ConfigDict(populate_by_name=True)


class RendererHealthResponse(BaseModel):
    healthy: bool
    renderers: List[SessionHealth]


# Error Models
class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str = Field(..., description="Error message")
    error_code: Optional[str] = Field(None, description="Error code")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="Error timestamp"
    )
    request_id: Optional[str] = Field(None, description="Request identifier for tracking")


class GenerationErrorResponse(BaseModel):
    """Body returned when an adapter reports a failure."""
    error: str = "PDF generation failed"
    details: str
    library: str
    generation_time: int = Field(..., alias="generationTime")

    model_config = ConfigDict(populate_by_name=True)


class UnknownLibraryResponse(BaseModel):
    error: str
    available: List[str]


# Benchmark Models
class BenchmarkResult(BaseModel):
    """Aggregated timings for repeated runs of one adapter."""
    library: str
    success: bool
    iterations: int = 0
    errors: int = 0
    avg_time: Optional[int] = Field(None, alias="avgTime")
    min_time: Optional[int] = Field(None, alias="minTime")
    max_time: Optional[int] = Field(None, alias="maxTime")
    avg_file_size: Optional[int] = Field(None, alias="avgFileSize")
    avg_file_size_kb: Optional[str] = Field(None, alias="avgFileSizeKB")
    error: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)
