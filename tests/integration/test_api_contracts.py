"""
Integration Tests for API Contracts
===================================

HTTP request/response contracts of the FastAPI application, served by a
runtime with real in-process adapters and fake browser engines.
"""

from pathlib import Path
from typing import Generator

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from pdf_harness.api.main import create_app
from pdf_harness.core.rendering.runtime import RenderingRuntime
from pdf_harness.models.schemas import AdapterId, EngineKind

from tests.utils.assertions import assert_generate_all_summary, assert_pdf_bytes
from tests.utils.helpers import make_runtime
from tests.utils.mocks import FakeEngine


@pytest.fixture
def broken_pyppeteer() -> FakeEngine:
    return FakeEngine(EngineKind.PYPPETEER, fail_launch=True)


@pytest.fixture
def degraded_client(
    playwright_engine: FakeEngine, broken_pyppeteer: FakeEngine, resolver, output_dir: Path
) -> Generator[TestClient, None, None]:
    """Client whose pyppeteer engine cannot start."""
    runtime = make_runtime(
        {EngineKind.PLAYWRIGHT: playwright_engine, EngineKind.PYPPETEER: broken_pyppeteer},
        resolver,
        output_path=output_dir,
    )
    with TestClient(create_app(runtime=runtime)) as test_client:
        yield test_client


class TestHealthEndpoints:

    def test_health(self, client: TestClient, playwright_engine: FakeEngine):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "ok"
        for field in ("version", "architecture", "platform", "runtimeVersion", "timestamp"):
            assert field in data
        assert playwright_engine.launch_calls == 0

    def test_request_id_header(self, client: TestClient):
        response = client.get("/health")

        assert len(response.headers["X-Request-ID"]) == 36

    def test_renderers_healthy(self, client: TestClient):
        response = client.get("/health/renderers")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["healthy"] is True
        assert {renderer["engine"] for renderer in data["renderers"]} == {"playwright", "pyppeteer"}

    def test_renderers_degraded(self, degraded_client: TestClient):
        response = degraded_client.get("/health/renderers")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        renderers = {renderer["engine"]: renderer for renderer in response.json()["renderers"]}
        assert renderers["playwright"]["healthy"] is True
        assert renderers["pyppeteer"]["healthy"] is False
        assert renderers["pyppeteer"]["detail"].startswith("EngineStartFailure")

    def test_root(self, client: TestClient):
        response = client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["health_check"] == "/health"


class TestLibraries:

    def test_lists_every_adapter(self, client: TestClient):
        response = client.get("/libraries")

        assert response.status_code == status.HTTP_200_OK
        libraries = response.json()["libraries"]
        assert [library["name"] for library in libraries] == AdapterId.names()
        assert {library["family"] for library in libraries} == {"engine", "in_process"}


class TestGenerate:

    def test_missing_library(self, client: TestClient):
        response = client.post("/generate", json={"data": {}})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "Library name is required"}

    def test_missing_body(self, client: TestClient):
        response = client.post("/generate")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "Library name is required"}

    @pytest.mark.parametrize("data", ["oops", [1, 2], 42])
    def test_non_object_data(self, client: TestClient, playwright_engine: FakeEngine, data):
        response = client.post("/generate", json={"library": "fpdf2", "data": data})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["error"] == "Invalid request body"
        assert body["details"]
        assert playwright_engine.launch_calls == 0

    def test_malformed_json(self, client: TestClient):
        response = client.post(
            "/generate", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Invalid request body"

    def test_unknown_library_launches_nothing(
        self, client: TestClient, playwright_engine: FakeEngine, pyppeteer_engine: FakeEngine
    ):
        response = client.post("/generate", json={"library": "unknown-lib"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["error"] == "Unknown library: unknown-lib"
        assert data["available"] == AdapterId.names()
        assert playwright_engine.launch_calls == 0
        assert pyppeteer_engine.launch_calls == 0

    @pytest.mark.parametrize("library", AdapterId.names())
    def test_every_library_returns_pdf(self, client: TestClient, library: str):
        response = client.post(
            "/generate",
            json={"library": library, "data": {"patientName": "Test Patient"}},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["Content-Disposition"] == (
            f'attachment; filename="{library}-output.pdf"'
        )
        assert int(response.headers["X-File-Size"]) == len(response.content)
        assert int(response.headers["X-Generation-Time"]) >= 0
        assert_pdf_bytes(response.content)

    def test_persists_output(self, client: TestClient, output_dir: Path):
        response = client.post("/generate", json={"library": "fpdf2"})

        assert response.status_code == status.HTTP_200_OK
        assert (output_dir / "fpdf2-output.pdf").read_bytes() == response.content

    def test_engine_failure_body(self, degraded_client: TestClient):
        response = degraded_client.post("/generate", json={"library": "pyppeteer-base64"})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        data = response.json()
        assert data["error"] == "PDF generation failed"
        assert data["library"] == "pyppeteer-base64"
        assert data["details"]
        assert "generationTime" in data

    def test_invalid_render_data(self, client: TestClient):
        response = client.post(
            "/generate", json={"library": "fpdf2", "data": {"patientName": {"first": "Jane"}}}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Invalid render data"


class TestGenerateAll:

    def test_all_succeed(self, client: TestClient):
        response = client.post("/generate-all", json={"data": {"patientName": "Test Patient"}})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert_generate_all_summary(data)
        assert data["summary"] == {"total": 7, "successful": 7, "failed": 0}
        assert [entry["library"] for entry in data["results"]] == AdapterId.names()

    def test_without_body(self, client: TestClient):
        response = client.post("/generate-all")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["summary"]["total"] == 7

    def test_non_object_data(self, client: TestClient):
        response = client.post("/generate-all", json={"data": "oops"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Invalid request body"

    def test_broken_engine_isolated(self, degraded_client: TestClient, broken_pyppeteer: FakeEngine):
        response = degraded_client.post("/generate-all", json={})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert_generate_all_summary(data)
        assert data["summary"] == {"total": 7, "successful": 5, "failed": 2}

        failed = [entry for entry in data["results"] if not entry["success"]]
        assert [entry["library"] for entry in failed] == ["pyppeteer-base64", "pyppeteer-baseurl"]
        assert all(entry["error"] for entry in failed)
        # each failed adapter retried the launch on its own
        assert broken_pyppeteer.launch_calls == 2
