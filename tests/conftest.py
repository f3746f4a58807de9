"""
Test Configuration
==================

Pytest configuration with fixtures for all test types.
Settings are pointed at a temporary output directory before any
application module is imported.
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

_TEST_OUTPUT = tempfile.mkdtemp(prefix="pdf_harness_test_")
os.environ["PDF_HARNESS_ENVIRONMENT"] = "testing"
os.environ["PDF_HARNESS_OUTPUT_PATH"] = _TEST_OUTPUT
os.environ.setdefault("PDF_HARNESS_LOG_LEVEL", "DEBUG")

from fastapi.testclient import TestClient  # noqa: E402

from pdf_harness.api.main import create_app  # noqa: E402
from pdf_harness.config.settings import Settings, get_settings  # noqa: E402
from pdf_harness.core.rendering.runtime import RenderingRuntime  # noqa: E402
from pdf_harness.core.rendering.template_resolver import TemplateResolver  # noqa: E402
from pdf_harness.models.schemas import EngineKind, RenderRequest  # noqa: E402

from tests.utils.helpers import make_runtime  # noqa: E402
from tests.utils.mocks import FakeEngine  # noqa: E402


def pytest_sessionfinish(session, exitstatus):
    shutil.rmtree(_TEST_OUTPUT, ignore_errors=True)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Test settings fixture."""
    return get_settings()


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    path = tmp_path / "output"
    path.mkdir()
    return path


@pytest.fixture
def resolver(test_settings: Settings) -> TemplateResolver:
    """Resolver over the packaged templates and images."""
    return TemplateResolver(test_settings.assets_path)


@pytest.fixture
def empty_assets_dir(tmp_path: Path, test_settings: Settings) -> Path:
    """Asset directory holding the templates but no image files."""
    path = tmp_path / "assets"
    path.mkdir()
    for template in (TemplateResolver.EMBEDDED_TEMPLATE, TemplateResolver.BASE_URL_TEMPLATE):
        shutil.copy(test_settings.assets_path / template, path / template)
    return path


@pytest.fixture
def bare_resolver(empty_assets_dir: Path) -> TemplateResolver:
    """Resolver whose asset directory has no images."""
    return TemplateResolver(empty_assets_dir)


@pytest.fixture
def render_request() -> RenderRequest:
    return RenderRequest(patientName="Test Patient", medicationName="Test Medication 100mg")


@pytest.fixture
def playwright_engine() -> FakeEngine:
    return FakeEngine(EngineKind.PLAYWRIGHT)


@pytest.fixture
def pyppeteer_engine() -> FakeEngine:
    return FakeEngine(EngineKind.PYPPETEER)


@pytest.fixture
def fake_runtime(
    playwright_engine: FakeEngine,
    pyppeteer_engine: FakeEngine,
    resolver: TemplateResolver,
    output_dir: Path,
) -> RenderingRuntime:
    """Runtime with real in-process adapters and fake browser engines."""
    return make_runtime(
        {EngineKind.PLAYWRIGHT: playwright_engine, EngineKind.PYPPETEER: pyppeteer_engine},
        resolver,
        output_path=output_dir,
    )


@pytest.fixture
def client(fake_runtime: RenderingRuntime) -> Generator[TestClient, None, None]:
    """FastAPI test client bound to the fake runtime."""
    with TestClient(create_app(runtime=fake_runtime)) as test_client:
        yield test_client
