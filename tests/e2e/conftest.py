"""
E2E Test Configuration
======================

Real Chromium fixtures. Browser tests are skipped unless
PDF_HARNESS_RUN_E2E=1 is set and the browsers are installed.
"""

import os
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio

from pdf_harness.config.settings import Settings
from pdf_harness.core.rendering.runtime import RenderingRuntime


def pytest_collection_modifyitems(config, items):
    if os.environ.get("PDF_HARNESS_RUN_E2E") == "1":
        return

    skip_e2e = pytest.mark.skip(reason="set PDF_HARNESS_RUN_E2E=1 to run real browser tests")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


@pytest_asyncio.fixture
async def real_runtime(
    test_settings: Settings, output_dir: Path
) -> AsyncGenerator[RenderingRuntime, None]:
    """Runtime with real Playwright and pyppeteer engines."""
    settings = test_settings.model_copy(update={"output_path": output_dir})
    runtime = RenderingRuntime.from_settings(settings)
    try:
        yield runtime
    finally:
        await runtime.shutdown()
