"""
API Dependencies
================

FastAPI dependency providers shared by the route modules.
"""

from fastapi import Request

from pdf_harness.config.settings import Settings, get_settings
from pdf_harness.core.rendering.runtime import RenderingRuntime


def get_runtime(request: Request) -> RenderingRuntime:
    """Rendering runtime owned by the running application."""
    return request.app.state.runtime


def get_current_settings() -> Settings:
    """Dependency to get current settings."""
    return get_settings()
