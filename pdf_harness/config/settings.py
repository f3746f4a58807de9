"""
Application Settings
===================

Main application settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import Optional, List, Union
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json
from pathlib import Path

PACKAGE_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="PDF Generation Harness", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=True, description="Debug mode")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, description="Server port")

    # Storage Configuration
    output_path: Path = Field(default=Path("./output"), description="Generated PDF directory")
    assets_path: Path = Field(
        default=PACKAGE_ROOT / "assets", description="Templates and image assets directory"
    )
    persist_outputs: bool = Field(default=True, description="Write successful renders to disk")

    # Browser Configuration
    playwright_headless: bool = Field(default=True, description="Run browser in headless mode")
    chromium_executable_path: Optional[str] = Field(
        default=None, description="Override for the Chromium executable location"
    )
    engine_launch_timeout: float = Field(
        default=60.0, gt=0, description="Engine launch timeout in seconds"
    )
    load_timeout_ms: int = Field(
        default=30000, gt=0, description="Document quiescence timeout in milliseconds"
    )
    render_timeout: float = Field(default=60.0, gt=0, description="PDF extraction timeout in seconds")
    settle_delay_ms: int = Field(
        default=1000, ge=0, description="Extra wait after navigation in base URL mode"
    )

    # Context Pool Configuration
    max_concurrent_contexts: int = Field(
        default=4, ge=1, description="Maximum open rendering contexts per engine"
    )
    context_acquire_timeout: float = Field(
        default=10.0, gt=0, description="Seconds to wait for a free rendering context"
    )

    # Security Configuration
    allowed_hosts: List[str] = Field(default=["*"], description="Allowed hosts for CORS")

    # Monitoring Configuration
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("allowed_hosts", mode="before")
    @classmethod
    def parse_allowed_hosts(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse allowed hosts from string or list."""
        if isinstance(v, str):
            # Handle JSON-like string: ["*"] or ["host1", "host2"]
            v = v.strip()
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            # Handle comma-separated string: "*" or "host1,host2"
            return [host.strip() for host in v.split(",") if host.strip()]
        return v

    @field_validator("chromium_executable_path")
    @classmethod
    def blank_executable_is_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty override as unset."""
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("output_path")
    @classmethod
    def create_directories(cls, v: Path) -> Path:
        """Ensure directories exist."""
        v.mkdir(parents=True, exist_ok=True)
        return v

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="PDF_HARNESS_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
