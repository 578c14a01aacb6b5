"""Application configuration loaded from environment variables.

All configuration is via environment variables (or a local .env file).
Run-level defaults for the optimization pipeline live here too so a host
can tune link density and re-validation without code changes.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Site SEO Package Builder")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)
    environment: str = Field(default="development")

    # Server
    port: int = Field(default=8000, description="Port to bind to")
    host: str = Field(default="0.0.0.0", description="Host to bind to")
    frontend_url: str | None = Field(
        default=None,
        description="Allowed CORS origin; all origins are allowed when unset",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Log format: json or text")

    # Optimization pipeline defaults
    link_density_target: int = Field(
        default=10,
        ge=1,
        description="Minimum outbound internal links per page (floored per page type)",
    )
    schema_validation: bool = Field(
        default=True,
        description="Re-validate all schema records after the per-page phase",
    )
    orphan_repair_passes: int = Field(
        default=1,
        ge=1,
        description="Orphan repair passes; 1 keeps the single greedy pass",
    )
    page_workers: int = Field(
        default=1,
        ge=1,
        description="Worker threads for the per-page phase (1 = sequential)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
