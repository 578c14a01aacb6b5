"""Pydantic schemas for run options and the optimize endpoint.

- OptimizationConfig: per-run options, defaulted from application settings
- SeoOptimizeRequest / SeoOptimizeResponse: HTTP request and response bodies
"""

from pydantic import BaseModel, Field

from siteseo.core.config import Settings, get_settings
from siteseo.schemas.enrichment import SeoOptimizationInput
from siteseo.schemas.seo_package import OptimizationProgress, OptimizedPackage
from siteseo.schemas.validation_rules import SeoValidationRules


class OptimizationConfig(BaseModel):
    """Options for one optimization run."""

    link_density_target: int = Field(
        10,
        ge=1,
        description="Minimum outbound internal links per page (floored per page type)",
    )
    schema_validation: bool = Field(
        True,
        description="Re-validate all schema records after the per-page phase",
    )
    orphan_repair_passes: int = Field(
        1,
        ge=1,
        description="Orphan repair passes; 1 keeps the single greedy pass",
    )
    page_workers: int = Field(
        1,
        ge=1,
        le=32,
        description="Worker threads for the per-page phase (1 = sequential)",
    )
    rules: SeoValidationRules = Field(
        default_factory=SeoValidationRules,
        description="Validator thresholds",
    )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "OptimizationConfig":
        settings = settings or get_settings()
        return cls(
            link_density_target=settings.link_density_target,
            schema_validation=settings.schema_validation,
            orphan_repair_passes=settings.orphan_repair_passes,
            page_workers=settings.page_workers,
        )


class SeoOptimizeRequest(BaseModel):
    """Request body for an optimization run."""

    input: SeoOptimizationInput = Field(..., description="Blueprint plus enrichments")
    config: OptimizationConfig | None = Field(
        None,
        description="Run options; application settings are used when omitted",
    )


class SeoOptimizeResponse(BaseModel):
    """Optimized package plus the ordered progress events of the run."""

    package: OptimizedPackage
    progress: list[OptimizationProgress] = Field(default_factory=list)
