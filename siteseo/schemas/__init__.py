"""Schemas layer - Pydantic models for inputs, outputs and rule tables.

Schemas define the shape of data for run inputs and the optimized package.
They handle validation, serialization, and documentation.
"""

from siteseo.schemas.blueprint import (
    Blueprint,
    BlueprintMeta,
    BrandIdentity,
    PageData,
    PageDescriptor,
    PageSEO,
    PageType,
    Provider,
    RequiredLink,
    SiteContext,
)
from siteseo.schemas.enrichment import (
    ComparisonPage,
    EditorialPage,
    EditorialSection,
    FAQItem,
    SeoOptimizationInput,
)
from siteseo.schemas.optimization import (
    OptimizationConfig,
    SeoOptimizeRequest,
    SeoOptimizeResponse,
)
from siteseo.schemas.seo_package import (
    Breadcrumb,
    HeadingNode,
    HeadingStructure,
    InternalLink,
    Issue,
    MetaTags,
    OptimizationPhase,
    OptimizationProgress,
    OptimizedPackage,
    OptimizedPage,
    PackageStats,
    PackageValidation,
    PackageWarning,
    SchemaError,
    SchemaRecord,
    SitemapData,
    SitemapUrl,
    SiteWideSeo,
    SourceData,
)
from siteseo.schemas.validation_rules import (
    DEFAULT_VALIDATION_RULES,
    SeoValidationRules,
)

__all__ = [
    # Blueprint
    "Blueprint",
    "BlueprintMeta",
    "BrandIdentity",
    "PageData",
    "PageDescriptor",
    "PageSEO",
    "PageType",
    "Provider",
    "RequiredLink",
    "SiteContext",
    # Enrichment
    "ComparisonPage",
    "EditorialPage",
    "EditorialSection",
    "FAQItem",
    "SeoOptimizationInput",
    # Run options and API
    "OptimizationConfig",
    "SeoOptimizeRequest",
    "SeoOptimizeResponse",
    # Package
    "Breadcrumb",
    "HeadingNode",
    "HeadingStructure",
    "InternalLink",
    "Issue",
    "MetaTags",
    "OptimizationPhase",
    "OptimizationProgress",
    "OptimizedPackage",
    "OptimizedPage",
    "PackageStats",
    "PackageValidation",
    "PackageWarning",
    "SchemaError",
    "SchemaRecord",
    "SitemapData",
    "SitemapUrl",
    "SiteWideSeo",
    "SourceData",
    # Rules
    "DEFAULT_VALIDATION_RULES",
    "SeoValidationRules",
]
