"""Pydantic schemas for the optimized SEO package.

Output records of an optimization run:
- InternalLink / SchemaRecord / Issue: per-page derived records
- OptimizedPage: one page with metadata, schema, headings, links and issues
- PackageValidation / PackageStats: package-level cross-check and aggregates
- OptimizedPackage: the root record handed to code generation
- OptimizationProgress: one progress notification
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from siteseo.schemas.enrichment import ComparisonPage, EditorialPage

Severity = Literal["error", "warning", "info"]
LinkContext = Literal["body", "sidebar"]
OptimizationPhase = Literal[
    "preparing",
    "optimizing-links",
    "optimizing-meta",
    "generating-schema",
    "generating-sitemap",
    "validating",
    "complete",
]

# =============================================================================
# META TAG MODELS
# =============================================================================


class OpenGraphMeta(BaseModel):
    title: str
    description: str
    type: str = Field(..., description="'website', 'article' or 'profile'")
    url: str
    image: str | None = None
    site_name: str


class TwitterMeta(BaseModel):
    card: str = "summary_large_image"
    title: str
    description: str
    image: str | None = None


class GeoMeta(BaseModel):
    region: str = Field(..., examples=["US-AZ"])
    placename: str
    position: str = Field(..., examples=["33.4484;-112.0740"])


class MetaTags(BaseModel):
    """Title, description and social metadata for one page."""

    title: str
    title_length: int = Field(..., ge=0)
    description: str
    description_length: int = Field(..., ge=0)
    canonical: str
    robots: str = "index, follow"
    open_graph: OpenGraphMeta | None = None
    twitter: TwitterMeta | None = None
    geo: GeoMeta | None = None


# =============================================================================
# STRUCTURE MODELS
# =============================================================================


class HeadingNode(BaseModel):
    level: int = Field(..., ge=1, le=6)
    text: str
    children: list["HeadingNode"] = Field(default_factory=list)


class HeadingStructure(BaseModel):
    """Heading outline of a page."""

    h1: str = ""
    h2s: list[str] = Field(default_factory=list)
    h3s: list[str] = Field(default_factory=list)
    hierarchy: list[HeadingNode] = Field(default_factory=list)
    valid: bool = True


class Breadcrumb(BaseModel):
    name: str
    url: str


class InternalLink(BaseModel):
    """One outbound edge of the link graph, as attached to its source page."""

    model_config = ConfigDict(frozen=True)

    target_page_id: str
    target_url: str
    anchor_text: str
    context: LinkContext = "body"


# =============================================================================
# SCHEMA AND ISSUE MODELS
# =============================================================================


class SchemaRecord(BaseModel):
    """A JSON-LD structured-data object with its validation state."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., examples=["LocalBusiness", "Article", "FAQPage"])
    payload: dict[str, Any] = Field(..., description="JSON-LD object")
    valid: bool = True
    errors: list[str] | None = None


class Issue(BaseModel):
    """A single validator finding."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., examples=["title_too_long", "missing_h1"])
    severity: Severity
    message: str
    field: str | None = None
    value: str | int | None = None
    suggestion: str | None = None


class SchemaError(BaseModel):
    schema_type: str
    property: str = ""
    message: str
    severity: Literal["error", "warning"] = "error"


class PackageWarning(BaseModel):
    type: str
    message: str
    affected_pages: list[str] = Field(default_factory=list)


# =============================================================================
# PAGE
# =============================================================================


class OptimizedPage(BaseModel):
    """One page of the optimized package."""

    page_id: str
    url: str
    type: str
    meta: MetaTags
    schemas: list[SchemaRecord] = Field(default_factory=list)
    headings: HeadingStructure = Field(default_factory=HeadingStructure)
    internal_links: list[InternalLink] = Field(default_factory=list)
    breadcrumbs: list[Breadcrumb] = Field(default_factory=list)
    content: Any = None
    seo_score: int = Field(0, ge=0, le=100)
    issues: list[Issue] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


# =============================================================================
# SITE-WIDE
# =============================================================================


class SitemapUrl(BaseModel):
    loc: str
    lastmod: str
    changefreq: Literal[
        "always", "hourly", "daily", "weekly", "monthly", "yearly", "never"
    ]
    priority: float = Field(..., ge=0.0, le=1.0)


class SitemapData(BaseModel):
    xml: str = ""
    urls: list[SitemapUrl] = Field(default_factory=list)


class SiteWideSeo(BaseModel):
    organization_schema: dict[str, Any] = Field(default_factory=dict)
    website_schema: dict[str, Any] = Field(default_factory=dict)
    sitemap: SitemapData = Field(default_factory=SitemapData)
    robots_txt: str = ""


# =============================================================================
# PACKAGE
# =============================================================================


class PackageValidation(BaseModel):
    """Package-level invariants recomputed from the assembled pages."""

    all_pages_have_title: bool = False
    all_pages_have_description: bool = False
    all_pages_have_canonical: bool = False
    all_pages_have_schema: bool = False
    internal_link_coverage: int = Field(
        0,
        ge=0,
        le=100,
        description="Percentage of pages that are the target of at least one link",
    )
    orphan_pages: list[str] = Field(default_factory=list)
    schema_errors: list[SchemaError] = Field(default_factory=list)
    warnings: list[PackageWarning] = Field(default_factory=list)


class PackageStats(BaseModel):
    total_pages: int = 0
    total_internal_links: int = 0
    avg_links_per_page: int = 0
    schema_types_used: list[str] = Field(default_factory=list)
    pages_by_type: dict[str, int] = Field(default_factory=dict)
    avg_seo_score: int = 0
    issues_by_type: dict[str, int] = Field(default_factory=dict)


class SourceData(BaseModel):
    """Upstream enrichments passed through for downstream stages."""

    editorial_content: dict[str, EditorialPage] | None = None
    comparison_data: dict[str, ComparisonPage] | None = None


class OptimizedPackage(BaseModel):
    """Root output record of an optimization run."""

    model_config = ConfigDict(frozen=True)

    pages: list[OptimizedPage]
    site_wide: SiteWideSeo
    validation: PackageValidation
    stats: PackageStats
    generated_at: str
    source_data: SourceData = Field(default_factory=SourceData)


# =============================================================================
# PROGRESS
# =============================================================================


class OptimizationProgress(BaseModel):
    """One progress notification, emitted at each phase/page boundary."""

    model_config = ConfigDict(frozen=True)

    phase: OptimizationPhase
    current_page: str | None = None
    completed_pages: int = Field(0, ge=0)
    total_pages: int = Field(0, ge=0)
    current_step: str | None = None
