"""Pydantic schemas for the site blueprint consumed by the optimizer.

The blueprint is produced upstream (site planning) and is read-only here:
- PageDescriptor: one page of the target site with its SEO hints and
  required outbound links
- Provider: a local business that can be featured on profile and
  comparison pages
- Blueprint: the page list plus brand, base URL and market metadata
- SiteContext: the derived read-only view the components work from
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# PAGE DESCRIPTOR MODELS
# =============================================================================


class PageType(str, Enum):
    """Closed set of page types a blueprint may contain."""

    HOMEPAGE = "homepage"
    SERVICE_HUB = "service_hub"
    SERVICE_PAGE = "service_page"
    CITY_SERVICE_PAGE = "city_service_page"
    PROVIDER_PROFILE = "provider_profile"
    PROVIDER_LISTING = "provider_listing"
    COMPARISON = "comparison"
    COST_GUIDE = "cost_guide"
    TROUBLESHOOTING = "troubleshooting"
    BUYING_GUIDE = "buying_guide"
    DIY_GUIDE = "diy_guide"
    LOCAL_EXPERTISE = "local_expertise"
    ABOUT = "about"
    METHODOLOGY = "methodology"
    CONTACT = "contact"
    LEGAL = "legal"
    PRIVACY = "privacy"
    TERMS = "terms"
    GUIDE = "guide"
    ARTICLE = "article"


class PageSEO(BaseModel):
    """SEO hints attached to a page by the site planner."""

    title_template: str = Field(
        "",
        description="Title template with [City], [State], [Brand], [Category], [Year] placeholders",
        examples=["[City] Garage Door Repair | [Brand]"],
    )
    description_template: str = Field(
        "",
        description="Meta description template with the same placeholders",
    )
    primary_keyword: str = Field(
        "",
        description="Primary keyword the page targets",
        examples=["phoenix garage door repair"],
    )
    secondary_keywords: list[str] = Field(
        default_factory=list,
        description="Secondary keywords",
    )


class RequiredLink(BaseModel):
    """An outbound link the blueprint requires a page to carry."""

    to_page_id: str = Field(
        ...,
        min_length=1,
        description="Target page id",
        examples=["provider-listing-phoenix"],
    )
    anchor_pattern: str | None = Field(
        None,
        description="Anchor text pattern with [City], [Category], [Provider] placeholders",
        examples=["view all [City] providers"],
    )


class PageData(BaseModel):
    """Data a page needs from upstream enrichment."""

    providers: list[str] = Field(
        default_factory=list,
        description="Provider ids featured on the page",
    )
    services: list[str] = Field(default_factory=list)
    city: str | None = None


class PageDescriptor(BaseModel):
    """One page of the target site.

    ``type`` is stored as its plain string value so the lookup tables,
    which are keyed by type name, can be indexed directly.
    """

    model_config = ConfigDict(use_enum_values=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique page id",
        examples=["city-phoenix-garage-door-repair"],
    )
    type: PageType = Field(..., description="Page type")
    url: str = Field(
        ...,
        min_length=1,
        description="URL path of the page",
        examples=["/phoenix/garage-door-repair"],
    )
    priority: int = Field(
        2,
        ge=1,
        le=3,
        description="Launch phase priority tier",
    )
    seo: PageSEO | None = Field(None, description="SEO hints")
    required_links: list[RequiredLink] = Field(
        default_factory=list,
        description="Outbound links the page must carry",
    )
    data: PageData = Field(default_factory=PageData)
    content: Any = Field(None, description="Opaque page content")

    @property
    def primary_keyword(self) -> str:
        return self.seo.primary_keyword if self.seo else ""


# =============================================================================
# PROVIDER MODELS
# =============================================================================


class Provider(BaseModel):
    """A local business record from provider enrichment."""

    id: str = Field(..., min_length=1)
    name: str = Field("", description="Business name")
    phone: str | None = None
    address: str | None = None
    website: str | None = None
    google_rating: float | None = Field(None, ge=0, le=5)
    google_review_count: int | None = Field(None, ge=0)
    service_area: list[str] = Field(
        default_factory=list,
        description="Cities the provider serves",
    )
    logo_url: str | None = None


# =============================================================================
# BLUEPRINT
# =============================================================================


class BrandIdentity(BaseModel):
    """Brand of the generated site."""

    name: str = Field(..., min_length=1, examples=["Phoenix Garage Door Guide"])
    tagline: str = ""
    domain: str = ""


class BlueprintMeta(BaseModel):
    """Market metadata for the blueprint."""

    city: str = Field(..., examples=["Phoenix"])
    state: str = Field("", examples=["Arizona"])
    category: str = Field(..., examples=["garage door repair"])
    generated_at: datetime = Field(
        ...,
        description="Blueprint timestamp; every date in the output derives from it",
    )


class Blueprint(BaseModel):
    """Site blueprint: pages plus brand and market metadata."""

    brand: BrandIdentity
    base_url: str = Field(..., min_length=1, examples=["https://example.com"])
    meta: BlueprintMeta
    pages: list[PageDescriptor] = Field(default_factory=list)
    providers: list[Provider] = Field(
        default_factory=list,
        description="Providers attached to the blueprint",
    )


class SiteContext(BaseModel):
    """Read-only site facts shared by every component of a run."""

    model_config = ConfigDict(frozen=True)

    brand_name: str
    base_url: str
    city: str
    state: str
    category: str
    generated_at: datetime

    @classmethod
    def from_blueprint(cls, blueprint: Blueprint) -> "SiteContext":
        return cls(
            brand_name=blueprint.brand.name,
            base_url=blueprint.base_url.rstrip("/"),
            city=blueprint.meta.city,
            state=blueprint.meta.state,
            category=blueprint.meta.category,
            generated_at=blueprint.meta.generated_at,
        )
