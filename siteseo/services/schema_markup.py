"""Schema.org JSON-LD generation and structural validation.

Per page, generate_schema emits:
- BreadcrumbList, always
- a business entity (type chosen by category keyword) plus AggregateRating
  when a provider is attached
- Article for article-like page types
- FAQPage when FAQs are supplied
- ItemList ranking providers on comparison pages

Site-wide, one Organization and one WebSite record. validate_schema checks
required properties; an invalid record is returned with its errors and is
never dropped.
"""

from collections.abc import Sequence
from typing import Any

from siteseo.core.logging import get_logger, pipeline_logger
from siteseo.schemas.blueprint import PageDescriptor, Provider, SiteContext
from siteseo.schemas.enrichment import FAQItem
from siteseo.schemas.seo_package import Breadcrumb, SchemaRecord
from siteseo.services.meta_tags import fill_template

logger = get_logger(__name__)

SCHEMA_CONTEXT = "https://schema.org"

# First key contained in the lowercased category wins
BUSINESS_TYPE_BY_KEYWORD: dict[str, str] = {
    "plumber": "Plumber",
    "plumbing": "Plumber",
    "electrician": "Electrician",
    "electrical": "Electrician",
    "hvac": "HVACBusiness",
    "air conditioning": "HVACBusiness",
    "heating": "HVACBusiness",
    "roofing": "RoofingContractor",
    "roofer": "RoofingContractor",
    "landscaping": "LandscapingBusiness",
    "landscaper": "LandscapingBusiness",
    "locksmith": "Locksmith",
    "painter": "HousePainter",
    "painting": "HousePainter",
    "moving": "MovingCompany",
    "mover": "MovingCompany",
    "cleaning": "HousekeepingService",
    "pest control": "PestControlService",
    "garage door": "HomeAndConstructionBusiness",
}
DEFAULT_BUSINESS_TYPE = "LocalBusiness"
LOCAL_BUSINESS_TYPES = frozenset(BUSINESS_TYPE_BY_KEYWORD.values()) | {
    DEFAULT_BUSINESS_TYPE
}

ARTICLE_PAGE_TYPES = frozenset(
    {
        "cost_guide",
        "troubleshooting",
        "buying_guide",
        "diy_guide",
        "guide",
        "article",
        "local_expertise",
    }
)

DEFAULT_PRICE_RANGE = "$$"


def determine_business_type(category: str) -> str:
    """Schema.org LocalBusiness subtype for a business category."""
    lowered = (category or "").lower()
    for keyword, business_type in BUSINESS_TYPE_BY_KEYWORD.items():
        if keyword in lowered:
            return business_type
    return DEFAULT_BUSINESS_TYPE


def _has_rating(provider: Provider) -> bool:
    return bool(provider.google_rating) and (provider.google_review_count or 0) > 0


def _record(payload: dict[str, Any]) -> SchemaRecord:
    return SchemaRecord(type=payload["@type"], payload=payload)


# =============================================================================
# PAGE SCHEMA GENERATORS
# =============================================================================


def generate_breadcrumb_schema(
    breadcrumbs: Sequence[Breadcrumb], site: SiteContext
) -> SchemaRecord:
    return _record(
        {
            "@context": SCHEMA_CONTEXT,
            "@type": "BreadcrumbList",
            "itemListElement": [
                {
                    "@type": "ListItem",
                    "position": index,
                    "name": crumb.name,
                    "item": (
                        crumb.url
                        if crumb.url.startswith("http")
                        else f"{site.base_url}{crumb.url}"
                    ),
                }
                for index, crumb in enumerate(breadcrumbs, start=1)
            ],
        }
    )


def generate_provider_schema(
    provider: Provider, page: PageDescriptor, site: SiteContext
) -> SchemaRecord:
    """Business entity record for a provider."""
    page_url = f"{site.base_url}{page.url}"
    payload: dict[str, Any] = {
        "@context": SCHEMA_CONTEXT,
        "@type": determine_business_type(site.category),
        "@id": f"{page_url}/#business",
        "name": provider.name,
        "url": page_url,
    }
    if provider.phone:
        payload["telephone"] = provider.phone
    payload["priceRange"] = DEFAULT_PRICE_RANGE

    if provider.address:
        payload["address"] = {
            "@type": "PostalAddress",
            "streetAddress": provider.address,
            "addressLocality": site.city,
            "addressRegion": site.state,
            "addressCountry": "US",
        }
    if provider.service_area:
        payload["areaServed"] = [
            {"@type": "City", "name": city} for city in provider.service_area
        ]
    if _has_rating(provider):
        payload["aggregateRating"] = {
            "@type": "AggregateRating",
            "ratingValue": provider.google_rating,
            "reviewCount": provider.google_review_count,
            "bestRating": "5",
            "worstRating": "1",
        }
    if provider.logo_url:
        payload["image"] = provider.logo_url
    if provider.website:
        payload["sameAs"] = [provider.website]
    return _record(payload)


def generate_aggregate_rating_schema(
    provider: Provider, page: PageDescriptor, site: SiteContext
) -> SchemaRecord | None:
    """Standalone AggregateRating; None when the provider has no reviews."""
    if not _has_rating(provider):
        return None
    page_url = f"{site.base_url}{page.url}"
    return _record(
        {
            "@context": SCHEMA_CONTEXT,
            "@type": "AggregateRating",
            "@id": f"{page_url}/#aggregateRating",
            "itemReviewed": {
                "@type": DEFAULT_BUSINESS_TYPE,
                "@id": f"{page_url}/#business",
            },
            "ratingValue": provider.google_rating,
            "reviewCount": provider.google_review_count,
            "bestRating": "5",
            "worstRating": "1",
        }
    )


def generate_article_schema(page: PageDescriptor, site: SiteContext) -> SchemaRecord:
    template = page.seo.title_template if page.seo else ""
    headline = (
        (fill_template(template, page, site) if template else "")
        or page.primary_keyword
        or "Article"
    )
    published = site.generated_at.isoformat()
    return _record(
        {
            "@context": SCHEMA_CONTEXT,
            "@type": "Article",
            "@id": f"{site.base_url}{page.url}/#article",
            "headline": headline,
            "image": f"{site.base_url}/article-image.png",
            "datePublished": published,
            "dateModified": published,
            "author": {"@type": "Person", "name": f"{site.brand_name} Team"},
            "publisher": {
                "@type": "Organization",
                "name": site.brand_name,
                "logo": {"@type": "ImageObject", "url": f"{site.base_url}/logo.png"},
            },
            "mainEntityOfPage": {
                "@type": "WebPage",
                "@id": f"{site.base_url}{page.url}",
            },
        }
    )


def generate_faq_schema(
    faqs: Sequence[FAQItem], page: PageDescriptor, site: SiteContext
) -> SchemaRecord:
    return _record(
        {
            "@context": SCHEMA_CONTEXT,
            "@type": "FAQPage",
            "@id": f"{site.base_url}{page.url}/#faq",
            "mainEntity": [
                {
                    "@type": "Question",
                    "name": faq.question,
                    "acceptedAnswer": {"@type": "Answer", "text": faq.answer},
                }
                for faq in faqs
            ],
        }
    )


def generate_item_list_schema(
    providers: Sequence[Provider], page: PageDescriptor, site: SiteContext
) -> SchemaRecord:
    """Ranked provider list for comparison pages."""
    items = []
    for position, provider in enumerate(providers, start=1):
        item: dict[str, Any] = {"@type": DEFAULT_BUSINESS_TYPE, "name": provider.name}
        if _has_rating(provider):
            item["aggregateRating"] = {
                "@type": "AggregateRating",
                "ratingValue": provider.google_rating,
                "reviewCount": provider.google_review_count,
            }
        items.append({"@type": "ListItem", "position": position, "item": item})

    return _record(
        {
            "@context": SCHEMA_CONTEXT,
            "@type": "ItemList",
            "@id": f"{site.base_url}{page.url}/#itemList",
            "name": f"Best {site.category} Companies in {site.city}",
            "description": (
                f"Compare the top {len(providers)} {site.category} companies "
                f"in {site.city}"
            ),
            "numberOfItems": len(providers),
            "itemListElement": items,
        }
    )


# =============================================================================
# SITE-WIDE SCHEMA
# =============================================================================


def generate_organization_schema(site: SiteContext) -> dict[str, Any]:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "Organization",
        "@id": f"{site.base_url}/#organization",
        "name": site.brand_name,
        "url": site.base_url,
        "logo": {
            "@type": "ImageObject",
            "@id": f"{site.base_url}/#logo",
            "url": f"{site.base_url}/logo.png",
        },
        "sameAs": [],
    }


def generate_website_schema(site: SiteContext) -> dict[str, Any]:
    """WebSite record with a sitelinks search action."""
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "WebSite",
        "@id": f"{site.base_url}/#website",
        "url": site.base_url,
        "name": site.brand_name,
        "publisher": {"@id": f"{site.base_url}/#organization"},
        "potentialAction": {
            "@type": "SearchAction",
            "target": {
                "@type": "EntryPoint",
                "urlTemplate": f"{site.base_url}/search?q={{search_term_string}}",
            },
            "query-input": "required name=search_term_string",
        },
    }


# =============================================================================
# MAIN GENERATOR AND VALIDATION
# =============================================================================


def generate_schema(
    page: PageDescriptor,
    site: SiteContext,
    provider: Provider | None = None,
    faqs: Sequence[FAQItem] | None = None,
    providers: Sequence[Provider] | None = None,
    breadcrumbs: Sequence[Breadcrumb] | None = None,
) -> list[SchemaRecord]:
    """All schema records for one page, unvalidated.

    Args:
        page: Page descriptor
        site: Site context
        provider: Provider featured on the page (provider profiles)
        faqs: FAQ list from editorial or comparison content
        providers: Providers ranked on a comparison page
        breadcrumbs: Breadcrumb trail; Home then the page when omitted
    """
    if breadcrumbs is None:
        breadcrumbs = [
            Breadcrumb(name="Home", url="/"),
            Breadcrumb(name=page.primary_keyword or "Page", url=page.url),
        ]
    records = [generate_breadcrumb_schema(breadcrumbs, site)]

    if provider is not None:
        records.append(generate_provider_schema(provider, page, site))
        rating = generate_aggregate_rating_schema(provider, page, site)
        if rating is not None:
            records.append(rating)

    if page.type in ARTICLE_PAGE_TYPES:
        records.append(generate_article_schema(page, site))

    if faqs:
        records.append(generate_faq_schema(faqs, page, site))

    if page.type == "comparison" and providers:
        records.append(generate_item_list_schema(providers, page, site))

    logger.debug(
        "Generated schema records",
        extra={"page_id": page.id, "schema_types": [r.type for r in records]},
    )
    return records


def _non_empty_list(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0


def validate_schema(record: SchemaRecord) -> SchemaRecord:
    """Check required properties; returns a copy with validity and errors set."""
    payload = record.payload
    errors: list[str] = []

    if not payload.get("@context"):
        errors.append("Missing @context property")
    if not payload.get("@type"):
        errors.append("Missing @type property")

    if record.type in LOCAL_BUSINESS_TYPES:
        if not payload.get("name"):
            errors.append("LocalBusiness: Missing required name property")
    elif record.type == "Article":
        if not payload.get("headline"):
            errors.append("Article: Missing required headline property")
        if not payload.get("author"):
            errors.append("Article: Missing required author property")
    elif record.type == "FAQPage":
        if not _non_empty_list(payload.get("mainEntity")):
            errors.append("FAQPage: Missing or empty mainEntity question list")
    elif record.type == "BreadcrumbList":
        if not _non_empty_list(payload.get("itemListElement")):
            errors.append("BreadcrumbList: Missing or empty itemListElement list")

    return record.model_copy(
        update={"valid": not errors, "errors": errors or None}
    )


def validate_schemas(
    records: Sequence[SchemaRecord], page_id: str | None = None
) -> list[SchemaRecord]:
    """Validate every record, logging the invalid ones."""
    validated = []
    for record in records:
        checked = validate_schema(record)
        if not checked.valid:
            pipeline_logger.schema_invalid(checked.type, page_id, checked.errors or [])
        validated.append(checked)
    return validated
