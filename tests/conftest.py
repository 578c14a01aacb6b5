"""Pytest configuration and fixtures.

Provides fixtures for:
- Page descriptor and blueprint builders
- A sample site covering every schema branch
- Settings override for testing
- FastAPI test client
"""

from collections.abc import Generator
from datetime import UTC, datetime
from typing import Any

import pytest
from fastapi.testclient import TestClient

from siteseo.core.config import Settings, get_settings
from siteseo.schemas import (
    Blueprint,
    BlueprintMeta,
    BrandIdentity,
    ComparisonPage,
    EditorialPage,
    EditorialSection,
    FAQItem,
    PageData,
    PageDescriptor,
    PageSEO,
    Provider,
    RequiredLink,
    SeoOptimizationInput,
    SiteContext,
)

GENERATED_AT = datetime(2025, 3, 14, 9, 30, tzinfo=UTC)
BASE_URL = "https://example.com"
BRAND_NAME = "Phoenix Garage Door Guide"
CITY = "Phoenix"
STATE = "Arizona"
CATEGORY = "garage door repair"

# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_page(
    page_id: str,
    page_type: str,
    *,
    url: str | None = None,
    keyword: str = "",
    title_template: str = "",
    description_template: str = "",
    required_links: list[tuple[str, str | None]] | None = None,
    providers: list[str] | None = None,
    priority: int = 2,
    content: Any = None,
) -> PageDescriptor:
    """Build a page descriptor; SEO hints only when some are given."""
    seo = None
    if keyword or title_template or description_template:
        seo = PageSEO(
            title_template=title_template,
            description_template=description_template,
            primary_keyword=keyword,
        )
    return PageDescriptor(
        id=page_id,
        type=page_type,
        url=url or f"/{page_id}",
        priority=priority,
        seo=seo,
        required_links=[
            RequiredLink(to_page_id=target, anchor_pattern=pattern)
            for target, pattern in (required_links or [])
        ],
        data=PageData(providers=providers or []),
        content=content,
    )


def make_blueprint(
    pages: list[PageDescriptor],
    providers: list[Provider] | None = None,
) -> Blueprint:
    return Blueprint(
        brand=BrandIdentity(name=BRAND_NAME),
        base_url=BASE_URL,
        meta=BlueprintMeta(
            city=CITY,
            state=STATE,
            category=CATEGORY,
            generated_at=GENERATED_AT,
        ),
        pages=pages,
        providers=providers or [],
    )


def make_provider(
    provider_id: str,
    name: str,
    *,
    rating: float | None = None,
    review_count: int | None = None,
) -> Provider:
    return Provider(
        id=provider_id,
        name=name,
        phone="(602) 555-0100",
        address="100 Main St",
        website=f"https://{provider_id}.example.com",
        google_rating=rating,
        google_review_count=review_count,
        service_area=["Phoenix", "Tempe"],
    )


# ---------------------------------------------------------------------------
# Site Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def site() -> SiteContext:
    """Site context shared by the component tests."""
    return SiteContext(
        brand_name=BRAND_NAME,
        base_url=BASE_URL,
        city=CITY,
        state=STATE,
        category=CATEGORY,
        generated_at=GENERATED_AT,
    )


@pytest.fixture
def providers() -> list[Provider]:
    return [
        make_provider("acme", "Acme Garage Doors", rating=4.8, review_count=212),
        make_provider("valley", "Valley Door Co", rating=4.5, review_count=87),
        make_provider("newco", "NewCo Doors"),
    ]


@pytest.fixture
def sample_pages() -> list[PageDescriptor]:
    """A small site with one page of most types."""
    return [
        make_page(
            "home",
            "homepage",
            url="/",
            keyword="garage door repair phoenix",
            title_template="[City] Garage Door Repair Guide | [Brand]",
            priority=1,
        ),
        make_page(
            "hub",
            "service_hub",
            url="/garage-door-repair",
            keyword="garage door repair",
            title_template="Garage Door Repair Services in [City], [State]",
            priority=1,
        ),
        make_page(
            "springs",
            "service_page",
            url="/garage-door-repair/springs",
            keyword="garage door spring repair",
            required_links=[("cost", "see [Category] prices"), ("ghost", None)],
        ),
        make_page(
            "cost",
            "cost_guide",
            url="/guides/garage-door-repair-cost",
            keyword="garage door repair cost",
            title_template="[Year] Garage Door Repair Cost in [City]",
        ),
        make_page(
            "compare",
            "comparison",
            url="/compare",
            keyword="best garage door companies",
            providers=["acme", "valley"],
        ),
        make_page(
            "acme-profile",
            "provider_profile",
            url="/providers/acme",
            keyword="acme garage doors",
            providers=["acme"],
            priority=3,
        ),
        make_page("about", "about", url="/about", priority=3),
        make_page("contact", "contact", url="/contact", priority=3),
        make_page("privacy", "privacy", url="/privacy", priority=3),
    ]


@pytest.fixture
def sample_blueprint(
    sample_pages: list[PageDescriptor], providers: list[Provider]
) -> Blueprint:
    return make_blueprint(sample_pages, providers)


@pytest.fixture
def sample_input(sample_blueprint: Blueprint) -> SeoOptimizationInput:
    """Blueprint plus editorial content for the cost guide and comparison FAQs."""
    return SeoOptimizationInput(
        blueprint=sample_blueprint,
        editorial_content={
            "cost": EditorialPage(
                page_id="cost",
                headline="How Much Does Garage Door Repair Cost in Phoenix?",
                sections=[
                    EditorialSection(
                        heading="Average Repair Prices",
                        subsections=[EditorialSection(heading="Spring Replacement")],
                    ),
                    EditorialSection(heading="What Drives the Price"),
                ],
                faq=[
                    FAQItem(
                        question="Is a broken spring an emergency?",
                        answer="Yes, the door should not be operated.",
                    )
                ],
                body={"intro": "Repair prices in Phoenix vary by part."},
            )
        },
        comparison_data={
            "compare": ComparisonPage(
                page_id="compare",
                faq=[FAQItem(question="Who is the top rated company?", answer="Acme.")],
                content={"winner": "acme"},
            )
        },
    )


# ---------------------------------------------------------------------------
# Settings Fixtures
# ---------------------------------------------------------------------------


def get_test_settings() -> Settings:
    """Get test settings."""
    return Settings(
        app_name="Test App",
        app_version="0.0.1",
        debug=True,
        environment="test",
        log_level="DEBUG",
        log_format="text",
    )


# ---------------------------------------------------------------------------
# FastAPI Test Client Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def app():
    """Create FastAPI app for testing."""
    from siteseo.main import create_app

    return create_app()


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Create synchronous test client."""
    app.dependency_overrides[get_settings] = get_test_settings

    test_client = TestClient(app)
    yield test_client

    app.dependency_overrides.clear()
