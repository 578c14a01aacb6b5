"""Tests for JSON-LD schema generation and validation.

Tests cover:
- determine_business_type: category keyword lookup and default
- generate_schema: breadcrumb always, business + rating for providers,
  Article for article types, FAQPage, ItemList on comparison pages
- Article dates derived from the blueprint timestamp
- Organization and WebSite records
- validate_schema: exact error messages, invalid records kept, input
  record untouched
"""

import pytest

from siteseo.schemas.enrichment import FAQItem
from siteseo.schemas.seo_package import Breadcrumb, SchemaRecord
from siteseo.services.schema_markup import (
    SCHEMA_CONTEXT,
    determine_business_type,
    generate_breadcrumb_schema,
    generate_organization_schema,
    generate_provider_schema,
    generate_schema,
    generate_website_schema,
    validate_schema,
    validate_schemas,
)
from tests.conftest import GENERATED_AT, make_page, make_provider

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _types(records: list[SchemaRecord]) -> list[str]:
    return [record.type for record in records]


def _faqs(count: int = 2) -> list[FAQItem]:
    return [
        FAQItem(question=f"Question {n}?", answer=f"Answer {n}.")
        for n in range(1, count + 1)
    ]


class TestDetermineBusinessType:
    @pytest.mark.parametrize(
        "category,expected",
        [
            ("Emergency Plumbing", "Plumber"),
            ("garage door repair", "HomeAndConstructionBusiness"),
            ("HVAC installation", "HVACBusiness"),
            ("dog grooming", "LocalBusiness"),
            ("", "LocalBusiness"),
        ],
    )
    def test_lookup(self, category: str, expected: str) -> None:
        assert determine_business_type(category) == expected


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


class TestGenerateSchema:
    def test_breadcrumb_only_for_plain_page(self, site) -> None:
        page = make_page("svc", "service_page", url="/springs", keyword="spring repair")
        records = generate_schema(page, site)

        assert _types(records) == ["BreadcrumbList"]
        elements = records[0].payload["itemListElement"]
        assert [e["name"] for e in elements] == ["Home", "spring repair"]
        assert [e["item"] for e in elements] == [
            "https://example.com/",
            "https://example.com/springs",
        ]
        assert [e["position"] for e in elements] == [1, 2]

    def test_explicit_breadcrumbs(self, site) -> None:
        page = make_page("svc", "service_page")
        crumbs = [
            Breadcrumb(name="Home", url="/"),
            Breadcrumb(name="Services", url="https://example.com/services"),
        ]
        record = generate_schema(page, site, breadcrumbs=crumbs)[0]
        assert record.payload["itemListElement"][1]["item"] == (
            "https://example.com/services"
        )

    def test_provider_profile_with_rating(self, site) -> None:
        page = make_page("acme-profile", "provider_profile", url="/providers/acme")
        provider = make_provider("acme", "Acme Garage Doors", rating=4.8, review_count=212)

        records = generate_schema(page, site, provider=provider)

        assert _types(records) == [
            "BreadcrumbList",
            "HomeAndConstructionBusiness",
            "AggregateRating",
        ]
        business = records[1].payload
        assert business["@id"] == "https://example.com/providers/acme/#business"
        assert business["name"] == "Acme Garage Doors"
        assert business["telephone"] == "(602) 555-0100"
        assert business["address"]["addressLocality"] == "Phoenix"
        assert business["areaServed"] == [
            {"@type": "City", "name": "Phoenix"},
            {"@type": "City", "name": "Tempe"},
        ]
        assert business["aggregateRating"]["ratingValue"] == 4.8
        assert business["sameAs"] == ["https://acme.example.com"]
        assert records[2].payload["reviewCount"] == 212

    def test_provider_without_reviews_has_no_rating(self, site) -> None:
        page = make_page("newco-profile", "provider_profile")
        provider = make_provider("newco", "NewCo Doors", rating=4.0, review_count=0)

        records = generate_schema(page, site, provider=provider)

        assert _types(records) == ["BreadcrumbList", "HomeAndConstructionBusiness"]
        assert "aggregateRating" not in records[1].payload

    def test_article_for_article_types(self, site) -> None:
        page = make_page(
            "cost",
            "cost_guide",
            url="/cost",
            title_template="[Year] Garage Door Repair Cost in [City]",
        )
        records = generate_schema(page, site)

        assert _types(records) == ["BreadcrumbList", "Article"]
        article = records[1].payload
        assert article["headline"] == "2025 Garage Door Repair Cost in Phoenix"
        assert article["datePublished"] == GENERATED_AT.isoformat()
        assert article["dateModified"] == GENERATED_AT.isoformat()
        assert article["author"] == {
            "@type": "Person",
            "name": "Phoenix Garage Door Guide Team",
        }

    def test_article_headline_falls_back_to_keyword(self, site) -> None:
        page = make_page("diy", "diy_guide", keyword="fix a garage door")
        article = generate_schema(page, site)[1].payload
        assert article["headline"] == "fix a garage door"

    def test_no_article_for_service_page(self, site) -> None:
        page = make_page("svc", "service_page")
        assert "Article" not in _types(generate_schema(page, site))

    def test_faq_page(self, site) -> None:
        page = make_page("cost", "cost_guide")
        records = generate_schema(page, site, faqs=_faqs(3))

        assert _types(records) == ["BreadcrumbList", "Article", "FAQPage"]
        questions = records[2].payload["mainEntity"]
        assert len(questions) == 3
        assert questions[0]["acceptedAnswer"]["text"] == "Answer 1."

    def test_empty_faq_list_emits_nothing(self, site) -> None:
        page = make_page("svc", "service_page")
        assert _types(generate_schema(page, site, faqs=[])) == ["BreadcrumbList"]

    def test_item_list_on_comparison(self, site, providers) -> None:
        page = make_page("compare", "comparison")
        records = generate_schema(page, site, providers=providers)

        assert _types(records) == ["BreadcrumbList", "ItemList"]
        item_list = records[1].payload
        assert item_list["numberOfItems"] == 3
        assert [e["position"] for e in item_list["itemListElement"]] == [1, 2, 3]
        assert "aggregateRating" in item_list["itemListElement"][0]["item"]
        assert "aggregateRating" not in item_list["itemListElement"][2]["item"]

    def test_no_item_list_without_providers(self, site) -> None:
        page = make_page("compare", "comparison")
        assert _types(generate_schema(page, site, providers=[])) == ["BreadcrumbList"]

    def test_item_list_only_on_comparison(self, site, providers) -> None:
        page = make_page("hub", "service_hub")
        assert _types(generate_schema(page, site, providers=providers)) == [
            "BreadcrumbList"
        ]


class TestSiteWideSchema:
    def test_organization(self, site) -> None:
        org = generate_organization_schema(site)
        assert org["@type"] == "Organization"
        assert org["@id"] == "https://example.com/#organization"
        assert org["name"] == "Phoenix Garage Door Guide"

    def test_website_search_action(self, site) -> None:
        website = generate_website_schema(site)
        assert website["publisher"] == {"@id": "https://example.com/#organization"}
        assert website["potentialAction"]["target"]["urlTemplate"] == (
            "https://example.com/search?q={search_term_string}"
        )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidateSchema:
    def test_generated_records_are_valid(self, site, providers) -> None:
        page = make_page("compare", "comparison", keyword="compare")
        records = generate_schema(
            page, site, provider=providers[0], faqs=_faqs(), providers=providers
        )
        for record in records:
            checked = validate_schema(record)
            assert checked.valid is True
            assert checked.errors is None

    def test_empty_breadcrumb_list_invalid(self, site) -> None:
        checked = validate_schema(generate_breadcrumb_schema([], site))
        assert checked.valid is False
        assert checked.errors == [
            "BreadcrumbList: Missing or empty itemListElement list"
        ]

    def test_business_without_name_invalid(self, site) -> None:
        page = make_page("p", "provider_profile")
        record = generate_provider_schema(make_provider("x", ""), page, site)
        checked = validate_schema(record)
        assert checked.valid is False
        assert checked.errors == ["LocalBusiness: Missing required name property"]

    def test_missing_context_and_type(self) -> None:
        checked = validate_schema(SchemaRecord(type="Article", payload={}))
        assert checked.errors == [
            "Missing @context property",
            "Missing @type property",
            "Article: Missing required headline property",
            "Article: Missing required author property",
        ]

    def test_empty_faq_invalid(self) -> None:
        record = SchemaRecord(
            type="FAQPage",
            payload={"@context": SCHEMA_CONTEXT, "@type": "FAQPage", "mainEntity": []},
        )
        assert validate_schema(record).errors == [
            "FAQPage: Missing or empty mainEntity question list"
        ]

    def test_input_record_unchanged(self, site) -> None:
        record = generate_breadcrumb_schema([], site)
        validate_schema(record)
        assert record.valid is True
        assert record.errors is None

    def test_invalid_records_kept(self, site) -> None:
        records = [
            generate_breadcrumb_schema([Breadcrumb(name="Home", url="/")], site),
            generate_breadcrumb_schema([], site),
        ]
        checked = validate_schemas(records, page_id="svc")
        assert [record.valid for record in checked] == [True, False]
        assert checked[1].payload == records[1].payload
