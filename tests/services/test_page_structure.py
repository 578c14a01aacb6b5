"""Tests for heading outlines and breadcrumbs.

Tests cover:
- extract_headings with editorial content: H1/H2/H3 and nested hierarchy
- extract_headings from SEO hints: template, keyword and placeholder H1
- generate_breadcrumbs: section crumbs per page type
"""

from siteseo.schemas.enrichment import EditorialPage, EditorialSection
from siteseo.services.page_structure import extract_headings, generate_breadcrumbs
from tests.conftest import make_page


class TestExtractHeadings:
    def test_editorial_outline(self, site) -> None:
        editorial = EditorialPage(
            page_id="cost",
            headline="What Garage Door Repair Costs",
            sections=[
                EditorialSection(
                    heading="Prices",
                    subsections=[
                        EditorialSection(heading="Springs"),
                        EditorialSection(heading="Openers"),
                    ],
                ),
                EditorialSection(heading="Saving Money"),
            ],
        )
        headings = extract_headings(make_page("cost", "cost_guide"), site, editorial)

        assert headings.h1 == "What Garage Door Repair Costs"
        assert headings.h2s == ["Prices", "Saving Money"]
        assert headings.h3s == ["Springs", "Openers"]
        assert headings.valid is True

        root = headings.hierarchy[0]
        assert (root.level, root.text) == (1, "What Garage Door Repair Costs")
        assert [child.text for child in root.children] == ["Prices", "Saving Money"]
        assert [h.text for h in root.children[0].children] == ["Springs", "Openers"]
        assert root.children[0].children[0].level == 3

    def test_h1_from_title_template(self, site) -> None:
        page = make_page("hub", "service_hub", title_template="Repair in [City]")
        headings = extract_headings(page, site)
        assert headings.h1 == "Repair in Phoenix"
        assert headings.h2s == []
        assert headings.valid is True

    def test_h1_from_keyword_is_not_valid_outline(self, site) -> None:
        page = make_page("svc", "service_page", keyword="spring repair")
        headings = extract_headings(page, site)
        assert headings.h1 == "spring repair"
        assert headings.valid is False

    def test_placeholder_h1(self, site) -> None:
        headings = extract_headings(make_page("about", "about"), site)
        assert headings.h1 == "Page"
        assert headings.valid is False


class TestGenerateBreadcrumbs:
    def test_provider_profile(self) -> None:
        page = make_page("acme", "provider_profile", url="/providers/acme", keyword="Acme")
        assert [(c.name, c.url) for c in generate_breadcrumbs(page)] == [
            ("Home", "/"),
            ("Providers", "/providers"),
            ("Acme", "/providers/acme"),
        ]

    def test_guides_section(self) -> None:
        page = make_page("fix", "troubleshooting")
        assert [c.name for c in generate_breadcrumbs(page)] == ["Home", "Guides", "Page"]

    def test_no_section_crumb(self) -> None:
        page = make_page("svc", "service_page", url="/springs")
        assert [(c.name, c.url) for c in generate_breadcrumbs(page)] == [
            ("Home", "/"),
            ("Page", "/springs"),
        ]
