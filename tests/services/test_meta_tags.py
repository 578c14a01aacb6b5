"""Tests for meta tag derivation.

Tests cover:
- fill_template: placeholders, year from the blueprint timestamp, leftovers
- Title: default template, brand suffix, word-boundary truncation
- Description: default template, CTA padding, sentence and word truncation
- Canonical, robots and Open Graph type per page type
- Geo meta and state abbreviations
"""

import pytest

from siteseo.schemas.blueprint import PageType
from siteseo.services.meta_tags import (
    determine_robots,
    fill_template,
    generate_geo_meta,
    optimize_description,
    optimize_meta_tags,
    optimize_title,
    state_abbreviation,
)
from tests.conftest import make_page


class TestFillTemplate:
    def test_site_placeholders(self, site) -> None:
        page = make_page("p", "service_page")
        assert (
            fill_template("[Brand]: [City], [State] [Category]", page, site)
            == "Phoenix Garage Door Guide: Phoenix, Arizona garage door repair"
        )

    def test_category_prefers_page_keyword(self, site) -> None:
        page = make_page("p", "service_page", keyword="spring repair")
        assert fill_template("[Category] in [City]", page, site) == (
            "spring repair in Phoenix"
        )

    def test_year_from_blueprint_timestamp(self, site) -> None:
        page = make_page("p", "cost_guide")
        assert fill_template("[Year] Costs", page, site) == "2025 Costs"

    def test_unknown_placeholder_removed(self, site) -> None:
        page = make_page("p", "service_page")
        assert (
            fill_template("[Foo] Garage Door Repair in [city] Today", page, site)
            == "Garage Door Repair in Phoenix Today"
        )


class TestOptimizeTitle:
    def test_template_within_range(self, site) -> None:
        page = make_page(
            "p", "service_page", title_template="[City] Garage Door Repair | [Brand]"
        )
        assert optimize_title(page, site) == (
            "Phoenix Garage Door Repair | Phoenix Garage Door Guide"
        )

    def test_short_default_title_gets_brand_suffix(self, site) -> None:
        page = make_page("p", "service_page", keyword="garage door repair")
        assert optimize_title(page, site) == (
            "garage door repair in Phoenix | Phoenix Garage Door Guide"
        )

    def test_default_title_without_keyword(self, site) -> None:
        page = make_page("p", "about")
        assert optimize_title(page, site) == (
            "Page in Phoenix | Phoenix Garage Door Guide"
        )

    def test_long_title_truncated_at_word_boundary(self, site) -> None:
        page = make_page(
            "p",
            "service_page",
            title_template=(
                "[City] Garage Door Repair Experts Serving Every Neighborhood "
                "Across The Valley"
            ),
        )
        title = optimize_title(page, site)
        assert title == "Phoenix Garage Door Repair Experts Serving Every"
        assert len(title) <= 60


class TestOptimizeDescription:
    def test_default_description_too_short_to_pad(self, site) -> None:
        page = make_page("p", "service_page", keyword="garage door repair")
        assert optimize_description(page, site) == (
            "Find the best garage door repair in Phoenix, Arizona."
        )

    def test_short_description_padded_with_first_fitting_cta(self, site) -> None:
        template = "word " * 20
        page = make_page("p", "service_page", description_template=template)
        description = optimize_description(page, site)
        assert description == template.strip() + " Get free quotes today."
        assert 120 <= len(description) <= 160

    def test_long_description_truncated_at_sentence(self, site) -> None:
        sentence = "Garage door repair in Phoenix is fast. "
        page = make_page("p", "service_page", description_template=sentence * 5)
        assert optimize_description(page, site) == (sentence * 4).strip()

    def test_long_description_truncated_at_word_with_ellipsis(self, site) -> None:
        sentence = "Garage door repair in Phoenix is fast and affordable. "
        page = make_page("p", "service_page", description_template=sentence * 4)
        description = optimize_description(page, site)
        assert description.endswith("and...")
        assert len(description) == 152


class TestDetermineRobots:
    @pytest.mark.parametrize(
        "page_type,expected",
        [
            ("service_page", "index, follow"),
            ("homepage", "index, follow"),
            ("privacy", "index, nofollow"),
            ("terms", "index, nofollow"),
            ("legal", "index, nofollow"),
        ],
    )
    def test_by_type(self, page_type: str, expected: str) -> None:
        assert determine_robots(page_type) == expected

    def test_every_page_type_indexable(self) -> None:
        for page_type in PageType:
            assert determine_robots(page_type.value).startswith("index")


class TestOptimizeMetaTags:
    def test_canonical_and_lengths(self, site) -> None:
        page = make_page(
            "p",
            "service_page",
            url="/phoenix/garage-door-repair",
            keyword="garage door repair",
        )
        meta = optimize_meta_tags(page, site)
        assert meta.canonical == "https://example.com/phoenix/garage-door-repair"
        assert meta.title_length == len(meta.title)
        assert meta.description_length == len(meta.description)
        assert meta.open_graph.url == meta.canonical
        assert meta.open_graph.image == "https://example.com/og-image.png"
        assert meta.twitter.image == "https://example.com/twitter-card.png"
        assert meta.geo is None

    @pytest.mark.parametrize(
        "page_type,og_type",
        [
            ("cost_guide", "article"),
            ("troubleshooting", "article"),
            ("provider_profile", "profile"),
            ("homepage", "website"),
            ("comparison", "website"),
        ],
    )
    def test_open_graph_type(self, site, page_type: str, og_type: str) -> None:
        meta = optimize_meta_tags(make_page("p", page_type), site)
        assert meta.open_graph.type == og_type

    def test_geo_with_coordinates(self, site) -> None:
        meta = optimize_meta_tags(
            make_page("p", "city_service_page"), site, coordinates=(33.4484, -112.074)
        )
        assert meta.geo.region == "US-AZ"
        assert meta.geo.placename == "Phoenix"
        assert meta.geo.position == "33.4484;-112.074"


class TestGeoHelpers:
    def test_no_coordinates(self, site) -> None:
        assert generate_geo_meta(site) is None

    @pytest.mark.parametrize(
        "state,expected",
        [("Arizona", "AZ"), ("new york", "NY"), ("az", "AZ"), ("Atlantis", "AT")],
    )
    def test_state_abbreviation(self, state: str, expected: str) -> None:
        assert state_abbreviation(state) == expected
