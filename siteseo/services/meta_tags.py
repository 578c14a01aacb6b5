"""Meta tag derivation for optimized pages.

Fills the page's title and description templates, fits them to the lengths
search engines display, and derives canonical, robots, Open Graph, Twitter
and (when coordinates are known) geo metadata. The year placeholder comes
from the blueprint timestamp so output is reproducible.
"""

import re

from siteseo.schemas.blueprint import PageDescriptor, SiteContext
from siteseo.schemas.seo_package import GeoMeta, MetaTags, OpenGraphMeta, TwitterMeta

TITLE_MAX_LENGTH = 60
TITLE_MIN_LENGTH = 30
DESCRIPTION_MAX_LENGTH = 160
DESCRIPTION_MIN_LENGTH = 120

# Appended, first fit wins, to descriptions shorter than the minimum
DESCRIPTION_CTAS = (
    "Get free quotes today.",
    "Compare options now.",
    "Find trusted pros.",
    "Read reviews and compare.",
)

NOFOLLOW_TYPES = frozenset({"privacy", "terms", "legal"})
OG_ARTICLE_TYPES = frozenset(
    {"article", "guide", "cost_guide", "troubleshooting", "buying_guide"}
)

STATE_ABBREVIATIONS = {
    "alabama": "AL",
    "alaska": "AK",
    "arizona": "AZ",
    "arkansas": "AR",
    "california": "CA",
    "colorado": "CO",
    "connecticut": "CT",
    "delaware": "DE",
    "florida": "FL",
    "georgia": "GA",
    "hawaii": "HI",
    "idaho": "ID",
    "illinois": "IL",
    "indiana": "IN",
    "iowa": "IA",
    "kansas": "KS",
    "kentucky": "KY",
    "louisiana": "LA",
    "maine": "ME",
    "maryland": "MD",
    "massachusetts": "MA",
    "michigan": "MI",
    "minnesota": "MN",
    "mississippi": "MS",
    "missouri": "MO",
    "montana": "MT",
    "nebraska": "NE",
    "nevada": "NV",
    "new hampshire": "NH",
    "new jersey": "NJ",
    "new mexico": "NM",
    "new york": "NY",
    "north carolina": "NC",
    "north dakota": "ND",
    "ohio": "OH",
    "oklahoma": "OK",
    "oregon": "OR",
    "pennsylvania": "PA",
    "rhode island": "RI",
    "south carolina": "SC",
    "south dakota": "SD",
    "tennessee": "TN",
    "texas": "TX",
    "utah": "UT",
    "vermont": "VT",
    "virginia": "VA",
    "washington": "WA",
    "west virginia": "WV",
    "wisconsin": "WI",
    "wyoming": "WY",
}

_LEFTOVER_PLACEHOLDER = re.compile(r"\[[^\]]*\]")
_WHITESPACE = re.compile(r" {2,}")


def fill_template(template: str, page: PageDescriptor, site: SiteContext) -> str:
    """Substitute site placeholders into a title or description template.

    ``[Category]`` takes the page's primary keyword, falling back to the
    site category. Unknown bracketed tokens are removed.
    """
    values = {
        "city": site.city,
        "state": site.state,
        "brand": site.brand_name,
        "category": page.primary_keyword or site.category,
        "year": str(site.generated_at.year),
    }
    text = template
    for name, value in values.items():
        text = re.sub(rf"\[{name}\]", lambda _, v=value: v, text, flags=re.IGNORECASE)
    text = _LEFTOVER_PLACEHOLDER.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def _truncate_title(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    truncated = text[:max_length]
    cut = max(truncated.rfind(" "), truncated.rfind("|"), truncated.rfind("-"))
    if cut > max_length * 0.6:
        return text[:cut].strip()
    return truncated.strip()


def _truncate_description(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    truncated = text[:max_length]
    sentence_end = max(truncated.rfind("."), truncated.rfind("!"))
    if sentence_end > max_length * 0.7:
        return text[: sentence_end + 1].strip()
    last_space = truncated.rfind(" ")
    if last_space > max_length * 0.8:
        return text[:last_space].strip() + "..."
    return truncated.strip()


def _pad_description(text: str) -> str:
    for cta in DESCRIPTION_CTAS:
        padded = f"{text} {cta}"
        if DESCRIPTION_MIN_LENGTH <= len(padded) <= DESCRIPTION_MAX_LENGTH:
            return padded
    return text


def optimize_title(page: PageDescriptor, site: SiteContext) -> str:
    template = (page.seo.title_template if page.seo else "") or (
        f"{page.primary_keyword or 'Page'} in [City]"
    )
    title = _truncate_title(fill_template(template, page, site), TITLE_MAX_LENGTH)
    if len(title) < TITLE_MIN_LENGTH and site.brand_name:
        title = f"{title} | {site.brand_name}"
    return title


def optimize_description(page: PageDescriptor, site: SiteContext) -> str:
    template = (page.seo.description_template if page.seo else "") or (
        f"Find the best {page.primary_keyword or 'services'} in [City], [State]."
    )
    description = _truncate_description(
        fill_template(template, page, site), DESCRIPTION_MAX_LENGTH
    )
    if len(description) < DESCRIPTION_MIN_LENGTH:
        description = _pad_description(description)
    return description


def determine_robots(page_type: str) -> str:
    if page_type in NOFOLLOW_TYPES:
        return "index, nofollow"
    return "index, follow"


def state_abbreviation(state: str) -> str:
    if len(state) <= 2:
        return state.upper()
    return STATE_ABBREVIATIONS.get(state.lower(), state[:2].upper())


def generate_geo_meta(
    site: SiteContext, coordinates: tuple[float, float] | None = None
) -> GeoMeta | None:
    """Geo meta for local pages; None without coordinates."""
    if not coordinates:
        return None
    lat, lng = coordinates
    return GeoMeta(
        region=f"US-{state_abbreviation(site.state)}",
        placename=site.city,
        position=f"{lat};{lng}",
    )


def optimize_meta_tags(
    page: PageDescriptor,
    site: SiteContext,
    coordinates: tuple[float, float] | None = None,
) -> MetaTags:
    """Derive the full meta tag block for a page."""
    title = optimize_title(page, site)
    description = optimize_description(page, site)
    canonical = f"{site.base_url}{page.url}"

    if page.type in OG_ARTICLE_TYPES:
        og_type = "article"
    elif page.type == "provider_profile":
        og_type = "profile"
    else:
        og_type = "website"

    return MetaTags(
        title=title,
        title_length=len(title),
        description=description,
        description_length=len(description),
        canonical=canonical,
        robots=determine_robots(page.type),
        open_graph=OpenGraphMeta(
            title=title,
            description=description,
            type=og_type,
            url=canonical,
            image=f"{site.base_url}/og-image.png",
            site_name=site.brand_name,
        ),
        twitter=TwitterMeta(
            title=title,
            description=description,
            image=f"{site.base_url}/twitter-card.png",
        ),
        geo=generate_geo_meta(site, coordinates),
    )
