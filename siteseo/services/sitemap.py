"""XML sitemap and robots.txt generation.

Lists every page once. Change frequency follows the page type;
priority follows the page's launch tier, with the homepage pinned to 1.0.
The last-modified date is the blueprint date so output is reproducible.
"""

from collections.abc import Sequence
from xml.etree import ElementTree

from siteseo.core.logging import get_logger
from siteseo.schemas.blueprint import PageDescriptor, SiteContext
from siteseo.schemas.seo_package import SitemapData, SitemapUrl

logger = get_logger(__name__)

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

SITEMAP_CHANGEFREQ: dict[str, str] = {
    "homepage": "weekly",
    "service_hub": "weekly",
    "comparison": "weekly",
    "provider_listing": "weekly",
    "provider_profile": "monthly",
    "legal": "yearly",
    "privacy": "yearly",
    "terms": "yearly",
}
DEFAULT_CHANGEFREQ = "monthly"

# Launch tier -> sitemap priority
SITEMAP_PRIORITIES: dict[int, float] = {1: 0.9, 2: 0.7, 3: 0.5}
DEFAULT_PRIORITY = 0.5
HOMEPAGE_PRIORITY = 1.0

DISALLOWED_PATHS = ("/api/", "/admin/")


def sitemap_priority(page: PageDescriptor) -> float:
    if page.type == "homepage":
        return HOMEPAGE_PRIORITY
    return SITEMAP_PRIORITIES.get(page.priority, DEFAULT_PRIORITY)


def render_sitemap_xml(urls: Sequence[SitemapUrl]) -> str:
    urlset = ElementTree.Element("urlset", xmlns=SITEMAP_NAMESPACE)
    for entry in urls:
        url = ElementTree.SubElement(urlset, "url")
        ElementTree.SubElement(url, "loc").text = entry.loc
        ElementTree.SubElement(url, "lastmod").text = entry.lastmod
        ElementTree.SubElement(url, "changefreq").text = entry.changefreq
        ElementTree.SubElement(url, "priority").text = f"{entry.priority:.1f}"
    ElementTree.indent(urlset)
    return f"{XML_DECLARATION}\n{ElementTree.tostring(urlset, encoding='unicode')}\n"


def generate_sitemap(pages: Sequence[PageDescriptor], site: SiteContext) -> SitemapData:
    """Sitemap entries and XML for every page, in blueprint order."""
    lastmod = site.generated_at.date().isoformat()
    urls = [
        SitemapUrl(
            loc=f"{site.base_url}{page.url}",
            lastmod=lastmod,
            changefreq=SITEMAP_CHANGEFREQ.get(page.type, DEFAULT_CHANGEFREQ),
            priority=sitemap_priority(page),
        )
        for page in pages
    ]
    logger.debug("Sitemap generated", extra={"url_count": len(urls)})
    return SitemapData(xml=render_sitemap_xml(urls), urls=urls)


def generate_robots_txt(site: SiteContext) -> str:
    lines = ["User-agent: *", "Allow: /"]
    lines.extend(f"Disallow: {path}" for path in DISALLOWED_PATHS)
    lines.extend(["", f"Sitemap: {site.base_url}/sitemap.xml"])
    return "\n".join(lines) + "\n"
