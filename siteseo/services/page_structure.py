"""Heading outline and breadcrumb derivation for a page."""

from siteseo.schemas.blueprint import PageDescriptor, SiteContext
from siteseo.schemas.enrichment import EditorialPage
from siteseo.schemas.seo_package import Breadcrumb, HeadingNode, HeadingStructure
from siteseo.services.meta_tags import fill_template

# Page type -> intermediate breadcrumb between Home and the page
SECTION_CRUMBS: dict[str, Breadcrumb] = {
    "provider_profile": Breadcrumb(name="Providers", url="/providers"),
    "cost_guide": Breadcrumb(name="Guides", url="/guides"),
    "troubleshooting": Breadcrumb(name="Guides", url="/guides"),
    "comparison": Breadcrumb(name="Compare", url="/compare"),
    "service_hub": Breadcrumb(name="Services", url="/services"),
}


def extract_headings(
    page: PageDescriptor,
    site: SiteContext,
    editorial: EditorialPage | None = None,
) -> HeadingStructure:
    """Heading outline from editorial content, or a single H1 from SEO hints.

    Editorial section headings become H2s and their subsection headings H3s.
    Without editorial content the outline is only valid when the page has a
    title template to build the H1 from.
    """
    if editorial is not None:
        h2s: list[str] = []
        h3s: list[str] = []
        children: list[HeadingNode] = []
        for section in editorial.sections:
            h2s.append(section.heading)
            sub_headings = [sub.heading for sub in section.subsections]
            h3s.extend(sub_headings)
            children.append(
                HeadingNode(
                    level=2,
                    text=section.heading,
                    children=[HeadingNode(level=3, text=h) for h in sub_headings],
                )
            )
        return HeadingStructure(
            h1=editorial.headline,
            h2s=h2s,
            h3s=h3s,
            hierarchy=[HeadingNode(level=1, text=editorial.headline, children=children)],
            valid=True,
        )

    template = page.seo.title_template if page.seo else ""
    h1 = (fill_template(template, page, site) if template else "") or (
        page.primary_keyword or "Page"
    )
    return HeadingStructure(h1=h1, valid=bool(template))


def generate_breadcrumbs(page: PageDescriptor) -> list[Breadcrumb]:
    """Home, a section crumb for some page types, then the page itself."""
    breadcrumbs = [Breadcrumb(name="Home", url="/")]
    section = SECTION_CRUMBS.get(page.type)
    if section is not None:
        breadcrumbs.append(section)
    breadcrumbs.append(Breadcrumb(name=page.primary_keyword or "Page", url=page.url))
    return breadcrumbs
