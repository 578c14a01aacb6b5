"""Internal link graph builder.

Builds the outbound link set of every page in one pass over the blueprint:
1. Required links from the page descriptor (anchor pattern or fallback phrase)
2. Contextual links by keyword containment or natural type relationship
3. Deduplication by target id, first occurrence wins
4. Density enforcement up to max(per-type minimum, density target)

Then the orphan repair pass gives every non-exempt page at least one inbound
link from its best linker. Repair runs once by default; hosts may allow more
passes, which stop as soon as the orphan set is empty or stops shrinking.

The result is an immutable LinkGraph. Nothing here performs I/O; the only
failure is malformed input (duplicate page ids).
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from siteseo.core.logging import get_logger, pipeline_logger
from siteseo.schemas.blueprint import PageDescriptor, SiteContext
from siteseo.schemas.seo_package import InternalLink, LinkContext
from siteseo.services.link_rules import (
    COVERAGE_EXCLUDED_TYPES,
    FALLBACK_LINKER_TYPE,
    MAX_CONTEXTUAL_LINKS,
    ORPHAN_EXEMPT_TYPES,
    density_priority,
    get_min_links,
    is_natural_link,
    preferred_linker_types,
)
from siteseo.utils.numbers import percentage

logger = get_logger(__name__)

DEFAULT_DENSITY_TARGET = 10

_CITY_PLACEHOLDER = re.compile(r"\[city\]", re.IGNORECASE)
_CATEGORY_PLACEHOLDER = re.compile(r"\[category\]", re.IGNORECASE)
_PROVIDER_PLACEHOLDER = re.compile(r"\[provider\]", re.IGNORECASE)
_LEFTOVER_PLACEHOLDER = re.compile(r"\[[^\]]*\]")
_WHITESPACE = re.compile(r"\s+")


class LinkGraphError(Exception):
    """Base exception for link graph construction errors."""

    pass


class DuplicatePageIdError(LinkGraphError):
    """Raised when two page descriptors share an id."""

    def __init__(self, page_id: str) -> None:
        self.page_id = page_id
        super().__init__(f"Duplicate page id: {page_id}")


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LinkGraph:
    """Outbound links per page id, in blueprint order. Read-only once built."""

    links: Mapping[str, tuple[InternalLink, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_lists(cls, links: Mapping[str, Iterable[InternalLink]]) -> "LinkGraph":
        return cls(
            links=MappingProxyType(
                {page_id: tuple(page_links) for page_id, page_links in links.items()}
            )
        )

    @property
    def page_ids(self) -> tuple[str, ...]:
        return tuple(self.links)

    @property
    def total_links(self) -> int:
        return sum(len(page_links) for page_links in self.links.values())

    def links_for(self, page_id: str) -> tuple[InternalLink, ...]:
        """Outbound links of a page; empty for unknown ids."""
        return self.links.get(page_id, ())

    def targets(self) -> frozenset[str]:
        """Ids of every page that is the target of at least one link."""
        return frozenset(
            link.target_page_id
            for page_links in self.links.values()
            for link in page_links
        )

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            page_id: [link.model_dump() for link in page_links]
            for page_id, page_links in self.links.items()
        }


# ---------------------------------------------------------------------------
# Edge builders
# ---------------------------------------------------------------------------


def _make_link(
    target: PageDescriptor, anchor_text: str, context: LinkContext = "body"
) -> InternalLink:
    return InternalLink(
        target_page_id=target.id,
        target_url=target.url,
        anchor_text=anchor_text,
        context=context,
    )


def _fallback_anchor(target: PageDescriptor, site: SiteContext) -> str:
    keyword = target.primary_keyword
    category = site.category
    fallbacks = {
        "homepage": f"{category} services",
        "service_hub": f"{category} in {site.city}",
        "comparison": f"compare {category} companies",
        "provider_profile": keyword or "view profile",
        "cost_guide": f"{category} cost guide",
        "troubleshooting": f"{category} troubleshooting",
    }
    return fallbacks.get(target.type, keyword or "learn more")


def generate_anchor_text(
    pattern: str | None, target: PageDescriptor, site: SiteContext
) -> str:
    """Anchor text for a link to ``target``.

    ``[City]``, ``[Category]`` and ``[Provider]`` (the target's primary
    keyword) are substituted case-insensitively; any other bracketed token
    is removed. Without a usable pattern, a phrase chosen by target type is
    returned.
    """
    if pattern:
        text = _CITY_PLACEHOLDER.sub(lambda _: site.city, pattern)
        text = _CATEGORY_PLACEHOLDER.sub(lambda _: site.category, text)
        text = _PROVIDER_PLACEHOLDER.sub(lambda _: target.primary_keyword, text)
        text = _LEFTOVER_PLACEHOLDER.sub("", text)
        text = _WHITESPACE.sub(" ", text).strip()
        if text:
            return text
    return _fallback_anchor(target, site)


def build_required_links(
    page: PageDescriptor,
    page_by_id: Mapping[str, PageDescriptor],
    site: SiteContext,
) -> list[InternalLink]:
    """Materialize the page's required links.

    Links to unknown page ids, or back to the page itself, are dropped.
    """
    links: list[InternalLink] = []
    for required in page.required_links:
        target = page_by_id.get(required.to_page_id)
        if target is None or target.id == page.id:
            logger.debug(
                "Dropping required link",
                extra={
                    "page_id": page.id,
                    "to_page_id": required.to_page_id,
                    "reason": "unknown target" if target is None else "self link",
                },
            )
            continue
        links.append(
            _make_link(target, generate_anchor_text(required.anchor_pattern, target, site))
        )
    return links


def find_contextual_links(
    source: PageDescriptor,
    pages: Sequence[PageDescriptor],
    site: SiteContext,
    limit: int = MAX_CONTEXTUAL_LINKS,
) -> list[InternalLink]:
    """Links justified by keyword containment or a natural type relationship.

    A target without a primary keyword is contained in any source keyword.
    """
    source_keyword = source.primary_keyword.lower()
    links: list[InternalLink] = []
    for target in pages:
        if len(links) >= limit:
            break
        if target.id == source.id:
            continue
        target_keyword = target.primary_keyword.lower()
        keyword_match = target_keyword in source_keyword
        if keyword_match or is_natural_link(source.type, target.type):
            links.append(_make_link(target, generate_anchor_text(None, target, site)))
    return links


def suggest_additional_links(
    source: PageDescriptor,
    pages: Sequence[PageDescriptor],
    existing: Sequence[InternalLink],
    needed: int,
    site: SiteContext,
) -> list[InternalLink]:
    """Up to ``needed`` sidebar links to pages not yet linked from ``source``.

    Candidates are taken in density priority order; pages of equal rank keep
    blueprint order.
    """
    if needed <= 0:
        return []
    linked = {link.target_page_id for link in existing}
    candidates = [
        page for page in pages if page.id != source.id and page.id not in linked
    ]
    candidates.sort(key=lambda page: density_priority(page.type))
    return [
        _make_link(target, generate_anchor_text(None, target, site), "sidebar")
        for target in candidates[:needed]
    ]


def dedupe_links(links: Iterable[InternalLink]) -> list[InternalLink]:
    """Drop links whose target was already seen; first occurrence wins."""
    seen: set[str] = set()
    unique: list[InternalLink] = []
    for link in links:
        if link.target_page_id in seen:
            continue
        seen.add(link.target_page_id)
        unique.append(link)
    return unique


# ---------------------------------------------------------------------------
# Orphans and coverage
# ---------------------------------------------------------------------------


def _targeted_ids(links: Mapping[str, Iterable[InternalLink]]) -> set[str]:
    return {
        link.target_page_id for page_links in links.values() for link in page_links
    }


def _orphans(
    pages: Sequence[PageDescriptor], targeted: set[str] | frozenset[str]
) -> list[PageDescriptor]:
    return [
        page
        for page in pages
        if page.type not in ORPHAN_EXEMPT_TYPES and page.id not in targeted
    ]


def find_orphan_pages(pages: Sequence[PageDescriptor], graph: LinkGraph) -> list[str]:
    """Ids of non-exempt pages that no link targets, in blueprint order."""
    return [page.id for page in _orphans(pages, graph.targets())]


def find_best_linker(
    orphan: PageDescriptor,
    pages: Sequence[PageDescriptor],
    links: Mapping[str, Sequence[InternalLink]],
) -> PageDescriptor | None:
    """Page that should link to ``orphan``.

    Among pages of a preferred linker type, the one with the fewest outbound
    links wins, blueprint order breaking ties. Falls back to the homepage.
    """
    preferred = set(preferred_linker_types(orphan.type))
    candidates = [
        page for page in pages if page.type in preferred and page.id != orphan.id
    ]
    if candidates:
        return min(candidates, key=lambda page: len(links.get(page.id, ())))
    for page in pages:
        if page.type == FALLBACK_LINKER_TYPE and page.id != orphan.id:
            return page
    return None


def fix_orphan_pages(
    orphans: Sequence[PageDescriptor],
    pages: Sequence[PageDescriptor],
    links: dict[str, list[InternalLink]],
    site: SiteContext,
) -> int:
    """Append one body link to each orphan from its best linker.

    ``links`` is updated in place so later orphans see current counts.
    Returns the number of orphans that received a link.
    """
    repaired = 0
    for orphan in orphans:
        linker = find_best_linker(orphan, pages, links)
        if linker is None:
            logger.debug(
                "No linker available for orphan page",
                extra={"page_id": orphan.id, "page_type": orphan.type},
            )
            continue
        links[linker.id].append(
            _make_link(orphan, generate_anchor_text(None, orphan, site))
        )
        repaired += 1
    return repaired


def calculate_link_coverage(pages: Sequence[PageDescriptor], graph: LinkGraph) -> int:
    """Percentage of linkable pages that are targeted by at least one link.

    Legal pages are left out of both sides of the ratio.
    """
    linkable = [page for page in pages if page.type not in COVERAGE_EXCLUDED_TYPES]
    if not linkable:
        return 0
    targeted = graph.targets()
    covered = sum(1 for page in linkable if page.id in targeted)
    return percentage(covered, len(linkable))


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


def _index_pages(pages: Sequence[PageDescriptor]) -> dict[str, PageDescriptor]:
    page_by_id: dict[str, PageDescriptor] = {}
    for page in pages:
        if page.id in page_by_id:
            raise DuplicatePageIdError(page.id)
        page_by_id[page.id] = page
    return page_by_id


def build_link_graph(
    pages: Sequence[PageDescriptor],
    site: SiteContext,
    density_target: int = DEFAULT_DENSITY_TARGET,
    max_repair_passes: int = 1,
) -> LinkGraph:
    """Build the internal link graph for a page set.

    Args:
        pages: Page descriptors in blueprint order
        site: Site context (city and category feed anchor text)
        density_target: Site-wide outbound link floor, raised per page type
        max_repair_passes: Orphan repair passes; 1 is a single greedy pass

    Returns:
        Immutable LinkGraph keyed by page id in blueprint order

    Raises:
        DuplicatePageIdError: If two pages share an id
    """
    page_by_id = _index_pages(pages)

    links: dict[str, list[InternalLink]] = {}
    for page in pages:
        page_links = dedupe_links(
            build_required_links(page, page_by_id, site)
            + find_contextual_links(page, pages, site)
        )
        min_links = max(get_min_links(page.type), density_target)
        page_links.extend(
            suggest_additional_links(
                page, pages, page_links, min_links - len(page_links), site
            )
        )
        links[page.id] = page_links

    previous_count: int | None = None
    for pass_number in range(1, max_repair_passes + 1):
        orphans = _orphans(pages, _targeted_ids(links))
        if not orphans:
            break
        if previous_count is not None and len(orphans) >= previous_count:
            break
        repaired = fix_orphan_pages(orphans, pages, links, site)
        pipeline_logger.orphans_repaired(pass_number, len(orphans), repaired)
        previous_count = len(orphans)

    graph = LinkGraph.from_lists(links)
    logger.info(
        "Link graph built",
        extra={
            "page_count": len(pages),
            "total_links": graph.total_links,
            "density_target": density_target,
        },
    )
    return graph
