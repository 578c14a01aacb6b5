"""Static lookup tables for internal link graph construction.

Every table is keyed by page type name. They are kept as plain data so the
graph builder can be tested against them and hosts can inspect them; the
small accessor functions only add the defaults for unlisted types.
"""

# Minimum outbound links per page type; the configured density target
# raises this floor, never lowers it.
MIN_LINKS_BY_TYPE: dict[str, int] = {
    "homepage": 20,
    "service_hub": 15,
    "service_page": 12,
    "city_service_page": 10,
    "comparison": 12,
    "provider_listing": 10,
    "provider_profile": 8,
    "cost_guide": 10,
    "troubleshooting": 8,
    "buying_guide": 10,
    "diy_guide": 8,
    "guide": 10,
    "local_expertise": 8,
    "about": 6,
    "methodology": 6,
    "contact": 4,
    "legal": 2,
    "privacy": 2,
    "terms": 2,
}
DEFAULT_MIN_LINKS = 5

# Source type -> target types that a reader naturally expects to be linked
NATURAL_LINK_RELATIONSHIPS: dict[str, frozenset[str]] = {
    "homepage": frozenset({"service_hub", "comparison", "cost_guide", "about"}),
    "service_hub": frozenset(
        {"provider_listing", "comparison", "cost_guide", "provider_profile"}
    ),
    "service_page": frozenset({"cost_guide", "troubleshooting", "provider_listing"}),
    "city_service_page": frozenset({"provider_listing", "cost_guide", "comparison"}),
    "comparison": frozenset({"provider_profile", "cost_guide", "service_hub"}),
    "provider_listing": frozenset({"provider_profile", "comparison"}),
    "provider_profile": frozenset({"comparison", "service_hub", "provider_profile"}),
    "cost_guide": frozenset({"service_hub", "provider_listing", "troubleshooting"}),
    "troubleshooting": frozenset({"cost_guide", "diy_guide", "provider_listing"}),
    "buying_guide": frozenset({"comparison", "cost_guide", "provider_listing"}),
    "diy_guide": frozenset({"troubleshooting", "buying_guide", "cost_guide"}),
    "local_expertise": frozenset({"service_hub", "provider_listing", "about"}),
    "about": frozenset({"methodology", "contact", "service_hub"}),
    "methodology": frozenset({"about", "comparison"}),
}

# Order in which density-fill candidates are taken
DENSITY_PRIORITY_ORDER: tuple[str, ...] = (
    "homepage",
    "service_hub",
    "comparison",
    "cost_guide",
    "provider_listing",
    "provider_profile",
    "troubleshooting",
    "buying_guide",
    "about",
)
UNRANKED_PRIORITY = 999

# Orphan type -> page types preferred as the source of the repair link
PREFERRED_LINKERS: dict[str, tuple[str, ...]] = {
    "provider_profile": ("comparison", "provider_listing", "service_hub"),
    "cost_guide": ("service_hub", "service_page", "comparison"),
    "troubleshooting": ("service_hub", "diy_guide", "cost_guide"),
    "comparison": ("service_hub", "homepage"),
}
DEFAULT_PREFERRED_LINKERS: tuple[str, ...] = ("homepage", "service_hub")
FALLBACK_LINKER_TYPE = "homepage"

# Pages that never need an inbound link
ORPHAN_EXEMPT_TYPES: frozenset[str] = frozenset(
    {"homepage", "legal", "privacy", "terms", "contact"}
)

# Pages left out of the builder's coverage percentage
COVERAGE_EXCLUDED_TYPES: frozenset[str] = frozenset({"legal", "privacy", "terms"})

MAX_CONTEXTUAL_LINKS = 5


def get_min_links(page_type: str) -> int:
    """Minimum outbound link count for a page type."""
    return MIN_LINKS_BY_TYPE.get(page_type, DEFAULT_MIN_LINKS)


def is_natural_link(source_type: str, target_type: str) -> bool:
    """Whether (source_type, target_type) is a natural linking relationship."""
    return target_type in NATURAL_LINK_RELATIONSHIPS.get(source_type, frozenset())


def density_priority(page_type: str) -> int:
    """Rank of a page type when filling density; lower is taken first."""
    try:
        return DENSITY_PRIORITY_ORDER.index(page_type)
    except ValueError:
        return UNRANKED_PRIORITY


def preferred_linker_types(page_type: str) -> tuple[str, ...]:
    """Page types preferred as the source of a link repairing an orphan."""
    return PREFERRED_LINKERS.get(page_type, DEFAULT_PREFERRED_LINKERS)
