"""Services layer - Link graph, schema markup, validation and orchestration.

Services are pure: they perform no I/O and share no mutable state, so a run
is fully determined by its input.
"""

from siteseo.services.link_graph import (
    DuplicatePageIdError,
    LinkGraph,
    LinkGraphError,
    build_link_graph,
    calculate_link_coverage,
    find_orphan_pages,
    generate_anchor_text,
)
from siteseo.services.meta_tags import optimize_meta_tags
from siteseo.services.page_structure import extract_headings, generate_breadcrumbs
from siteseo.services.schema_markup import (
    generate_organization_schema,
    generate_schema,
    generate_website_schema,
    validate_schema,
)
from siteseo.services.seo_optimization import (
    SeoOptimizationError,
    SeoOptimizationService,
    SeoOptimizationValidationError,
    get_seo_optimization_service,
    run_seo_optimization,
)
from siteseo.services.seo_validator import (
    calculate_seo_score,
    generate_suggestions,
    validate_package,
    validate_page,
)
from siteseo.services.sitemap import generate_robots_txt, generate_sitemap

__all__ = [
    # Link graph
    "DuplicatePageIdError",
    "LinkGraph",
    "LinkGraphError",
    "build_link_graph",
    "calculate_link_coverage",
    "find_orphan_pages",
    "generate_anchor_text",
    # Page derivations
    "extract_headings",
    "generate_breadcrumbs",
    "optimize_meta_tags",
    # Schema markup
    "generate_organization_schema",
    "generate_schema",
    "generate_website_schema",
    "validate_schema",
    # Validation
    "calculate_seo_score",
    "generate_suggestions",
    "validate_package",
    "validate_page",
    # Sitemap
    "generate_robots_txt",
    "generate_sitemap",
    # Orchestration
    "SeoOptimizationError",
    "SeoOptimizationService",
    "SeoOptimizationValidationError",
    "get_seo_optimization_service",
    "run_seo_optimization",
]
