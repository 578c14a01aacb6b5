"""Rule-based SEO validation.

Per-page rules are independent pure functions, each taking the observed
fields and the rule thresholds and returning a list of Issues:
- Title length, keyword, location and overused patterns
- Description length and keyword
- H1 presence, keyword and length; presence of H2s
- Required schema types, and invalid schema records
- Internal link count against a per-type minimum
- Canonical URL presence

validate_package is a second, separate pass over the assembled pages. It
recomputes coverage, orphans and schema errors from the pages themselves and
never reads the per-page issues.

Scoring is deterministic (no LLM calls) and injectable; suggestions are
derived from issue counts, the score band and a few structural nudges.
"""

from collections.abc import Callable, Sequence

from siteseo.core.logging import get_logger
from siteseo.schemas.seo_package import (
    Issue,
    OptimizedPage,
    PackageValidation,
    PackageWarning,
    SchemaError,
    SchemaRecord,
)
from siteseo.schemas.validation_rules import (
    DEFAULT_VALIDATION_RULES,
    DescriptionRules,
    HeadingRules,
    SchemaRules,
    SeoValidationRules,
    TitleRules,
)
from siteseo.services.link_rules import ORPHAN_EXEMPT_TYPES
from siteseo.services.schema_markup import (
    ARTICLE_PAGE_TYPES,
    DEFAULT_BUSINESS_TYPE,
    LOCAL_BUSINESS_TYPES,
)
from siteseo.utils.numbers import percentage

logger = get_logger(__name__)

ScoreFn = Callable[[OptimizedPage], int]

# Score adjustments
SEVERITY_PENALTIES = {"error": 15, "warning": 5, "info": 2}
PRACTICE_BONUS = 5
BONUS_MIN_SCHEMAS = 2
BONUS_MIN_LINKS = 5

# Suggestion thresholds
NUDGE_MIN_LINKS = 5
NUDGE_MIN_SCHEMAS = 2
NUDGE_MIN_TITLE_LENGTH = 40
NUDGE_MIN_DESCRIPTION_LENGTH = 120


# =============================================================================
# TITLE AND DESCRIPTION
# =============================================================================


def validate_title(
    title: str,
    title_length: int,
    rules: TitleRules,
    keyword: str | None = None,
    location: str | None = None,
) -> list[Issue]:
    issues: list[Issue] = []

    if title_length < rules.min_length:
        issues.append(
            Issue(
                type="title_too_short",
                severity="warning",
                message=(
                    f"Title is too short ({title_length} chars). "
                    f"Recommended: {rules.min_length}-{rules.max_length} characters."
                ),
                field="title",
                value=title_length,
                suggestion="Add more descriptive keywords or location to the title.",
            )
        )
    if title_length > rules.max_length:
        issues.append(
            Issue(
                type="title_too_long",
                severity="error",
                message=(
                    f"Title is too long ({title_length} chars). "
                    f"Maximum: {rules.max_length} characters."
                ),
                field="title",
                value=title_length,
                suggestion="Shorten the title while keeping important keywords.",
            )
        )

    lowered = title.lower()
    if keyword and "keyword" in rules.must_include and keyword.lower() not in lowered:
        issues.append(
            Issue(
                type="title_missing_keyword",
                severity="warning",
                message=f'Title should include the primary keyword "{keyword}".',
                field="title",
                value=title,
                suggestion=f'Add "{keyword}" to the title.',
            )
        )
    if (
        location
        and "location" in rules.must_include
        and location.lower() not in lowered
    ):
        issues.append(
            Issue(
                type="title_missing_location",
                severity="info",
                message=(
                    f'Consider including location "{location}" in the title '
                    "for local SEO."
                ),
                field="title",
                value=title,
            )
        )

    for pattern in rules.must_not_include:
        if pattern in title:
            issues.append(
                Issue(
                    type="title_has_forbidden_pattern",
                    severity="info",
                    message=f'Title contains overused pattern "{pattern}".',
                    field="title",
                    value=title,
                    suggestion=f'Consider removing or replacing "{pattern}".',
                )
            )
    return issues


def validate_description(
    description: str,
    description_length: int,
    rules: DescriptionRules,
    keyword: str | None = None,
) -> list[Issue]:
    issues: list[Issue] = []

    if description_length < rules.min_length:
        issues.append(
            Issue(
                type="description_too_short",
                severity="warning",
                message=(
                    f"Description is too short ({description_length} chars). "
                    f"Recommended: {rules.min_length}-{rules.max_length} characters."
                ),
                field="description",
                value=description_length,
                suggestion="Add more compelling content about the page.",
            )
        )
    if description_length > rules.max_length:
        issues.append(
            Issue(
                type="description_too_long",
                severity="warning",
                message=(
                    f"Description is too long ({description_length} chars). "
                    "It may be truncated in search results."
                ),
                field="description",
                value=description_length,
                suggestion=f"Shorten to {rules.max_length} characters or less.",
            )
        )
    if (
        keyword
        and "keyword" in rules.must_include
        and keyword.lower() not in description.lower()
    ):
        issues.append(
            Issue(
                type="description_missing_keyword",
                severity="info",
                message=f'Description should include the primary keyword "{keyword}".',
                field="description",
                value=description,
            )
        )
    return issues


# =============================================================================
# HEADINGS
# =============================================================================


def validate_headings(
    h1: str,
    h2s: Sequence[str],
    rules: HeadingRules,
    keyword: str | None = None,
) -> list[Issue]:
    issues: list[Issue] = []

    if rules.required and not h1:
        issues.append(
            Issue(
                type="missing_h1",
                severity="error",
                message="Page is missing an H1 heading.",
                field="h1",
                suggestion="Add a unique, descriptive H1 heading.",
            )
        )
    if (
        h1
        and keyword
        and "keyword" in rules.must_include
        and keyword.lower() not in h1.lower()
    ):
        issues.append(
            Issue(
                type="h1_missing_keyword",
                severity="info",
                message=f'H1 should include the primary keyword "{keyword}".',
                field="h1",
                value=h1,
            )
        )
    if h1 and len(h1) > rules.max_length:
        issues.append(
            Issue(
                type="h1_too_long",
                severity="info",
                message=f"H1 is quite long ({len(h1)} chars). Consider shortening.",
                field="h1",
                value=len(h1),
            )
        )
    if not h2s:
        issues.append(
            Issue(
                type="no_h2_headings",
                severity="info",
                message="Page has no H2 headings. Consider adding section headings.",
                field="h2s",
            )
        )
    return issues


# =============================================================================
# SCHEMA, LINKS, CANONICAL
# =============================================================================


def validate_schema_markup(
    schemas: Sequence[SchemaRecord],
    page_type: str,
    rules: SchemaRules,
) -> list[Issue]:
    """Required schema types per page type, plus one issue per schema error."""
    issues: list[Issue] = []
    present = {record.type for record in schemas}
    # A business subtype satisfies a LocalBusiness requirement
    if present & LOCAL_BUSINESS_TYPES:
        present.add(DEFAULT_BUSINESS_TYPE)

    for required in rules.required:
        if required not in present:
            issues.append(
                Issue(
                    type="missing_required_schema",
                    severity="error",
                    message=f"Missing required {required} schema.",
                    field="schema",
                    value=required,
                )
            )

    if page_type == "provider_profile":
        for required in rules.provider_required:
            if required not in present:
                issues.append(
                    Issue(
                        type="missing_provider_schema",
                        severity="warning",
                        message=f"Provider profile should have {required} schema.",
                        field="schema",
                        value=required,
                    )
                )

    if page_type in ARTICLE_PAGE_TYPES:
        for required in rules.article_required:
            if required not in present:
                issues.append(
                    Issue(
                        type="missing_article_schema",
                        severity="info",
                        message=f"Article page should consider {required} schema.",
                        field="schema",
                        value=required,
                    )
                )

    for record in schemas:
        if record.valid:
            continue
        for error in record.errors or []:
            issues.append(
                Issue(
                    type="invalid_schema",
                    severity="error",
                    message=f"{record.type} schema is invalid: {error}",
                    field="schema",
                    value=record.type,
                    suggestion="Fill in the missing schema properties.",
                )
            )
    return issues


def validate_internal_links(
    link_count: int,
    page_type: str,
    rules: SeoValidationRules,
) -> list[Issue]:
    min_links = rules.min_links_for(page_type)
    if link_count >= min_links:
        return []
    return [
        Issue(
            type="insufficient_internal_links",
            severity="warning",
            message=(
                f"Page has only {link_count} internal links. "
                f"Recommended minimum: {min_links}."
            ),
            field="internal_links",
            value=link_count,
            suggestion="Add more relevant internal links to improve crawlability.",
        )
    ]


def validate_canonical(canonical: str) -> list[Issue]:
    if canonical:
        return []
    return [
        Issue(
            type="missing_canonical",
            severity="error",
            message="Page is missing a canonical URL.",
            field="canonical",
        )
    ]


def validate_page(
    page: OptimizedPage,
    rules: SeoValidationRules = DEFAULT_VALIDATION_RULES,
    keyword: str | None = None,
    location: str | None = None,
) -> list[Issue]:
    """All rule findings for one page, in rule order. Duplicates are kept."""
    return [
        *validate_title(
            page.meta.title, page.meta.title_length, rules.title, keyword, location
        ),
        *validate_description(
            page.meta.description,
            page.meta.description_length,
            rules.description,
            keyword,
        ),
        *validate_headings(page.headings.h1, page.headings.h2s, rules.h1, keyword),
        *validate_schema_markup(page.schemas, page.type, rules.schema_rules),
        *validate_internal_links(len(page.internal_links), page.type, rules),
        *validate_canonical(page.meta.canonical),
    ]


# =============================================================================
# SCORING AND SUGGESTIONS
# =============================================================================


def calculate_seo_score(page: OptimizedPage) -> int:
    """Score 0-100: issue penalties by severity plus good-practice bonuses."""
    score = 100
    for issue in page.issues:
        score -= SEVERITY_PENALTIES.get(issue.severity, 0)

    if 30 <= page.meta.title_length <= 60:
        score += PRACTICE_BONUS
    if 120 <= page.meta.description_length <= 160:
        score += PRACTICE_BONUS
    if len(page.schemas) >= BONUS_MIN_SCHEMAS:
        score += PRACTICE_BONUS
    if len(page.internal_links) >= BONUS_MIN_LINKS:
        score += PRACTICE_BONUS

    return max(0, min(100, score))


def generate_suggestions(page: OptimizedPage) -> list[str]:
    suggestions: list[str] = []

    error_count = sum(1 for issue in page.issues if issue.severity == "error")
    warning_count = sum(1 for issue in page.issues if issue.severity == "warning")
    if error_count:
        suggestions.append(f"Fix {error_count} critical SEO issues first.")
    if warning_count:
        suggestions.append(f"Address {warning_count} SEO warnings to improve ranking.")

    if page.seo_score < 50:
        suggestions.append("This page needs significant SEO improvements.")
    elif page.seo_score < 70:
        suggestions.append("Good foundation, but room for optimization.")
    elif page.seo_score < 90:
        suggestions.append("Well-optimized page. Minor tweaks can help.")

    if len(page.internal_links) < NUDGE_MIN_LINKS:
        suggestions.append("Add more internal links to related content.")
    if len(page.schemas) < NUDGE_MIN_SCHEMAS:
        suggestions.append("Consider adding more schema types (FAQ, Review, etc.).")
    if page.meta.title_length < NUDGE_MIN_TITLE_LENGTH:
        suggestions.append("Title could be more descriptive.")
    if page.meta.description_length < NUDGE_MIN_DESCRIPTION_LENGTH:
        suggestions.append("Meta description could be more detailed.")

    return suggestions


def assess_page(
    page: OptimizedPage,
    rules: SeoValidationRules = DEFAULT_VALIDATION_RULES,
    keyword: str | None = None,
    location: str | None = None,
    score_fn: ScoreFn = calculate_seo_score,
) -> OptimizedPage:
    """Copy of ``page`` with issues, score and suggestions recomputed."""
    issues = validate_page(page, rules, keyword, location)
    scored = page.model_copy(update={"issues": issues})
    scored = scored.model_copy(update={"seo_score": score_fn(scored)})
    return scored.model_copy(update={"suggestions": generate_suggestions(scored)})


# =============================================================================
# PACKAGE VALIDATION
# =============================================================================


def validate_package(pages: Sequence[OptimizedPage]) -> PackageValidation:
    """Re-derive package-level invariants directly from the assembled pages."""
    without_title: list[str] = []
    without_description: list[str] = []
    without_canonical: list[str] = []
    without_schema: list[str] = []
    schema_errors: list[SchemaError] = []
    targeted: set[str] = set()

    for page in pages:
        if not page.meta.title:
            without_title.append(page.page_id)
        if not page.meta.description:
            without_description.append(page.page_id)
        if not page.meta.canonical:
            without_canonical.append(page.page_id)
        if not page.schemas:
            without_schema.append(page.page_id)

        for record in page.schemas:
            if record.valid:
                continue
            for error in record.errors or []:
                schema_errors.append(
                    SchemaError(
                        schema_type=record.type,
                        property=page.page_id,
                        message=error,
                    )
                )

        for link in page.internal_links:
            targeted.add(link.target_page_id)

    page_ids = [page.page_id for page in pages]
    covered = sum(1 for page_id in page_ids if page_id in targeted)
    coverage = percentage(covered, len(page_ids))

    orphan_pages = [
        page.page_id
        for page in pages
        if page.page_id not in targeted and page.type not in ORPHAN_EXEMPT_TYPES
    ]

    warnings: list[PackageWarning] = []
    for warning_type, template, affected in (
        ("pages_without_title", "{} pages are missing titles.", without_title),
        (
            "pages_without_description",
            "{} pages are missing meta descriptions.",
            without_description,
        ),
        (
            "pages_without_canonical",
            "{} pages are missing canonical URLs.",
            without_canonical,
        ),
        ("pages_without_schema", "{} pages have no schema markup.", without_schema),
        ("orphan_pages", "{} pages have no incoming internal links.", orphan_pages),
    ):
        if affected:
            warnings.append(
                PackageWarning(
                    type=warning_type,
                    message=template.format(len(affected)),
                    affected_pages=list(affected),
                )
            )

    validation = PackageValidation(
        all_pages_have_title=not without_title,
        all_pages_have_description=not without_description,
        all_pages_have_canonical=not without_canonical,
        all_pages_have_schema=not without_schema,
        internal_link_coverage=coverage,
        orphan_pages=orphan_pages,
        schema_errors=schema_errors,
        warnings=warnings,
    )
    logger.info(
        "Package validated",
        extra={
            "page_count": len(pages),
            "internal_link_coverage": coverage,
            "orphan_count": len(orphan_pages),
            "schema_error_count": len(schema_errors),
        },
    )
    return validation
