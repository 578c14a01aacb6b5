"""SEO optimization pipeline orchestrator.

Runs the fixed phase sequence over a blueprint and assembles the optimized
package:
1. preparing: input validation (fatal errors abort before any event)
2. optimizing-links: the whole link graph, built once
3. optimizing-meta: per page meta, headings, breadcrumbs, schema, link
   slice, validation, score and suggestions
4. generating-schema: optional re-validation of every schema record
5. generating-sitemap: sitemap, robots.txt and site-wide schema
6. validating: package-level cross-check and statistics
7. complete

Each phase finishes before the next begins. Progress is reported through a
callback receiving one immutable OptimizationProgress per phase transition
and per page. The per-page phase may run on a bounded thread pool; results
and progress events are still delivered in page order.

ERROR LOGGING REQUIREMENTS:
- Log phase transitions at INFO level
- Log rejected input with field names and rejected values
- Log invalid schema records with schema type and page id
- Add timing logs for phases >1 second
"""

import time
from collections.abc import Callable, Iterable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from siteseo.core.logging import get_logger, pipeline_logger
from siteseo.schemas.blueprint import PageDescriptor, Provider, SiteContext
from siteseo.schemas.enrichment import (
    ComparisonPage,
    EditorialPage,
    FAQItem,
    SeoOptimizationInput,
)
from siteseo.schemas.optimization import OptimizationConfig
from siteseo.schemas.seo_package import (
    OptimizationPhase,
    OptimizationProgress,
    OptimizedPackage,
    OptimizedPage,
    PackageStats,
    SiteWideSeo,
    SourceData,
)
from siteseo.services.link_graph import LinkGraph, build_link_graph
from siteseo.services.meta_tags import optimize_meta_tags
from siteseo.services.page_structure import extract_headings, generate_breadcrumbs
from siteseo.services.schema_markup import (
    generate_organization_schema,
    generate_schema,
    generate_website_schema,
    validate_schema,
    validate_schemas,
)
from siteseo.services.seo_validator import (
    ScoreFn,
    assess_page,
    calculate_seo_score,
    validate_package,
)
from siteseo.services.sitemap import generate_robots_txt, generate_sitemap
from siteseo.utils.numbers import round_half_up

logger = get_logger(__name__)

ProgressCallback = Callable[[OptimizationProgress], None]


# =============================================================================
# EXCEPTIONS
# =============================================================================


class SeoOptimizationError(Exception):
    """Base exception for SEO optimization errors."""

    def __init__(self, message: str, page_id: str | None = None) -> None:
        super().__init__(message)
        self.page_id = page_id


class SeoOptimizationValidationError(SeoOptimizationError):
    """Raised when the run input is unusable; no phase has run."""

    def __init__(
        self,
        field_name: str,
        value: Any,
        message: str,
        page_id: str | None = None,
    ) -> None:
        super().__init__(f"Validation error for {field_name}: {message}", page_id)
        self.field_name = field_name
        self.value = value


# =============================================================================
# RUN STATE
# =============================================================================


@dataclass(frozen=True)
class PageJob:
    """Everything the per-page phase reads for one page."""

    page: PageDescriptor
    links: LinkGraph
    provider: Provider | None = None
    providers: tuple[Provider, ...] = ()
    faqs: tuple[FAQItem, ...] = ()
    editorial: EditorialPage | None = None
    comparison: ComparisonPage | None = None


@dataclass
class ProgressReporter:
    """Builds progress events and hands them to the callback, if any."""

    callback: ProgressCallback | None
    total_pages: int

    def __call__(
        self,
        phase: OptimizationPhase,
        step: str,
        completed_pages: int,
        current_page: str | None = None,
    ) -> None:
        if self.callback is None:
            return
        self.callback(
            OptimizationProgress(
                phase=phase,
                current_page=current_page,
                completed_pages=completed_pages,
                total_pages=self.total_pages,
                current_step=step,
            )
        )


@contextmanager
def timed_phase(phase: OptimizationPhase, total_pages: int) -> Iterator[None]:
    pipeline_logger.phase_start(phase, total_pages)
    start_time = time.monotonic()
    yield
    pipeline_logger.phase_complete(phase, (time.monotonic() - start_time) * 1000)


# =============================================================================
# SERVICE
# =============================================================================


class SeoOptimizationService:
    """Turns a blueprint plus enrichments into an optimized SEO package.

    Usage:
        service = SeoOptimizationService()
        package = service.optimize(
            SeoOptimizationInput(blueprint=blueprint),
            config=OptimizationConfig(link_density_target=8),
            on_progress=events.append,
        )
    """

    def __init__(self) -> None:
        logger.debug("SeoOptimizationService initialized")

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def _validate_input(self, input_data: SeoOptimizationInput) -> None:
        pages = input_data.blueprint.pages
        if not pages:
            pipeline_logger.input_rejected(
                "blueprint.pages", 0, "Blueprint has no pages"
            )
            raise SeoOptimizationValidationError(
                "blueprint.pages", 0, "Blueprint has no pages"
            )

        seen: set[str] = set()
        for page in pages:
            if page.id in seen:
                pipeline_logger.input_rejected(
                    "blueprint.pages", page.id, "Duplicate page id"
                )
                raise SeoOptimizationValidationError(
                    "blueprint.pages",
                    page.id,
                    f"Duplicate page id: {page.id}",
                    page_id=page.id,
                )
            seen.add(page.id)

    def _build_jobs(
        self, input_data: SeoOptimizationInput, links: LinkGraph
    ) -> list[PageJob]:
        provider_map = input_data.provider_map()
        jobs: list[PageJob] = []
        for page in input_data.blueprint.pages:
            editorial = input_data.editorial_content.get(page.id)
            comparison = input_data.comparison_data.get(page.id)

            provider = None
            if page.type == "provider_profile" and page.data.providers:
                provider = provider_map.get(page.data.providers[0])

            providers: tuple[Provider, ...] = ()
            if page.type == "comparison":
                if page.data.providers:
                    providers = tuple(
                        provider_map[pid]
                        for pid in page.data.providers
                        if pid in provider_map
                    )
                else:
                    providers = tuple(provider_map.values())

            faqs: tuple[FAQItem, ...] = ()
            if editorial is not None and editorial.faq:
                faqs = tuple(editorial.faq)
            elif comparison is not None and comparison.faq:
                faqs = tuple(comparison.faq)

            jobs.append(
                PageJob(
                    page=page,
                    links=links,
                    provider=provider,
                    providers=providers,
                    faqs=faqs,
                    editorial=editorial,
                    comparison=comparison,
                )
            )
        return jobs

    # -------------------------------------------------------------------------
    # Per-page phase
    # -------------------------------------------------------------------------

    def _page_content(self, job: PageJob) -> Any:
        if job.editorial is not None and job.editorial.body is not None:
            return job.editorial.body
        if job.comparison is not None and job.comparison.content is not None:
            return job.comparison.content
        return job.page.content

    def optimize_page(
        self,
        job: PageJob,
        site: SiteContext,
        config: OptimizationConfig,
        score_fn: ScoreFn = calculate_seo_score,
    ) -> OptimizedPage:
        """Assemble, validate and score one page."""
        page = job.page
        breadcrumbs = generate_breadcrumbs(page)
        schemas = validate_schemas(
            generate_schema(
                page,
                site,
                provider=job.provider,
                faqs=job.faqs,
                providers=job.providers,
                breadcrumbs=breadcrumbs,
            ),
            page_id=page.id,
        )
        optimized = OptimizedPage(
            page_id=page.id,
            url=page.url,
            type=page.type,
            meta=optimize_meta_tags(page, site),
            schemas=schemas,
            headings=extract_headings(page, site, job.editorial),
            internal_links=list(job.links.links_for(page.id)),
            breadcrumbs=breadcrumbs,
            content=self._page_content(job),
        )
        return assess_page(
            optimized,
            rules=config.rules,
            keyword=page.primary_keyword or site.category,
            location=site.city,
            score_fn=score_fn,
        )

    def _collect_pages(
        self,
        jobs: Sequence[PageJob],
        results: Iterable[OptimizedPage],
        report: ProgressReporter,
    ) -> list[OptimizedPage]:
        pages: list[OptimizedPage] = []
        result_iter = iter(results)
        for index, job in enumerate(jobs):
            report(
                "optimizing-meta",
                f"Optimizing {job.page.type}: {job.page.url}",
                completed_pages=index,
                current_page=job.page.id,
            )
            pages.append(next(result_iter))
        return pages

    def _optimize_pages(
        self,
        jobs: Sequence[PageJob],
        site: SiteContext,
        config: OptimizationConfig,
        score_fn: ScoreFn,
        report: ProgressReporter,
    ) -> list[OptimizedPage]:
        def worker(job: PageJob) -> OptimizedPage:
            return self.optimize_page(job, site, config, score_fn)

        if config.page_workers > 1:
            with ThreadPoolExecutor(max_workers=config.page_workers) as executor:
                return self._collect_pages(jobs, executor.map(worker, jobs), report)
        return self._collect_pages(jobs, map(worker, jobs), report)

    # -------------------------------------------------------------------------
    # Later phases
    # -------------------------------------------------------------------------

    def _revalidate(
        self,
        pages: Sequence[OptimizedPage],
        site: SiteContext,
        config: OptimizationConfig,
        score_fn: ScoreFn,
        keywords: dict[str, str],
    ) -> list[OptimizedPage]:
        """Re-validate every schema record; rescore pages whose validity changed."""
        revalidated: list[OptimizedPage] = []
        for page in pages:
            schemas = [validate_schema(record) for record in page.schemas]
            updated = page.model_copy(update={"schemas": schemas})
            if [r.valid for r in schemas] != [r.valid for r in page.schemas]:
                for record in schemas:
                    if not record.valid:
                        pipeline_logger.schema_invalid(
                            record.type, page.page_id, record.errors or []
                        )
                updated = assess_page(
                    updated,
                    rules=config.rules,
                    keyword=keywords.get(page.page_id) or site.category,
                    location=site.city,
                    score_fn=score_fn,
                )
            revalidated.append(updated)
        return revalidated

    def calculate_stats(self, pages: Sequence[OptimizedPage]) -> PackageStats:
        total_pages = len(pages)
        total_links = 0
        total_score = 0
        schema_types: dict[str, None] = {}
        pages_by_type: dict[str, int] = {}
        issues_by_type: dict[str, int] = {}

        for page in pages:
            total_links += len(page.internal_links)
            total_score += page.seo_score
            for record in page.schemas:
                schema_types.setdefault(record.type, None)
            pages_by_type[page.type] = pages_by_type.get(page.type, 0) + 1
            for issue in page.issues:
                issues_by_type[issue.type] = issues_by_type.get(issue.type, 0) + 1

        return PackageStats(
            total_pages=total_pages,
            total_internal_links=total_links,
            avg_links_per_page=(
                round_half_up(total_links / total_pages) if total_pages else 0
            ),
            schema_types_used=list(schema_types),
            pages_by_type=pages_by_type,
            avg_seo_score=(
                round_half_up(total_score / total_pages) if total_pages else 0
            ),
            issues_by_type=issues_by_type,
        )

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def optimize(
        self,
        input_data: SeoOptimizationInput,
        config: OptimizationConfig | None = None,
        on_progress: ProgressCallback | None = None,
        score_fn: ScoreFn = calculate_seo_score,
    ) -> OptimizedPackage:
        """Run the full pipeline.

        Args:
            input_data: Blueprint plus optional enrichments
            config: Run options; built from settings when omitted
            on_progress: Called synchronously with each progress event
            score_fn: Page scoring function

        Returns:
            The optimized package

        Raises:
            SeoOptimizationValidationError: If the input is unusable
        """
        self._validate_input(input_data)
        config = config or OptimizationConfig.from_settings()

        blueprint = input_data.blueprint
        site = SiteContext.from_blueprint(blueprint)
        descriptors = blueprint.pages
        total_pages = len(descriptors)
        report = ProgressReporter(on_progress, total_pages)
        start_time = time.monotonic()

        logger.info(
            "SEO optimization started",
            extra={
                "page_count": total_pages,
                "link_density_target": config.link_density_target,
                "schema_validation": config.schema_validation,
                "page_workers": config.page_workers,
            },
        )

        with timed_phase("preparing", total_pages):
            report("preparing", "Preparing pages...", completed_pages=0)

        with timed_phase("optimizing-links", total_pages):
            report(
                "optimizing-links",
                "Building internal link structure...",
                completed_pages=0,
            )
            links = build_link_graph(
                descriptors,
                site,
                density_target=config.link_density_target,
                max_repair_passes=config.orphan_repair_passes,
            )
            jobs = self._build_jobs(input_data, links)

        with timed_phase("optimizing-meta", total_pages):
            pages = self._optimize_pages(jobs, site, config, score_fn, report)

        with timed_phase("generating-schema", total_pages):
            report(
                "generating-schema",
                "Validating schema markup...",
                completed_pages=total_pages,
            )
            if config.schema_validation:
                keywords = {page.id: page.primary_keyword for page in descriptors}
                pages = self._revalidate(pages, site, config, score_fn, keywords)

        with timed_phase("generating-sitemap", total_pages):
            report(
                "generating-sitemap",
                "Generating sitemap...",
                completed_pages=total_pages,
            )
            site_wide = SiteWideSeo(
                organization_schema=generate_organization_schema(site),
                website_schema=generate_website_schema(site),
                sitemap=generate_sitemap(descriptors, site),
                robots_txt=generate_robots_txt(site),
            )

        with timed_phase("validating", total_pages):
            report(
                "validating",
                "Running final validation...",
                completed_pages=total_pages,
            )
            validation = validate_package(pages)
            stats = self.calculate_stats(pages)

        package = OptimizedPackage(
            pages=pages,
            site_wide=site_wide,
            validation=validation,
            stats=stats,
            generated_at=site.generated_at.isoformat(),
            source_data=SourceData(
                editorial_content=input_data.editorial_content or None,
                comparison_data=input_data.comparison_data or None,
            ),
        )

        pipeline_logger.phase_start("complete", total_pages)
        report("complete", "SEO optimization complete!", completed_pages=total_pages)

        logger.info(
            "SEO optimization complete",
            extra={
                "page_count": total_pages,
                "total_internal_links": stats.total_internal_links,
                "avg_seo_score": stats.avg_seo_score,
                "orphan_count": len(validation.orphan_pages),
                "duration_ms": round((time.monotonic() - start_time) * 1000, 2),
            },
        )
        return package


# =============================================================================
# SINGLETON
# =============================================================================


_seo_optimization_service: SeoOptimizationService | None = None


def get_seo_optimization_service() -> SeoOptimizationService:
    """Get the global SEO optimization service instance.

    Usage:
        from siteseo.services.seo_optimization import get_seo_optimization_service
        service = get_seo_optimization_service()
        package = service.optimize(input_data)
    """
    global _seo_optimization_service
    if _seo_optimization_service is None:
        _seo_optimization_service = SeoOptimizationService()
        logger.info("SeoOptimizationService singleton created")
    return _seo_optimization_service


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def run_seo_optimization(
    input_data: SeoOptimizationInput,
    config: OptimizationConfig | None = None,
    on_progress: ProgressCallback | None = None,
    score_fn: ScoreFn = calculate_seo_score,
) -> OptimizedPackage:
    """Convenience function for running the pipeline.

    Args:
        input_data: Blueprint plus optional enrichments
        config: Run options; built from settings when omitted
        on_progress: Called synchronously with each progress event
        score_fn: Page scoring function

    Returns:
        The optimized package
    """
    service = get_seo_optimization_service()
    return service.optimize(
        input_data, config=config, on_progress=on_progress, score_fn=score_fn
    )
