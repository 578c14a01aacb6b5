"""SEO optimization API endpoints.

Runs the optimization pipeline over a submitted blueprint:
- POST /api/v1/seo/optimize - Optimize a blueprint into an SEO package

Error Logging Requirements:
- Log all incoming requests with method, path, request_id
- Log response status and timing for every request
- Return structured error responses: {"error": str, "code": str, "request_id": str}
- Log 4xx errors at WARNING, 5xx at ERROR
"""

import time

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from siteseo.core.logging import get_logger
from siteseo.schemas.optimization import SeoOptimizeRequest, SeoOptimizeResponse
from siteseo.schemas.seo_package import OptimizationProgress
from siteseo.services.seo_optimization import (
    SeoOptimizationValidationError,
    get_seo_optimization_service,
)

logger = get_logger(__name__)

router = APIRouter()


def _get_request_id(request: Request) -> str:
    """Get request_id from request state."""
    return getattr(request.state, "request_id", "unknown")


@router.post(
    "/optimize",
    response_model=SeoOptimizeResponse,
    summary="Optimize a site blueprint",
    description=(
        "Build the internal link graph, schema markup and metadata for every "
        "page of a blueprint and validate the resulting package."
    ),
    responses={
        400: {
            "description": "Validation error",
            "content": {
                "application/json": {
                    "example": {
                        "error": "Validation error for blueprint.pages: Blueprint has no pages",
                        "code": "VALIDATION_ERROR",
                        "request_id": "<request_id>",
                    }
                }
            },
        },
    },
)
def optimize_blueprint(
    request: Request,
    data: SeoOptimizeRequest,
) -> SeoOptimizeResponse | JSONResponse:
    """Optimize a blueprint.

    Phases run in a fixed order: preparing, optimizing-links,
    optimizing-meta (one event per page), generating-schema,
    generating-sitemap, validating, complete. The response carries every
    progress event of the run in emission order.
    """
    request_id = _get_request_id(request)
    start_time = time.monotonic()

    logger.debug(
        "SEO optimization request",
        extra={
            "request_id": request_id,
            "page_count": len(data.input.blueprint.pages),
            "has_config": data.config is not None,
        },
    )

    progress: list[OptimizationProgress] = []
    try:
        service = get_seo_optimization_service()
        package = service.optimize(
            data.input, config=data.config, on_progress=progress.append
        )
    except SeoOptimizationValidationError as e:
        logger.warning(
            "SEO optimization validation error",
            extra={
                "request_id": request_id,
                "field": e.field_name,
                "value": str(e.value)[:100],
                "error_message": str(e),
            },
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": str(e),
                "code": "VALIDATION_ERROR",
                "request_id": request_id,
            },
        )

    logger.info(
        "SEO optimization request complete",
        extra={
            "request_id": request_id,
            "page_count": package.stats.total_pages,
            "avg_seo_score": package.stats.avg_seo_score,
            "duration_ms": round((time.monotonic() - start_time) * 1000, 2),
        },
    )
    return SeoOptimizeResponse(package=package, progress=progress)
