"""API v1 router and endpoint organization."""

from fastapi import APIRouter

from siteseo.api.v1.endpoints import seo

router = APIRouter(tags=["v1"])

router.include_router(seo.router, prefix="/seo", tags=["SEO Optimization"])
