"""API v1 routes. Account routes (me) are mounted separately under API_PREFIX."""

from fastapi import APIRouter

from stepup.api.v1 import health

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
