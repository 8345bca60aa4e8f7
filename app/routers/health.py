# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Liveness, readiness and version info for load balancers and monitoring.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Callable

from fastapi import APIRouter
from pydantic import BaseModel

from app import __version__
from app.config import settings
from app.dependencies import SupabaseDep
from core.services.content_service import ContentService

logger = logging.getLogger(__name__)

router = APIRouter()

HEALTHY = "healthy"

# Content may legitimately run without Sheets (static catalog only)
CONTENT_OK = (HEALTHY, "disabled")


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Per-dependency result: "healthy", "disabled" or "unhealthy: <reason>"."""
    database: str
    storage: str
    content: str


class ReadinessResponse(BaseModel):
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _probe(name: str, check: Callable[[], object]) -> str:
    try:
        check()
        return HEALTHY
    except Exception as e:
        logger.warning(f"Readiness probe {name} failed: {e}")
        return f"unhealthy: {str(e)[:50]}"


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status=HEALTHY,
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=__version__,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(supabase: SupabaseDep):
    """
    Probe the users table, the storage API and the content source.

    Status is "ready" when all three pass, "degraded" otherwise.
    """
    client = supabase.get_client()

    checks = ChecksResponse(
        database=_probe("database", lambda: client.table("users").select("id").limit(1).execute()),
        storage=_probe("storage", client.storage.list_buckets),
        content=ContentService.source_status(),
    )

    ready = (
        checks.database == HEALTHY
        and checks.storage == HEALTHY
        and checks.content in CONTENT_OK
    )
    return ReadinessResponse(
        status="ready" if ready else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """Process is up; no dependencies are touched."""
    return LivenessResponse(status="alive", timestamp=_now())
