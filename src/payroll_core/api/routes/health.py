"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, status
from pydantic import BaseModel

from payroll_core.api.dependencies import RateSet

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    rate_set_version: str
    rate_set_valid: bool


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
)
async def health_check(rate_set: RateSet) -> HealthResponse:
    """Report API health and whether the tax rates cover today."""
    now = datetime.now(timezone.utc)
    valid = rate_set.is_valid_for(now.date())

    return HealthResponse(
        status="healthy" if valid else "degraded",
        timestamp=now,
        rate_set_version=rate_set.version,
        rate_set_valid=valid,
    )


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_check() -> dict[str, str]:
    """Readiness check for container orchestration."""
    return {"status": "ready"}


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check() -> dict[str, str]:
    """Liveness check for container orchestration."""
    return {"status": "alive"}
