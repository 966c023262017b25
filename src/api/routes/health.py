"""Health check endpoints for monitoring and deployment verification."""

import logging
import time

from fastapi import APIRouter, Response, status

from src.api.middleware.latency_logging import get_latency_stats
from src.core.config import get_settings
from src.core.openai import get_openai_metrics
from src.core.supabase import check_database_connection
from src.schemas.common import CheckResult, HealthResponse, HealthStatus, ReadinessResponse
from src.services.record_service import SESSIONS_TABLE, get_record_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness check",
    description="Basic health check to verify the service is running. Used for liveness probes.",
)
async def health_check() -> HealthResponse:
    """Return basic health status.

    This endpoint should always return 200 if the service is running.
    It does not check external dependencies.

    Returns:
        HealthResponse: Current health status with timestamp.
    """
    return HealthResponse(
        status=HealthStatus.HEALTHY,
        persistence_backend=get_settings().persistence_backend,
    )


async def _check_records() -> CheckResult:
    start_time = time.perf_counter()
    try:
        await get_record_service().list_all(SESSIONS_TABLE)
        error = None
    except Exception as e:
        logger.warning("Record service check failed: %s", e)
        error = str(e)
    latency_ms = (time.perf_counter() - start_time) * 1000
    return CheckResult(name="records", healthy=error is None, latency_ms=round(latency_ms, 2), error=error)


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={
        200: {"description": "All dependencies healthy"},
        503: {"description": "One or more dependencies unhealthy"},
    },
    summary="Readiness check",
    description="Check if all dependencies are available. Used for readiness probes.",
)
async def readiness_check(response: Response) -> ReadinessResponse:
    """Check readiness of all dependencies.

    Verifies that the service can handle requests by checking:
    - Record storage for the configured persistence backend
    - Database connectivity (Supabase), when that backend is used

    Returns 503 if any dependency is unhealthy.

    Args:
        response: FastAPI response object for setting status code.

    Returns:
        ReadinessResponse: Status of all dependency checks plus latency stats.
    """
    checks: list[CheckResult] = [await _check_records()]

    if get_settings().uses_supabase:
        start_time = time.perf_counter()
        db_result = await check_database_connection()
        latency_ms = (time.perf_counter() - start_time) * 1000
        checks.append(
            CheckResult(
                name="database",
                healthy=db_result["healthy"],
                latency_ms=round(latency_ms, 2),
                error=db_result.get("error"),
            )
        )

    all_healthy = all(check.healthy for check in checks)
    overall_status = HealthStatus.HEALTHY if all_healthy else HealthStatus.UNHEALTHY

    if not all_healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(
        status=overall_status,
        checks=checks,
        latency={
            "requests": get_latency_stats().get_stats(),
            "paths": get_latency_stats().get_stats_by_path(),
            "openai": get_openai_metrics().get_stats(),
        },
    )
