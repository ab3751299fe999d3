"""
Health Router - Liveness and readiness endpoints

- GET /health        liveness; never touches Redis
- GET /health/ready  readiness; pings Redis through the session store

Anti-Patterns Avoided:
- No bare except clauses - storage failures are logged with context
"""

import logging
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel

from chat_sessions.core.exceptions import StorageUnavailableError
from chat_sessions.sessions.store import SessionStore


logger = logging.getLogger(__name__)

_PROCESS_STARTED = time.monotonic()


# =============================================================================
# Response Models
# =============================================================================


class HealthResponse(BaseModel):
    """Liveness response model."""

    status: str
    timestamp: datetime
    uptime: float
    message: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    checks: dict[str, bool]


# =============================================================================
# Health Service
# =============================================================================


class HealthService:
    """
    Service class for dependency checks.

    Wraps the session store so tests can substitute a fake store or
    override the dependency entirely.
    """

    def __init__(self, store: Optional[SessionStore]) -> None:
        self._store = store

    async def check_redis(self) -> bool:
        """
        Check Redis connectivity.

        Returns:
            bool: True if Redis answered PING, False otherwise
        """
        if self._store is None:
            logger.warning("Session store not initialized, Redis check failed")
            return False

        try:
            return await self._store.ping()
        except StorageUnavailableError as e:
            logger.warning(f"Redis health check failed: {e.message}")
            return False


def get_health_service(request: Request) -> HealthService:
    """Dependency injection factory for HealthService."""
    return HealthService(getattr(request.app.state, "session_store", None))


# =============================================================================
# Router
# =============================================================================

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Liveness check.

    Returns:
        HealthResponse: status "OK", current time and process uptime in seconds
    """
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc),
        uptime=round(time.monotonic() - _PROCESS_STARTED, 3),
        message="Chat Sessions API is running",
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(
    response: Response,
    health_service: HealthService = Depends(get_health_service),
) -> ReadinessResponse:
    """
    Readiness check.

    Returns 503 with status "not_ready" when Redis does not answer.
    """
    checks = {"redis": await health_service.check_redis()}
    all_healthy = all(checks.values())

    if not all_healthy:
        response.status_code = 503

    return ReadinessResponse(
        status="ready" if all_healthy else "not_ready",
        checks=checks,
    )
