"""
Health Check API Routes
Liveness, dependency diagnostics and Prometheus metrics.
"""

import time
from datetime import datetime
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel

from mention_service.config.constants import SERVICE_NAME, SERVICE_VERSION
from mention_service.config.settings import Settings
from mention_service.core.channels.instagram_graph_client import InstagramGraphClient
from mention_service.database.redis_client import RedisConnectionManager
from mention_service.dependencies import (
    get_app_settings,
    get_graph_client,
    get_metrics_collector,
    get_queue_repository,
    get_redis_manager,
)
from mention_service.repositories.exceptions import QueueUnavailableError
from mention_service.repositories.mention_queue_repository import MentionQueueRepository
from mention_service.utils.date_utils import utc_now
from mention_service.utils.metrics import MetricsCollector

router = APIRouter(tags=["health"])

# Global startup time for uptime calculation
SERVICE_START_TIME = time.time()


class HealthStatus(BaseModel):
    """Health status response model"""
    status: str
    service: str
    version: str
    timestamp: datetime
    uptime_seconds: float


class DetailedHealthResponse(BaseModel):
    """Detailed health check response"""
    status: str
    timestamp: datetime
    environment: str
    redis: Dict[str, Any]
    queue: Dict[str, Any]
    graph_api: Dict[str, Any]


@router.get(
    "/health",
    response_model=HealthStatus,
    summary="Basic health check"
)
async def basic_health_check() -> HealthStatus:
    """Liveness probe; does not touch external services."""
    return HealthStatus(
        status="healthy",
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        timestamp=utc_now(),
        uptime_seconds=round(time.time() - SERVICE_START_TIME, 3)
    )


@router.get(
    "/health/detailed",
    response_model=DetailedHealthResponse,
    summary="Dependency health check"
)
async def detailed_health_check(
        settings: Annotated[Settings, Depends(get_app_settings)],
        redis_manager: Annotated[RedisConnectionManager, Depends(get_redis_manager)],
        queue_repo: Annotated[MentionQueueRepository, Depends(get_queue_repository)],
        graph_client: Annotated[InstagramGraphClient, Depends(get_graph_client)]
) -> DetailedHealthResponse:
    """
    Report Redis reachability, queue depth and Graph credential presence.
    """
    redis_health = await redis_manager.health_check()

    queue_info: Dict[str, Any] = {"key": settings.MENTIONS_QUEUE_KEY}
    if redis_health["status"] == "healthy":
        try:
            queue_info["length"] = await queue_repo.length(settings.MENTIONS_QUEUE_KEY)
        except QueueUnavailableError as e:
            queue_info["error"] = str(e)

    graph_info = {
        "credential_configured": graph_client.has_credential,
        "auto_reply_enabled": settings.AUTO_REPLY_ENABLED,
    }

    status = "healthy" if redis_health["status"] == "healthy" else "degraded"

    return DetailedHealthResponse(
        status=status,
        timestamp=utc_now(),
        environment=settings.ENVIRONMENT.value,
        redis=redis_health,
        queue=queue_info,
        graph_api=graph_info
    )


@router.get("/metrics", include_in_schema=False)
async def prometheus_metrics(
        settings: Annotated[Settings, Depends(get_app_settings)],
        metrics: Annotated[MetricsCollector, Depends(get_metrics_collector)]
) -> Response:
    """Prometheus metrics endpoint."""
    if not settings.METRICS_ENABLED:
        raise HTTPException(status_code=404, detail="Metrics disabled")
    return Response(metrics.export(), media_type=metrics.content_type)
