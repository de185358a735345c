"""
Mention Service - FastAPI Application Entry Point.

This module provides the FastAPI application instance with its
middleware, routes, exception handlers, and lifecycle management.
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI, Request
from redis.asyncio import Redis

from mention_service.api import health_router, webhook_router
from mention_service.config.constants import (
    SERVICE_NAME,
    SERVICE_VERSION,
    SERVICE_DESCRIPTION,
)
from mention_service.config.settings import Settings, get_settings
from mention_service.core.channels.instagram_graph_client import InstagramGraphClient
from mention_service.database.redis_client import RedisConfig, RedisConnectionManager
from mention_service.exceptions.base_exceptions import setup_exception_handlers
from mention_service.utils.date_utils import Clock, epoch_millis
from mention_service.utils.logger import setup_logging, get_logger
from mention_service.utils.metrics import MetricsCollector, get_metrics

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    settings: Settings = app.state.settings
    setup_logging(settings.LOG_LEVEL.value, settings.LOG_FORMAT)

    logger.info(
        "Mention Service starting",
        version=SERVICE_VERSION,
        environment=settings.ENVIRONMENT.value,
        queue_key=settings.MENTIONS_QUEUE_KEY,
        auto_reply_enabled=settings.AUTO_REPLY_ENABLED
    )

    if not settings.META_VERIFY_TOKEN:
        logger.warning("META_VERIFY_TOKEN is not set; verification requests will be rejected")

    # Unreachable Redis does not block startup; enqueue failures are reported per event
    redis_health = await app.state.redis_manager.health_check()
    if redis_health["status"] != "healthy":
        logger.warning("Redis not reachable at startup", error=redis_health.get("error"))

    try:
        yield
    finally:
        logger.info("Shutting down Mention Service...")
        try:
            await app.state.graph_client.close()
            await app.state.redis_manager.disconnect()
            logger.info("Mention Service shutdown completed successfully")
        except Exception as e:
            logger.error("Error during shutdown", error=str(e), exc_info=True)


def create_app(
        settings: Optional[Settings] = None,
        redis_client: Optional[Redis] = None,
        graph_client: Optional[InstagramGraphClient] = None,
        clock: Optional[Clock] = None,
        metrics: Optional[MetricsCollector] = None
) -> FastAPI:
    """
    Create and configure FastAPI application instance.

    Every collaborator can be injected; omitted ones are built from settings.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Mention Service API",
        description=SERVICE_DESCRIPTION,
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.redis_manager = RedisConnectionManager(
        RedisConfig.from_settings(settings),
        client=redis_client
    )
    app.state.graph_client = graph_client or InstagramGraphClient(
        api_url=settings.graph_api_url(),
        access_token=settings.META_ACCESS_TOKEN,
        timeout_seconds=settings.GRAPH_API_TIMEOUT_SECONDS
    )
    app.state.metrics = metrics or get_metrics()
    app.state.clock = clock or epoch_millis

    setup_middleware(app)
    setup_exception_handlers(app)

    app.include_router(webhook_router)
    app.include_router(health_router)

    return app


def setup_middleware(app: FastAPI) -> None:
    """Configure application middleware.

    There is no CORS middleware: preflights reach the webhook OPTIONS route,
    which answers with fixed permissive headers.
    """

    @app.middleware("http")
    async def add_request_id_middleware(request: Request, call_next):
        """Add unique request ID to all requests."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time header to responses."""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(round(process_time * 1000, 2))
        return response


def main() -> None:
    """Main entry point for running the service."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL.value, settings.LOG_FORMAT)

    uvicorn_config = {
        "app": "mention_service.main:app",
        "host": settings.HOST,
        "port": settings.PORT,
        "log_level": settings.LOG_LEVEL.value.lower(),
        "access_log": True,
        "log_config": None,
        "server_header": False,
    }

    if settings.is_development():
        uvicorn_config.update({
            "reload": settings.DEBUG,
            "reload_dirs": ["mention_service/"],
        })

    logger.info(
        "Starting Mention Service server",
        service=SERVICE_NAME,
        host=settings.HOST,
        port=settings.PORT,
        environment=settings.ENVIRONMENT.value
    )

    uvicorn.run(**uvicorn_config)


# Create the FastAPI app instance
app = create_app()

if __name__ == "__main__":
    main()
