"""
Dependency injection for services and repositories

Process-level collaborators (settings, Redis client, Graph API client,
metrics) are created once in create_app and stored on app.state; these
providers hand them to route handlers.
"""

from typing import Annotated

from fastapi import Depends, Request

from mention_service.config.settings import Settings
from mention_service.core.channels.instagram_graph_client import InstagramGraphClient
from mention_service.core.verification import ChallengeVerifier
from mention_service.database.redis_client import RedisConnectionManager
from mention_service.repositories.mention_queue_repository import MentionQueueRepository
from mention_service.services.mention_service import MentionService
from mention_service.services.reply_service import ReplyService
from mention_service.utils.date_utils import Clock
from mention_service.utils.metrics import MetricsCollector


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_redis_manager(request: Request) -> RedisConnectionManager:
    return request.app.state.redis_manager


def get_graph_client(request: Request) -> InstagramGraphClient:
    return request.app.state.graph_client


def get_metrics_collector(request: Request) -> MetricsCollector:
    return request.app.state.metrics


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def get_challenge_verifier(
        settings: Annotated[Settings, Depends(get_app_settings)]
) -> ChallengeVerifier:
    return ChallengeVerifier(settings.META_VERIFY_TOKEN)


def get_queue_repository(
        settings: Annotated[Settings, Depends(get_app_settings)],
        redis_manager: Annotated[RedisConnectionManager, Depends(get_redis_manager)]
) -> MentionQueueRepository:
    return MentionQueueRepository(
        redis_manager.client,
        timeout_seconds=settings.QUEUE_PUSH_TIMEOUT_SECONDS
    )


def get_reply_service(
        settings: Annotated[Settings, Depends(get_app_settings)],
        graph_client: Annotated[InstagramGraphClient, Depends(get_graph_client)],
        metrics: Annotated[MetricsCollector, Depends(get_metrics_collector)]
) -> ReplyService:
    return ReplyService(
        graph_client=graph_client,
        configured_username=settings.IG_USERNAME,
        reply_template=settings.AUTO_REPLY_TEMPLATE,
        metrics=metrics
    )


def get_mention_service(
        settings: Annotated[Settings, Depends(get_app_settings)],
        queue_repo: Annotated[MentionQueueRepository, Depends(get_queue_repository)],
        reply_service: Annotated[ReplyService, Depends(get_reply_service)],
        metrics: Annotated[MetricsCollector, Depends(get_metrics_collector)],
        clock: Annotated[Clock, Depends(get_clock)]
) -> MentionService:
    return MentionService(
        queue_repo=queue_repo,
        queue_key=settings.MENTIONS_QUEUE_KEY,
        username=settings.IG_USERNAME,
        metrics=metrics,
        reply_service=reply_service if settings.AUTO_REPLY_ENABLED else None,
        enqueue_enabled=settings.ENQUEUE_ENABLED,
        dedup_ttl_seconds=settings.MENTION_DEDUP_TTL_SECONDS if settings.MENTION_DEDUP_ENABLED else None,
        clock=clock
    )
