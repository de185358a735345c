"""
Webhook API Routes
Subscription handshake and mention notifications from the Meta platform.
"""

import json
from typing import Annotated, Any, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response
from fastapi.responses import PlainTextResponse
import structlog

from mention_service.config.constants import (
    WEBHOOK_PATH,
    WEBHOOK_ALIAS_PATH,
    HUB_MODE_PARAM,
    HUB_VERIFY_TOKEN_PARAM,
    HUB_CHALLENGE_PARAM,
    CORS_PREFLIGHT_HEADERS,
)
from mention_service.core.verification import ChallengeVerifier
from mention_service.dependencies import (
    get_challenge_verifier,
    get_mention_service,
    get_metrics_collector,
)
from mention_service.exceptions.base_exceptions import VerificationRejectedError
from mention_service.models.mention import WebhookAck
from mention_service.services.mention_service import MentionService
from mention_service.utils.metrics import MetricsCollector

logger = structlog.get_logger()
router = APIRouter(tags=["webhooks"])


def _first_query_value(request: Request, name: str) -> Optional[str]:
    """First value of a query parameter that may be repeated."""
    values = request.query_params.getlist(name)
    return values[0] if values else None


@router.get(
    WEBHOOK_PATH,
    response_class=PlainTextResponse,
    summary="Webhook verification",
    description="Answer the platform's subscription handshake"
)
@router.get(WEBHOOK_ALIAS_PATH, response_class=PlainTextResponse, include_in_schema=False)
async def webhook_verification(
        request: Request,
        verifier: Annotated[ChallengeVerifier, Depends(get_challenge_verifier)],
        metrics: Annotated[MetricsCollector, Depends(get_metrics_collector)]
) -> PlainTextResponse:
    """
    Echo hub.challenge when hub.mode and hub.verify_token match.

    Returns:
        200 with the challenge, or 403 with a fixed body
    """
    try:
        challenge = verifier.verify(
            mode=_first_query_value(request, HUB_MODE_PARAM),
            token=_first_query_value(request, HUB_VERIFY_TOKEN_PARAM),
            challenge=_first_query_value(request, HUB_CHALLENGE_PARAM)
        )
    except VerificationRejectedError as e:
        e.log_error(logger)
        metrics.webhook_requests.labels(method="GET", outcome="rejected").inc()
        return PlainTextResponse(e.user_message, status_code=e.status_code)

    metrics.webhook_requests.labels(method="GET", outcome="verified").inc()
    return PlainTextResponse(challenge)


@router.post(
    WEBHOOK_PATH,
    response_model=WebhookAck,
    summary="Webhook notifications",
    description="Acknowledge mention notifications and process them in the background"
)
@router.post(WEBHOOK_ALIAS_PATH, response_model=WebhookAck, include_in_schema=False)
async def webhook_notification(
        request: Request,
        background_tasks: BackgroundTasks,
        mention_service: Annotated[MentionService, Depends(get_mention_service)],
        metrics: Annotated[MetricsCollector, Depends(get_metrics_collector)]
) -> WebhookAck:
    """
    Acknowledge immediately; enqueue and reply after the response is sent.

    The platform retries deliveries that are not acknowledged quickly, so
    the response never waits on Redis or the Graph API, and nothing that
    happens afterwards changes it.
    """
    body = await request.body()
    payload: Any = None
    if body:
        try:
            payload = json.loads(body)
        except ValueError:
            logger.warning("Webhook body is not valid JSON", body_length=len(body))

    entries = payload.get("entry") if isinstance(payload, dict) else None
    logger.info(
        "Webhook notification received",
        entries=len(entries) if isinstance(entries, list) else 0
    )

    background_tasks.add_task(mention_service.run_detached, payload)
    metrics.webhook_requests.labels(method="POST", outcome="acknowledged").inc()
    return WebhookAck(status="ok")


@router.options(WEBHOOK_PATH, include_in_schema=False)
@router.options(WEBHOOK_ALIAS_PATH, include_in_schema=False)
async def webhook_preflight() -> Response:
    """Empty success with permissive CORS headers."""
    return Response(status_code=200, headers=CORS_PREFLIGHT_HEADERS)
