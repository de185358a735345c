"""
Models package for Mention Service.
"""

from mention_service.models.types import (
    JobStatus,
    EnqueueStatus,
    ReplyDecision,
    ReplyOutcome,
)
from mention_service.models.mention import (
    MentionEvent,
    Job,
    MediaContext,
    CommentContext,
    WebhookAck,
    EventReport,
    ProcessingReport,
)

__all__ = [
    "JobStatus",
    "EnqueueStatus",
    "ReplyDecision",
    "ReplyOutcome",
    "MentionEvent",
    "Job",
    "MediaContext",
    "CommentContext",
    "WebhookAck",
    "EventReport",
    "ProcessingReport",
]
