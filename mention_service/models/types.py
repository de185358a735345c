"""
Common type definitions and enums used across the application.
"""

from enum import Enum


# ============================================================================
# ENUMS FOR TYPE SAFETY
# ============================================================================

class JobStatus(str, Enum):
    """Lifecycle state of a queued job; only the consumer advances it"""
    PENDING = "pending"


class EnqueueStatus(str, Enum):
    """Per-event result of the enqueue step"""
    ENQUEUED = "enqueued"
    DUPLICATE = "duplicate"
    TIMEOUT = "timeout"
    UNAVAILABLE = "unavailable"
    FAILED = "failed"
    DISABLED = "disabled"


class ReplyDecision(str, Enum):
    """Whether the resolved context allows an automated reply"""
    SKIP_NO_CONTEXT = "skip_no_context"
    SKIP_FOREIGN_MEDIA = "skip_foreign_media"
    SKIP_NO_COMMENT = "skip_no_comment"
    REPLY = "reply"


class ReplyOutcome(str, Enum):
    """Final result of the reply workflow for one mention"""
    SKIPPED_NO_CONTEXT = "skipped_no_context"
    SKIPPED_FOREIGN_MEDIA = "skipped_foreign_media"
    SKIPPED_NO_COMMENT = "skipped_no_comment"
    REPLIED = "replied"
    REPLY_FAILED = "reply_failed"
    DISABLED = "disabled"


# Decisions that end the workflow without a reply attempt
SKIP_OUTCOMES = {
    ReplyDecision.SKIP_NO_CONTEXT: ReplyOutcome.SKIPPED_NO_CONTEXT,
    ReplyDecision.SKIP_FOREIGN_MEDIA: ReplyOutcome.SKIPPED_FOREIGN_MEDIA,
    ReplyDecision.SKIP_NO_COMMENT: ReplyOutcome.SKIPPED_NO_COMMENT,
}
