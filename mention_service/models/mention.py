"""
Mention pipeline models.

MentionEvent is the transient unit extracted from a webhook change,
Job is the record written to the queue, and the context models are
read-only Graph API snapshots used by the reply workflow.
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field

from mention_service.models.types import (
    JobStatus, EnqueueStatus, ReplyOutcome
)


class MentionEvent(BaseModel):
    """A mention of the tracked account in a comment on some media"""
    media_id: str = Field(..., min_length=1)
    comment_id: str = Field(..., min_length=1)

    class Config:
        frozen = True


class Job(BaseModel):
    """
    Durable unit of work for one mention event.

    Serialized with camelCase keys, which is the format the queue
    consumer reads.
    """
    id: str
    media_id: str = Field(..., alias="mediaId")
    comment_id: str = Field(..., alias="commentId")
    username: str
    status: JobStatus = JobStatus.PENDING
    created_at: str = Field(..., alias="createdAt")

    class Config:
        frozen = True
        populate_by_name = True

    def to_queue_payload(self) -> str:
        """Compact JSON as pushed onto the queue."""
        return self.model_dump_json(by_alias=True)

    @property
    def dedup_identity(self) -> str:
        """Content identity shared by redeliveries of the same notification."""
        return f"{self.media_id}:{self.comment_id}"


class MediaContext(BaseModel):
    """Graph API media snapshot"""
    id: str
    username: Optional[str] = None
    caption: Optional[str] = None
    permalink: Optional[str] = None
    media_type: Optional[str] = None

    class Config:
        frozen = True
        extra = "ignore"


class CommentContext(BaseModel):
    """Graph API comment snapshot"""
    id: str
    username: Optional[str] = None
    text: Optional[str] = None
    timestamp: Optional[str] = None

    class Config:
        frozen = True
        extra = "ignore"


class WebhookAck(BaseModel):
    """Acknowledgment returned to the platform for every POST"""
    status: str = "ok"


class EventReport(BaseModel):
    """What happened to one mention event after acknowledgment"""
    media_id: str
    comment_id: str
    job_id: Optional[str] = None
    enqueue_status: EnqueueStatus = EnqueueStatus.DISABLED
    queue_length: Optional[int] = None
    reply_outcome: ReplyOutcome = ReplyOutcome.DISABLED


class ProcessingReport(BaseModel):
    """Summary of one payload's post-acknowledgment processing"""
    events: List[EventReport] = Field(default_factory=list)

    @property
    def enqueued(self) -> int:
        return sum(1 for e in self.events if e.enqueue_status == EnqueueStatus.ENQUEUED)

    @property
    def failed(self) -> int:
        return sum(
            1 for e in self.events
            if e.enqueue_status in (EnqueueStatus.TIMEOUT, EnqueueStatus.UNAVAILABLE, EnqueueStatus.FAILED)
        )

    def summary(self) -> Dict[str, Any]:
        return {
            "events": len(self.events),
            "enqueued": self.enqueued,
            "duplicates": sum(1 for e in self.events if e.enqueue_status == EnqueueStatus.DUPLICATE),
            "enqueue_failures": self.failed,
            "replies": sum(1 for e in self.events if e.reply_outcome == ReplyOutcome.REPLIED),
        }
