"""
Job construction for mention events.
"""

from mention_service.models.mention import Job, MentionEvent
from mention_service.models.types import JobStatus
from mention_service.utils.date_utils import Clock, epoch_millis, millis_to_iso


def build_job(event: MentionEvent, username: str, clock: Clock = epoch_millis) -> Job:
    """
    Build the queue record for a mention event.

    The id and createdAt come from one clock reading, so the id is
    "{comment_id}_{millis}". Two deliveries of the same notification
    within one millisecond would collide; deduplication is keyed on
    media and comment ids instead (see MentionQueueRepository).

    Args:
        event: Mention event from the normalizer
        username: Configured account handle
        clock: Callable returning epoch milliseconds

    Returns:
        Immutable Job in pending status
    """
    millis = clock()
    return Job(
        id=f"{event.comment_id}_{millis}",
        media_id=event.media_id,
        comment_id=event.comment_id,
        username=(username or "").lower(),
        status=JobStatus.PENDING,
        created_at=millis_to_iso(millis),
    )
