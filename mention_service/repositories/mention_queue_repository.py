"""
Mention Queue Repository
========================

Producer side of the Redis list that carries mention jobs to the worker.

Jobs are pushed on the left (LPUSH) and the consumer pops from the right
(RPOP), so the list behaves as a FIFO queue. Every command runs under an
explicit time ceiling and is never retried here: the webhook has already
been acknowledged, so a failed push is reported and left to the platform's
own redelivery.
"""

import asyncio
from typing import Optional, Awaitable, TypeVar

from redis.asyncio import Redis
from redis.exceptions import (
    TimeoutError as RedisTimeoutError,
    RedisError
)
import structlog

from mention_service.config.constants import (
    DEDUP_KEY_SEGMENT,
    DEFAULT_QUEUE_PUSH_TIMEOUT_SECONDS,
)
from mention_service.models.mention import Job
from .exceptions import QueueUnavailableError, QueueTimeoutError

T = TypeVar("T")


class MentionQueueRepository:
    """
    Redis list producer for mention jobs
    """

    def __init__(
        self,
        redis_client: Redis,
        timeout_seconds: float = DEFAULT_QUEUE_PUSH_TIMEOUT_SECONDS
    ):
        """
        Initialize queue repository

        Args:
            redis_client: Redis client instance
            timeout_seconds: Ceiling applied to every Redis command
        """
        self.redis = redis_client
        self.timeout_seconds = timeout_seconds
        self.logger = structlog.get_logger("MentionQueueRepository")

    # Key Management

    def build_dedup_key(self, queue_key: str, job: Job) -> str:
        """
        Build the marker key recording that a mention was enqueued

        Args:
            queue_key: Queue the job belongs to
            job: Job whose media/comment ids identify the mention

        Returns:
            e.g. instagram:mentions:seen:<media_id>:<comment_id>
        """
        return ":".join([queue_key, DEDUP_KEY_SEGMENT, job.dedup_identity])

    async def _bounded(self, awaitable: Awaitable[T], queue_key: str, operation: str) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout_seconds)
        except (asyncio.TimeoutError, RedisTimeoutError) as e:
            raise QueueTimeoutError(queue_key, self.timeout_seconds, original_error=e) from e
        except (RedisError, OSError) as e:
            raise QueueUnavailableError(
                f"Queue {operation} failed: {e}",
                queue_key=queue_key,
                original_error=e
            ) from e

    # Producer Operations

    async def enqueue(self, queue_key: str, job: Job) -> int:
        """
        Push a job onto the queue

        Args:
            queue_key: Redis list key
            job: Job to serialize and push

        Returns:
            Queue length after the push

        Raises:
            QueueTimeoutError: No answer within the ceiling
            QueueUnavailableError: Redis rejected or failed the command
        """
        length = await self._bounded(
            self.redis.lpush(queue_key, job.to_queue_payload()),
            queue_key,
            "push"
        )

        self.logger.info(
            "Job enqueued",
            queue_key=queue_key,
            job_id=job.id,
            queue_length=length
        )
        return int(length)

    async def enqueue_unique(
        self,
        queue_key: str,
        job: Job,
        ttl_seconds: int
    ) -> Optional[int]:
        """
        Push a job unless the same mention was pushed within ttl_seconds

        The marker is claimed with SET NX before the push and released if
        the push fails, so a redelivered notification can still be queued.

        Returns:
            Queue length after the push, or None for a duplicate
        """
        marker = self.build_dedup_key(queue_key, job)
        claimed = await self._bounded(
            self.redis.set(marker, job.id, nx=True, ex=ttl_seconds),
            queue_key,
            "claim"
        )

        if not claimed:
            self.logger.info(
                "Duplicate mention skipped",
                queue_key=queue_key,
                media_id=job.media_id,
                comment_id=job.comment_id
            )
            return None

        try:
            return await self.enqueue(queue_key, job)
        except QueueUnavailableError:
            await self._release(marker, queue_key)
            raise

    async def _release(self, marker: str, queue_key: str) -> None:
        try:
            await self._bounded(self.redis.delete(marker), queue_key, "release")
        except QueueUnavailableError as e:
            # Marker expires on its own after the TTL
            self.logger.warning(
                "Failed to release dedup marker",
                marker=marker,
                error=str(e)
            )

    async def length(self, queue_key: str) -> int:
        """
        Current number of jobs waiting in the queue

        Raises:
            QueueUnavailableError: Redis failed or timed out
        """
        return int(await self._bounded(self.redis.llen(queue_key), queue_key, "length"))
