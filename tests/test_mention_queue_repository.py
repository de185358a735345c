"""Tests for the Redis mention queue producer."""

import json
import time

import pytest

from mention_service.core.job_builder import build_job
from mention_service.models.mention import MentionEvent
from mention_service.repositories import (
    MentionQueueRepository,
    QueueTimeoutError,
    QueueUnavailableError,
)
from tests.fakes import FIXED_MILLIS, FailingPushRedis, FailingRedis, FakeRedis, HangingRedis

QUEUE = "instagram:mentions"


def _job(comment_id="C1", media_id="M1"):
    return build_job(
        MentionEvent(media_id=media_id, comment_id=comment_id),
        "brand",
        clock=lambda: FIXED_MILLIS
    )


@pytest.mark.asyncio
async def test_enqueue_pushes_job_and_grows_queue_by_one():
    redis = FakeRedis()
    repo = MentionQueueRepository(redis)
    before = await repo.length(QUEUE)

    length = await repo.enqueue(QUEUE, _job())

    assert length == before + 1
    assert await repo.length(QUEUE) == before + 1
    assert json.loads(redis.lists[QUEUE][0])["id"] == "C1_1700000000000"


@pytest.mark.asyncio
async def test_consumer_pops_jobs_in_push_order():
    redis = FakeRedis()
    repo = MentionQueueRepository(redis)

    await repo.enqueue(QUEUE, _job("C1"))
    await repo.enqueue(QUEUE, _job("C2"))

    first = json.loads(await redis.rpop(QUEUE))
    assert first["commentId"] == "C1"


@pytest.mark.asyncio
async def test_hanging_redis_times_out_within_ceiling():
    repo = MentionQueueRepository(HangingRedis(), timeout_seconds=0.05)

    start = time.perf_counter()
    with pytest.raises(QueueTimeoutError) as exc_info:
        await repo.enqueue(QUEUE, _job())

    assert time.perf_counter() - start < 1.0
    assert exc_info.value.queue_key == QUEUE


@pytest.mark.asyncio
async def test_refused_connection_is_reported_as_unavailable():
    repo = MentionQueueRepository(FailingRedis())

    with pytest.raises(QueueUnavailableError) as exc_info:
        await repo.enqueue(QUEUE, _job())

    assert not isinstance(exc_info.value, QueueTimeoutError)


@pytest.mark.asyncio
async def test_enqueue_unique_skips_redelivered_mention():
    redis = FakeRedis()
    repo = MentionQueueRepository(redis)

    first = await repo.enqueue_unique(QUEUE, _job(), ttl_seconds=60)
    second = await repo.enqueue_unique(
        QUEUE,
        build_job(MentionEvent(media_id="M1", comment_id="C1"), "brand", clock=lambda: FIXED_MILLIS + 1),
        ttl_seconds=60
    )

    assert first == 1
    assert second is None
    assert await repo.length(QUEUE) == 1


@pytest.mark.asyncio
async def test_enqueue_unique_sets_marker_with_ttl():
    redis = FakeRedis()
    repo = MentionQueueRepository(redis)
    job = _job()

    await repo.enqueue_unique(QUEUE, job, ttl_seconds=60)

    marker = repo.build_dedup_key(QUEUE, job)
    assert marker == "instagram:mentions:seen:M1:C1"
    assert redis.strings[marker] == job.id
    assert redis.expirations[marker] == 60


@pytest.mark.asyncio
async def test_enqueue_unique_releases_marker_when_push_fails():
    redis = FailingPushRedis()
    repo = MentionQueueRepository(redis)
    job = _job()

    with pytest.raises(QueueUnavailableError):
        await repo.enqueue_unique(QUEUE, job, ttl_seconds=60)

    assert repo.build_dedup_key(QUEUE, job) not in redis.strings


@pytest.mark.asyncio
async def test_distinct_comments_on_same_media_are_both_queued():
    repo = MentionQueueRepository(FakeRedis())

    await repo.enqueue_unique(QUEUE, _job("C1"), ttl_seconds=60)
    await repo.enqueue_unique(QUEUE, _job("C2"), ttl_seconds=60)

    assert await repo.length(QUEUE) == 2
