"""
Mention Service

Post-acknowledgment processing of one webhook payload: normalize the
payload into mention events, enqueue a job per event and, when enabled,
run the auto-reply workflow. Each event is handled independently; a
failure for one event is logged and counted, then processing moves on.
"""

import time
from typing import Any, Optional

from mention_service.core.job_builder import build_job
from mention_service.core.normalizers.mention_normalizer import iter_mention_events
from mention_service.models.mention import MentionEvent, EventReport, ProcessingReport
from mention_service.models.types import EnqueueStatus, ReplyOutcome
from mention_service.repositories.exceptions import QueueTimeoutError, QueueUnavailableError
from mention_service.repositories.mention_queue_repository import MentionQueueRepository
from mention_service.services.base_service import BaseService
from mention_service.services.reply_service import ReplyService
from mention_service.utils.date_utils import Clock, epoch_millis
from mention_service.utils.metrics import MetricsCollector


class MentionService(BaseService):
    """Runs the mention pipeline for one webhook delivery"""

    def __init__(
            self,
            queue_repo: MentionQueueRepository,
            queue_key: str,
            username: str,
            metrics: MetricsCollector,
            reply_service: Optional[ReplyService] = None,
            enqueue_enabled: bool = True,
            dedup_ttl_seconds: Optional[int] = None,
            clock: Clock = epoch_millis
    ):
        """
        Args:
            queue_repo: Queue producer
            queue_key: Redis list receiving jobs
            username: Configured account handle attached to every job
            metrics: Metrics collector
            reply_service: Auto-reply workflow; None disables it
            enqueue_enabled: Push jobs at all
            dedup_ttl_seconds: Dedup window; None pushes every delivery
            clock: Epoch-millisecond clock used for job identity
        """
        super().__init__()
        self.queue_repo = queue_repo
        self.queue_key = queue_key
        self.username = username
        self.metrics = metrics
        self.reply_service = reply_service
        self.enqueue_enabled = enqueue_enabled
        self.dedup_ttl_seconds = dedup_ttl_seconds
        self.clock = clock

    async def process_payload(self, payload: Any) -> ProcessingReport:
        """
        Process every mention event in a webhook payload.

        Events are handled sequentially in entry/change order. The enqueue
        and reply steps of each event are isolated: any error is recorded
        on that event's report and the loop moves on.

        Args:
            payload: Decoded webhook body, possibly malformed

        Returns:
            ProcessingReport with one EventReport per mention event
        """
        report = ProcessingReport()

        for event in iter_mention_events(payload):
            self.metrics.mention_events.inc()
            event_report = EventReport(media_id=event.media_id, comment_id=event.comment_id)

            if self.enqueue_enabled:
                try:
                    await self._enqueue_event(event, event_report)
                except Exception as e:
                    event_report.enqueue_status = EnqueueStatus.FAILED
                    self.metrics.enqueue_failures.labels(reason="error").inc()
                    self.log_failure(
                        "enqueue", e,
                        media_id=event.media_id,
                        comment_id=event.comment_id
                    )

            if self.reply_service is not None:
                try:
                    event_report.reply_outcome = await self.reply_service.handle_mention(event)
                except Exception as e:
                    event_report.reply_outcome = ReplyOutcome.REPLY_FAILED
                    self.metrics.reply_outcomes.labels(outcome=ReplyOutcome.REPLY_FAILED.value).inc()
                    self.log_failure(
                        "reply", e,
                        media_id=event.media_id,
                        comment_id=event.comment_id
                    )

            report.events.append(event_report)

        return report

    async def _enqueue_event(self, event: MentionEvent, event_report: EventReport) -> None:
        job = build_job(event, self.username, self.clock)
        event_report.job_id = job.id

        try:
            if self.dedup_ttl_seconds:
                length = await self.queue_repo.enqueue_unique(
                    self.queue_key, job, self.dedup_ttl_seconds
                )
            else:
                length = await self.queue_repo.enqueue(self.queue_key, job)
        except QueueTimeoutError as e:
            event_report.enqueue_status = EnqueueStatus.TIMEOUT
            self.metrics.enqueue_failures.labels(reason="timeout").inc()
            self.log_failure("enqueue", e, job_id=job.id, queue_key=self.queue_key)
            return
        except QueueUnavailableError as e:
            event_report.enqueue_status = EnqueueStatus.UNAVAILABLE
            self.metrics.enqueue_failures.labels(reason="unavailable").inc()
            self.log_failure("enqueue", e, job_id=job.id, queue_key=self.queue_key)
            return

        if length is None:
            event_report.enqueue_status = EnqueueStatus.DUPLICATE
            self.metrics.duplicate_mentions.inc()
            return

        event_report.enqueue_status = EnqueueStatus.ENQUEUED
        event_report.queue_length = length
        self.metrics.jobs_enqueued.inc()

    async def run_detached(self, payload: Any) -> None:
        """
        Entry point for the background task scheduled after the ack.

        This is the terminal catch point for post-acknowledgment work:
        the HTTP response is already sent, so failures can only be logged.
        """
        start = time.perf_counter()
        try:
            report = await self.process_payload(payload)
        except Exception as e:
            self.logger.error(
                "Post-acknowledgment processing failed",
                error_type=type(e).__name__,
                error=str(e),
                exc_info=e
            )
            return
        finally:
            self.metrics.processing_duration.observe(time.perf_counter() - start)

        self.log_operation("process_payload", **report.summary())
