"""
Metrics collection for the mention pipeline.

Work that runs after the webhook has been acknowledged can only be
observed through logs and these counters.
"""

from functools import lru_cache
from typing import Optional

from prometheus_client import (
    Counter, Histogram,
    CollectorRegistry, generate_latest, CONTENT_TYPE_LATEST
)

from mention_service.utils.logger import get_logger

logger = get_logger(__name__)


class MetricsCollector:
    """Prometheus collectors for webhook and pipeline activity."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()

        self.webhook_requests = Counter(
            'mention_service_webhook_requests_total',
            'Webhook requests by method and outcome',
            ['method', 'outcome'],
            registry=self.registry
        )

        self.mention_events = Counter(
            'mention_service_mention_events_total',
            'Mention events extracted from webhook payloads',
            registry=self.registry
        )

        self.jobs_enqueued = Counter(
            'mention_service_jobs_enqueued_total',
            'Jobs pushed onto the mentions queue',
            registry=self.registry
        )

        self.duplicate_mentions = Counter(
            'mention_service_duplicate_mentions_total',
            'Mentions skipped because they were already enqueued',
            registry=self.registry
        )

        self.enqueue_failures = Counter(
            'mention_service_enqueue_failures_total',
            'Failed enqueue attempts',
            ['reason'],
            registry=self.registry
        )

        self.reply_outcomes = Counter(
            'mention_service_reply_outcomes_total',
            'Auto-reply workflow outcomes',
            ['outcome'],
            registry=self.registry
        )

        self.processing_duration = Histogram(
            'mention_service_processing_duration_seconds',
            'Duration of post-acknowledgment payload processing',
            buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
            registry=self.registry
        )

    def export(self) -> bytes:
        """Render all collectors in the Prometheus text format."""
        return generate_latest(self.registry)

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE_LATEST


@lru_cache()
def get_metrics() -> MetricsCollector:
    """Process-wide metrics collector."""
    return MetricsCollector()
