"""
Utility modules for Mention Service.

Logging setup, clock helpers and metrics collection.
"""

from mention_service.utils.logger import setup_logging, get_logger
from mention_service.utils.date_utils import Clock, epoch_millis, millis_to_iso, utc_now
from mention_service.utils.metrics import MetricsCollector, get_metrics

__all__ = [
    "setup_logging",
    "get_logger",
    "Clock",
    "epoch_millis",
    "millis_to_iso",
    "utc_now",
    "MetricsCollector",
    "get_metrics",
]
