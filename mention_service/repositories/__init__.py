"""
Repository layer for Mention Service.
"""

from .mention_queue_repository import MentionQueueRepository
from .exceptions import (
    RepositoryError,
    QueueUnavailableError,
    QueueTimeoutError,
)

__all__ = [
    "MentionQueueRepository",
    "RepositoryError",
    "QueueUnavailableError",
    "QueueTimeoutError",
]
