"""
Queue repository exceptions.

QueueTimeoutError subclasses QueueUnavailableError, so callers that only
care whether the job reached the queue can catch the base class.
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class RepositoryError(Exception):
    """Failure of a storage command, with the underlying cause attached."""

    def __init__(
            self,
            message: str,
            original_error: Optional[Exception] = None,
            error_code: Optional[str] = None,
            context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.error_code = error_code or "REPOSITORY_ERROR"
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "error_code": self.error_code,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            **self.context,
        }
        if self.original_error is not None:
            data["cause"] = f"{type(self.original_error).__name__}: {self.original_error}"
        return data


class QueueUnavailableError(RepositoryError):
    """Redis refused, dropped or failed a queue command."""

    def __init__(
            self,
            message: str,
            queue_key: Optional[str] = None,
            original_error: Optional[Exception] = None
    ):
        super().__init__(
            message,
            original_error=original_error,
            error_code="QUEUE_UNAVAILABLE",
            context={"queue_key": queue_key}
        )
        self.queue_key = queue_key


class QueueTimeoutError(QueueUnavailableError):
    """A queue command got no answer within its ceiling."""

    def __init__(
            self,
            queue_key: Optional[str],
            timeout_seconds: float,
            original_error: Optional[Exception] = None
    ):
        super().__init__(
            f"Queue command on {queue_key} exceeded {timeout_seconds}s",
            queue_key=queue_key,
            original_error=original_error
        )
        self.error_code = "QUEUE_TIMEOUT"
        self.timeout_seconds = timeout_seconds
        self.context["timeout_seconds"] = timeout_seconds
