"""
Core exceptions for the mention pipeline.

These errors are raised by the Graph API client and caught by the
reply workflow; none of them reaches the webhook HTTP response.
"""

from typing import Dict, Any, Optional
from datetime import datetime, timezone


class CoreError(Exception):
    """Base exception for all core business logic errors."""

    def __init__(
            self,
            message: str,
            error_code: Optional[str] = None,
            details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat()
        }


class UpstreamError(CoreError):
    """Raised when the Graph API call fails or answers with a non-success status."""

    def __init__(
            self,
            message: str,
            status_code: Optional[int] = None,
            body: Optional[str] = None,
            operation: Optional[str] = None
    ):
        super().__init__(
            message=message,
            error_code="UPSTREAM_ERROR",
            details={
                "status_code": status_code,
                "body": body[:500] if body else body,
                "operation": operation
            }
        )
        self.status_code = status_code
        self.body = body
        self.operation = operation


class UpstreamTimeoutError(UpstreamError):
    """Raised when a Graph API call exceeds its time ceiling."""

    def __init__(self, operation: str, timeout_seconds: float):
        super().__init__(
            message=f"Graph API {operation} timed out after {timeout_seconds}s",
            operation=operation
        )
        self.error_code = "UPSTREAM_TIMEOUT"
        self.timeout_seconds = timeout_seconds
        self.details["timeout_seconds"] = timeout_seconds


class MissingCredentialError(CoreError):
    """Raised when a Graph API call is attempted without an access token."""

    def __init__(self, credential: str = "META_ACCESS_TOKEN", operation: Optional[str] = None):
        super().__init__(
            message=f"Missing credential {credential}",
            error_code="MISSING_CREDENTIAL",
            details={"credential": credential, "operation": operation}
        )
        self.credential = credential
        self.operation = operation
