"""
Custom exceptions package for Mention Service.

This package provides the HTTP-facing exception classes and the
FastAPI exception handler registration.
"""

from mention_service.exceptions.base_exceptions import (
    MentionServiceException,
    VerificationRejectedError,
    setup_exception_handlers,
)

__all__ = [
    "MentionServiceException",
    "VerificationRejectedError",
    "setup_exception_handlers",
]
