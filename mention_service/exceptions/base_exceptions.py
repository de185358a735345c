"""
HTTP-facing exceptions and FastAPI error handlers.

Only the synchronous parts of the webhook (the verification handshake and
framework-level routing errors) ever answer with an error. Everything that
runs after a notification is acknowledged reports through logs instead.
"""

import uuid
from typing import Any, Dict, Optional
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from mention_service.config.constants import (
    ErrorCategory,
    HTTP_STATUS_CODES,
    VERIFICATION_FAILED_BODY,
)
from mention_service.utils.logger import get_logger

logger = get_logger(__name__)

_CATEGORY_BY_STATUS = {code: category for category, code in HTTP_STATUS_CODES.items()}


class MentionServiceException(Exception):
    """
    Root of the exceptions that map to an HTTP status.

    ``message`` is for logs; ``user_message`` is the only text a caller sees.
    """

    def __init__(
            self,
            message: str,
            error_code: str = "INTERNAL_ERROR",
            status_code: int = 500,
            details: Optional[Dict[str, Any]] = None,
            category: ErrorCategory = ErrorCategory.INTERNAL,
            user_message: Optional[str] = None,
            retryable: bool = False,
            caused_by: Optional[Exception] = None
    ):
        super().__init__(message)

        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        self.category = category
        self.user_message = user_message or message
        self.retryable = retryable
        self.caused_by = caused_by
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Error body without request metadata; internal details are omitted."""
        return {
            "code": self.error_code,
            "message": self.user_message,
            "category": self.category.value,
            "timestamp": self.timestamp.isoformat(),
            "retryable": self.retryable,
        }

    def log_error(self, log: Optional[structlog.stdlib.BoundLogger] = None) -> None:
        """Log at warning for client errors and error for server errors."""
        log = log or logger
        fields: Dict[str, Any] = {
            "error_code": self.error_code,
            "error_category": self.category.value,
            "status_code": self.status_code,
        }
        if self.details:
            fields["details"] = self.details
        if self.caused_by is not None:
            fields["caused_by"] = f"{type(self.caused_by).__name__}: {self.caused_by}"

        level = "error" if self.status_code >= 500 else "warning"
        getattr(log, level)(self.message, **fields)


class VerificationRejectedError(MentionServiceException):
    """Webhook subscription handshake did not match the configured token."""

    def __init__(
            self,
            message: str = "Webhook verification rejected",
            reason: Optional[str] = None,
            **kwargs
    ):
        details = kwargs.pop("details", {})
        if reason:
            details["reason"] = reason

        super().__init__(
            message=message,
            error_code="VERIFICATION_REJECTED",
            status_code=403,
            category=ErrorCategory.AUTHORIZATION,
            details=details,
            user_message=VERIFICATION_FAILED_BODY,
            **kwargs
        )


def _error_response(
        request: Request,
        status_code: int,
        error: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "error",
            "error": error,
            "meta": {"path": request.url.path, "method": request.method},
        },
        headers=headers
    )


async def mention_service_exception_handler(
        request: Request,
        exc: MentionServiceException
) -> JSONResponse:
    exc.log_error()
    return _error_response(request, exc.status_code, exc.to_dict())


async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException
) -> JSONResponse:
    """Routing errors (404, 405); the Allow header of a 405 is kept."""
    category = _CATEGORY_BY_STATUS.get(exc.status_code, ErrorCategory.VALIDATION)

    logger.warning(
        "HTTP exception occurred",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        method=request.method
    )

    return _error_response(
        request,
        exc.status_code,
        {
            "code": f"HTTP_{exc.status_code}",
            "message": exc.detail,
            "category": category.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]

    logger.warning("Request validation failed", validation_errors=errors, path=request.url.path)

    return _error_response(
        request,
        400,
        {
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "category": ErrorCategory.VALIDATION.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "details": {"validation_errors": errors},
        }
    )


async def generic_exception_handler(
        request: Request,
        exc: Exception
) -> JSONResponse:
    """Last resort for synchronous route failures; the error id ties the response to the log."""
    error_id = str(uuid.uuid4())

    logger.error(
        "Unexpected exception occurred",
        error_id=error_id,
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
        exc_info=exc
    )

    return _error_response(
        request,
        500,
        {
            "code": "INTERNAL_SERVER_ERROR",
            "message": "An unexpected error occurred",
            "category": ErrorCategory.INTERNAL.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "error_id": error_id,
        }
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the handlers above on the application."""
    app.add_exception_handler(MentionServiceException, mention_service_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
