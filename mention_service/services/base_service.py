"""
Base Service Class

Abstract base class for services providing common logging helpers.
"""

from abc import ABC
from typing import Any, Dict

import structlog


class BaseService(ABC):
    """Abstract base class for all services"""

    SENSITIVE_FIELDS = (
        "password", "token", "secret", "credential", "authorization", "api_key"
    )

    def __init__(self):
        self.logger = structlog.get_logger(self.__class__.__name__)
        self.service_name = self.__class__.__name__

    def log_operation(self, operation: str, **kwargs) -> None:
        """Log service operation with standard fields"""
        self.logger.info(
            "Service operation",
            service=self.service_name,
            operation=operation,
            **self._sanitize_log_data(kwargs)
        )

    def log_failure(self, operation: str, error: Exception, **context) -> None:
        """Log a caught failure that ends processing for one item"""
        self.logger.error(
            "Service operation failed",
            service=self.service_name,
            operation=operation,
            error_type=type(error).__name__,
            error_message=str(error),
            **self._sanitize_log_data(context)
        )

    def _sanitize_log_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Remove sensitive data from log entries"""
        sanitized = {}
        for key, value in data.items():
            if any(sensitive in key.lower() for sensitive in self.SENSITIVE_FIELDS):
                sanitized[key] = "[REDACTED]"
            elif isinstance(value, dict):
                sanitized[key] = self._sanitize_log_data(value)
            else:
                sanitized[key] = value

        return sanitized
