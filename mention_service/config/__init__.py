"""
Configuration package for Mention Service.

This package provides centralized configuration management with
environment-based settings, validation, and constants.
"""

from mention_service.config.settings import get_settings, reload_settings, Settings
from mention_service.config.constants import (
    SERVICE_NAME,
    SERVICE_VERSION,
    WEBHOOK_PATH,
    DEFAULT_MENTIONS_QUEUE_KEY,
)

__all__ = [
    "get_settings",
    "reload_settings",
    "Settings",
    "SERVICE_NAME",
    "SERVICE_VERSION",
    "WEBHOOK_PATH",
    "DEFAULT_MENTIONS_QUEUE_KEY",
]
