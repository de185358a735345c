"""
Mention Service - Instagram mention intake.

This package receives Meta webhook notifications, queues one job per
mention for downstream workers, and can answer mentions with a reply.
"""

__version__ = "1.0.0"
__description__ = "Instagram mention webhook receiver and job producer"

# Package metadata
__title__ = "instagram-mention-service"
__license__ = "MIT"

# Semantic version components
VERSION_INFO = (1, 0, 0)

from mention_service.config.settings import get_settings
from mention_service.utils.logger import get_logger

__all__ = [
    "__version__",
    "__description__",
    "VERSION_INFO",
    "get_settings",
    "get_logger",
]
