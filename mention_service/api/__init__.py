"""
API Package
HTTP routes of the Mention Service.
"""

from .health_routes import router as health_router
from .webhook_routes import router as webhook_router

__all__ = [
    "health_router",
    "webhook_router",
]
