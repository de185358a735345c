"""
Database connection management.
"""

from mention_service.database.redis_client import RedisConfig, RedisConnectionManager

__all__ = [
    "RedisConfig",
    "RedisConnectionManager",
]
