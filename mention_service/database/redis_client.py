"""
Redis Connection Management
==========================

Process-level Redis client for the mentions queue. The client is built
once when the application is created, handed to request handlers through
dependency providers, and closed when the application shuts down.

Managed services (Upstash, Vercel KV) are reached through a rediss://
URL with the credential either embedded or supplied as REDIS_PASSWORD.
"""

import asyncio
import time
from typing import Optional, Dict, Any
from dataclasses import dataclass
from urllib.parse import urlparse

from redis.asyncio import Redis, ConnectionPool
from redis.exceptions import RedisError
import structlog

from mention_service.config.constants import HEALTH_CHECK_TIMEOUT
from mention_service.config.settings import Settings

logger = structlog.get_logger(__name__)


@dataclass
class RedisConfig:
    """Redis configuration with secure defaults"""
    url: str = "redis://localhost:6379"
    password: Optional[str] = None

    # Connection pool settings
    max_connections: int = 20
    health_check_interval: int = 30

    # Timeout settings
    socket_connect_timeout: float = 3.0
    socket_timeout: float = 3.0

    decode_responses: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisConfig":
        return cls(
            url=str(settings.REDIS_URL),
            password=settings.REDIS_PASSWORD,
            socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
        )

    @property
    def host(self) -> Optional[str]:
        return urlparse(self.url).hostname

    def get_pool_kwargs(self) -> Dict[str, Any]:
        """
        Get connection pool parameters

        Returns:
            Dictionary of pool parameters
        """
        kwargs = {
            'max_connections': self.max_connections,
            'socket_connect_timeout': self.socket_connect_timeout,
            'socket_timeout': self.socket_timeout,
            'decode_responses': self.decode_responses,
            'health_check_interval': self.health_check_interval,
        }

        if self.password:
            kwargs['password'] = self.password

        return kwargs


class RedisConnectionManager:
    """
    Owns the Redis client lifetime for one process
    """

    def __init__(self, config: RedisConfig, client: Optional[Redis] = None):
        """
        Initialize connection manager

        Args:
            config: Redis configuration
            client: Pre-built client; when omitted a pooled client is created lazily
        """
        self.config = config
        self._client = client
        self._pool: Optional[ConnectionPool] = None

    @property
    def client(self) -> Redis:
        """Redis client; connections are opened on first command."""
        if self._client is None:
            self._pool = ConnectionPool.from_url(self.config.url, **self.config.get_pool_kwargs())
            self._client = Redis(connection_pool=self._pool)
            logger.info("Redis client created", host=self.config.host)
        return self._client

    async def health_check(self) -> Dict[str, Any]:
        """
        Ping Redis and report latency

        Returns:
            Health status information
        """
        start = time.perf_counter()
        try:
            await asyncio.wait_for(self.client.ping(), timeout=HEALTH_CHECK_TIMEOUT)
        except (asyncio.TimeoutError, RedisError, OSError) as e:
            logger.warning("Redis health check failed", error=str(e) or type(e).__name__)
            return {"status": "unhealthy", "error": str(e) or type(e).__name__}

        return {
            "status": "healthy",
            "response_time_ms": round((time.perf_counter() - start) * 1000, 2),
        }

    async def disconnect(self) -> None:
        """Close the client and its pool"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None

        logger.info("Disconnected from Redis")
