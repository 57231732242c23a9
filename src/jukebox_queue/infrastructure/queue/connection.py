"""Process-wide Redis connection pool shared by the queue and the metadata store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import redis.asyncio as redis
from redis.exceptions import RedisError

from jukebox_queue.domain.shared.exceptions import QueueError
from jukebox_queue.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ...config.settings import QueueConnectionOptions

logger = logging.getLogger(__name__)


class RedisConnectionManager:
    """Owns one connection pool from start-up to shutdown.

    Clients handed out by ``client`` all borrow connections from the same pool,
    so per-topic ordering is decided by Redis alone regardless of how many
    callers share it.
    """

    def __init__(self, options: QueueConnectionOptions, *, max_connections: int = 20) -> None:
        self._options = options
        self._max_connections = max_connections
        self._pool: redis.ConnectionPool | None = None
        self._client: redis.Redis | None = None

    def _create_pool(self) -> redis.ConnectionPool:
        password = (
            self._options.auth_token.get_secret_value() if self._options.auth_token else None
        )
        connection_class = redis.SSLConnection if self._options.ssl else redis.Connection
        return redis.ConnectionPool(
            connection_class=connection_class,
            host=self._options.host,
            port=self._options.port,
            db=self._options.db,
            password=password,
            decode_responses=True,
            max_connections=self._max_connections,
        )

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._pool = self._create_pool()
            self._client = redis.Redis(connection_pool=self._pool)
            logger.info(
                LogTemplates.QUEUE_CONNECTED,
                self._options.host,
                self._options.port,
                self._options.is_authenticated,
            )
        return self._client

    @property
    def is_open(self) -> bool:
        return self._client is not None

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except RedisError as e:
            raise QueueError(ErrorMessages.QUEUE_UNAVAILABLE.format(error=e)) from e

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None
        logger.info(LogTemplates.QUEUE_CLOSED)
