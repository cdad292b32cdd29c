"""
Redis Store - Production backend.

Each table is a Redis hash (HGET / HSET / HDEL). Atomic batches are
sent as a MULTI/EXEC pipeline, so the game record and both key
bindings commit together or not at all.

Connections come from one process-wide ConnectionPool opened at
startup and disconnected at shutdown. Every command borrows a
connection from the pool and returns it when done.
"""

from __future__ import annotations
import logging
import threading

import redis
from redis.exceptions import RedisError

from ..errors import TransientStorageError
from .backend import KeyValueStore, Write

logger = logging.getLogger(__name__)


class RedisStore(KeyValueStore):
    """
    KeyValueStore over Redis hashes.

    Args:
        url: Redis URL, e.g. redis://localhost:2187
        max_connections: Pool size
        socket_timeout: Seconds before a connect/read is abandoned
        client: Pre-built client (tests); skips pool creation
    """

    def __init__(
        self,
        url: str = "redis://localhost:2187",
        max_connections: int = 50,
        socket_timeout: float = 5.0,
        client: redis.Redis | None = None,
    ):
        self.url = url
        self.max_connections = max_connections
        self.socket_timeout = socket_timeout
        self._pool: redis.ConnectionPool | None = None
        self._client = client
        self._lock = threading.Lock()

    def open(self) -> None:
        with self._lock:
            if self._client is not None:
                return
            self._pool = redis.ConnectionPool.from_url(
                self.url,
                max_connections=self.max_connections,
                socket_timeout=self.socket_timeout,
                socket_connect_timeout=self.socket_timeout,
                health_check_interval=30,
                decode_responses=True,
            )
            self._client = redis.Redis(connection_pool=self._pool)
        logger.info("Redis pool opened (max_connections=%d)", self.max_connections)

    def close(self) -> None:
        """Disconnect a pool opened by open(). An injected client is left alone."""
        with self._lock:
            if self._pool is None:
                return
            self._pool.disconnect()
            self._pool = None
            self._client = None
        logger.info("Redis pool closed")

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self.open()
        return self._client

    def get(self, table: str, key: str) -> str | None:
        try:
            return self.client.hget(table, key)
        except RedisError as e:
            logger.warning("Redis HGET %s failed: %s", table, e)
            raise TransientStorageError(f"Storage unavailable: {e}") from e

    def set(self, table: str, key: str, value: str) -> None:
        try:
            self.client.hset(table, key, value)
        except RedisError as e:
            logger.warning("Redis HSET %s failed: %s", table, e)
            raise TransientStorageError(f"Storage unavailable: {e}") from e

    def delete(self, table: str, key: str) -> None:
        try:
            self.client.hdel(table, key)
        except RedisError as e:
            logger.warning("Redis HDEL %s failed: %s", table, e)
            raise TransientStorageError(f"Storage unavailable: {e}") from e

    def atomic(self, writes: list[Write]) -> None:
        if not writes:
            return
        try:
            with self.client.pipeline(transaction=True) as pipe:
                for write in writes:
                    if write.is_delete:
                        pipe.hdel(write.table, write.key)
                    else:
                        pipe.hset(write.table, write.key, write.value)
                pipe.execute()
        except RedisError as e:
            logger.warning("Redis transaction of %d writes failed: %s", len(writes), e)
            raise TransientStorageError(f"Transaction failed: {e}") from e
