"""Database utilities: the asyncpg pool wrapper and schema initialization."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import asyncpg

from .errors import ConnectFailed, PoolExhausted, SchemaInitFailed, StorageError
from .settings import Settings

logger = logging.getLogger(__name__)

CREATE_TODO_TABLE = """
CREATE TABLE IF NOT EXISTS todo (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL CHECK (length(trim(name)) > 0),
    checked BOOLEAN NOT NULL DEFAULT FALSE
);
"""

HEALTH_QUERY = "SELECT 1"

_CONNECT_ERRORS = (OSError, asyncpg.PostgresError, asyncpg.InterfaceError)


class StoragePool:
    """Bounded set of reusable connections with guaranteed release."""

    def __init__(self, pool: Any, acquire_timeout: float) -> None:
        self._pool = pool
        self.acquire_timeout = acquire_timeout

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        try:
            conn = await self._pool.acquire(timeout=self.acquire_timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("Timed out after %ss waiting for a database connection", self.acquire_timeout)
            raise PoolExhausted() from exc
        except _CONNECT_ERRORS as exc:
            logger.error("Could not open a database connection: %s", exc)
            raise ConnectFailed() from exc

        try:
            yield conn
        finally:
            await self._pool.release(conn)

    async def close(self) -> None:
        await self._pool.close()
        logger.info("Database pool closed")


async def create_pool(settings: Settings) -> StoragePool:
    try:
        pool = await asyncpg.create_pool(
            dsn=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            max_inactive_connection_lifetime=settings.pool_max_idle_seconds,
            timeout=settings.connect_timeout_seconds,
        )
    except (asyncio.TimeoutError, *_CONNECT_ERRORS) as exc:
        logger.error("Failed to create database pool: %s", exc)
        raise ConnectFailed() from exc

    logger.info(
        "Database pool created (min_size=%s, max_size=%s)",
        settings.pool_min_size,
        settings.pool_max_size,
    )
    return StoragePool(pool, acquire_timeout=settings.pool_timeout_seconds)


async def init_db(pool: StoragePool) -> None:
    try:
        async with pool.acquire() as conn:
            await conn.execute(CREATE_TODO_TABLE)
    except (ConnectFailed, PoolExhausted) as exc:
        raise SchemaInitFailed() from exc
    except _CONNECT_ERRORS as exc:
        logger.error("Failed to create todo table: %s", exc)
        raise SchemaInitFailed() from exc
    logger.info("Database schema ready")


async def ping(pool: StoragePool) -> None:
    async with pool.acquire() as conn:
        try:
            await conn.fetchval(HEALTH_QUERY)
        except _CONNECT_ERRORS as exc:
            logger.error("Health query failed: %s", exc)
            raise StorageError() from exc
