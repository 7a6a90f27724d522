from __future__ import annotations

import asyncio
import json
from typing import Any, cast
from weakref import WeakKeyDictionary

import asyncpg
import structlog
from dotenv import load_dotenv

from src.config.db_settings import PoolConfig

LOGGER = structlog.get_logger(__name__)

_POOL_LOCKS: "WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Lock]" = WeakKeyDictionary()
_POOLS: "WeakKeyDictionary[asyncio.AbstractEventLoop, asyncpg.Pool]" = WeakKeyDictionary()
_last_pool: asyncpg.Pool | None = None


async def init_pool(config: PoolConfig | None = None) -> asyncpg.Pool:
    """Initialise the asyncpg pool for the running loop if it does not already exist."""
    global _last_pool
    loop = asyncio.get_running_loop()
    existing = _POOLS.get(loop)
    if existing is not None:
        _last_pool = existing
        return existing

    lock = _get_pool_lock(loop)

    async with lock:
        pool = _POOLS.get(loop)
        if pool is not None:
            return pool

        if config is None:
            load_dotenv(override=False)
            pool_config = PoolConfig.model_validate({})  # Load from environment variables
        else:
            pool_config = config

        _apg = cast(Any, asyncpg)
        pool = await _apg.create_pool(**pool_config.pool_kwargs(), init=_configure_connection)
        _POOLS[loop] = pool
        _last_pool = pool

        LOGGER.info(
            "db.pool.initialised",
            min_size=pool_config.min_size,
            max_size=pool_config.max_size,
        )
        return pool


def get_pool() -> asyncpg.Pool:
    """Return the active pool or raise if it has not been initialised."""
    loop = _maybe_get_running_loop()
    if loop is not None:
        pool = _POOLS.get(loop)
        if pool is not None:
            return pool
    if _last_pool is not None:
        return _last_pool
    raise RuntimeError("Database pool not initialised. Call init_pool() first.")


async def close_pool() -> None:
    """Close the pool if one exists."""
    global _last_pool
    loop = asyncio.get_running_loop()
    lock = _get_pool_lock(loop)

    async with lock:
        pool = _POOLS.pop(loop, None)

    if pool is not None:
        await pool.close()
        if _last_pool is pool:
            _last_pool = None
        LOGGER.info("db.pool.closed")


def _get_pool_lock(loop: asyncio.AbstractEventLoop | None = None) -> asyncio.Lock:
    if loop is None:
        loop = asyncio.get_running_loop()
    lock = _POOL_LOCKS.get(loop)
    if lock is None:
        lock = asyncio.Lock()
        _POOL_LOCKS[loop] = lock
    return lock


def _maybe_get_running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


async def _configure_connection(connection: asyncpg.Connection) -> None:
    # Embedded relations are aggregated with json_agg; decode them to Python objects.
    _conn_any = cast(Any, connection)
    for type_name in ("json", "jsonb"):
        await _conn_any.set_type_codec(
            type_name,
            schema="pg_catalog",
            encoder=json.dumps,
            decoder=json.loads,
            format="text",
        )
