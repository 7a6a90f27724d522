"""Lightweight typing protocols for the relational data source.

Only the small surface area the roster gateway uses is described here. Real
objects from `asyncpg` satisfy these protocols at runtime (structural
typing), and so do the in-memory doubles used by the tests.
"""

from __future__ import annotations

from typing import Any, AsyncContextManager, Protocol


class ConnectionProtocol(Protocol):
    async def fetch(
        self, query: Any, *args: Any, timeout: float | None = None  # noqa: ASYNC109
    ) -> list[Any]: ...


class PoolProtocol(Protocol):
    def acquire(
        self, *, timeout: float | None = None
    ) -> AsyncContextManager[ConnectionProtocol]: ...


__all__ = [
    "ConnectionProtocol",
    "PoolProtocol",
]
