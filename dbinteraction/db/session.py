"""
Async engine/connection management.
Challenge: Connection pooling per named connection string, proper cleanup.
Design: One AsyncEngine per URL, created lazily and reused; each call gets its own
transactional connection (commit on success, rollback on error).
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine


class ConnectionFactory:
    """Hands out connections for connection strings. Owns the engines it creates."""

    def __init__(self, echo: bool = False):
        self.echo = echo
        self._engines: dict[str, AsyncEngine] = {}

    def get_engine(self, connection_string: str) -> AsyncEngine:
        engine = self._engines.get(connection_string)
        if engine is None:
            options = {"echo": self.echo}
            if make_url(connection_string).get_backend_name() != "sqlite":
                options["pool_pre_ping"] = True  # Verify connections before use
            engine = create_async_engine(connection_string, **options)
            self._engines[connection_string] = engine
        return engine

    @asynccontextmanager
    async def connect(self, connection_string: str) -> AsyncIterator[AsyncConnection]:
        """Yield a connection inside a transaction. Rolls back if the body raises."""
        async with self.get_engine(connection_string).begin() as conn:
            yield conn

    async def dispose(self) -> None:
        """Close all pooled connections (application shutdown)."""
        engines, self._engines = self._engines, {}
        for engine in engines.values():
            await engine.dispose()
