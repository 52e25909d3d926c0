"""Async SQLAlchemy engine lifecycle and transactional sessions.

Database is an explicitly constructed persistence handle: open() it once at
process start, close() it at shutdown, and hand out sessions with session().
Nothing is created at import time.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""


class Database:
    def __init__(self, url: str, echo: bool = False) -> None:
        self._url = url
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not open; call open() first")
        return self._engine

    def open(self) -> None:
        """Create the engine and session factory.  Idempotent."""
        if self._engine is not None:
            return
        self._engine = create_async_engine(self._url, echo=self._echo, pool_pre_ping=True)
        self._sessionmaker = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def close(self) -> None:
        """Dispose of the connection pool.  Safe to call on a closed handle."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session wrapped in a single transaction.

        The transaction commits when the block exits normally and rolls back
        when it raises, so every write made through the yielded session is
        all-or-nothing.
        """
        if self._sessionmaker is None:
            raise RuntimeError("Database is not open; call open() first")
        async with self._sessionmaker() as session:
            async with session.begin():
                yield session
