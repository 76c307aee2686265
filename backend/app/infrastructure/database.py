"""Database Session Manager — async connection pool, startup connect, and readiness state.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - All SQLAlchemy exceptions mapped to DatabaseError (core/errors.py)
    - connect() never raises: its outcome is logged and recorded in `state`
    - Sessions work while state is PENDING; the engine connects on demand

Design Decisions:
    - One manager per app, held on app.state.database and injected via get_db
      (no module-level singleton, tests build their own)
    - Engine created lazily: an unparsable URL fails the connect attempt
      (logged) instead of crashing app construction
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from app.core.domain_types import ConnectionState
from app.core.errors import DatabaseError
from app.db.base import Base
import app.models  # noqa: F401  (populates Base.metadata)

logger = logging.getLogger(__name__)


def _engine_options(database_url: str, pool_size: int, max_overflow: int) -> dict:
    """SQLite pools reject sizing arguments; everything else gets them."""
    options = {"pool_pre_ping": True}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
        )
    return options


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and readiness state."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        create_schema: bool = True,
    ):
        self.database_url = database_url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.create_schema = create_schema
        self.state = ConnectionState.PENDING
        self.last_error: str | None = None
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    def _ensure_engine(self) -> None:
        if self._engine is not None:
            return
        self._engine = create_async_engine(
            self.database_url,
            **_engine_options(
                self.database_url, self.pool_size, self.max_overflow,
            ),
        )
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @property
    def engine(self) -> AsyncEngine:
        self._ensure_engine()
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        self._ensure_engine()
        return self._session_factory

    async def connect(self) -> ConnectionState:
        """Open a first connection (and create tables if configured); record the outcome."""
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                if self.create_schema:
                    await conn.run_sync(Base.metadata.create_all)
        except Exception as e:
            self.state = ConnectionState.FAILED
            self.last_error = str(e)
            logger.error(
                f"Database connection failed: {e}",
                extra={"database_state": self.state.value},
            )
            return self.state
        self.state = ConnectionState.CONNECTED
        self.last_error = None
        logger.info(
            "Connected to database successfully",
            extra={"database_state": self.state.value},
        )
        return self.state

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        try:
            factory = self.session_factory
        except SQLAlchemyError as e:
            logger.error(f"DB engine unavailable: {e}")
            raise DatabaseError("Database is not configured", "connect")
        session = factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise DatabaseError("Integrity constraint violated", "commit")
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise DatabaseError("Connection or operational error", "execute")
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise DatabaseError("Database driver error", "query")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown")
        finally:
            await session.close()

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    database: DatabaseSessionManager = request.app.state.database
    async with database.session() as session:
        yield session
