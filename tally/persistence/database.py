"""Database connection and session management.

Provides async database engine and session factory for PostgreSQL, and the
helpers repositories use to turn driver errors into domain errors.
"""

from contextlib import asynccontextmanager, contextmanager
from typing import AsyncGenerator, Iterator

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from tally.config import Settings
from tally.domain.error import ConflictError, StorageUnavailableError


def create_engine(settings: Settings) -> AsyncEngine:
    """Create async database engine.

    Args:
        settings: Application settings with database URL

    Returns:
        Configured async engine
    """
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,  # Log SQL queries in debug mode
        pool_pre_ping=True,  # Verify connections before using
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create async session factory.

    Args:
        engine: Database engine

    Returns:
        Session factory for creating database sessions
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Don't expire objects after commit
        autoflush=False,  # Manual flushing for better control
        autocommit=False,  # Explicit transaction management
    )


@asynccontextmanager
async def get_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Get database session with automatic cleanup.

    Args:
        session_factory: Factory for creating sessions

    Yields:
        Database session
    """
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Translate SQLAlchemy errors raised in the block into domain errors.

    Uniqueness and other integrity violations become ``ConflictError``;
    everything else the driver raises becomes ``StorageUnavailableError``.

    Args:
        operation: Name of the repository operation, for the error message
    """
    try:
        yield
    except IntegrityError as e:
        raise ConflictError(f"Conflict during {operation}: {e.orig}") from e
    except DBAPIError as e:
        raise StorageUnavailableError(operation, str(e.orig)) from e
    except PoolTimeoutError as e:
        raise StorageUnavailableError(operation, str(e)) from e


@asynccontextmanager
async def savepoint(session: AsyncSession, operation: str) -> AsyncGenerator[None, None]:
    """Run writes inside a savepoint with error translation.

    A failed statement only rolls back to the savepoint, so the rest of the
    request's transaction (a vote already recorded, other posts of a ranking
    page) stays usable.

    Args:
        session: Session of the current unit of work
        operation: Name of the repository operation, for the error message
    """
    with storage_errors(operation):
        async with session.begin_nested():
            yield
