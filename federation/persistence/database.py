"""Database connection and session management.

Provides async database engine and session factory for PostgreSQL.
"""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from federation.config import Settings
from federation.domain.error import ConflictError, StoreUnavailableError


def create_engine(settings: Settings) -> AsyncEngine:
    """Create async database engine.

    Every statement is bounded by ``command_timeout`` and every pool checkout
    by ``pool_timeout``.

    Args:
        settings: Application settings with database configuration

    Returns:
        Configured async engine
    """
    return create_async_engine(
        settings.database.url,
        echo=settings.debug,  # Log SQL queries in debug mode
        pool_pre_ping=True,  # Verify connections before using
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
        pool_timeout=settings.database.pool_timeout,
        connect_args={"command_timeout": settings.database.command_timeout},
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


@contextmanager
def translate_errors(resource: str, operation: str) -> Iterator[None]:
    """Map database failures onto domain errors.

    Unique-constraint violations become ConflictError; everything else,
    including timeouts, becomes StoreUnavailableError.

    Args:
        resource: Resource being written or read (for messages)
        operation: Repository operation name
    """
    try:
        yield
    except IntegrityError as e:
        raise ConflictError(resource, str(e.orig)) from e
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        raise StoreUnavailableError("database", operation, e) from e
