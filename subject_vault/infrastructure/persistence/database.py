"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Schema is managed by Alembic migrations in production; create_schema()
builds the tables directly for local development and tests.

Engines are built from Settings by the runtime lifespan, so importing this
module does not trigger Settings validation.
"""

from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from subject_vault.core.config import Settings
from subject_vault.domain.exceptions import SqlNotConfiguredException


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def build_engine(settings: Settings) -> AsyncEngine:
    """Create an async engine from settings.

    Pool and driver options apply to PostgreSQL (asyncpg) only; other URLs
    (e.g. sqlite+aiosqlite) use the dialect defaults.

    Raises:
        SqlNotConfiguredException: DATABASE_URL is empty.
    """
    if not settings.database_url:
        raise SqlNotConfiguredException()
    kwargs: dict[str, Any] = {"echo": settings.database_echo}
    if "postgresql" in settings.database_url:
        kwargs.update(
            pool_pre_ping=True,
            pool_size=settings.db_pool_size if settings.db_pool_size is not None else 20,
            max_overflow=(
                settings.db_max_overflow if settings.db_max_overflow is not None else 30
            ),
            pool_recycle=3600,
            connect_args={
                "command_timeout": (
                    settings.db_command_timeout
                    if settings.db_command_timeout is not None
                    else 60
                )
            },
        )
    return create_async_engine(settings.database_url, **kwargs)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Return the session factory used by every unit of work."""
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )


async def create_schema(bind: AsyncEngine) -> None:
    """Create all vault tables (development and tests; production uses Alembic)."""
    # Registers the models on Base.metadata
    import subject_vault.infrastructure.persistence.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
