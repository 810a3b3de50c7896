"""Unit of work: one AsyncSession and one transaction per logical vault operation.

The unit of work is the explicit transaction handle threaded through every
storage call of an operation; repositories never open sessions themselves.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from subject_vault.infrastructure.persistence.repositories import (
    SubjectKeyRepository,
    SubjectProcessorRepository,
    SubjectRepository,
)


class SqlAlchemyUnitOfWork:
    """Async context manager over a session from the given factory.

    On clean exit the transaction is committed (rolled back when read_only);
    on exception it is rolled back and the exception propagates unchanged.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        read_only: bool = False,
    ) -> None:
        self._session_factory = session_factory
        self._read_only = read_only
        self.session: AsyncSession | None = None

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        self.session = self._session_factory()
        self.subjects = SubjectRepository(self.session)
        self.keys = SubjectKeyRepository(self.session)
        self.processors = SubjectProcessorRepository(self.session)
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        session = self.session
        if session is None:
            return
        try:
            if exc_type is None and not self._read_only:
                await session.commit()
            else:
                await session.rollback()
        finally:
            await session.close()
            self.session = None


class SqlAlchemyUnitOfWorkFactory:
    """Callable producing a fresh unit of work per operation."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    def __call__(self, *, read_only: bool = False) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(self._session_factory, read_only=read_only)
