"""Pytest configuration and fixtures for the subject vault.

Integration fixtures run the real ORM models, Fernet cipher and unit of work
against an in-memory SQLite database (aiosqlite). The ledger is a recording
double so tests can assert when and how often it was called.
"""

from collections.abc import Awaitable, Callable
from typing import Any

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from subject_vault.application.dtos.subject import LedgerReceipt
from subject_vault.application.use_cases.subjects import SubjectVaultService
from subject_vault.infrastructure.external.encryption import FernetCipher, FernetKeyGenerator
from subject_vault.infrastructure.persistence.database import (
    build_session_factory,
    create_schema,
)
from subject_vault.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWorkFactory
from subject_vault.shared.utils.datetime import utc_now


class RecordingLedger:
    """Ledger double: records every call, optionally runs a hook, optionally fails."""

    def __init__(
        self,
        fail_with: Exception | None = None,
        on_call: Callable[[str], Awaitable[None]] | None = None,
    ) -> None:
        self.calls: list[str] = []
        self.fail_with = fail_with
        self.on_call = on_call

    async def record_erasure(self, subject_id: str) -> LedgerReceipt:
        self.calls.append(subject_id)
        if self.on_call is not None:
            await self.on_call(subject_id)
        if self.fail_with is not None:
            raise self.fail_with
        return LedgerReceipt(
            subject_id=subject_id,
            transaction_id=f"tx-{len(self.calls)}",
            recorded_at=utc_now(),
        )


@pytest.fixture
async def engine() -> AsyncEngine:
    """In-memory SQLite engine with the vault schema. One shared connection (StaticPool)."""
    eng = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_schema(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(engine)


@pytest.fixture
def ledger() -> RecordingLedger:
    return RecordingLedger()


@pytest.fixture
def make_vault(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., SubjectVaultService]:
    """Build a vault over the test database; keyword args override ledger and options."""

    def _make(ledger: Any = None, **options: Any) -> SubjectVaultService:
        return SubjectVaultService(
            SqlAlchemyUnitOfWorkFactory(session_factory),
            FernetCipher(),
            FernetKeyGenerator(),
            ledger if ledger is not None else RecordingLedger(),
            **options,
        )

    return _make


@pytest.fixture
def vault(
    make_vault: Callable[..., SubjectVaultService], ledger: RecordingLedger
) -> SubjectVaultService:
    return make_vault(ledger)


@pytest.fixture
def count_rows(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[int]]:
    """Return an async helper counting rows of a model matching column == value filters."""

    async def _count(model: Any, **filters: Any) -> int:
        stmt = select(func.count()).select_from(model)
        for column, value in filters.items():
            stmt = stmt.where(getattr(model, column) == value)
        async with session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar_one()

    return _count
