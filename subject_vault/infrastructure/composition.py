"""Composition root: builds SubjectVaultService from infrastructure implementations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from subject_vault.application.use_cases.subjects import SubjectVaultService
from subject_vault.infrastructure.external.encryption import (
    FernetCipher,
    FernetKeyGenerator,
)
from subject_vault.infrastructure.persistence.unit_of_work import (
    SqlAlchemyUnitOfWorkFactory,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from subject_vault.application.interfaces.services import IErasureLedger
    from subject_vault.core.config import Settings


def build_subject_vault_service(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    ledger: IErasureLedger,
) -> SubjectVaultService:
    """Wire the vault service: SQLAlchemy unit of work, Fernet encryption, given ledger."""
    return SubjectVaultService(
        SqlAlchemyUnitOfWorkFactory(session_factory),
        FernetCipher(),
        FernetKeyGenerator(),
        ledger,
        page_size=settings.vault_page_size,
        allow_reinitialize_after_erasure=settings.allow_reinitialize_after_erasure,
    )
