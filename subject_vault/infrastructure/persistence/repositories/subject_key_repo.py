"""Encryption key repository. Create, read and delete only; keys are never updated."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from subject_vault.domain.exceptions import SubjectWriteConflictException
from subject_vault.infrastructure.persistence.models.subject_key import SubjectKey
from subject_vault.infrastructure.persistence.repositories.base import BaseRepository


class SubjectKeyRepository(BaseRepository[SubjectKey]):
    """Encryption key store. One row per subject."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, SubjectKey)

    async def get_key(self, subject_id: str) -> str | None:
        result = await self.db.execute(
            select(SubjectKey.key).where(SubjectKey.subject_id == subject_id)
        )
        return result.scalar_one_or_none()

    async def create_key(self, subject_id: str, key: str) -> None:
        """Insert the key row. A second key for the same subject is a write conflict."""
        try:
            await self.create(SubjectKey(subject_id=subject_id, key=key))
        except IntegrityError as e:
            raise SubjectWriteConflictException(subject_id) from e

    async def delete_key(self, subject_id: str) -> int:
        """Delete the key row (crypto-shredding). Returns deleted row count."""
        result = await self.db.execute(
            delete(SubjectKey)
            .where(SubjectKey.subject_id == subject_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
