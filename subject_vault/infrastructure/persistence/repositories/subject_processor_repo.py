"""Subject-processor association repository."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from subject_vault.domain.exceptions import SubjectWriteConflictException
from subject_vault.infrastructure.persistence.models.subject_processor import (
    SubjectProcessor,
)
from subject_vault.infrastructure.persistence.repositories.base import BaseRepository


class SubjectProcessorRepository(BaseRepository[SubjectProcessor]):
    """Processor association store (many-to-many)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, SubjectProcessor)

    async def exists(self, subject_id: str, processor_id: str) -> bool:
        result = await self.db.execute(
            select(SubjectProcessor.subject_id).where(
                SubjectProcessor.subject_id == subject_id,
                SubjectProcessor.processor_id == processor_id,
            )
        )
        return result.first() is not None

    async def add(self, subject_id: str, processor_id: str) -> None:
        try:
            await self.create(
                SubjectProcessor(subject_id=subject_id, processor_id=processor_id)
            )
        except IntegrityError as e:
            raise SubjectWriteConflictException(subject_id) from e

    async def delete_for_subject(self, subject_id: str) -> int:
        result = await self.db.execute(
            delete(SubjectProcessor)
            .where(SubjectProcessor.subject_id == subject_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
