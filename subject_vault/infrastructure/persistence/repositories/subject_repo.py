"""Subject repository. Returns application DTOs; never decrypts."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from subject_vault.application.dtos.subject import (
    SubjectListItem,
    SubjectObjection,
    SubjectRestrictions,
    SubjectSecret,
)
from subject_vault.core.constants import DEFAULT_CONSENT_FLAGS
from subject_vault.domain.enums import SubjectStatus
from subject_vault.domain.exceptions import SubjectWriteConflictException
from subject_vault.infrastructure.persistence.models.subject import Subject
from subject_vault.infrastructure.persistence.models.subject_key import SubjectKey
from subject_vault.infrastructure.persistence.models.subject_processor import (
    SubjectProcessor,
)
from subject_vault.infrastructure.persistence.repositories.base import BaseRepository
from subject_vault.shared.utils.datetime import ensure_utc


def _listable_for_processor(stmt: Any, processor_id: str) -> Any:
    """Join key and processor association; keep rows with ciphertext and key only."""
    return (
        stmt.join(SubjectKey, SubjectKey.subject_id == Subject.id)
        .join(SubjectProcessor, SubjectProcessor.subject_id == Subject.id)
        .where(
            SubjectProcessor.processor_id == processor_id,
            Subject.encrypted_personal_data.is_not(None),
            SubjectKey.key.is_not(None),
        )
    )


class SubjectRepository(BaseRepository[Subject]):
    """Subject record store."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Subject)

    async def _update_by_id(self, subject_id: str, **values: Any) -> int:
        """Run a single id-scoped UPDATE and return the matched row count."""
        result = await self.db.execute(
            update(Subject)
            .where(Subject.id == subject_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def get_status(self, subject_id: str) -> SubjectStatus | None:
        result = await self.db.execute(
            select(Subject.status).where(Subject.id == subject_id)
        )
        status = result.scalar_one_or_none()
        return SubjectStatus(status) if status is not None else None

    async def create_subject(
        self, subject_id: str, encrypted_personal_data: str
    ) -> None:
        """Insert a new subject. The only place default consent flags are applied.

        Raises SubjectWriteConflictException when another writer inserted the same id.
        """
        subject = Subject(
            id=subject_id,
            encrypted_personal_data=encrypted_personal_data,
            status=SubjectStatus.ACTIVE.value,
            **DEFAULT_CONSENT_FLAGS,
        )
        try:
            await self.create(subject)
        except IntegrityError as e:
            raise SubjectWriteConflictException(subject_id) from e

    async def update_personal_data(
        self, subject_id: str, encrypted_personal_data: str
    ) -> None:
        await self._update_by_id(
            subject_id,
            encrypted_personal_data=encrypted_personal_data,
            updated_at=func.now(),
        )

    async def reactivate(self, subject_id: str) -> None:
        await self._update_by_id(
            subject_id, status=SubjectStatus.ACTIVE.value, erased_at=None
        )

    async def mark_erased(
        self, subject_id: str, erased_at: datetime
    ) -> datetime | None:
        """Mark an active subject erased and return the stored erasure time.

        An already erased subject is left untouched so its first erased_at
        (and updated_at) is kept. Returns None when the subject does not exist.
        """
        await self.db.execute(
            update(Subject)
            .where(
                Subject.id == subject_id,
                Subject.status != SubjectStatus.ERASED.value,
            )
            .values(status=SubjectStatus.ERASED.value, erased_at=erased_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(
            select(Subject.erased_at).where(Subject.id == subject_id)
        )
        row = result.first()
        if row is None:
            return None
        return ensure_utc(row.erased_at) or erased_at

    async def get_secret(self, subject_id: str) -> SubjectSecret | None:
        """Return ciphertext joined with its key; None when either side is missing."""
        result = await self.db.execute(
            select(Subject.id, Subject.encrypted_personal_data, SubjectKey.key)
            .join(SubjectKey, SubjectKey.subject_id == Subject.id)
            .where(Subject.id == subject_id)
        )
        row = result.first()
        if row is None or row.encrypted_personal_data is None:
            return None
        return SubjectSecret(
            subject_id=row.id,
            encrypted_personal_data=row.encrypted_personal_data,
            key=row.key,
        )

    async def count_listable_for_processor(self, processor_id: str) -> int:
        result = await self.db.execute(
            _listable_for_processor(
                select(func.count(Subject.id)).select_from(Subject), processor_id
            )
        )
        return result.scalar() or 0

    async def list_for_processor(
        self, processor_id: str, skip: int, limit: int
    ) -> list[SubjectListItem]:
        result = await self.db.execute(
            _listable_for_processor(
                select(Subject.id, Subject.created_at), processor_id
            )
            .order_by(Subject.id.asc())
            .offset(skip)
            .limit(limit)
        )
        return [
            SubjectListItem(id=row.id, created_at=ensure_utc(row.created_at))
            for row in result.all()
        ]

    async def update_restrictions(
        self,
        subject_id: str,
        direct_marketing: bool,
        email_communication: bool,
        research: bool,
    ) -> int:
        return await self._update_by_id(
            subject_id,
            direct_marketing=direct_marketing,
            email_communication=email_communication,
            research=research,
        )

    async def get_restrictions(self, subject_id: str) -> SubjectRestrictions | None:
        result = await self.db.execute(
            select(
                Subject.direct_marketing, Subject.email_communication, Subject.research
            ).where(Subject.id == subject_id)
        )
        row = result.first()
        if row is None:
            return None
        return SubjectRestrictions(
            direct_marketing=row.direct_marketing,
            email_communication=row.email_communication,
            research=row.research,
        )

    async def update_objection(self, subject_id: str, objection: Any) -> int:
        return await self._update_by_id(subject_id, objection=objection)

    async def get_objection(self, subject_id: str) -> SubjectObjection | None:
        result = await self.db.execute(
            select(Subject.objection).where(Subject.id == subject_id)
        )
        row = result.first()
        return SubjectObjection(objection=row.objection) if row is not None else None
