"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

from subject_vault.domain.enums import SubjectStatus

if TYPE_CHECKING:
    from subject_vault.application.dtos.subject import (
        SubjectListItem,
        SubjectObjection,
        SubjectRestrictions,
        SubjectSecret,
    )


class ISubjectRepository(Protocol):
    """Protocol for the subject record store."""

    async def get_status(self, subject_id: str) -> SubjectStatus | None:
        """Return the subject status, or None when no row exists."""

    async def create_subject(
        self, subject_id: str, encrypted_personal_data: str
    ) -> None:
        """Insert a new subject with default consent flags."""

    async def update_personal_data(
        self, subject_id: str, encrypted_personal_data: str
    ) -> None:
        """Replace ciphertext and bump updated_at."""

    async def reactivate(self, subject_id: str) -> None:
        """Set status back to active and clear erased_at."""

    async def mark_erased(
        self, subject_id: str, erased_at: datetime
    ) -> datetime | None:
        """Set status to erased once; return the stored erased_at (None when no such subject)."""

    async def get_secret(self, subject_id: str) -> SubjectSecret | None:
        """Return ciphertext joined with its key, or None (never existed or erased)."""

    async def count_listable_for_processor(self, processor_id: str) -> int:
        """Count subjects linked to processor with non-null ciphertext and key."""

    async def list_for_processor(
        self, processor_id: str, skip: int, limit: int
    ) -> list[SubjectListItem]:
        """Return one page of listable subjects ordered by id ascending."""

    async def update_restrictions(
        self,
        subject_id: str,
        direct_marketing: bool,
        email_communication: bool,
        research: bool,
    ) -> int:
        """Update consent flags; return affected row count."""

    async def get_restrictions(self, subject_id: str) -> SubjectRestrictions | None:
        """Return consent flags or None."""

    async def update_objection(self, subject_id: str, objection: Any) -> int:
        """Update objection; return affected row count."""

    async def get_objection(self, subject_id: str) -> SubjectObjection | None:
        """Return objection or None."""


class ISubjectKeyRepository(Protocol):
    """Protocol for the encryption key store (no update operation by design of the vault)."""

    async def get_key(self, subject_id: str) -> str | None:
        """Return key material for subject, or None."""

    async def create_key(self, subject_id: str, key: str) -> None:
        """Insert the key row for subject."""

    async def delete_key(self, subject_id: str) -> int:
        """Delete the key row; return deleted row count."""


class IProcessorAssociationRepository(Protocol):
    """Protocol for subject-processor associations."""

    async def exists(self, subject_id: str, processor_id: str) -> bool:
        """Return True when the association exists."""

    async def add(self, subject_id: str, processor_id: str) -> None:
        """Insert the association."""

    async def delete_for_subject(self, subject_id: str) -> int:
        """Delete all associations of subject; return deleted row count."""


class IVaultUnitOfWork(Protocol):
    """One session and one transaction shared by all repositories of a logical operation.

    Used as an async context manager: commits on clean exit, rolls back on error.
    """

    subjects: ISubjectRepository
    keys: ISubjectKeyRepository
    processors: IProcessorAssociationRepository

    async def __aenter__(self) -> IVaultUnitOfWork: ...

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None: ...
