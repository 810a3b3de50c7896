"""Subject vault use cases: encrypted personal data, consent flags and erasure.

Personal data is stored encrypted under a per-subject key. Erasure deletes
the key (crypto-shredding) and the processor associations in one
transaction, then records the erasure on the external ledger once that
transaction has committed. The subject row itself is kept for audit.
"""

from __future__ import annotations

import json
import math
from collections.abc import Callable
from datetime import datetime
from typing import Any

from subject_vault.application.dtos.subject import (
    ErasureResult,
    Paging,
    SubjectObjection,
    SubjectPage,
    SubjectRestrictions,
)
from subject_vault.application.interfaces.repositories import IVaultUnitOfWork
from subject_vault.application.interfaces.services import (
    ICipher,
    IErasureLedger,
    IKeyGenerator,
)
from subject_vault.core.constants import DEFAULT_PAGE_SIZE
from subject_vault.domain.enums import SubjectStatus
from subject_vault.domain.exceptions import (
    DecryptionException,
    ForbiddenException,
    LedgerNotificationException,
    ResourceNotFoundException,
    SubjectErasedException,
    ValidationException,
)
from subject_vault.shared.telemetry.logging import get_logger
from subject_vault.shared.telemetry.tracing import add_span_event, traced
from subject_vault.shared.utils.datetime import utc_now

logger = get_logger(__name__)

_SUBJECT = "subject"

UnitOfWorkFactory = Callable[..., IVaultUnitOfWork]


def _deserialize(plaintext: bytes) -> Any:
    """Parse decrypted personal data (JSON)."""
    try:
        return json.loads(plaintext.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecryptionException("Decrypted personal data is not valid JSON") from e


def _ensure_single_row(subject_id: str, updated: int) -> None:
    """Translate the row count of an id-scoped update into the vault error taxonomy."""
    if updated == 0:
        raise ResourceNotFoundException(_SUBJECT, subject_id)
    if updated > 1:
        logger.critical("Duplicated subject in the database: subject_id=%s", subject_id)
        raise ForbiddenException(
            "Duplicated subject in the database", resource_id=subject_id
        )


class SubjectVaultService:
    """Orchestrates the subject, key and processor stores under transactional boundaries.

    Holds no mutable state between calls. Every store access goes through a
    unit of work created per operation and passed explicitly to helpers.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        cipher: ICipher,
        key_generator: IKeyGenerator,
        ledger: IErasureLedger,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        allow_reinitialize_after_erasure: bool = False,
    ) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self._uow_factory = uow_factory
        self._cipher = cipher
        self._key_generator = key_generator
        self._ledger = ledger
        self._page_size = page_size
        self._allow_reinitialize_after_erasure = allow_reinitialize_after_erasure

    @property
    def page_size(self) -> int:
        return self._page_size

    def _encrypt(self, personal_data: Any, key: str) -> str:
        plaintext = json.dumps(personal_data).encode("utf-8")
        return self._cipher.encrypt(plaintext, key).decode("ascii")

    # ---- Read path ----

    @traced("vault.get_subject_data")
    async def get_subject_data(self, subject_id: str) -> Any:
        """Decrypt and return the personal data of a subject.

        Raises:
            ResourceNotFoundException: Subject never existed or was erased (no key).
            DecryptionException: Ciphertext does not decrypt under the stored key.
        """
        async with self._uow_factory(read_only=True) as uow:
            secret = await uow.subjects.get_secret(subject_id)
        if secret is None:
            raise ResourceNotFoundException(_SUBJECT, subject_id)
        plaintext = self._cipher.decrypt(
            secret.encrypted_personal_data.encode("ascii"), secret.key
        )
        return _deserialize(plaintext)

    @traced("vault.get_subject_status")
    async def get_subject_status(self, subject_id: str) -> SubjectStatus:
        """Return ACTIVE or ERASED; ResourceNotFoundException when the subject never existed."""
        async with self._uow_factory(read_only=True) as uow:
            status = await uow.subjects.get_status(subject_id)
        if status is None:
            raise ResourceNotFoundException(_SUBJECT, subject_id)
        return status

    # ---- Initialize / update ----

    @traced("vault.initialize_user")
    async def initialize_user(self, subject_id: str, personal_data: Any) -> None:
        """Create the subject and its key, or re-encrypt its data under the existing key.

        Runs in one transaction. A concurrent writer creating the same subject
        makes the loser fail with SubjectWriteConflictException (retryable).

        Raises:
            SubjectErasedException: Subject was erased and re-initialization is not allowed.
        """
        async with self._uow_factory() as uow:
            await self._initialize_user_in_transaction(uow, subject_id, personal_data)
        logger.info("Subject personal data stored: subject_id=%s", subject_id)

    async def _initialize_user_in_transaction(
        self, uow: IVaultUnitOfWork, subject_id: str, personal_data: Any
    ) -> None:
        status = await uow.subjects.get_status(subject_id)
        if status is None:
            await self._create_new_subject(uow, subject_id, personal_data)
            return
        if status == SubjectStatus.ERASED:
            if not self._allow_reinitialize_after_erasure:
                raise SubjectErasedException(subject_id)
            logger.warning("Re-initializing erased subject: subject_id=%s", subject_id)
            await uow.subjects.reactivate(subject_id)
        await self._update_existing_subject(uow, subject_id, personal_data)

    async def _create_new_subject(
        self, uow: IVaultUnitOfWork, subject_id: str, personal_data: Any
    ) -> None:
        key = self._key_generator.generate_key()
        await uow.subjects.create_subject(subject_id, self._encrypt(personal_data, key))
        await uow.keys.create_key(subject_id, key)

    async def _update_existing_subject(
        self, uow: IVaultUnitOfWork, subject_id: str, personal_data: Any
    ) -> None:
        # Never rotate: reuse the stored key whenever one exists.
        key = await uow.keys.get_key(subject_id)
        if key is None:
            logger.warning("Subject has no encryption key, creating one: subject_id=%s", subject_id)
            key = self._key_generator.generate_key()
            await uow.keys.create_key(subject_id, key)
        await uow.subjects.update_personal_data(
            subject_id, self._encrypt(personal_data, key)
        )

    # ---- Listing ----

    @traced("vault.list_subjects")
    async def list_subjects(
        self, processor_id: str, requested_page: int = 1
    ) -> SubjectPage:
        """Return one page of the subjects linked to processor_id (ids and creation times only).

        Erased subjects and subjects without ciphertext or key are excluded.
        An empty result still reports one page.

        Raises:
            ValidationException: requested_page outside [1, total pages].
        """
        async with self._uow_factory(read_only=True) as uow:
            count = await uow.subjects.count_listable_for_processor(processor_id)
            total_pages = max(1, math.ceil(count / self._page_size))
            if requested_page > total_pages:
                raise ValidationException(
                    f"page number too big, maximum page number is {total_pages}",
                    field="page",
                )
            if requested_page < 1:
                raise ValidationException("Minimum page number is 1", field="page")
            items = await uow.subjects.list_for_processor(
                processor_id,
                skip=(requested_page - 1) * self._page_size,
                limit=self._page_size,
            )
        return SubjectPage(
            data=items, paging=Paging(current=requested_page, total=total_pages)
        )

    @traced("vault.associate_processor")
    async def associate_processor(self, subject_id: str, processor_id: str) -> None:
        """Link processor_id to an active subject. No-op when already linked.

        Raises:
            ResourceNotFoundException: Subject never existed.
            SubjectErasedException: Subject was erased.
        """
        async with self._uow_factory() as uow:
            status = await uow.subjects.get_status(subject_id)
            if status is None:
                raise ResourceNotFoundException(_SUBJECT, subject_id)
            if status == SubjectStatus.ERASED:
                raise SubjectErasedException(subject_id)
            if await uow.processors.exists(subject_id, processor_id):
                return
            await uow.processors.add(subject_id, processor_id)
        logger.info(
            "Processor associated: subject_id=%s processor_id=%s", subject_id, processor_id
        )

    # ---- Erasure ----

    @traced("vault.erase_data_and_revoke_consent")
    async def erase_data_and_revoke_consent(self, subject_id: str) -> ErasureResult:
        """Crypto-shred the subject's data and revoke every processor association.

        Deletes the key row and the associations and marks the subject erased
        in one transaction. Only after that transaction commits is the ledger
        notified, exactly once. A ledger failure is logged and reported on the
        result; it does not undo or fail the erasure.

        Erasing an already erased subject keeps and returns the first erased_at.
        """
        requested_at = utc_now()
        async with self._uow_factory() as uow:
            keys_deleted = await uow.keys.delete_key(subject_id)
            associations_deleted = await uow.processors.delete_for_subject(subject_id)
            erased_at = await uow.subjects.mark_erased(subject_id, requested_at)
        if erased_at is None:
            logger.warning("Erasure requested for unknown subject: subject_id=%s", subject_id)
            erased_at = requested_at
        logger.info(
            "Subject erased: subject_id=%s keys_deleted=%d associations_deleted=%d",
            subject_id,
            keys_deleted,
            associations_deleted,
        )
        add_span_event("vault.erasure.committed", {"subject_id": subject_id})
        return await self._record_erasure(subject_id, erased_at)

    async def _record_erasure(self, subject_id: str, erased_at: datetime) -> ErasureResult:
        logger.info("Emitting erasure event to ledger: subject_id=%s", subject_id)
        try:
            receipt = await self._ledger.record_erasure(subject_id)
        except LedgerNotificationException as e:
            logger.error(
                "Ledger notification failed after erasure: subject_id=%s reason=%s",
                subject_id,
                e.details.get("reason"),
            )
            return ErasureResult(
                subject_id=subject_id,
                erased_at=erased_at,
                ledger_error=f"{e.message}: {e.details.get('reason')}",
            )
        except Exception as e:
            logger.exception(
                "Ledger notifier raised unexpectedly after erasure: subject_id=%s",
                subject_id,
            )
            return ErasureResult(
                subject_id=subject_id, erased_at=erased_at, ledger_error=str(e)
            )
        add_span_event("vault.erasure.ledger_recorded", {"subject_id": subject_id})
        return ErasureResult(
            subject_id=subject_id, erased_at=erased_at, ledger_receipt=receipt
        )

    # ---- Restriction / objection ----

    @traced("vault.restrict")
    async def restrict(
        self,
        subject_id: str,
        direct_marketing: bool,
        email_communication: bool,
        research: bool,
    ) -> None:
        """Overwrite the three consent flags of a subject.

        Raises:
            ResourceNotFoundException: No subject row matched.
            ForbiddenException: More than one row matched (duplicated subject id).
        """
        async with self._uow_factory() as uow:
            updated = await uow.subjects.update_restrictions(
                subject_id, direct_marketing, email_communication, research
            )
            _ensure_single_row(subject_id, updated)

    @traced("vault.get_subject_restrictions")
    async def get_subject_restrictions(self, subject_id: str) -> SubjectRestrictions:
        async with self._uow_factory(read_only=True) as uow:
            restrictions = await uow.subjects.get_restrictions(subject_id)
        if restrictions is None:
            raise ResourceNotFoundException(_SUBJECT, subject_id)
        return restrictions

    @traced("vault.object")
    async def object(self, subject_id: str, objection: Any) -> None:
        """Record the subject's objection (same not-found / duplicate checks as restrict)."""
        async with self._uow_factory() as uow:
            updated = await uow.subjects.update_objection(subject_id, objection)
            _ensure_single_row(subject_id, updated)

    @traced("vault.get_subject_objection")
    async def get_subject_objection(self, subject_id: str) -> SubjectObjection:
        async with self._uow_factory(read_only=True) as uow:
            objection = await uow.subjects.get_objection(subject_id)
        if objection is None:
            raise ResourceNotFoundException(_SUBJECT, subject_id)
        return objection
