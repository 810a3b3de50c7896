"""SubjectVaultService unit tests with a mocked unit of work and repos."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from subject_vault.application.dtos.subject import (
    LedgerReceipt,
    SubjectListItem,
    SubjectSecret,
)
from subject_vault.application.use_cases.subjects import SubjectVaultService
from subject_vault.domain.enums import SubjectStatus
from subject_vault.domain.exceptions import (
    DecryptionException,
    ForbiddenException,
    LedgerNotificationException,
    ResourceNotFoundException,
    SubjectErasedException,
    ValidationException,
)

_ERASED_AT = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


class FakeUnitOfWork:
    """Records how each unit of work ended; repos are AsyncMocks shared across units."""

    def __init__(self, subjects, keys, processors, events: list, read_only: bool) -> None:
        self.subjects = subjects
        self.keys = keys
        self.processors = processors
        self._events = events
        self._read_only = read_only

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is None and not self._read_only:
            self._events.append("commit")
        else:
            self._events.append("rollback")


@pytest.fixture
def vault_mocks():
    """Service with mocked repos, cipher, key generator and ledger; events log commits and ledger calls."""
    events: list[str] = []
    subjects = AsyncMock()
    keys = AsyncMock()
    processors = AsyncMock()

    def uow_factory(*, read_only: bool = False) -> FakeUnitOfWork:
        return FakeUnitOfWork(subjects, keys, processors, events, read_only)

    cipher = MagicMock()
    cipher.encrypt = MagicMock(side_effect=lambda plaintext, key: b"enc:" + plaintext)
    cipher.decrypt = MagicMock(side_effect=lambda ciphertext, key: ciphertext[len(b"enc:"):])
    key_generator = MagicMock()
    key_generator.generate_key = MagicMock(return_value="k-new")

    async def record_erasure(subject_id: str) -> LedgerReceipt:
        events.append("ledger")
        return LedgerReceipt(
            subject_id=subject_id,
            transaction_id="tx-1",
            recorded_at=datetime(2025, 1, 15, tzinfo=timezone.utc),
        )

    ledger = MagicMock()
    ledger.record_erasure = AsyncMock(side_effect=record_erasure)
    svc = SubjectVaultService(
        uow_factory, cipher, key_generator, ledger, page_size=10
    )
    return svc, subjects, keys, processors, ledger, events


@pytest.mark.parametrize("page_size", [0, -3])
def test_page_size_must_be_positive(page_size: int) -> None:
    with pytest.raises(ValueError, match="page_size"):
        SubjectVaultService(MagicMock(), MagicMock(), MagicMock(), MagicMock(), page_size=page_size)


async def test_get_subject_data_decrypts_json(vault_mocks) -> None:
    svc, subjects, _keys, _processors, _ledger, events = vault_mocks
    subjects.get_secret = AsyncMock(
        return_value=SubjectSecret("s1", 'enc:{"name": "Alice"}', "k1")
    )
    assert await svc.get_subject_data("s1") == {"name": "Alice"}
    assert events == ["rollback"]


async def test_get_subject_data_rejects_non_json_plaintext(vault_mocks) -> None:
    svc, subjects, *_ = vault_mocks
    subjects.get_secret = AsyncMock(return_value=SubjectSecret("s1", "enc:not json", "k1"))
    with pytest.raises(DecryptionException):
        await svc.get_subject_data("s1")


async def test_initialize_new_subject_creates_subject_then_key(vault_mocks) -> None:
    svc, subjects, keys, _processors, _ledger, events = vault_mocks
    subjects.get_status = AsyncMock(return_value=None)
    await svc.initialize_user("s1", {"name": "Alice"})
    subjects.create_subject.assert_awaited_once_with("s1", 'enc:{"name": "Alice"}')
    keys.create_key.assert_awaited_once_with("s1", "k-new")
    subjects.update_personal_data.assert_not_called()
    assert events == ["commit"]


async def test_initialize_existing_subject_reuses_stored_key(vault_mocks) -> None:
    svc, subjects, keys, *_ = vault_mocks
    subjects.get_status = AsyncMock(return_value=SubjectStatus.ACTIVE)
    keys.get_key = AsyncMock(return_value="k-old")
    await svc.initialize_user("s1", {"name": "Bob"})
    svc._key_generator.generate_key.assert_not_called()
    keys.create_key.assert_not_called()
    svc._cipher.encrypt.assert_called_once_with(b'{"name": "Bob"}', "k-old")
    subjects.update_personal_data.assert_awaited_once_with("s1", 'enc:{"name": "Bob"}')


async def test_initialize_erased_subject_rejected_and_rolled_back(vault_mocks) -> None:
    svc, subjects, keys, _processors, _ledger, events = vault_mocks
    subjects.get_status = AsyncMock(return_value=SubjectStatus.ERASED)
    with pytest.raises(SubjectErasedException):
        await svc.initialize_user("s1", {"name": "Alice"})
    keys.create_key.assert_not_called()
    subjects.reactivate.assert_not_called()
    assert events == ["rollback"]


async def test_list_subjects_computes_offset_and_total(vault_mocks) -> None:
    svc, subjects, *_ = vault_mocks
    created = datetime(2025, 1, 15, tzinfo=timezone.utc)
    subjects.count_listable_for_processor = AsyncMock(return_value=25)
    subjects.list_for_processor = AsyncMock(return_value=[SubjectListItem("s21", created)])
    page = await svc.list_subjects("p1", 3)
    subjects.list_for_processor.assert_awaited_once_with("p1", skip=20, limit=10)
    assert page.paging.current == 3
    assert page.paging.total == 3


@pytest.mark.parametrize(
    ("count", "requested_page", "message"),
    [
        (0, 2, "maximum page number is 1"),
        (11, 3, "maximum page number is 2"),
        (5, 0, "Minimum page number is 1"),
    ],
)
async def test_list_subjects_page_out_of_range(vault_mocks, count, requested_page, message) -> None:
    svc, subjects, *_ = vault_mocks
    subjects.count_listable_for_processor = AsyncMock(return_value=count)
    with pytest.raises(ValidationException, match=message):
        await svc.list_subjects("p1", requested_page)
    subjects.list_for_processor.assert_not_called()


async def test_erasure_notifies_ledger_after_commit(vault_mocks) -> None:
    svc, subjects, keys, processors, ledger, events = vault_mocks
    keys.delete_key = AsyncMock(return_value=1)
    processors.delete_for_subject = AsyncMock(return_value=2)
    subjects.mark_erased = AsyncMock(return_value=_ERASED_AT)
    result = await svc.erase_data_and_revoke_consent("s1")
    assert events == ["commit", "ledger"]
    ledger.record_erasure.assert_awaited_once_with("s1")
    assert result.ledger_recorded is True
    assert result.ledger_receipt.transaction_id == "tx-1"
    assert result.erased_at == _ERASED_AT


async def test_erasure_of_unknown_subject_uses_request_time(vault_mocks) -> None:
    svc, subjects, keys, processors, ledger, events = vault_mocks
    keys.delete_key = AsyncMock(return_value=0)
    processors.delete_for_subject = AsyncMock(return_value=0)
    subjects.mark_erased = AsyncMock(return_value=None)
    result = await svc.erase_data_and_revoke_consent("ghost")
    requested_at = subjects.mark_erased.await_args.args[1]
    assert result.erased_at == requested_at
    assert events == ["commit", "ledger"]
    ledger.record_erasure.assert_awaited_once_with("ghost")


async def test_erasure_failure_skips_ledger(vault_mocks) -> None:
    svc, _subjects, keys, processors, ledger, events = vault_mocks
    keys.delete_key = AsyncMock(return_value=1)
    processors.delete_for_subject = AsyncMock(side_effect=RuntimeError("connection lost"))
    with pytest.raises(RuntimeError, match="connection lost"):
        await svc.erase_data_and_revoke_consent("s1")
    ledger.record_erasure.assert_not_called()
    assert events == ["rollback"]


async def test_erasure_reports_ledger_failure(vault_mocks) -> None:
    svc, subjects, keys, processors, ledger, _events = vault_mocks
    keys.delete_key = AsyncMock(return_value=1)
    processors.delete_for_subject = AsyncMock(return_value=0)
    subjects.mark_erased = AsyncMock(return_value=_ERASED_AT)
    ledger.record_erasure = AsyncMock(
        side_effect=LedgerNotificationException("s1", "ledger returned HTTP 503")
    )
    result = await svc.erase_data_and_revoke_consent("s1")
    assert result.ledger_recorded is False
    assert result.ledger_receipt is None
    assert result.ledger_error == (
        "Failed to record erasure on ledger for subject s1: ledger returned HTTP 503"
    )


async def test_restrict_duplicated_rows_is_forbidden(vault_mocks) -> None:
    svc, subjects, _keys, _processors, _ledger, events = vault_mocks
    subjects.update_restrictions = AsyncMock(return_value=2)
    with pytest.raises(ForbiddenException, match="Duplicated subject"):
        await svc.restrict("s1", False, True, False)
    assert events == ["rollback"]


async def test_object_unknown_subject_not_found(vault_mocks) -> None:
    svc, subjects, *_ = vault_mocks
    subjects.update_objection = AsyncMock(return_value=0)
    with pytest.raises(ResourceNotFoundException):
        await svc.object("ghost", {"reason": "no marketing"})
