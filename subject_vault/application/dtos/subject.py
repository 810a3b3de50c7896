"""DTOs for subject vault use cases (no dependency on ORM)."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class SubjectSecret:
    """Ciphertext and key of one subject, as read inside a single call. Never cached."""

    subject_id: str
    encrypted_personal_data: str
    key: str


@dataclass(frozen=True)
class SubjectListItem:
    """One row of a processor-scoped listing. Personal data is not included."""

    id: str
    created_at: datetime


@dataclass(frozen=True)
class Paging:
    current: int
    total: int


@dataclass(frozen=True)
class SubjectPage:
    """Result of list_subjects: one page of subjects plus paging metadata."""

    data: list[SubjectListItem]
    paging: Paging

    def to_dict(self) -> dict[str, Any]:
        """Return {"data": [...], "paging": {"current": int, "total": int}}."""
        return {
            "data": [asdict(item) for item in self.data],
            "paging": asdict(self.paging),
        }


@dataclass(frozen=True)
class SubjectRestrictions:
    """Consent flags of a subject (False means processing is restricted)."""

    direct_marketing: bool
    email_communication: bool
    research: bool


@dataclass(frozen=True)
class SubjectObjection:
    objection: Any


@dataclass(frozen=True)
class LedgerReceipt:
    """Acknowledgement returned by the erasure ledger."""

    subject_id: str
    transaction_id: str
    recorded_at: datetime
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ErasureResult:
    """Outcome of erase_data_and_revoke_consent.

    The local erasure always succeeded when this is returned; ledger_error is
    set when the post-commit ledger notification failed.
    """

    subject_id: str
    erased_at: datetime
    ledger_receipt: LedgerReceipt | None = None
    ledger_error: str | None = None

    @property
    def ledger_recorded(self) -> bool:
        return self.ledger_receipt is not None
