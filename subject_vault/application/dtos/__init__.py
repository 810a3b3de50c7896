"""Application DTOs (no dependency on ORM)."""

from subject_vault.application.dtos.subject import (
    ErasureResult,
    LedgerReceipt,
    Paging,
    SubjectListItem,
    SubjectObjection,
    SubjectPage,
    SubjectRestrictions,
    SubjectSecret,
)

__all__ = [
    "ErasureResult",
    "LedgerReceipt",
    "Paging",
    "SubjectListItem",
    "SubjectObjection",
    "SubjectPage",
    "SubjectRestrictions",
    "SubjectSecret",
]
