"""Domain layer: enums and exceptions.

No dependencies on infrastructure. Used by application and infrastructure
layers.
"""

from subject_vault.domain.enums import SubjectStatus
from subject_vault.domain.exceptions import (
    DecryptionException,
    ForbiddenException,
    LedgerNotificationException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    SubjectErasedException,
    SubjectWriteConflictException,
    ValidationException,
    VaultException,
)

__all__ = [
    "DecryptionException",
    "ForbiddenException",
    "LedgerNotificationException",
    "ResourceNotFoundException",
    "SqlNotConfiguredException",
    "SubjectErasedException",
    "SubjectStatus",
    "SubjectWriteConflictException",
    "ValidationException",
    "VaultException",
]
