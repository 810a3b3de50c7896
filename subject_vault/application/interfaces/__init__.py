"""Application ports (Protocols) implemented by infrastructure."""

from subject_vault.application.interfaces.repositories import (
    IProcessorAssociationRepository,
    ISubjectKeyRepository,
    ISubjectRepository,
    IVaultUnitOfWork,
)
from subject_vault.application.interfaces.services import (
    ICipher,
    IErasureLedger,
    IKeyGenerator,
)

__all__ = [
    "ICipher",
    "IErasureLedger",
    "IKeyGenerator",
    "IProcessorAssociationRepository",
    "ISubjectKeyRepository",
    "ISubjectRepository",
    "IVaultUnitOfWork",
]
