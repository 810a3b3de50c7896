"""SQLAlchemy repositories for the vault tables."""

from subject_vault.infrastructure.persistence.repositories.subject_key_repo import (
    SubjectKeyRepository,
)
from subject_vault.infrastructure.persistence.repositories.subject_processor_repo import (
    SubjectProcessorRepository,
)
from subject_vault.infrastructure.persistence.repositories.subject_repo import (
    SubjectRepository,
)

__all__ = [
    "SubjectKeyRepository",
    "SubjectProcessorRepository",
    "SubjectRepository",
]
