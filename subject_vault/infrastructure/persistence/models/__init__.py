"""ORM models. Importing this package registers every table on Base.metadata."""

from subject_vault.infrastructure.persistence.models.subject import Subject
from subject_vault.infrastructure.persistence.models.subject_key import SubjectKey
from subject_vault.infrastructure.persistence.models.subject_processor import (
    SubjectProcessor,
)

__all__ = ["Subject", "SubjectKey", "SubjectProcessor"]
