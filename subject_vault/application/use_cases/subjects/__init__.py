"""Subject use cases."""

from subject_vault.application.use_cases.subjects.subject_vault_service import (
    SubjectVaultService,
)

__all__ = ["SubjectVaultService"]
