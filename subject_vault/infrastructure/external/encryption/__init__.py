"""Per-subject encryption (Fernet)."""

from subject_vault.infrastructure.external.encryption.cipher import (
    FernetCipher,
    FernetKeyGenerator,
)

__all__ = ["FernetCipher", "FernetKeyGenerator"]
