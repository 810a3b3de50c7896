"""Service interfaces (ports) for the application layer.

Protocols define contracts for the encryption primitive, key generation
and the external erasure ledger (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from subject_vault.application.dtos.subject import LedgerReceipt


class ICipher(Protocol):
    """Protocol for symmetric encryption of personal data."""

    def encrypt(self, plaintext: bytes, key: str) -> bytes:
        """Encrypt plaintext under key."""

    def decrypt(self, ciphertext: bytes, key: str) -> bytes:
        """Decrypt ciphertext; raise DecryptionException when malformed or foreign."""


class IKeyGenerator(Protocol):
    """Protocol for generating per-subject keys."""

    def generate_key(self) -> str:
        """Return new uniformly random key material in a store-compatible encoding."""


class IErasureLedger(Protocol):
    """Protocol for the external tamper-evident erasure ledger."""

    async def record_erasure(self, subject_id: str) -> LedgerReceipt:
        """Record an erasure event; raise LedgerNotificationException on failure."""
