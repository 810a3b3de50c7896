"""Personal data encryption with per-subject Fernet keys.

Keys are url-safe base64 strings so they can be stored in a text column.
Tokens are ASCII bytes; callers decode them for storage.
"""

from cryptography.fernet import Fernet, InvalidToken

from subject_vault.domain.exceptions import DecryptionException

DECRYPTION_ERROR_MSG = "Failed to decrypt personal data - invalid key or corrupted data"


class FernetCipher:
    """Encrypt/decrypt bytes under a caller-supplied key. Stateless."""

    @staticmethod
    def _fernet(key: str) -> Fernet:
        try:
            return Fernet(key.encode())
        except ValueError as e:
            raise DecryptionException("Stored encryption key is malformed") from e

    def encrypt(self, plaintext: bytes, key: str) -> bytes:
        return self._fernet(key).encrypt(plaintext)

    def decrypt(self, ciphertext: bytes, key: str) -> bytes:
        """Decrypt a token produced by encrypt.

        Raises:
            DecryptionException: If the token is malformed or was encrypted under another key.
        """
        try:
            return self._fernet(key).decrypt(ciphertext)
        except InvalidToken as e:
            raise DecryptionException(DECRYPTION_ERROR_MSG) from e


class FernetKeyGenerator:
    """Generate a fresh 32-byte Fernet key per subject."""

    def generate_key(self) -> str:
        return Fernet.generate_key().decode()
