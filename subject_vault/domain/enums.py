"""Domain enumerations for the subject vault."""

from enum import Enum


class SubjectStatus(str, Enum):
    """Subject lifecycle status.

    ERASED is terminal under default settings: the key row is gone and the
    stored ciphertext can no longer be decrypted.
    """

    ACTIVE = "active"
    ERASED = "erased"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings.

        Returns:
            List of enum value strings (e.g. for check constraints).
        """
        return [status.value for status in cls]
