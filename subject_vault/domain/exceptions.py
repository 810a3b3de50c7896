"""Domain exceptions for the subject vault.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. An outer
layer maps them to status signals using error_code.
"""

from typing import Any


class VaultException(Exception):
    """Base exception for all vault errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(VaultException):
    """Raised when input validation fails (e.g. page number out of range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(VaultException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'subject').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ForbiddenException(VaultException):
    """Raised when a storage integrity rule is violated (e.g. duplicated subject id).

    Not a normal permission denial: an id-scoped update touching more than
    one row means the store no longer guarantees subject uniqueness.
    """

    def __init__(self, message: str, resource_id: str | None = None) -> None:
        details = {"resource_id": resource_id} if resource_id else {}
        super().__init__(message, "FORBIDDEN", details)


class DecryptionException(VaultException):
    """Raised when stored ciphertext cannot be decrypted or decoded under its key."""

    def __init__(self, message: str = "Failed to decrypt personal data") -> None:
        super().__init__(message, "DECRYPTION_ERROR")


class SubjectWriteConflictException(VaultException):
    """Raised when a concurrent request won the race to create the subject or its key; retry."""

    def __init__(self, subject_id: str) -> None:
        super().__init__(
            "Subject was written by another request; retry.",
            "SUBJECT_WRITE_CONFLICT",
            {"subject_id": subject_id},
        )


class SubjectErasedException(VaultException):
    """Raised when writing to a subject whose data was erased (re-identification)."""

    def __init__(self, subject_id: str) -> None:
        super().__init__(
            f"Subject data was erased: {subject_id}",
            "SUBJECT_ERASED",
            {"subject_id": subject_id},
        )


class LedgerNotificationException(VaultException):
    """Raised by ledger notifiers when an erasure could not be recorded.

    The vault reports it on the erasure result; it never fails the erasure.
    """

    def __init__(self, subject_id: str, reason: str) -> None:
        super().__init__(
            f"Failed to record erasure on ledger for subject {subject_id}",
            "LEDGER_NOTIFICATION_FAILED",
            {"subject_id": subject_id, "reason": reason},
        )


class SqlNotConfiguredException(VaultException):
    """Raised when an operation requires the SQL store but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
