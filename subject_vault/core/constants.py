"""Core constants shared by the vault service and its configuration."""

# Subjects per page in processor-scoped listings
DEFAULT_PAGE_SIZE = 10

# Default consent flags applied when a subject is first initialized
DEFAULT_CONSENT_FLAGS: dict[str, bool] = {
    "direct_marketing": True,
    "email_communication": True,
    "research": True,
}
