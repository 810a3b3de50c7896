"""Ledger notifier factory: HTTP ledger or local logging fallback from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from subject_vault.core.config import Settings
    from subject_vault.infrastructure.external.ledger.client import HttpErasureLedger
    from subject_vault.infrastructure.external.ledger.local import LoggingErasureLedger


class LedgerFactory:
    """Factory for erasure ledger notifiers based on configuration."""

    @staticmethod
    def create_ledger(
        settings: "Settings | None" = None,
    ) -> "HttpErasureLedger | LoggingErasureLedger":
        """Create the erasure ledger notifier.

        Args:
            settings: Application settings; if None, uses get_settings().

        Returns:
            HttpErasureLedger when ledger_enabled, otherwise LoggingErasureLedger.

        Raises:
            ValueError: Ledger enabled without LEDGER_URL.
        """
        from subject_vault.core.config import get_settings

        s = settings or get_settings()
        if not s.ledger_enabled:
            from subject_vault.infrastructure.external.ledger.local import (
                LoggingErasureLedger,
            )

            return LoggingErasureLedger()
        if not s.ledger_url:
            raise ValueError("LEDGER_URL required when ledger is enabled")
        from subject_vault.infrastructure.external.ledger.client import (
            HttpErasureLedger,
        )

        return HttpErasureLedger(
            s.ledger_url,
            api_token=s.ledger_api_token,
            timeout=s.ledger_timeout_seconds,
        )
