"""Ledger notifier used when no external ledger is configured: logs the erasure."""

from uuid import uuid4

from subject_vault.application.dtos.subject import LedgerReceipt
from subject_vault.shared.telemetry.logging import get_logger
from subject_vault.shared.utils.datetime import utc_now

logger = get_logger(__name__)


class LoggingErasureLedger:
    """Writes erasure events to the application log instead of a ledger."""

    async def record_erasure(self, subject_id: str) -> LedgerReceipt:
        receipt = LedgerReceipt(
            subject_id=subject_id,
            transaction_id=f"local-{uuid4().hex}",
            recorded_at=utc_now(),
        )
        logger.warning(
            "Erasure ledger disabled; erasure of subject_id=%s logged locally as %s",
            subject_id,
            receipt.transaction_id,
        )
        return receipt

    async def aclose(self) -> None:
        return None
