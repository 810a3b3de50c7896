"""Erasure ledger notifiers (HTTP ledger client and local logging fallback)."""

from subject_vault.infrastructure.external.ledger.client import HttpErasureLedger
from subject_vault.infrastructure.external.ledger.factory import LedgerFactory
from subject_vault.infrastructure.external.ledger.local import LoggingErasureLedger

__all__ = ["HttpErasureLedger", "LedgerFactory", "LoggingErasureLedger"]
