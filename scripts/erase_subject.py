"""Erase one subject's personal data (crypto-shredding) and record it on the ledger.

Usage:
    python -m scripts.erase_subject <subject_id>
Requires DATABASE_URL, and LEDGER_URL unless LEDGER_ENABLED=false.
Exit code 0 when the erasure committed (even if the ledger call failed; the
failure is printed), 1 on usage or storage errors.
"""

import asyncio
import sys

from sqlalchemy.exc import SQLAlchemyError

from subject_vault.core.lifespan import vault_lifespan
from subject_vault.domain.exceptions import VaultException


async def main() -> int:
    """Erase the subject given on the command line."""
    if len(sys.argv) != 2:
        print("Usage: python -m scripts.erase_subject <subject_id>", file=sys.stderr)
        return 1
    subject_id = sys.argv[1]

    async with vault_lifespan() as vault:
        try:
            result = await vault.erase_data_and_revoke_consent(subject_id)
        except VaultException as e:
            print(f"Erasure failed: {e.message}", file=sys.stderr)
            return 1
        except SQLAlchemyError as e:
            print(f"Erasure failed, storage error: {e}", file=sys.stderr)
            return 1

    print(f"Subject {subject_id} erased at {result.erased_at.isoformat()}")
    if result.ledger_receipt is not None:
        print(f"Ledger transaction: {result.ledger_receipt.transaction_id}")
    else:
        print(f"Ledger notification failed: {result.ledger_error}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
