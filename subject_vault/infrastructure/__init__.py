"""Infrastructure layer: persistence, encryption and ledger adapters."""
