"""External collaborators: encryption primitive and erasure ledger."""
