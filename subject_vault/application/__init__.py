"""Application layer: DTOs, ports and the subject vault use case."""
