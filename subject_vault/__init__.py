"""Subject data vault: per-subject encryption, consent flags and crypto-shredding erasure."""

__version__ = "1.0.0"
