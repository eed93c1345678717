"""Duplicate detection against processing history."""

from .ledger import FingerprintLedger, fingerprint, normalize_key

__all__ = ["FingerprintLedger", "fingerprint", "normalize_key"]
