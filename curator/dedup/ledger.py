"""Persistent, size-bounded record of processed items."""

import hashlib
import json
from pathlib import Path
from typing import Dict, List

import pendulum
from pydantic import ValidationError
from rich.console import Console

from ..errors import LedgerCorruptionError
from ..models import FingerprintRecord, LedgerStats, LedgerStore

console = Console()

LEDGER_VERSION = 1
DEFAULT_MAX_ENTRIES = 500


def normalize_key(value: str) -> str:
    """Normalize a title or source for fingerprinting."""
    return value.strip().lower()


def fingerprint(title: str, source: str) -> str:
    """Deterministic fingerprint of a (title, source) pair."""
    normalized = f"{normalize_key(title)}|{normalize_key(source)}"
    return hashlib.md5(normalized.encode("utf-8")).hexdigest()


class FingerprintLedger:
    """
    Dedup ledger stored as a single versioned JSON file.

    The store is re-read on every access and rewritten after every
    mutation. A missing, unreadable or wrong-version store is treated as
    empty. The ledger assumes a single writer.
    """

    def __init__(self, path: Path, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        """
        Initialize ledger.

        Args:
            path: Ledger file path
            max_entries: Most recent records kept after each write
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.path = path
        self.max_entries = max_entries

    def _read_store(self) -> LedgerStore:
        """Read the store, raising LedgerCorruptionError on any defect."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise LedgerCorruptionError(f"Unreadable ledger {self.path}: {e}")

        if not isinstance(data, dict) or data.get("version") != LEDGER_VERSION:
            raise LedgerCorruptionError(f"Unexpected ledger format in {self.path}")

        try:
            return LedgerStore(**data)
        except ValidationError as e:
            raise LedgerCorruptionError(f"Invalid ledger entries in {self.path}: {e}")

    def _load(self) -> LedgerStore:
        """Load the store, falling back to an empty one."""
        if not self.path.exists():
            return LedgerStore(version=LEDGER_VERSION)

        try:
            return self._read_store()
        except LedgerCorruptionError as e:
            console.print(f"[yellow]Warning: {e}. Starting with an empty ledger.[/yellow]")
            return LedgerStore(version=LEDGER_VERSION)

    def _save(self, store: LedgerStore) -> None:
        """Trim to the most recent entries and write the store."""
        if len(store.entries) > self.max_entries:
            store.entries = store.entries[-self.max_entries:]

        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "version": store.version,
            "entries": [e.model_dump(mode="json", by_alias=True) for e in store.entries],
        }
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)

    def is_duplicate(self, title: str, source: str) -> bool:
        """Check whether an item has already been processed."""
        key = fingerprint(title, source)
        return any(entry.fingerprint == key for entry in self._load().entries)

    def mark_processed(self, title: str, source: str, output_kind: str = "all") -> bool:
        """
        Record an item as processed.

        The first write wins: an existing fingerprint is left untouched.

        Returns:
            True if a new record was inserted
        """
        store = self._load()
        key = fingerprint(title, source)

        if any(entry.fingerprint == key for entry in store.entries):
            return False

        store.entries.append(
            FingerprintRecord(
                fingerprint=key,
                title=title,
                source=source,
                processed_at=pendulum.now("UTC"),
                output_kind=output_kind,
            )
        )
        self._save(store)
        return True

    def records(self) -> List[FingerprintRecord]:
        """All records, oldest first."""
        return list(self._load().entries)

    def stats(self) -> LedgerStats:
        """Get ledger statistics."""
        entries = self._load().entries

        by_source: Dict[str, int] = {}
        for entry in entries:
            by_source[entry.source] = by_source.get(entry.source, 0) + 1

        last_processed_at = entries[-1].processed_at if entries else None

        return LedgerStats(
            total_processed=len(entries),
            last_processed_at=last_processed_at,
            counts_by_source=by_source,
        )

    def clear(self) -> None:
        """Delete the ledger store."""
        if self.path.exists():
            self.path.unlink()
