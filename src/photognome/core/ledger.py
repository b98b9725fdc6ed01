"""Undo ledger storage.

The ledger holds at most one entry: the rows that succeeded in the most recent
apply. Without a path it lives in memory (tests, library use); with a path it
is persisted as JSON so that ``photognome undo`` works across invocations.
"""

import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from photognome.errors import LedgerCorruptError
from photognome.models.ledger import LedgerEntry

logger = logging.getLogger(__name__)


class UndoLedger:
    """Single-slot store for the last apply."""

    def __init__(self, path: Optional[Path] = None) -> None:
        """Create a ledger, file-backed when *path* is given."""
        self.path = path
        self._entry: Optional[LedgerEntry] = None

    def record(self, entry: LedgerEntry) -> None:
        """Replace the stored entry with *entry*."""
        if self.path is None:
            self._entry = entry
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(entry.model_dump_json(indent=2), encoding="utf-8")
        tmp_path.replace(self.path)
        logger.debug("Recorded %d operation(s) in %s", len(entry.operations), self.path)

    def peek(self) -> Optional[LedgerEntry]:
        """Return the stored entry without removing it.

        Raises:
            LedgerCorruptError: If the ledger file cannot be parsed.
        """
        if self.path is None:
            return self._entry
        if not self.path.exists():
            return None
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise LedgerCorruptError(self.path, str(e)) from e
        if not raw.strip():
            return None
        try:
            return LedgerEntry.model_validate_json(raw)
        except ValidationError as e:
            raise LedgerCorruptError(self.path, f"{e.error_count()} error(s)") from e

    def clear(self) -> None:
        """Forget the stored entry."""
        if self.path is None:
            self._entry = None
            return
        self.path.unlink(missing_ok=True)

    def is_empty(self) -> bool:
        """Return True if there is nothing to undo."""
        entry = self.peek()
        return entry is None or not entry.operations
