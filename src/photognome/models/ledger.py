"""Models for the undo ledger.

A ledger entry records exactly the rows that succeeded in the most recent
apply, in apply order, so undo can walk them backwards.
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


class LedgerOperation(BaseModel):
    """One applied rename."""

    current_path: Path
    """Where the file lives now (the plan's target)."""

    original_path: Path
    """Where the file lived before apply."""

    backup_path: Optional[Path] = None
    """Backup copy written before the rename, if any."""


class LedgerEntry(BaseModel):
    """The most recent apply, as recorded for undo."""

    plan_id: Optional[str] = None
    jpg_root: Optional[Path] = None
    backup_originals: bool = False
    created_at: datetime = Field(default_factory=datetime.now)
    operations: List[LedgerOperation] = Field(default_factory=list)
