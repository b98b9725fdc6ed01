"""Undo the most recent apply.

Walks the ledger entry backwards, moving each file from its renamed path back
to its original path. Like apply, this runs in two passes through temporary
names, so swapped and chained renames restore cleanly. Rows that cannot be
restored are skipped with a reason rather than aborting the whole undo. The
ledger is cleared afterwards either way; backup copies are left in place.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set, Tuple

from photognome.core.apply import RowOutcome
from photognome.core.ledger import UndoLedger
from photognome.core.planner import path_key
from photognome.errors import NothingToUndoError
from photognome.fs.operations import atomic_move, is_same_file, temp_sibling
from photognome.models.core import CandidateStatus
from photognome.models.ledger import LedgerOperation

logger = logging.getLogger(__name__)


@dataclass
class UndoResult:
    """Result of undoing the last apply."""

    restored: int = 0
    skipped: int = 0
    outcomes: List[RowOutcome] = field(default_factory=list)


def _stage_restore(
    op: LedgerOperation, outcome: RowOutcome, vacating: Set[str]
) -> Optional[Path]:
    if not op.current_path.exists():
        outcome.error = f"Renamed file is missing: {op.current_path}"
        return None
    if (
        op.original_path.exists()
        and path_key(op.original_path) not in vacating
        and not is_same_file(op.current_path, op.original_path)
    ):
        outcome.error = f"Original path is occupied: {op.original_path}"
        return None

    staged = temp_sibling(op.current_path)
    try:
        atomic_move(op.current_path, staged)
    except OSError as e:
        outcome.error = f"Restore failed: {e}"
        return None
    return staged


def _finish_restore(op: LedgerOperation, outcome: RowOutcome, staged: Path) -> None:
    try:
        atomic_move(staged, op.original_path)
    except FileExistsError:
        outcome.error = f"Original path is occupied: {op.original_path}"
    except OSError as e:
        outcome.error = f"Restore failed: {e}"
    else:
        outcome.status = CandidateStatus.RESTORED
        return

    try:
        atomic_move(staged, op.current_path)
    except OSError as e:
        outcome.error = f"{outcome.error}; file left at {staged}: {e}"


def undo_last(ledger: UndoLedger) -> UndoResult:
    """Reverse the last recorded apply.

    Args:
        ledger: The undo ledger.

    Returns:
        UndoResult with per-row outcomes, in undo (reverse apply) order.

    Raises:
        NothingToUndoError: If the ledger is empty.
        LedgerCorruptError: If the persisted ledger cannot be read.
    """
    entry = ledger.peek()
    if entry is None or not entry.operations:
        raise NothingToUndoError()

    result = UndoResult()
    vacating = {path_key(op.current_path) for op in entry.operations}
    staged: List[Tuple[LedgerOperation, RowOutcome, Path]] = []
    for op in reversed(entry.operations):
        outcome = RowOutcome(
            original_path=op.original_path,
            target_path=op.current_path,
            status=CandidateStatus.SKIPPED,
            backup_path=op.backup_path,
        )
        result.outcomes.append(outcome)
        temp = _stage_restore(op, outcome, vacating)
        if temp is not None:
            staged.append((op, outcome, temp))

    for op, outcome, temp in staged:
        _finish_restore(op, outcome, temp)

    for outcome in result.outcomes:
        if outcome.status == CandidateStatus.RESTORED:
            result.restored += 1
        else:
            result.skipped += 1
            logger.warning(
                "Skipped undo of %s: %s", outcome.target_path, outcome.error
            )

    ledger.clear()
    logger.info("Restored %d, skipped %d", result.restored, result.skipped)
    return result
