"""Apply engine for rename plans.

Executes the changed rows of a RenamePlan through temporary names.
- Optionally copies each original into ``<jpg_root>/backup`` first.
- Refuses to overwrite anything; an occupied target is a row error and no
  backup is taken for that row.
- Rows already renamed stay renamed when a later row fails (no rollback).
- The undo ledger is replaced with exactly the rows that succeeded.
"""

import logging
import time as time_mod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set, Tuple

from photognome.core.ledger import UndoLedger
from photognome.core.planner import BACKUP_DIR_NAME, path_key
from photognome.errors import InvalidPlanError
from photognome.fs.operations import (
    atomic_move,
    backup_copy,
    is_same_file,
    temp_sibling,
)
from photognome.models.core import CandidateStatus
from photognome.models.ledger import LedgerEntry, LedgerOperation
from photognome.models.plan import PlanCandidate, RenamePlan

logger = logging.getLogger(__name__)


@dataclass
class RowOutcome:
    """What happened to one candidate during apply or undo."""

    original_path: Path
    target_path: Path
    status: CandidateStatus
    error: Optional[str] = None
    backup_path: Optional[Path] = None


@dataclass
class ApplyResult:
    """Result of applying a rename plan."""

    applied: int = 0
    unchanged: int = 0
    failed: int = 0
    outcomes: List[RowOutcome] = field(default_factory=list)
    first_error: Optional[str] = None
    duration: float = 0.0

    @property
    def success(self: "ApplyResult") -> bool:
        """True when no row failed."""
        return self.failed == 0


def validate_plan(plan: RenamePlan) -> None:
    """Check every changed candidate before anything is touched.

    Raises:
        InvalidPlanError: If a changed row moves across directories or carries
            an error.
    """
    for candidate in plan.candidates:
        if not candidate.changed:
            continue
        if candidate.error is not None:
            raise InvalidPlanError(
                f"Changed row carries an error: {candidate.original_path} "
                f"({candidate.error})"
            )
        if candidate.target_path.parent != candidate.original_path.parent:
            raise InvalidPlanError(
                f"Target leaves the original directory: {candidate.target_path}"
            )


def _backup_relative(plan: RenamePlan, candidate: PlanCandidate) -> Path:
    try:
        return candidate.original_path.relative_to(plan.jpg_root)
    except ValueError:
        return Path(candidate.original_path.name)


def _stage_row(
    plan: RenamePlan,
    candidate: PlanCandidate,
    outcome: RowOutcome,
    vacating: Set[str],
    backup_originals: bool,
) -> Optional[Path]:
    """Check, back up and move one original aside to a temporary name.

    Returns the temporary path, or None with ``outcome.error`` set.
    """
    target = candidate.target_path
    if (
        target.exists()
        and path_key(target) not in vacating
        and not is_same_file(candidate.original_path, target)
    ):
        outcome.error = f"Target already exists: {target}"
        return None

    if backup_originals:
        try:
            outcome.backup_path = backup_copy(
                candidate.original_path,
                plan.jpg_root / BACKUP_DIR_NAME,
                _backup_relative(plan, candidate),
            )
        except OSError as e:
            outcome.error = f"Backup failed: {e}"
            return None

    staged = temp_sibling(candidate.original_path)
    try:
        atomic_move(candidate.original_path, staged)
    except OSError as e:
        outcome.error = f"Rename failed: {e}"
        return None
    return staged


def _finish_row(candidate: PlanCandidate, outcome: RowOutcome, staged: Path) -> None:
    """Move a staged file to its target, or back to its original on failure."""
    try:
        atomic_move(staged, candidate.target_path)
    except FileExistsError:
        outcome.error = f"Target already exists: {candidate.target_path}"
    except OSError as e:
        outcome.error = f"Rename failed: {e}"
    else:
        outcome.status = CandidateStatus.RENAMED
        return

    try:
        atomic_move(staged, candidate.original_path)
    except OSError as e:
        outcome.error = f"{outcome.error}; file left at {staged}: {e}"


def apply_plan(
    plan: RenamePlan, ledger: UndoLedger, *, backup_originals: bool = False
) -> ApplyResult:
    """Apply the changed rows of *plan*.

    Renames run in two passes. Every changed original is first moved to a
    hidden temporary name in its folder, then each temporary file is moved to
    its target. A row may therefore target another row's original, which makes
    chains (``A -> B``, ``B -> C``) and swaps (``A <-> B``) work. A row that
    fails in the second pass is moved back to its original name.

    Args:
        plan: The plan to execute.
        ledger: Undo ledger to record successful rows in.
        backup_originals: Copy each original into the backup folder first.

    Returns:
        ApplyResult with per-row outcomes.

    Raises:
        InvalidPlanError: If the plan fails validation; nothing is changed.
    """
    validate_plan(plan)
    start = time_mod.time()
    result = ApplyResult()
    vacating = {path_key(c.original_path) for c in plan.candidates if c.changed}
    staged: List[Tuple[PlanCandidate, RowOutcome, Path]] = []

    for candidate in plan.candidates:
        if not candidate.changed:
            result.unchanged += 1
            result.outcomes.append(
                RowOutcome(
                    original_path=candidate.original_path,
                    target_path=candidate.target_path,
                    status=CandidateStatus.SKIPPED,
                    error=candidate.error,
                )
            )
            continue

        outcome = RowOutcome(
            original_path=candidate.original_path,
            target_path=candidate.target_path,
            status=CandidateStatus.FAILED,
        )
        result.outcomes.append(outcome)
        temp = _stage_row(plan, candidate, outcome, vacating, backup_originals)
        if temp is not None:
            staged.append((candidate, outcome, temp))

    operations: List[LedgerOperation] = []
    for candidate, outcome, temp in staged:
        _finish_row(candidate, outcome, temp)
        if outcome.status == CandidateStatus.RENAMED:
            operations.append(
                LedgerOperation(
                    current_path=candidate.target_path,
                    original_path=candidate.original_path,
                    backup_path=outcome.backup_path,
                )
            )
            logger.debug(
                "Renamed %s -> %s", candidate.original_path, candidate.target_path
            )

    for outcome in result.outcomes:
        if outcome.status == CandidateStatus.RENAMED:
            result.applied += 1
        elif outcome.status == CandidateStatus.FAILED:
            result.failed += 1
            if result.first_error is None:
                result.first_error = outcome.error
            logger.warning("Failed %s: %s", outcome.original_path, outcome.error)

    if operations:
        ledger.record(
            LedgerEntry(
                plan_id=plan.id,
                jpg_root=plan.jpg_root,
                backup_originals=backup_originals,
                operations=operations,
            )
        )
    result.duration = time_mod.time() - start
    logger.info(
        "Applied %d, unchanged %d, failed %d in %.2fs",
        result.applied,
        result.unchanged,
        result.failed,
        result.duration,
    )
    return result


__all__ = ["ApplyResult", "RowOutcome", "apply_plan", "validate_plan"]
