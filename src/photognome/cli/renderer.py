"""Renderer for CLI output.

Renders rename plans and apply/undo outcomes as Rich tables, with one colour
per row status:
- yellow: will be renamed
- dim: unchanged
- red: row error
- green: renamed or restored
"""

from typing import Optional

from rich.console import Console
from rich.table import Table

from photognome.core.apply import ApplyResult
from photognome.core.undo import UndoResult
from photognome.models.core import CandidateStatus
from photognome.models.plan import PlanCandidate, RenamePlan

STATUS_STYLES = {
    CandidateStatus.PENDING: "yellow",
    CandidateStatus.RENAMED: "green bold",
    CandidateStatus.RESTORED: "green bold",
    CandidateStatus.SKIPPED: "dim",
    CandidateStatus.FAILED: "red bold",
}


def candidate_status(candidate: PlanCandidate) -> CandidateStatus:
    """Return the display status of a plan row before apply."""
    if candidate.error is not None:
        return CandidateStatus.FAILED
    if candidate.changed:
        return CandidateStatus.PENDING
    return CandidateStatus.SKIPPED


def _display_path(plan: RenamePlan, candidate: PlanCandidate) -> str:
    if candidate.original_path.is_relative_to(plan.jpg_root):
        return str(candidate.original_path.relative_to(plan.jpg_root))
    return str(candidate.original_path)


def render_plan(plan: RenamePlan, console: Optional[Console] = None) -> None:
    """Render a rename plan as a table followed by a summary line.

    Args:
        plan: The rename plan to render.
        console: Optional Console instance to use for rendering.
    """
    console = console or Console()

    table = Table(title=f"Rename Plan: {plan.id}")
    table.add_column("Status", style="bold")
    table.add_column("Original")
    table.add_column("New name")
    table.add_column("Source", style="cyan")
    table.add_column("Note", style="yellow")

    for candidate in plan.candidates:
        status = candidate_status(candidate)
        table.add_row(
            status.value,
            _display_path(plan, candidate),
            candidate.target_path.name,
            candidate.source_label.value,
            candidate.error or "",
            style=STATUS_STYLES[status],
        )

    console.print(table)
    stats = plan.stats
    console.print(
        f"JPEGs: {stats.jpg_files} | Rename: {stats.planned} | "
        f"Unchanged: {stats.unchanged} | Errors: {stats.errors}"
    )
    if stats.errors:
        console.print(f"Rows with errors: {stats.errors}", style="red bold")


def _outcome_table(title: str) -> Table:
    table = Table(title=title)
    table.add_column("Status", style="bold")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Note", style="yellow")
    return table


def render_apply_result(result: ApplyResult, console: Optional[Console] = None) -> None:
    """Render per-row apply outcomes and the totals."""
    console = console or Console()
    table = _outcome_table("Apply")
    for outcome in result.outcomes:
        if outcome.status == CandidateStatus.SKIPPED and outcome.error is None:
            continue
        table.add_row(
            outcome.status.value,
            outcome.original_path.name,
            outcome.target_path.name,
            outcome.error or "",
            style=STATUS_STYLES[outcome.status],
        )
    console.print(table)
    console.print(
        f"Renamed: {result.applied} | Unchanged: {result.unchanged} | "
        f"Failed: {result.failed}"
    )
    if result.first_error:
        console.print(f"First error: {result.first_error}", style="red bold")


def render_undo_result(result: UndoResult, console: Optional[Console] = None) -> None:
    """Render per-row undo outcomes and the totals."""
    console = console or Console()
    table = _outcome_table("Undo")
    for outcome in result.outcomes:
        table.add_row(
            outcome.status.value,
            outcome.target_path.name,
            outcome.original_path.name,
            outcome.error or "",
            style=STATUS_STYLES[outcome.status],
        )
    console.print(table)
    console.print(f"Restored: {result.restored} | Skipped: {result.skipped}")
