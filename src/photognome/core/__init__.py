"""Core rename engine for photognome.

- build_plan: turns a PlanRequest into a RenamePlan (no filesystem writes).
- apply_plan / undo_last: execute a plan and reverse the last apply.
- render_filename / render_preview: template rendering and sanitization.
"""

from photognome.core.apply import ApplyResult, RowOutcome, apply_plan
from photognome.core.ledger import UndoLedger
from photognome.core.planner import build_plan
from photognome.core.sanitize import sanitize_stem
from photognome.core.template import render_filename, render_preview, validate_template
from photognome.core.undo import UndoResult, undo_last

__all__ = [
    "ApplyResult",
    "RowOutcome",
    "UndoLedger",
    "UndoResult",
    "apply_plan",
    "build_plan",
    "render_filename",
    "render_preview",
    "sanitize_stem",
    "undo_last",
    "validate_template",
]
