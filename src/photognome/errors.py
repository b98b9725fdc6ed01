"""Exception hierarchy for photognome.

Request-level failures (bad inputs, invalid templates, missing RAW roots) are
raised as exceptions and propagate to the caller. Row-level failures during
planning, apply and undo are never raised; they are recorded on the plan
candidates and on the apply/undo outcome lists instead.
"""

from pathlib import Path


class PhotognomeError(Exception):
    """Base class for all photognome errors."""


# ---------------------------------------------------------------------------
# Template validation
# ---------------------------------------------------------------------------


class TemplateError(PhotognomeError, ValueError):
    """Raised when a naming template cannot be used."""


class TemplateDisallowedCharsError(TemplateError):
    """Raised when a template contains characters that are illegal in filenames."""

    def __init__(self, template: str, chars: list[str]) -> None:
        """Initialize the error with the offending characters."""
        joined = " ".join(chars)
        super().__init__(f"Template contains disallowed characters: {joined}")
        self.template = template
        self.chars = chars


class EmptyTemplateError(TemplateError):
    """Raised when the template is empty or only whitespace."""

    def __init__(self) -> None:
        """Initialize the error."""
        super().__init__("Template is empty")


# ---------------------------------------------------------------------------
# Plan building
# ---------------------------------------------------------------------------


class PlanError(PhotognomeError):
    """Raised when a plan request cannot be turned into a plan."""


class MissingJpgInputError(PlanError):
    """Raised when the JPG input is empty or does not exist."""

    def __init__(self, path: Path | None) -> None:
        """Initialize the error with the missing path."""
        if path is None or str(path) == "":
            message = "JPG input was not specified"
        else:
            message = f"JPG input does not exist: {path}"
        super().__init__(message)
        self.path = path


class UnsupportedFileTypeError(PlanError):
    """Raised when a single-file JPG input is not a JPEG."""

    def __init__(self, path: Path) -> None:
        """Initialize the error with the rejected path."""
        super().__init__(f"Not a JPEG file: {path}")
        self.path = path


class RawRootNotFoundError(PlanError):
    """Raised when an explicitly supplied RAW root is missing or not a directory."""

    def __init__(self, path: Path) -> None:
        """Initialize the error with the RAW root path."""
        super().__init__(f"RAW folder does not exist or is not a directory: {path}")
        self.path = path


# ---------------------------------------------------------------------------
# Apply / undo
# ---------------------------------------------------------------------------


class ApplyError(PhotognomeError):
    """Raised when a plan cannot be applied at all."""


class InvalidPlanError(ApplyError):
    """Raised when a plan violates its invariants before any file is touched."""


class UndoError(PhotognomeError):
    """Raised when the last apply cannot be undone."""


class NothingToUndoError(UndoError):
    """Raised when the undo ledger is empty."""

    def __init__(self) -> None:
        """Initialize the error."""
        super().__init__("Nothing to undo: no rename has been applied")


class LedgerCorruptError(UndoError):
    """Raised when the persisted undo ledger cannot be parsed."""

    def __init__(self, path: Path, detail: str) -> None:
        """Initialize the error with the ledger path and parse detail."""
        super().__init__(f"Undo ledger is corrupt: {path} ({detail})")
        self.path = path
