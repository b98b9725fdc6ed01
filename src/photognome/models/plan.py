"""Models for rename plans.

This module defines the data structures for representing photo rename plans in
photognome.
- Used to serialize, validate, and audit planned renames before execution.
- A plan is a value object: building one never touches the filesystem, and the
  same JSON can be stored and re-submitted to apply later.

Design:
- PlanRequest records every input that shaped the plan, so a plan can be
  re-derived from its request.
- PlanCandidate is one row; its target always lives in the same directory as
  its original (renames never move across directories).
- Row-level problems (collisions) are recorded on the candidate's ``error``
  field rather than raised.
"""

import uuid
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from photognome.models.core import MetadataRecord, MetadataSource, SidecarSet

DEFAULT_TEMPLATE = (
    "{year}{month}{day}_{hour}{minute}{second}_{camera_maker}_{camera_model}_"
    "{lens_maker}_{lens_model}_{film_sim}_{orig_name}"
)
DEFAULT_MAX_FILENAME_LEN = 240


class PlanRequest(BaseModel):
    """Inputs for building a rename plan."""

    jpg_input: Optional[Path] = None
    """JPEG folder, or a single JPEG file treated as a one-element listing."""

    raw_input: Optional[Path] = None
    """Folder holding XMP/DNG/RAF sidecars. Must exist when given."""

    raw_parent_if_missing: bool = False
    """Search one level above the JPG folder when no RAW folder is given."""

    template: str = DEFAULT_TEMPLATE
    dedupe_same_maker: bool = True
    exclusions: List[str] = Field(default_factory=list)
    max_filename_len: int = Field(default=DEFAULT_MAX_FILENAME_LEN, gt=0)

    recursive: bool = False
    """Descend into subfolders of the JPG folder (the backup folder is skipped)."""

    include_hidden: bool = False
    """Include dot-files and dot-folders."""

    @field_validator("jpg_input", "raw_input", mode="before")
    @classmethod
    def _blank_path_to_none(cls, value: object) -> object:
        # Reason: Path("") is "."; an empty input must stay distinguishable.
        if isinstance(value, str) and not value.strip():
            return None
        return value


class PlanCandidate(BaseModel):
    """A single photo rename in a plan."""

    original_path: Path
    """Absolute path of the photo as discovered."""

    target_path: Path
    """Absolute path the photo will have after renaming."""

    changed: bool
    """Whether the target differs from the original after full sanitization."""

    source_label: MetadataSource
    """Source that supplied the capture timestamp."""

    error: Optional[str] = None
    """Row-level failure (e.g. a collision). A row with an error is never applied."""

    sidecars: Optional[SidecarSet] = None
    metadata: Optional[MetadataRecord] = None

    @model_validator(mode="after")
    def validate_paths(self: "PlanCandidate") -> "PlanCandidate":
        """Ensure both paths are absolute and share a parent directory.

        Raises:
            ValueError: If either path is relative or the target would move the
                file into another directory.
        """
        if not self.original_path.is_absolute():
            raise ValueError(f"Original path must be absolute: {self.original_path}")
        if not self.target_path.is_absolute():
            raise ValueError(f"Target path must be absolute: {self.target_path}")
        if self.target_path.parent != self.original_path.parent:
            raise ValueError(
                f"Target must stay in the original directory: {self.target_path}"
            )
        return self


class PlanStats(BaseModel):
    """Counters collected while building a plan."""

    scanned_files: int = 0
    jpg_files: int = 0
    skipped_non_jpg: int = 0
    skipped_hidden: int = 0
    planned: int = 0
    unchanged: int = 0
    errors: int = 0


class RenamePlan(BaseModel):
    """An ordered, re-playable description of intended renames.

    Candidate order is the discovery order of the originals; apply walks it
    forwards and undo walks it backwards.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    """Unique identifier (used by the plan store)."""

    created_at: datetime = Field(default_factory=datetime.now)

    jpg_root: Path
    """Folder the photos were discovered in; backups are written beneath it."""

    request: PlanRequest
    candidates: List[PlanCandidate] = Field(default_factory=list)
    stats: PlanStats = Field(default_factory=PlanStats)

    @property
    def changed_candidates(self: "RenamePlan") -> List[PlanCandidate]:
        """Candidates that will actually be renamed by apply."""
        return [c for c in self.candidates if c.changed and c.error is None]

    @property
    def error_candidates(self: "RenamePlan") -> List[PlanCandidate]:
        """Candidates carrying a row-level error."""
        return [c for c in self.candidates if c.error is not None]
