"""Core domain models for photognome.

This module defines the foundational data structures for metadata resolution
and sidecar discovery.
- Used throughout photognome for representing per-source metadata, the merged
  per-photo record, and the files associated with each JPEG.
- Ensures all file paths are absolute for safety and cross-platform correctness.

Design:
- MetadataSource and CandidateStatus enums provide closed, type-safe labels
  for provenance and row outcomes.
- SourceMetadata is the partial record a single source (XMP, RAW EXIF, JPG
  EXIF) contributes; blank strings are normalised to None on construction.
- MetadataRecord is the frozen, fully resolved record the template renderer
  consumes.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class MetadataSource(str, Enum):
    """Source that supplied a photo's capture timestamp.

    Used for provenance display only; the merged record is authoritative.
    """

    XMP = "xmp"
    RAW_EXIF = "raw_exif"
    JPG_EXIF = "jpg_exif"
    FILE_MODIFIED_TIME = "file_modified_time"


class CandidateStatus(str, Enum):
    """Outcome of a single apply or undo row."""

    PENDING = "pending"
    RENAMED = "renamed"
    RESTORED = "restored"
    SKIPPED = "skipped"
    FAILED = "failed"


class SourceMetadata(BaseModel):
    """Metadata fields contributed by a single source.

    Every field is optional; a provider fills in what it could read.
    """

    captured_at: Optional[datetime] = None
    """Capture timestamp (DateTimeOriginal or equivalent)."""

    camera_maker: Optional[str] = None
    camera_model: Optional[str] = None
    lens_maker: Optional[str] = None
    lens_model: Optional[str] = None
    film_simulation: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @field_validator(
        "camera_maker",
        "camera_model",
        "lens_maker",
        "lens_model",
        "film_simulation",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        # Reason: providers often report padded or empty strings; treating them
        # as absent lets the merger fall through to the next source.
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    def is_empty(self: "SourceMetadata") -> bool:
        """Return True if this source supplied no usable field at all."""
        return all(value is None for value in self.model_dump().values())


class MetadataRecord(BaseModel):
    """Resolved metadata for one photo.

    Immutable once constructed. Every field reflects the most-preferred
    non-empty source; string fields are empty when no source supplied them.
    """

    capture_year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int

    camera_maker: str = ""
    camera_model: str = ""
    lens_maker: str = ""
    lens_model: str = ""
    film_simulation: str = ""

    source_label: MetadataSource
    """Source that supplied the capture timestamp (provenance only)."""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_datetime(
        cls,
        moment: datetime,
        source_label: MetadataSource,
        **fields: str,
    ) -> "MetadataRecord":
        """Build a record whose date/time fields come from *moment*."""
        return cls(
            capture_year=moment.year,
            month=moment.month,
            day=moment.day,
            hour=moment.hour,
            minute=moment.minute,
            second=moment.second,
            source_label=source_label,
            **fields,
        )

    @property
    def captured_at(self: "MetadataRecord") -> datetime:
        """Return the capture timestamp as a naive datetime."""
        return datetime(
            self.capture_year,
            self.month,
            self.day,
            self.hour,
            self.minute,
            self.second,
        )


class SidecarSet(BaseModel):
    """Files associated with one JPEG by shared basename."""

    jpg_path: Path
    """Absolute path to the JPEG itself."""

    xmp_path: Optional[Path] = None
    """Matching XMP sidecar, if found."""

    raw_path: Optional[Path] = None
    """Matching RAW image (DNG preferred over RAF), if found."""

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_path(self: "SidecarSet") -> "SidecarSet":
        """Ensure the JPEG path is absolute.

        Raises:
            ValueError: If the path is not absolute.
        """
        if not self.jpg_path.is_absolute():
            raise ValueError(f"Path must be absolute: {self.jpg_path}")
        return self
