"""Metadata merging across XMP, RAW EXIF and JPG EXIF sources.

Each field of the resolved record comes from the first source, in priority
order XMP -> RAW EXIF -> JPG EXIF, that supplied a non-empty value. When no
source supplies a capture timestamp, the JPEG's filesystem modification time
is used instead and the record is labelled ``file_modified_time``.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from photognome.metadata.base import MetadataProvider
from photognome.models.core import (
    MetadataRecord,
    MetadataSource,
    SidecarSet,
    SourceMetadata,
)

logger = logging.getLogger(__name__)

STRING_FIELDS = (
    "camera_maker",
    "camera_model",
    "lens_maker",
    "lens_model",
    "film_simulation",
)


def merge_metadata(
    xmp: Optional[SourceMetadata],
    raw_exif: Optional[SourceMetadata],
    jpg_exif: Optional[SourceMetadata],
    *,
    fallback_time: datetime,
) -> MetadataRecord:
    """Merge up to three sources into one resolved record.

    Args:
        xmp: Fields from the XMP sidecar, if any.
        raw_exif: Fields from the RAW image's EXIF, if any.
        jpg_exif: Fields from the JPEG's own EXIF, if any.
        fallback_time: Timestamp used when no source has a capture date
            (normally the JPEG's modification time).

    Returns:
        The merged, immutable record. ``source_label`` names the source that
        supplied the timestamp, not a per-field provenance.
    """
    ordered = [
        (MetadataSource.XMP, xmp),
        (MetadataSource.RAW_EXIF, raw_exif),
        (MetadataSource.JPG_EXIF, jpg_exif),
    ]
    present = [(label, meta) for label, meta in ordered if meta is not None]

    captured_at = fallback_time
    source_label = MetadataSource.FILE_MODIFIED_TIME
    for label, meta in present:
        if meta.captured_at is not None:
            captured_at = meta.captured_at
            source_label = label
            break

    fields: dict[str, str] = {}
    for name in STRING_FIELDS:
        fields[name] = next(
            (getattr(meta, name) for _, meta in present if getattr(meta, name)),
            "",
        )

    return MetadataRecord.from_datetime(captured_at, source_label, **fields)


def file_modified_time(path: Path) -> datetime:
    """Return *path*'s modification time as a naive local datetime.

    Falls back to the current time when the file cannot be stat'ed.
    """
    try:
        return datetime.fromtimestamp(path.stat().st_mtime)
    except OSError:
        return datetime.now()


def _read_source(
    provider: MetadataProvider, path: Optional[Path], source: MetadataSource
) -> Optional[SourceMetadata]:
    if path is None:
        return None
    try:
        return provider.read(path, source)
    except Exception as e:  # noqa: BLE001
        # Reason: a single unreadable source is treated as absent, never fatal.
        logger.warning("Could not read %s metadata from %s: %s", source.value, path, e)
        return None


def resolve_metadata(
    sidecars: SidecarSet, provider: MetadataProvider
) -> MetadataRecord:
    """Read every available source for one photo and merge them.

    Args:
        sidecars: The JPEG and its discovered XMP/RAW companions.
        provider: Metadata provider used to read each source.

    Returns:
        The merged record for the photo.
    """
    xmp = _read_source(provider, sidecars.xmp_path, MetadataSource.XMP)
    raw = _read_source(provider, sidecars.raw_path, MetadataSource.RAW_EXIF)
    jpg = _read_source(provider, sidecars.jpg_path, MetadataSource.JPG_EXIF)
    return merge_metadata(
        xmp, raw, jpg, fallback_time=file_modified_time(sidecars.jpg_path)
    )
