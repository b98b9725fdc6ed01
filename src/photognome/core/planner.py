"""Rename plan builder.

Turns a PlanRequest into a RenamePlan without touching any file:
- Validates the request (JPG input, RAW folder, template).
- Enumerates JPEGs in a stable, sorted order.
- Resolves sidecars, merges metadata and renders each new name.
- Applies the collision policy so that no two rows claim the same target.

Design:
- Request-level problems raise PlanError/TemplateError subclasses; nothing is
  returned for a bad request.
- Row-level problems (collisions, occupied targets) are written to the
  candidate's ``error`` field and the row is marked unchanged.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from photognome.core.sidecar import SidecarIndex, resolve_sidecars
from photognome.core.template import render_filename, validate_template
from photognome.errors import (
    MissingJpgInputError,
    RawRootNotFoundError,
    UnsupportedFileTypeError,
)
from photognome.fs.operations import is_same_file
from photognome.metadata.base import MetadataProvider
from photognome.metadata.merger import resolve_metadata
from photognome.metadata.provider import FileMetadataProvider
from photognome.models.plan import PlanCandidate, PlanRequest, PlanStats, RenamePlan

logger = logging.getLogger(__name__)

JPG_EXTENSIONS = frozenset({".jpg", ".jpeg"})
BACKUP_DIR_NAME = "backup"


def is_hidden(path: Path) -> bool:
    """Check if a path is hidden (its name starts with a dot)."""
    return path.name.startswith(".")


def is_jpeg(path: Path) -> bool:
    """Check if a path has a ``.jpg``/``.jpeg`` extension (any case)."""
    return path.suffix.lower() in JPG_EXTENSIONS


@dataclass
class _Listing:
    root: Path
    files: List[Path] = field(default_factory=list)
    stats: PlanStats = field(default_factory=PlanStats)


def _walk(directory: Path, request: PlanRequest, listing: _Listing) -> None:
    """Collect JPEGs from *directory* into *listing*, descending if recursive."""
    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        logger.warning("Cannot list %s: %s", directory, e)
        return

    subdirs: List[Path] = []
    for entry in entries:
        if entry.is_dir():
            if is_hidden(entry) and not request.include_hidden:
                listing.stats.skipped_hidden += 1
                continue
            if directory == listing.root and entry.name == BACKUP_DIR_NAME:
                continue
            if request.recursive and not entry.is_symlink():
                subdirs.append(entry)
            continue
        if not entry.is_file():
            continue
        listing.stats.scanned_files += 1
        if is_hidden(entry) and not request.include_hidden:
            listing.stats.skipped_hidden += 1
            continue
        if not is_jpeg(entry):
            listing.stats.skipped_non_jpg += 1
            continue
        listing.files.append(entry)

    for subdir in subdirs:
        _walk(subdir, request, listing)


def collect_jpgs(request: PlanRequest) -> _Listing:
    """Validate the JPG input and list the JPEGs it covers.

    Raises:
        MissingJpgInputError: If the input is empty or does not exist.
        UnsupportedFileTypeError: If a single-file input is not a JPEG.
    """
    if request.jpg_input is None:
        raise MissingJpgInputError(None)
    jpg_input = request.jpg_input.expanduser().absolute()
    if not jpg_input.exists():
        raise MissingJpgInputError(jpg_input)

    if jpg_input.is_file():
        if not is_jpeg(jpg_input):
            raise UnsupportedFileTypeError(jpg_input)
        listing = _Listing(root=jpg_input.parent, files=[jpg_input])
        listing.stats.scanned_files = 1
    else:
        listing = _Listing(root=jpg_input)
        _walk(jpg_input, request, listing)

    listing.stats.jpg_files = len(listing.files)
    return listing


def path_key(path: Path) -> str:
    """Return the case-insensitive key used to compare planned paths."""
    return str(path).casefold()


def apply_collision_policy(candidates: List[PlanCandidate]) -> None:
    """Ensure no two candidates end up at the same (case-insensitive) path.

    Unchanged candidates keep their own paths and claim them first. Changed
    candidates then claim their targets in plan order; a later duplicate gets
    a row error and is demoted to unchanged. Targets that already exist on disk
    and are not one of the plan's originals are rejected the same way.

    Mutates *candidates* in place.
    """
    originals = {path_key(c.original_path) for c in candidates}
    claimed: Dict[str, PlanCandidate] = {}
    for candidate in candidates:
        if not candidate.changed:
            claimed.setdefault(path_key(candidate.original_path), candidate)

    for candidate in candidates:
        if not candidate.changed:
            continue
        key = path_key(candidate.target_path)
        owner = claimed.get(key)
        if owner is not None and owner is not candidate:
            candidate.error = (
                f"Target name collides with {owner.original_path.name}: "
                f"{candidate.target_path.name}"
            )
            candidate.changed = False
            claimed.setdefault(path_key(candidate.original_path), candidate)
            continue
        if (
            key not in originals
            and candidate.target_path.exists()
            and not is_same_file(candidate.original_path, candidate.target_path)
        ):
            candidate.error = f"Target already exists: {candidate.target_path.name}"
            candidate.changed = False
            claimed.setdefault(path_key(candidate.original_path), candidate)
            continue
        claimed[key] = candidate


def _summarize(candidates: List[PlanCandidate], stats: PlanStats) -> None:
    stats.planned = sum(1 for c in candidates if c.changed and c.error is None)
    stats.errors = sum(1 for c in candidates if c.error is not None)
    stats.unchanged = sum(1 for c in candidates if not c.changed and c.error is None)


def build_plan(
    request: PlanRequest, provider: Optional[MetadataProvider] = None
) -> RenamePlan:
    """Build a rename plan for the photos described by *request*.

    Args:
        request: What to rename and how.
        provider: Metadata provider; defaults to reading files from disk.

    Returns:
        The plan. Candidates are in sorted discovery order.

    Raises:
        MissingJpgInputError: If the JPG input is empty or missing.
        UnsupportedFileTypeError: If a single-file input is not a JPEG.
        RawRootNotFoundError: If an explicit RAW folder does not exist.
        TemplateError: If the template is empty or has disallowed characters.
    """
    listing = collect_jpgs(request)

    raw_root: Optional[Path] = None
    if request.raw_input is not None:
        raw_root = request.raw_input.expanduser().absolute()
        if not raw_root.is_dir():
            raise RawRootNotFoundError(raw_root)

    validate_template(request.template)
    provider = provider or FileMetadataProvider()
    index = SidecarIndex()

    candidates: List[PlanCandidate] = []
    for jpg_path in listing.files:
        sidecars = resolve_sidecars(
            jpg_path,
            raw_root,
            request.raw_parent_if_missing,
            jpg_root=listing.root,
            recursive=request.recursive,
            index=index,
        )
        record = resolve_metadata(sidecars, provider)
        new_name = render_filename(
            request.template,
            record,
            jpg_path.name,
            request.exclusions,
            request.max_filename_len,
            dedupe_same_maker=request.dedupe_same_maker,
        )
        target = jpg_path.with_name(new_name)
        candidates.append(
            PlanCandidate(
                original_path=jpg_path,
                target_path=target,
                changed=target != jpg_path,
                source_label=record.source_label,
                sidecars=sidecars,
                metadata=record,
            )
        )

    apply_collision_policy(candidates)
    _summarize(candidates, listing.stats)
    logger.info(
        "Planned %d rename(s) for %d JPEG(s) in %s (%d error(s))",
        listing.stats.planned,
        listing.stats.jpg_files,
        listing.root,
        listing.stats.errors,
    )
    return RenamePlan(
        jpg_root=listing.root,
        request=request,
        candidates=candidates,
        stats=listing.stats,
    )

