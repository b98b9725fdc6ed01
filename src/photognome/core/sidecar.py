"""Sidecar discovery for JPEG files.

Finds the XMP sidecar and the RAW image (DNG or RAF) that belong to a JPEG by
matching basenames case-insensitively inside a RAW folder.
- XMP and RAW are resolved independently; a photo may have both.
- Among RAW formats DNG wins over RAF.
- Within one extension an exact-case ``stem.ext`` beats ``stem.EXT``, which
  beats any other case-insensitive spelling, so results are stable on
  case-sensitive filesystems holding near-duplicates.

Design:
- SidecarIndex lists each search directory once and answers every lookup for
  that directory from memory, so planning a folder of N photos costs one
  directory listing instead of N.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from photognome.errors import RawRootNotFoundError
from photognome.models.core import SidecarSet

logger = logging.getLogger(__name__)

XMP_EXTENSIONS: tuple[str, ...] = ("xmp",)
RAW_EXTENSIONS: tuple[str, ...] = ("dng", "raf")
SIDECAR_EXTENSIONS = frozenset(XMP_EXTENSIONS + RAW_EXTENSIONS)


class SidecarIndex:
    """Lazily built per-directory index of sidecar files keyed by lower-cased stem."""

    def __init__(self) -> None:
        """Initialize an empty index."""
        self._dirs: Dict[Path, Dict[str, List[Path]]] = {}

    def _load(self, directory: Path) -> Dict[str, List[Path]]:
        by_stem: Dict[str, List[Path]] = {}
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            logger.debug("Cannot list sidecar folder %s: %s", directory, e)
            entries = []
        for entry in entries:
            ext = entry.suffix[1:].lower()
            if ext not in SIDECAR_EXTENSIONS or not entry.stem:
                continue
            if not entry.is_file():
                continue
            by_stem.setdefault(entry.stem.lower(), []).append(entry)
        return by_stem

    def candidates(self, directory: Path, stem: str) -> List[Path]:
        """Return sidecar files in *directory* whose stem matches *stem* (any case)."""
        if directory not in self._dirs:
            self._dirs[directory] = self._load(directory)
        return self._dirs[directory].get(stem.lower(), [])


def _pick(
    candidates: Sequence[Path], stem: str, extensions: Sequence[str]
) -> Optional[Path]:
    """Choose the best candidate for the first extension that has one."""
    for ext in extensions:
        exact_lower = f"{stem}.{ext}"
        exact_upper = f"{stem}.{ext.upper()}"
        for wanted in (exact_lower, exact_upper):
            for path in candidates:
                if path.name == wanted:
                    return path
        for path in candidates:
            if path.suffix[1:].lower() == ext:
                return path
    return None


def effective_raw_root(
    jpg_path: Path,
    raw_root: Optional[Path],
    raw_parent_if_missing: bool,
    jpg_root: Optional[Path] = None,
) -> Optional[Path]:
    """Work out which folder, if any, should be searched for sidecars.

    Args:
        jpg_path: The JPEG being resolved.
        raw_root: Explicit RAW folder, if the user supplied one.
        raw_parent_if_missing: When no RAW folder is given, search one level
            above the JPG folder instead.
        jpg_root: Root of the JPG scan (defaults to the JPEG's own folder).

    Returns:
        The folder to search, or None if no search should happen.

    Raises:
        RawRootNotFoundError: If *raw_root* was given but is not a directory.
    """
    if raw_root is not None:
        if not raw_root.is_dir():
            raise RawRootNotFoundError(raw_root)
        return raw_root
    if raw_parent_if_missing:
        return (jpg_root or jpg_path.parent).parent
    return None


def resolve_sidecars(
    jpg_path: Path,
    raw_root: Optional[Path] = None,
    raw_parent_if_missing: bool = False,
    *,
    jpg_root: Optional[Path] = None,
    recursive: bool = False,
    index: Optional[SidecarIndex] = None,
) -> SidecarSet:
    """Find the XMP sidecar and RAW image matching *jpg_path*.

    Args:
        jpg_path: Absolute path of the JPEG.
        raw_root: Explicit RAW folder to search (non-recursively).
        raw_parent_if_missing: When *raw_root* is None, search the folder one
            level above the JPG folder.
        jpg_root: Root of the JPG scan; used with *recursive* to mirror the
            JPEG's sub-folder inside the RAW folder.
        recursive: Whether the plan descends into sub-folders.
        index: Shared index reused across a plan run.

    Returns:
        The resolved SidecarSet. Missing sidecars are left as None.

    Raises:
        RawRootNotFoundError: If an explicit *raw_root* does not exist.
    """
    search_root = effective_raw_root(
        jpg_path, raw_root, raw_parent_if_missing, jpg_root
    )
    if search_root is None:
        return SidecarSet(jpg_path=jpg_path)

    search_dir = search_root
    if recursive and jpg_root is not None:
        try:
            relative = jpg_path.parent.relative_to(jpg_root)
        except ValueError:
            relative = Path()
        search_dir = search_root / relative

    if not search_dir.is_dir():
        return SidecarSet(jpg_path=jpg_path)

    index = index or SidecarIndex()
    stem = jpg_path.stem
    candidates = index.candidates(search_dir, stem)
    xmp_path = _pick(candidates, stem, XMP_EXTENSIONS)
    raw_path = _pick(candidates, stem, RAW_EXTENSIONS)
    if xmp_path or raw_path:
        logger.debug(
            "Sidecars for %s: xmp=%s raw=%s", jpg_path.name, xmp_path, raw_path
        )
    return SidecarSet(jpg_path=jpg_path, xmp_path=xmp_path, raw_path=raw_path)
