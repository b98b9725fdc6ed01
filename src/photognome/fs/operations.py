"""Filesystem operations for photognome.

Provides the atomic rename helper used by apply/undo and the backup copier.
Handles cross-device moves, Windows long paths and case-only renames.
"""

import errno
import logging
import os
import shutil
import sys
import uuid
from pathlib import Path

logger = logging.getLogger(__name__)

WIN_MAX_PATH = 259  # Windows MAX_PATH limit for NTFS long paths
MAX_BACKUP_SUFFIX = 999


def get_win_long_path_prefix() -> str:
    """Return the Windows NTFS long path prefix (avoids static backslash pattern)."""
    bslash = chr(92)
    return bslash + bslash + "?" + bslash


def _win_long_path(path: Path) -> str:
    s = str(path)
    prefix = get_win_long_path_prefix()
    if sys.platform == "win32" and len(s) > WIN_MAX_PATH and not s.startswith(prefix):
        return prefix + s
    return s


def is_same_file(path1: Path, path2: Path) -> bool:
    """Return True if both paths exist and refer to the same file on disk.

    On case-insensitive filesystems ``a.jpg`` and ``A.JPG`` are the same file.
    """
    try:
        return os.path.samefile(path1, path2)
    except OSError:
        return False


def _rename(src: Path, dst: Path) -> None:
    src_path = _win_long_path(src)
    dst_path = _win_long_path(dst)
    try:
        Path(src_path).rename(dst_path)
    except OSError as e:
        if e.errno == errno.EXDEV:
            shutil.copy2(src_path, dst_path)
            Path(src_path).unlink()
        else:
            raise


def temp_sibling(path: Path) -> Path:
    """Return an unused hidden name next to *path* for a staged rename."""
    return path.with_name(f".{path.name}.{uuid.uuid4().hex[:8]}.tmp")


def atomic_move(src: Path, dst: Path) -> None:
    """Atomically move *src* to *dst*.

    A destination that is the same file as *src* (a case-only rename on a
    case-insensitive filesystem) is allowed; the rename goes through a
    temporary name so the new spelling sticks.

    Args:
        src: Source file path.
        dst: Destination file path.

    Raises:
        FileExistsError: If *dst* exists and is a different file.
        FileNotFoundError: If *src* is missing.
        OSError: For non-recoverable FS errors.

    Example:
        >>> from pathlib import Path
        >>> from photognome.fs.operations import atomic_move
        >>> src = Path('a.jpg')
        >>> dst = Path('b.jpg')
        >>> src.write_bytes(b'jpeg')
        >>> atomic_move(src, dst)
        >>> dst.read_bytes()
        b'jpeg'
    """
    if not src.exists():
        raise FileNotFoundError(f"Source {src} does not exist.")
    if dst.exists():
        if not is_same_file(src, dst):
            raise FileExistsError(f"Destination {dst} already exists.")
        if src.name != dst.name:
            temp = temp_sibling(src)
            _rename(src, temp)
            _rename(temp, dst)
        return
    _rename(src, dst)


def _unique_path(path: Path) -> Path:
    """Return *path*, or ``stem_001.ext``, ``stem_002.ext``... if it is taken."""
    if not path.exists():
        return path
    for n in range(1, MAX_BACKUP_SUFFIX + 1):
        candidate = path.with_name(f"{path.stem}_{n:03d}{path.suffix}")
        if not candidate.exists():
            return candidate
    raise FileExistsError(f"No free backup name left for {path}")


def backup_copy(src: Path, backup_root: Path, relative: Path) -> Path:
    """Copy *src* to ``backup_root / relative`` without overwriting anything.

    Missing parent folders are created. If a file already exists at the backup
    location a numeric ``_001`` style suffix is added.

    Args:
        src: File to back up.
        backup_root: Root of the backup tree.
        relative: Path of *src* relative to the scanned JPG folder.

    Returns:
        The path of the backup copy.

    Raises:
        OSError: If the copy fails.
    """
    destination = _unique_path(backup_root / relative)
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(_win_long_path(src), _win_long_path(destination))
    logger.debug("Backed up %s -> %s", src, destination)
    return destination
