"""Filesystem operations for photognome."""

from photognome.fs.operations import (
    atomic_move,
    backup_copy,
    is_same_file,
    temp_sibling,
)

__all__ = ["atomic_move", "backup_copy", "is_same_file", "temp_sibling"]
