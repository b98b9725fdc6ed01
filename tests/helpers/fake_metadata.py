"""In-memory metadata provider for tests.

Lets planner tests describe what each source "contains" without writing real
EXIF or XMP payloads.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from photognome.metadata.base import MetadataProvider
from photognome.models.core import MetadataSource, SourceMetadata


class StaticMetadataProvider(MetadataProvider):
    """Returns canned SourceMetadata keyed by ``(filename, source)``."""

    def __init__(self) -> None:
        self.entries: Dict[Tuple[str, MetadataSource], SourceMetadata] = {}
        self.failures: Dict[Tuple[str, MetadataSource], Exception] = {}
        self.calls: List[Tuple[str, MetadataSource]] = []

    def add(self, filename: str, source: MetadataSource, **fields: Any) -> None:
        """Register metadata for *filename* read as *source*."""
        self.entries[(filename, source)] = SourceMetadata(**fields)

    def fail(self, filename: str, source: MetadataSource, error: Exception) -> None:
        """Make reading *filename* as *source* raise *error*."""
        self.failures[(filename, source)] = error

    def read(self, path: Path, source: MetadataSource) -> Optional[SourceMetadata]:
        key = (path.name, source)
        self.calls.append(key)
        if key in self.failures:
            raise self.failures[key]
        return self.entries.get(key)
