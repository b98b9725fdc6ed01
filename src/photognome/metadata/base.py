"""Base abstraction for metadata providers.

Defines the interface the planner uses to read per-source metadata. The planner
only ever sees :class:`~photognome.models.core.SourceMetadata` records; how a
provider obtains them (exifread, an external exiftool process, a test double)
is its own business.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from photognome.models.core import MetadataSource, SourceMetadata


class MetadataProvider(ABC):
    """Abstract base class for all metadata providers.

    Providers are injected into the planner for testability. A provider may
    return None or raise for a source it cannot read; the planner treats both
    as "source absent".
    """

    @abstractmethod
    def read(
        self, path: Path, source: MetadataSource
    ) -> Optional[SourceMetadata]:
        """Read the metadata one source contributes for *path*.

        Args:
            path: The XMP sidecar, RAW image, or JPEG to read.
            source: Which kind of source *path* is (XMP, RAW EXIF, JPG EXIF).

        Returns:
            The fields the source supplied, or None if it supplied nothing.
        """
        raise NotImplementedError
