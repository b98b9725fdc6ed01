"""Default file-based metadata provider."""

from pathlib import Path
from typing import Optional

from photognome.metadata.base import MetadataProvider
from photognome.metadata.exif import read_exif_metadata
from photognome.metadata.xmp import read_xmp_metadata
from photognome.models.core import MetadataSource, SourceMetadata


class FileMetadataProvider(MetadataProvider):
    """Reads XMP sidecars directly and JPEG/RAW EXIF through exifread."""

    def read(
        self, path: Path, source: MetadataSource
    ) -> Optional[SourceMetadata]:
        """Read *path* as the given kind of source.

        Returns:
            The parsed fields, or None if the source supplied nothing usable.

        Raises:
            ValueError: If *source* is not a readable source kind.
        """
        if source == MetadataSource.XMP:
            meta = read_xmp_metadata(path)
        elif source in (MetadataSource.RAW_EXIF, MetadataSource.JPG_EXIF):
            meta = read_exif_metadata(path)
        else:
            raise ValueError(f"Cannot read metadata source: {source.value}")
        return None if meta.is_empty() else meta
