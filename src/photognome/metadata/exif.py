"""EXIF reader for JPEG and RAW (DNG/RAF) files.

Uses exifread, which understands JPEG, TIFF-based RAW containers such as DNG,
and Fujifilm RAF. Tags are looked up by their name without the IFD prefix
(``"EXIF DateTimeOriginal"`` and ``"Image DateTime"`` both answer to their last
word), in priority order.
"""

import logging
from pathlib import Path
from typing import Any, Dict

import exifread

from photognome.metadata.utils import first_present, parse_capture_date
from photognome.models.core import SourceMetadata

logger = logging.getLogger(__name__)

DATE_TAGS = ("datetimeoriginal", "datetimedigitized", "datetime")
MAKE_TAGS = ("make",)
MODEL_TAGS = ("model",)
LENS_MAKE_TAGS = ("lensmake",)
LENS_MODEL_TAGS = ("lensmodel", "lens")
FILM_SIM_TAGS = ("filmmode", "filmsimulation", "filmsimulationname", "picturemode")


def _index_tags(tags: Dict[str, Any]) -> Dict[str, str]:
    """Map lower-cased tag names (IFD prefix stripped) to printable values.

    The first tag seen for a name wins, so primary IFD values take precedence
    over thumbnail and maker-note duplicates.
    """
    values: Dict[str, str] = {}
    for full_name, tag in tags.items():
        name = full_name.split(" ", 1)[-1].lower()
        if name in values:
            continue
        printable = str(getattr(tag, "printable", tag)).strip()
        if printable:
            values[name] = printable
    return values


def read_exif_metadata(path: Path) -> SourceMetadata:
    """Read capture metadata embedded in a JPEG or RAW file.

    Args:
        path: Path to the image.

    Returns:
        The fields found in the image (any of them may be None).

    Raises:
        OSError: If the file cannot be opened.
    """
    with open(path, "rb") as f:
        tags = exifread.process_file(f, details=True)
    values = _index_tags(tags)
    logger.debug("EXIF %s: %d tags", path, len(values))

    return SourceMetadata(
        captured_at=parse_capture_date(first_present(values, DATE_TAGS)),
        camera_maker=first_present(values, MAKE_TAGS),
        camera_model=first_present(values, MODEL_TAGS),
        lens_maker=first_present(values, LENS_MAKE_TAGS),
        lens_model=first_present(values, LENS_MODEL_TAGS),
        film_simulation=first_present(values, FILM_SIM_TAGS),
    )
