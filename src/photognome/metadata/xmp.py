"""XMP sidecar reader.

Lightroom, Capture One, darktable and in-camera XMP writers disagree on
whether a property is serialised as an attribute of ``rdf:Description`` or as a
child element (sometimes wrapped in ``rdf:Alt``/``rdf:Seq``). This reader
accepts all of those forms and matches properties by their local name only, so
namespace prefixes do not matter.
"""

import html
import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict

from photognome.metadata.utils import first_present, parse_capture_date
from photognome.models.core import SourceMetadata

logger = logging.getLogger(__name__)

DATE_KEYS = ("datetimeoriginal", "createdate", "datecreated")
MAKE_KEYS = ("make",)
MODEL_KEYS = ("model",)
LENS_MAKE_KEYS = ("lensmake",)
LENS_MODEL_KEYS = ("lensmodel", "lens")
FILM_SIM_KEYS = ("filmsimulation", "filmmode", "filmsimulationname")

TARGET_KEYS = frozenset(
    DATE_KEYS
    + MAKE_KEYS
    + MODEL_KEYS
    + LENS_MAKE_KEYS
    + LENS_MODEL_KEYS
    + FILM_SIM_KEYS
)

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def _local_name(qualified: str) -> str:
    """Reduce ``{uri}LocalName`` or ``prefix:LocalName`` to ``localname``."""
    name = qualified.rsplit("}", 1)[-1].rsplit(":", 1)[-1]
    return _NON_ALNUM.sub("", name.lower())


def _element_value(element: ET.Element) -> str:
    """Return an element's text, descending into rdf:Alt/rdf:Seq lists."""
    text = (element.text or "").strip()
    if text:
        return text
    for child in element.iter():
        if child is element:
            continue
        child_text = (child.text or "").strip()
        if child_text:
            return child_text
    return ""


_LOOSE_ATTR = re.compile(r"([\w.-]+(?::[\w.-]+)?)\s*=\s*(\"[^\"]*\"|'[^']*')")
_LOOSE_ELEMENT = re.compile(r"<([\w.-]+(?::[\w.-]+)?)(?:\s[^>]*)?>([^<]+)</\1\s*>")


def _collect_loose(xml_text: str) -> Dict[str, str]:
    """Scan attributes and simple elements without a full XML parse.

    Used for packets ElementTree rejects, typically ones that use namespace
    prefixes without declaring them.
    """
    values: Dict[str, str] = {}
    for match in _LOOSE_ATTR.finditer(xml_text):
        key = _local_name(match.group(1))
        value = html.unescape(match.group(2)[1:-1]).strip()
        if key in TARGET_KEYS and key not in values and value:
            values[key] = value
    for match in _LOOSE_ELEMENT.finditer(xml_text):
        key = _local_name(match.group(1))
        value = html.unescape(match.group(2)).strip()
        if key in TARGET_KEYS and key not in values and value:
            values[key] = value
    return values


def collect_xmp_values(xml_text: str) -> Dict[str, str]:
    """Collect the first value of each recognised property in an XMP packet.

    Args:
        xml_text: The XMP document.

    Returns:
        Mapping of normalised local name (e.g. ``"lensmodel"``) to value.
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        logger.debug("Strict XMP parse failed (%s); falling back to a loose scan", e)
        return _collect_loose(xml_text)
    values: Dict[str, str] = {}
    for element in root.iter():
        for attr_name, attr_value in element.attrib.items():
            key = _local_name(attr_name)
            if key in TARGET_KEYS and key not in values and attr_value.strip():
                values[key] = attr_value.strip()
        key = _local_name(element.tag)
        if key in TARGET_KEYS and key not in values:
            value = _element_value(element)
            if value:
                values[key] = value
    return values


def read_xmp_metadata(path: Path) -> SourceMetadata:
    """Read capture metadata from an XMP sidecar.

    Args:
        path: Path to the ``.xmp`` file.

    Returns:
        The fields found in the sidecar (any of them may be None).

    Raises:
        OSError: If the file cannot be read.
    """
    xml_text = path.read_text(encoding="utf-8", errors="replace")
    # Reason: xpacket wrappers sometimes carry a BOM or leading junk that
    # ElementTree refuses before the first tag.
    start = xml_text.find("<")
    if start > 0:
        xml_text = xml_text[start:]
    values = collect_xmp_values(xml_text)
    logger.debug("XMP %s: %s", path, values)

    return SourceMetadata(
        captured_at=parse_capture_date(first_present(values, DATE_KEYS)),
        camera_maker=first_present(values, MAKE_KEYS),
        camera_model=first_present(values, MODEL_KEYS),
        lens_maker=first_present(values, LENS_MAKE_KEYS),
        lens_model=first_present(values, LENS_MODEL_KEYS),
        film_simulation=first_present(values, FILM_SIM_KEYS),
    )
