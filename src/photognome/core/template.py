"""Filename templates.

Templates are plain text with ``{token}`` placeholders:

    {year} {month} {day} {hour} {minute} {second} {date}
    {camera_maker} {camera_model} {lens_maker} {lens_model} {film_sim}
    {orig_name}

Unknown ``{...}`` sequences are left in the output verbatim. A template may
not contain characters that are illegal in filenames.
"""

import re
from pathlib import Path
from typing import Dict, Iterable, Optional

from photognome.core.sanitize import FORBIDDEN_CHARS, sanitize_stem
from photognome.errors import EmptyTemplateError, TemplateDisallowedCharsError
from photognome.models.core import MetadataRecord, MetadataSource
from photognome.models.plan import DEFAULT_MAX_FILENAME_LEN

TOKEN_PATTERN = re.compile(r"\{([A-Za-z_]+)\}")

KNOWN_TOKENS = (
    "year",
    "month",
    "day",
    "hour",
    "minute",
    "second",
    "date",
    "camera_maker",
    "camera_model",
    "lens_maker",
    "lens_model",
    "film_sim",
    "orig_name",
)

SAMPLE_RECORD = MetadataRecord(
    capture_year=2026,
    month=2,
    day=8,
    hour=10,
    minute=20,
    second=30,
    camera_maker="FUJIFILM",
    camera_model="X-T5",
    lens_maker="FUJIFILM",
    lens_model="XF33mmF1.4 R LM WR",
    film_simulation="Classic Chrome",
    source_label=MetadataSource.XMP,
)
SAMPLE_FILENAME = "DSCF0001.JPG"


def validate_template(template: str) -> None:
    """Check that *template* can be used to render filenames.

    Raises:
        EmptyTemplateError: If the template is empty or blank.
        TemplateDisallowedCharsError: If it contains ``\\ / : * ? " < > |``.
    """
    if not template or not template.strip():
        raise EmptyTemplateError()
    found = [ch for ch in FORBIDDEN_CHARS if ch in template]
    if found:
        raise TemplateDisallowedCharsError(template, found)


def token_values(
    record: MetadataRecord, original_stem: str, dedupe_same_maker: bool = False
) -> Dict[str, str]:
    """Return the substitution value for every known token."""
    lens_maker = record.lens_maker
    if dedupe_same_maker and lens_maker and lens_maker == record.camera_maker:
        lens_maker = ""
    return {
        "year": f"{record.capture_year:04d}",
        "month": f"{record.month:02d}",
        "day": f"{record.day:02d}",
        "hour": f"{record.hour:02d}",
        "minute": f"{record.minute:02d}",
        "second": f"{record.second:02d}",
        "date": record.captured_at.strftime("%Y%m%d%H%M%S"),
        "camera_maker": record.camera_maker,
        "camera_model": record.camera_model,
        "lens_maker": lens_maker,
        "lens_model": record.lens_model,
        "film_sim": record.film_simulation,
        "orig_name": original_stem,
    }


def substitute_tokens(template: str, values: Dict[str, str]) -> str:
    """Replace known tokens; leave unknown ``{...}`` sequences untouched."""
    return TOKEN_PATTERN.sub(lambda m: values.get(m.group(1), m.group(0)), template)


def render_filename(
    template: str,
    record: MetadataRecord,
    original_name: str,
    exclusions: Iterable[str] = (),
    max_len: int = DEFAULT_MAX_FILENAME_LEN,
    *,
    dedupe_same_maker: bool = False,
) -> str:
    """Render and sanitize a new filename for one photo.

    Args:
        template: Naming template.
        record: Resolved metadata for the photo.
        original_name: Current filename including extension.
        exclusions: Strings removed from the rendered name.
        max_len: Maximum length of the resulting filename.
        dedupe_same_maker: Blank ``{lens_maker}`` when it equals the camera maker.

    Returns:
        The new basename: sanitized stem plus the original extension.

    Raises:
        TemplateError: If the template is invalid.
    """
    validate_template(template)
    original = Path(original_name)
    stem, extension = original.stem, original.suffix
    rendered = substitute_tokens(
        template, token_values(record, stem, dedupe_same_maker=dedupe_same_maker)
    )
    sanitized = sanitize_stem(
        rendered,
        exclusions,
        extension=extension,
        max_len=max_len,
        keep_suffix=stem if "{orig_name}" in template else None,
    )
    return f"{sanitized}{extension}"


def render_preview(
    template: str,
    *,
    exclusions: Iterable[str] = (),
    dedupe_same_maker: bool = True,
    max_len: int = DEFAULT_MAX_FILENAME_LEN,
    record: Optional[MetadataRecord] = None,
    original_name: str = SAMPLE_FILENAME,
) -> str:
    """Render a sample filename for live template feedback."""
    return render_filename(
        template,
        record or SAMPLE_RECORD,
        original_name,
        exclusions,
        max_len,
        dedupe_same_maker=dedupe_same_maker,
    )


def unknown_tokens(template: str) -> list[str]:
    """Return ``{...}`` names in *template* that will not be substituted."""
    return [
        name for name in TOKEN_PATTERN.findall(template) if name not in KNOWN_TOKENS
    ]
