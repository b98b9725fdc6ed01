"""Filename sanitization pipeline.

Turns a freshly rendered template string into a safe file stem. Steps run in a
fixed order:

1. Exclusion removal (case-insensitive; space, hyphen and underscore are
   interchangeable when matching).
2. Whitespace runs become a single underscore.
3. Characters illegal on Windows/macOS/Linux filesystems become underscores.
4. Repeated separators collapse and leading/trailing separators are trimmed.
5. Empty stems and Windows device names are made usable.
6. Over-long stems are truncated, keeping the original-name suffix, and the
   device-name check runs again on what is left.

The steps repeat until the stem stops changing, so feeding the output back in
returns it unchanged.
"""

import re
from typing import Iterable, Optional

FORBIDDEN_CHARS = '\\/:*?"<>|'
SEPARATORS = "_- "
TRIM_CHARS = SEPARATORS + "."
UNTITLED = "untitled"
RESERVED_SUFFIX = "_file"
MAX_PASSES = 16

WINDOWS_RESERVED_NAMES = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{i}" for i in range(1, 10)]
    + [f"LPT{i}" for i in range(1, 10)]
)

_WHITESPACE_RUN = re.compile(r"\s+")
_SEPARATOR_CLASS = "[ _\\-]"


def exclusion_pattern(exclusion: str) -> re.Pattern[str]:
    """Compile an exclusion into a case- and separator-insensitive pattern.

    Example:
        ``"-DxO_DeepPRIME 3"`` matches ``"-dxo-deepprime_3"``.
    """
    parts = [
        _SEPARATOR_CLASS if ch in SEPARATORS else re.escape(ch) for ch in exclusion
    ]
    return re.compile("".join(parts), re.IGNORECASE)


def apply_exclusions(value: str, exclusions: Iterable[str]) -> str:
    """Remove every occurrence of each exclusion from *value*."""
    for exclusion in exclusions:
        if not exclusion or not exclusion.strip():
            continue
        value = exclusion_pattern(exclusion).sub("", value)
    return value


def normalize_whitespace(value: str) -> str:
    """Replace each run of whitespace with a single underscore."""
    return _WHITESPACE_RUN.sub("_", value)


def replace_forbidden(value: str) -> str:
    """Replace filesystem-illegal and control characters with underscores."""
    return "".join(
        "_" if ch in FORBIDDEN_CHARS or ord(ch) < 32 or ord(ch) == 127 else ch
        for ch in value
    )


def collapse_separators(value: str) -> str:
    """Collapse runs of the same separator and trim separators/dots at both ends.

    ``"__a--b__"`` becomes ``"a-b"``; mixed runs such as ``"_-"`` are kept.
    """
    out: list[str] = []
    for ch in value:
        if ch in SEPARATORS and out and out[-1] == ch:
            continue
        out.append(ch)
    return "".join(out).strip(TRIM_CHARS)


def _clean_once(value: str, exclusions: tuple[str, ...]) -> str:
    value = apply_exclusions(value, exclusions)
    value = normalize_whitespace(value)
    value = replace_forbidden(value)
    return collapse_separators(value)


def clean_stem(value: str, exclusions: Iterable[str] = ()) -> str:
    """Run exclusion removal and character normalisation to a fixed point.

    Repeating until nothing changes guarantees idempotence even when removing
    one exclusion (or collapsing separators) exposes another match.
    """
    frozen = tuple(exclusions)
    while True:
        cleaned = _clean_once(value, frozen)
        if cleaned == value:
            return cleaned
        value = cleaned


def _is_reserved(stem: str) -> bool:
    return stem.split(".", 1)[0].upper() in WINDOWS_RESERVED_NAMES


def make_usable(stem: str) -> str:
    """Replace empty stems and suffix Windows reserved device names."""
    if not stem:
        return UNTITLED
    if _is_reserved(stem):
        return f"{stem}{RESERVED_SUFFIX}"
    return stem


def truncate_stem(
    stem: str,
    extension: str,
    max_len: int,
    keep_suffix: Optional[str] = None,
) -> str:
    """Shorten *stem* so that ``stem + extension`` fits in *max_len* characters.

    The extension is never truncated. When *stem* ends with *keep_suffix*
    (normally the original filename), that suffix survives intact and the text
    in front of it is cut instead. Otherwise the trailing part of the stem is
    kept.

    Args:
        stem: Sanitized stem.
        extension: Extension including the dot (e.g. ``".JPG"``).
        max_len: Maximum length of the full filename.
        keep_suffix: Trailing text to preserve if possible.

    Returns:
        The (possibly shortened) stem.
    """
    limit = max(max_len - len(extension), 1)
    if len(stem) <= limit:
        return stem

    if keep_suffix and stem.endswith(keep_suffix) and len(keep_suffix) < limit:
        head = stem[: len(stem) - len(keep_suffix)]
        head_body = head.rstrip(TRIM_CHARS)
        separator = head[len(head_body) : len(head_body) + 1]
        room = limit - len(keep_suffix) - len(separator)
        kept = head_body[:room].rstrip(TRIM_CHARS) if room > 0 else ""
        if kept:
            return f"{kept}{separator}{keep_suffix}"
        return keep_suffix

    tail = stem[-limit:].lstrip(TRIM_CHARS)
    return tail or stem[:limit]


def fit_stem(
    stem: str,
    extension: str,
    max_len: int,
    keep_suffix: Optional[str] = None,
) -> str:
    """Make *stem* usable and fit it into *max_len*.

    Truncation can cut a stem down to a Windows device name (``"x-CON"`` kept
    to its last three characters is ``"CON"``), so the reserved check runs
    again on the shortened result. When ``_file`` no longer fits, the first
    character is dropped instead; no device name survives that.
    """
    limit = max(max_len - len(extension), 1)
    fitted = truncate_stem(make_usable(stem), extension, max_len, keep_suffix)
    if _is_reserved(fitted):
        if len(fitted) + len(RESERVED_SUFFIX) <= limit:
            return f"{fitted}{RESERVED_SUFFIX}"
        return fitted[1:]
    return fitted


def sanitize_stem(
    stem: str,
    exclusions: Iterable[str] = (),
    *,
    extension: str = "",
    max_len: int = 240,
    keep_suffix: Optional[str] = None,
) -> str:
    """Run the full sanitization pipeline on a rendered stem.

    Cleaning and fitting repeat until the stem stops changing, because a cut
    can join text into a new exclusion match or a device name.

    Args:
        stem: Rendered template output (without extension).
        exclusions: Strings to strip out.
        extension: Extension that will be re-appended (counts toward *max_len*).
        max_len: Maximum full filename length.
        keep_suffix: Raw original-name stem to preserve when truncating.

    Returns:
        A filesystem-safe stem.
    """
    frozen = tuple(exclusions)
    suffix = clean_stem(keep_suffix) if keep_suffix else None
    value = stem
    for _ in range(MAX_PASSES):
        cleaned = clean_stem(value, frozen)
        fitted = fit_stem(cleaned, extension, max_len, keep_suffix=suffix or None)
        if fitted == value:
            break
        value = fitted
    return value
