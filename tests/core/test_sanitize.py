"""Tests for the filename sanitization pipeline."""

import pytest

from photognome.core.sanitize import (
    apply_exclusions,
    collapse_separators,
    make_usable,
    replace_forbidden,
    sanitize_stem,
    truncate_stem,
)


@pytest.mark.parametrize("variant", ["-NR", "-nr", "_NR", " NR", "_nR"])
def test_exclusions_are_case_and_separator_insensitive(variant: str) -> None:
    result = apply_exclusions(f"20260208{variant}_IMG_0001", ["-NR"])
    assert result == "20260208_IMG_0001"


def test_exclusion_with_inner_separators() -> None:
    value = "20260208-dxo_deepprime-3_IMG_0001"
    assert apply_exclusions(value, ["-DxO_DeepPRIME 3"]) == "20260208_IMG_0001"


def test_blank_exclusions_are_ignored() -> None:
    assert apply_exclusions("a_b", ["", "   "]) == "a_b"


def test_forbidden_and_control_characters_become_underscores() -> None:
    assert replace_forbidden('a:b*c?"d<e>f|g\\h/i\x01j') == "a_b_c__d_e_f_g_h_i_j"


def test_collapse_separators_only_merges_identical_runs() -> None:
    assert collapse_separators("__a--b  c_-d__") == "a-b c_-d"
    assert collapse_separators("..name..") == "name"


def test_sanitize_stem_scenario_c() -> None:
    assert sanitize_stem("20260208-NR_IMG_0001", ["-NR"]) == "20260208_IMG_0001"


def test_sanitize_stem_whitespace_and_empty_segments() -> None:
    result = sanitize_stem("20260208__FUJIFILM_X T5___IMG 0001")
    assert result == "20260208_FUJIFILM_X_T5_IMG_0001"


def test_empty_result_becomes_untitled() -> None:
    assert sanitize_stem("___") == "untitled"
    assert sanitize_stem("-NR", ["-NR"]) == "untitled"


@pytest.mark.parametrize("name", ["CON", "aux", "COM1", "lpt9"])
def test_windows_reserved_names_are_suffixed(name: str) -> None:
    assert make_usable(name) == f"{name}_file"


def test_truncation_keeps_original_name_suffix() -> None:
    stem = "20260208_102030_FUJIFILM_X-T5_XF33mmF1.4_R_LM_WR_IMG_0001"

    result = truncate_stem(stem, ".JPG", 30, keep_suffix="IMG_0001")

    assert len(result) + len(".JPG") <= 30
    assert result.endswith("_IMG_0001")
    assert result.startswith("20260208")


def test_truncation_without_suffix_keeps_tail() -> None:
    result = truncate_stem("aaaa_bbbb_cccc", ".jpg", 10)
    assert result == "b_cccc"
    assert truncate_stem("aaaa_bbbb__cc", ".jpg", 7) == "cc"


def test_sanitize_stem_respects_max_len_with_extension() -> None:
    stem = "x" * 300 + "_IMG_0001"
    result = sanitize_stem(stem, extension=".JPG", max_len=240, keep_suffix="IMG_0001")
    assert len(result) + 4 <= 240
    assert result.endswith("_IMG_0001")


@pytest.mark.parametrize(
    "raw",
    [
        "20260208-NR_IMG_0001",
        "  spaced   out  name ",
        "a__b--c..",
        "con",
        "weird:*?<>|chars",
        "-dxo_deepprime 3-NR-nr_IMG",
        "",
        "abcdefgh-CON",
        "CON_file",
    ],
)
@pytest.mark.parametrize("max_len", [24, 14, 7])
def test_sanitize_stem_is_idempotent(raw: str, max_len: int) -> None:
    exclusions = ["-NR", "-DxO_DeepPRIME 3"]
    once = sanitize_stem(raw, exclusions, extension=".JPG", max_len=max_len)
    twice = sanitize_stem(once, exclusions, extension=".JPG", max_len=max_len)
    assert once == twice


@pytest.mark.parametrize("max_len", [3, 7, 8, 14])
@pytest.mark.parametrize("raw", [".x\taNba.-_-CON:", "x-_-AUX.raw", "ab-COM1"])
def test_truncated_stems_are_idempotent_and_never_reserved(
    raw: str, max_len: int
) -> None:
    once = sanitize_stem(raw, ["-a"], max_len=max_len)

    assert sanitize_stem(once, ["-a"], max_len=max_len) == once
    assert make_usable(once) == once
    assert 0 < len(once) <= max_len


def test_truncation_down_to_device_name_is_refitted() -> None:
    assert sanitize_stem("abcdefgh-CON", max_len=3) == "ON"
    assert sanitize_stem("ab.-_.-CON", max_len=8) == "CON_file"
