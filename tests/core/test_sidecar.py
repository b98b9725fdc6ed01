"""Tests for XMP/RAW sidecar discovery."""

from pathlib import Path

import pytest

from photognome.core.sidecar import SidecarIndex, effective_raw_root, resolve_sidecars
from photognome.errors import RawRootNotFoundError


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path


def test_finds_xmp_and_raw_case_insensitively(tmp_path: Path) -> None:
    jpg = _touch(tmp_path / "jpg" / "IMG_0001.JPG")
    raw_dir = tmp_path / "raw"
    xmp = _touch(raw_dir / "img_0001.xmp")
    raw = _touch(raw_dir / "IMG_0001.RAF")
    _touch(raw_dir / "IMG_0002.RAF")

    sidecars = resolve_sidecars(jpg, raw_dir)

    assert sidecars.xmp_path == xmp
    assert sidecars.raw_path == raw


def test_dng_is_preferred_over_raf(tmp_path: Path) -> None:
    jpg = _touch(tmp_path / "jpg" / "DSCF0001.JPG")
    raw_dir = tmp_path / "raw"
    _touch(raw_dir / "DSCF0001.RAF")
    dng = _touch(raw_dir / "DSCF0001.DNG")

    assert resolve_sidecars(jpg, raw_dir).raw_path == dng


def test_no_raw_root_means_no_sidecars(tmp_path: Path) -> None:
    jpg = _touch(tmp_path / "jpg" / "IMG_0001.JPG")
    _touch(tmp_path / "jpg" / "IMG_0001.xmp")

    sidecars = resolve_sidecars(jpg)

    assert sidecars.xmp_path is None
    assert sidecars.raw_path is None


def test_raw_parent_searches_one_level_up(tmp_path: Path) -> None:
    jpg = _touch(tmp_path / "shoot" / "jpg" / "IMG_0001.JPG")
    xmp = _touch(tmp_path / "shoot" / "IMG_0001.xmp")

    sidecars = resolve_sidecars(jpg, None, raw_parent_if_missing=True)

    assert sidecars.xmp_path == xmp
    assert effective_raw_root(jpg, None, True) == tmp_path / "shoot"


def test_explicit_raw_root_beats_parent_flag(tmp_path: Path) -> None:
    jpg = _touch(tmp_path / "shoot" / "jpg" / "IMG_0001.JPG")
    raw_dir = tmp_path / "elsewhere"
    raw_dir.mkdir()
    assert effective_raw_root(jpg, raw_dir, True) == raw_dir


def test_missing_raw_root_raises(tmp_path: Path) -> None:
    jpg = _touch(tmp_path / "jpg" / "IMG_0001.JPG")
    with pytest.raises(RawRootNotFoundError):
        resolve_sidecars(jpg, tmp_path / "nope")


def test_recursive_mirrors_subfolder(tmp_path: Path) -> None:
    jpg_root = tmp_path / "jpg"
    jpg = _touch(jpg_root / "day1" / "IMG_0001.JPG")
    raw_dir = tmp_path / "raw"
    _touch(raw_dir / "IMG_0001.RAF")
    nested = _touch(raw_dir / "day1" / "IMG_0001.RAF")

    sidecars = resolve_sidecars(jpg, raw_dir, jpg_root=jpg_root, recursive=True)

    assert sidecars.raw_path == nested


def test_index_lists_each_folder_once(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    raw_dir = tmp_path / "raw"
    _touch(raw_dir / "A.RAF")
    _touch(raw_dir / "B.RAF")
    _touch(raw_dir / "notes.txt")
    index = SidecarIndex()
    listed = []
    original_load = index._load

    def counting_load(directory: Path):
        listed.append(directory)
        return original_load(directory)

    monkeypatch.setattr(index, "_load", counting_load)

    assert [p.name for p in index.candidates(raw_dir, "a")] == ["A.RAF"]
    assert [p.name for p in index.candidates(raw_dir, "B")] == ["B.RAF"]
    assert index.candidates(raw_dir, "notes") == []
    assert listed == [raw_dir]
