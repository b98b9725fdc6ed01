"""Tests for FileMetadataProvider dispatch."""

from pathlib import Path

import pytest

from photognome.metadata import provider as provider_module
from photognome.metadata.provider import FileMetadataProvider
from photognome.models.core import MetadataSource, SourceMetadata


def test_dispatches_by_source(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    seen = []

    def fake_xmp(path: Path) -> SourceMetadata:
        seen.append(("xmp", path.name))
        return SourceMetadata(camera_maker="FUJIFILM")

    def fake_exif(path: Path) -> SourceMetadata:
        seen.append(("exif", path.name))
        return SourceMetadata(camera_model="X-T5")

    monkeypatch.setattr(provider_module, "read_xmp_metadata", fake_xmp)
    monkeypatch.setattr(provider_module, "read_exif_metadata", fake_exif)
    reader = FileMetadataProvider()

    xmp = reader.read(tmp_path / "a.xmp", MetadataSource.XMP)
    raw = reader.read(tmp_path / "a.raf", MetadataSource.RAW_EXIF)
    jpg = reader.read(tmp_path / "a.jpg", MetadataSource.JPG_EXIF)

    assert xmp.camera_maker == "FUJIFILM"
    assert raw.camera_model == "X-T5"
    assert jpg.camera_model == "X-T5"
    assert seen == [("xmp", "a.xmp"), ("exif", "a.raf"), ("exif", "a.jpg")]


def test_empty_metadata_is_reported_as_absent(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(
        provider_module, "read_exif_metadata", lambda path: SourceMetadata()
    )
    reader = FileMetadataProvider()
    assert reader.read(tmp_path / "a.jpg", MetadataSource.JPG_EXIF) is None


def test_modified_time_is_not_a_readable_source(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        FileMetadataProvider().read(
            tmp_path / "a.jpg", MetadataSource.FILE_MODIFIED_TIME
        )
