"""Tests for metadata merging and per-photo resolution.

Priority is XMP -> RAW EXIF -> JPG EXIF for every field, with the file's
modification time as the last resort for the timestamp.
"""

import os
from datetime import datetime
from pathlib import Path

from photognome.metadata.merger import merge_metadata, resolve_metadata
from photognome.models.core import MetadataSource, SidecarSet, SourceMetadata
from tests.helpers.fake_metadata import StaticMetadataProvider

FALLBACK = datetime(2020, 1, 1, 0, 0, 0)


def test_each_field_comes_from_first_source_that_has_it() -> None:
    xmp = SourceMetadata(camera_model="X-T5")
    raw = SourceMetadata(
        captured_at=datetime(2026, 2, 8, 10, 20, 30),
        camera_maker="FUJIFILM",
        camera_model="ignored",
        lens_model="XF33mm",
    )
    jpg = SourceMetadata(
        captured_at=datetime(2000, 1, 1),
        lens_maker="FUJIFILM",
        lens_model="ignored",
        film_simulation="Velvia",
    )

    record = merge_metadata(xmp, raw, jpg, fallback_time=FALLBACK)

    assert record.camera_model == "X-T5"
    assert record.camera_maker == "FUJIFILM"
    assert record.lens_model == "XF33mm"
    assert record.lens_maker == "FUJIFILM"
    assert record.film_simulation == "Velvia"
    assert record.captured_at == datetime(2026, 2, 8, 10, 20, 30)
    assert record.source_label is MetadataSource.RAW_EXIF


def test_xmp_timestamp_wins() -> None:
    record = merge_metadata(
        SourceMetadata(captured_at=datetime(2026, 2, 8)),
        SourceMetadata(captured_at=datetime(2025, 1, 1)),
        None,
        fallback_time=FALLBACK,
    )
    assert record.capture_year == 2026
    assert record.source_label is MetadataSource.XMP


def test_falls_back_to_modified_time_when_no_source_has_a_date() -> None:
    record = merge_metadata(
        None, SourceMetadata(camera_maker="Canon"), None, fallback_time=FALLBACK
    )
    assert record.captured_at == FALLBACK
    assert record.source_label is MetadataSource.FILE_MODIFIED_TIME
    assert record.camera_maker == "Canon"
    assert record.lens_model == ""


def test_resolve_metadata_treats_provider_errors_as_absent(tmp_path: Path) -> None:
    jpg = tmp_path / "IMG_0001.JPG"
    jpg.write_bytes(b"jpeg")
    xmp = tmp_path / "IMG_0001.xmp"
    xmp.write_text("<x/>")
    mtime = datetime(2024, 5, 6, 7, 8, 9).timestamp()
    os.utime(jpg, (mtime, mtime))

    provider = StaticMetadataProvider()
    provider.fail("IMG_0001.xmp", MetadataSource.XMP, ValueError("bad xml"))
    provider.add("IMG_0001.JPG", MetadataSource.JPG_EXIF, camera_maker="FUJIFILM")

    record = resolve_metadata(SidecarSet(jpg_path=jpg, xmp_path=xmp), provider)

    assert record.camera_maker == "FUJIFILM"
    assert record.source_label is MetadataSource.FILE_MODIFIED_TIME
    assert record.captured_at == datetime(2024, 5, 6, 7, 8, 9)
    # RAW is absent, so it is never asked for.
    assert ("IMG_0001.JPG", MetadataSource.RAW_EXIF) not in provider.calls
