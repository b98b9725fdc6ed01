"""Tests for the photognome.models package.

Covers:
- SourceMetadata blank handling and immutability
- MetadataRecord construction from a datetime
- SidecarSet / PlanCandidate path invariants
- RenamePlan JSON round trip
"""

from datetime import datetime
from pathlib import Path

import pytest
from pydantic import ValidationError

from photognome.models import (
    MetadataRecord,
    MetadataSource,
    PlanCandidate,
    PlanRequest,
    RenamePlan,
    SidecarSet,
    SourceMetadata,
)


def test_source_metadata_blank_strings_become_none() -> None:
    meta = SourceMetadata(camera_maker="  ", camera_model=" X-T5 ")
    assert meta.camera_maker is None
    assert meta.camera_model == "X-T5"
    assert not meta.is_empty()
    assert SourceMetadata().is_empty()


def test_source_metadata_is_frozen() -> None:
    meta = SourceMetadata(camera_maker="FUJIFILM")
    with pytest.raises(ValidationError):
        meta.camera_maker = "Canon"  # type: ignore[misc]


def test_metadata_record_from_datetime() -> None:
    moment = datetime(2026, 2, 8, 10, 20, 30)
    record = MetadataRecord.from_datetime(
        moment, MetadataSource.XMP, camera_maker="FUJIFILM"
    )
    assert (record.capture_year, record.month, record.day) == (2026, 2, 8)
    assert (record.hour, record.minute, record.second) == (10, 20, 30)
    assert record.camera_maker == "FUJIFILM"
    assert record.lens_model == ""
    assert record.captured_at == moment
    assert record.source_label is MetadataSource.XMP


def test_sidecar_set_requires_absolute_jpg(tmp_path: Path) -> None:
    SidecarSet(jpg_path=tmp_path / "a.jpg")
    with pytest.raises(ValidationError):
        SidecarSet(jpg_path=Path("relative.jpg"))


def test_plan_candidate_must_stay_in_directory(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        PlanCandidate(
            original_path=tmp_path / "a.jpg",
            target_path=tmp_path / "sub" / "b.jpg",
            changed=True,
            source_label=MetadataSource.JPG_EXIF,
        )


def test_plan_request_blank_jpg_input_is_none() -> None:
    request = PlanRequest(jpg_input="  ")
    assert request.jpg_input is None
    assert request.max_filename_len == 240
    assert request.dedupe_same_maker is True


def test_plan_request_rejects_non_positive_max_len(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        PlanRequest(jpg_input=tmp_path, max_filename_len=0)


def test_rename_plan_json_round_trip(tmp_path: Path) -> None:
    candidate = PlanCandidate(
        original_path=tmp_path / "IMG_0001.JPG",
        target_path=tmp_path / "20260208_IMG_0001.JPG",
        changed=True,
        source_label=MetadataSource.FILE_MODIFIED_TIME,
    )
    plan = RenamePlan(
        jpg_root=tmp_path,
        request=PlanRequest(jpg_input=tmp_path),
        candidates=[candidate],
    )

    restored = RenamePlan.model_validate_json(plan.model_dump_json())

    assert restored.id == plan.id
    assert restored.candidates[0].target_path == candidate.target_path
    assert restored.candidates[0].source_label is MetadataSource.FILE_MODIFIED_TIME
    assert restored.changed_candidates == restored.candidates
