"""Tests for saving and loading rename plans."""

import time
from pathlib import Path

import pytest
import yaml

from photognome.models.plan import PlanRequest, RenamePlan
from photognome.utils.plan_store import (
    get_latest_plan_id,
    get_plans_dir,
    list_plans,
    load_plan,
    save_plan,
)


@pytest.fixture
def plans_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "data"
    monkeypatch.setenv("PHOTOGNOME_HOME", str(home))
    return home


def _plan(tmp_path: Path) -> RenamePlan:
    return RenamePlan(
        jpg_root=tmp_path,
        request=PlanRequest(jpg_input=tmp_path, exclusions=["-NR"]),
    )


def test_save_and_load(tmp_path: Path, plans_home: Path) -> None:
    plan = _plan(tmp_path)

    plan_id = save_plan(plan, extra_args={"apply": False})
    loaded, meta = load_plan(plan_id)

    assert get_plans_dir() == plans_home / "plans"
    assert loaded == plan
    assert meta is not None
    assert meta.id == plan.id
    assert meta.args["apply"] is False
    assert meta.args["request"]["exclusions"] == ["-NR"]

    meta_path = plans_home / "plans" / f"{plan_id}.meta.yaml"
    raw_meta = yaml.safe_load(meta_path.read_text())
    assert raw_meta["id"] == plan.id


def test_latest_plan(tmp_path: Path, plans_home: Path) -> None:
    assert get_latest_plan_id() is None

    first = save_plan(_plan(tmp_path))
    time.sleep(0.01)
    second = save_plan(_plan(tmp_path))

    assert get_latest_plan_id() == second
    assert [plan_id for plan_id, _ in list_plans()] == [second, first]


def test_missing_plan(plans_home: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_plan("does-not-exist")


def test_invalid_plan_file(plans_home: Path) -> None:
    (get_plans_dir() / "broken.json").write_text("{}")
    with pytest.raises(ValueError):
        load_plan("broken")
