"""Utilities for storing and retrieving rename plans.

Plans built by ``photognome rename`` are saved under ``~/.photognome/plans`` so
that ``photognome apply`` can execute them later:
- ``<id>.json``: the plan itself (RenamePlan JSON).
- ``<id>.meta.yaml``: run metadata (when, which version, which arguments).
- ``latest.json``: symlink (or copy, where symlinks are unavailable) of the
  most recently saved plan.
"""

import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, cast

import yaml
from pydantic import BaseModel, ValidationError

from photognome.__about__ import __version__
from photognome.models.plan import RenamePlan
from photognome.utils.config import get_photognome_home

logger = logging.getLogger(__name__)

LATEST_NAME = "latest.json"


class RunMetadata(BaseModel):
    """Metadata about a saved rename plan."""

    id: str
    timestamp: datetime
    version: str = __version__
    args: Dict[str, Any] = {}

    def model_dump_for_yaml(self) -> Dict[str, Any]:
        """Convert to a YAML-serializable dictionary."""
        return cast(Dict[str, Any], self.model_dump(mode="json"))


def get_plans_dir() -> Path:
    """Ensure the plans directory exists and return its path."""
    plans_dir = get_photognome_home() / "plans"
    if not plans_dir.exists():
        plans_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Created plans directory at %s", plans_dir)
    return plans_dir


def save_plan(plan: RenamePlan, extra_args: Optional[Dict[str, Any]] = None) -> str:
    """Save a rename plan and its run metadata to disk.

    Args:
        plan: The rename plan to save.
        extra_args: Extra arguments to store with the plan metadata.

    Returns:
        str: The ID of the saved plan.
    """
    plans_dir = get_plans_dir()
    plan_path = plans_dir / f"{plan.id}.json"
    plan_path.write_text(plan.model_dump_json(indent=2), encoding="utf-8")

    args: Dict[str, Any] = {"request": plan.request.model_dump(mode="json")}
    if extra_args:
        args.update(extra_args)
    metadata = RunMetadata(id=plan.id, timestamp=plan.created_at, args=args)
    meta_path = plans_dir / f"{plan.id}.meta.yaml"
    with open(meta_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(metadata.model_dump_for_yaml(), f, sort_keys=False)

    latest_link = plans_dir / LATEST_NAME
    try:
        if latest_link.exists() or latest_link.is_symlink():
            latest_link.unlink()
        os.symlink(str(plan_path), str(latest_link))
    except (OSError, NotImplementedError):
        shutil.copyfile(str(plan_path), str(latest_link))

    logger.debug("Saved plan %s to %s", plan.id, plan_path)
    return plan.id


def load_plan(plan_id: str) -> Tuple[RenamePlan, Optional[RunMetadata]]:
    """Load a rename plan and, if present, its metadata.

    Args:
        plan_id: The ID of the plan to load.

    Returns:
        The loaded plan and its metadata (None if the metadata file is gone).

    Raises:
        FileNotFoundError: If the plan file does not exist.
        ValueError: If the plan file is not a valid plan.
    """
    plans_dir = get_plans_dir()
    plan_path = plans_dir / f"{plan_id}.json"
    if not plan_path.exists():
        raise FileNotFoundError(f"Plan file not found: {plan_path}")

    try:
        plan = RenamePlan.model_validate_json(plan_path.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise ValueError(f"Invalid plan file {plan_path}: {e}") from e

    metadata: Optional[RunMetadata] = None
    meta_path = plans_dir / f"{plan_id}.meta.yaml"
    if meta_path.exists():
        with open(meta_path, "r", encoding="utf-8") as f:
            metadata = RunMetadata.model_validate(yaml.safe_load(f))
    return plan, metadata


def get_latest_plan_id() -> Optional[str]:
    """Get the ID of the latest saved plan, or None if none exist."""
    plans_dir = get_plans_dir()
    latest_path = plans_dir / LATEST_NAME
    if latest_path.is_symlink():
        return latest_path.resolve().stem
    if latest_path.exists():
        try:
            return RenamePlan.model_validate_json(
                latest_path.read_text(encoding="utf-8")
            ).id
        except ValidationError:
            logger.warning("Ignoring unreadable %s", latest_path)
    plans = list_plans()
    return plans[0][0] if plans else None


def list_plans() -> List[Tuple[str, datetime]]:
    """List saved plans as ``(plan_id, created)`` tuples, newest first."""
    plans_dir = get_plans_dir()
    result: List[Tuple[str, datetime]] = []
    for plan_file in plans_dir.glob("*.json"):
        if plan_file.name == LATEST_NAME:
            continue
        plan_id = plan_file.stem
        timestamp = datetime.fromtimestamp(plan_file.stat().st_mtime)
        meta_file = plans_dir / f"{plan_id}.meta.yaml"
        if meta_file.exists():
            with open(meta_file, "r", encoding="utf-8") as f:
                meta_data = yaml.safe_load(f)
            if isinstance(meta_data, dict) and "timestamp" in meta_data:
                ts = meta_data["timestamp"]
                timestamp = datetime.fromisoformat(ts) if isinstance(ts, str) else ts
        result.append((plan_id, timestamp))
    result.sort(key=lambda x: x[1], reverse=True)
    return result
