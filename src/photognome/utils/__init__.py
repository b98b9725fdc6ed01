"""Utility modules for photognome."""

from photognome.utils.json import DateTimeEncoder
from photognome.utils.plan_store import (
    get_latest_plan_id,
    list_plans,
    load_plan,
    save_plan,
)

__all__ = [
    "DateTimeEncoder",
    "get_latest_plan_id",
    "list_plans",
    "load_plan",
    "save_plan",
]
