"""JSON serialization helpers for photognome.

Used by the CLI's ``--json`` output to serialize apply/undo results, which are
dataclasses holding datetime, Path and Enum values.
"""

import dataclasses
import json
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Self


class DateTimeEncoder(json.JSONEncoder):
    """Custom JSON encoder for photognome.

    Handles datetime, Path, Enum and dataclass instances.
    """

    def default(self: Self, obj: object) -> Any:  # noqa: ANN401
        """Convert objects to JSON-serializable format.

        Returns:
            - datetime: ISO 8601 string
            - Path: string
            - Enum: its value
            - dataclass: a dict of its fields
            - Otherwise: falls back to base class
        """
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Path):
            return str(obj)
        if isinstance(obj, Enum):
            return obj.value
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
        return super().default(obj)


def dumps(obj: object, **kwargs: Any) -> str:  # noqa: ANN401
    """Serialize *obj* with DateTimeEncoder."""
    return json.dumps(obj, cls=DateTimeEncoder, **kwargs)
