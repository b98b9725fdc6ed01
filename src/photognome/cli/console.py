"""Console utilities for CLI commands.

Centralises Rich configuration:

* ``get_console`` returns a Console honouring the ``--no-rich`` flag (which
  sets ``PHOTOGNOME_NO_RICH``) or the variable being set externally.
* Pretty tracebacks are installed on the returned console.
"""

from __future__ import annotations

import os
from typing import Any

from rich.console import Console
from rich.traceback import install as install_rich_traceback

__all__ = ["ENV_DISABLE_RICH", "get_console", "rich_enabled"]

# ENV VAR used to disable rich output entirely (useful for piping or testing)
ENV_DISABLE_RICH = "PHOTOGNOME_NO_RICH"


def rich_enabled() -> bool:
    """Return False when Rich styling has been switched off."""
    return os.getenv(ENV_DISABLE_RICH, "0").lower() not in {"1", "true", "yes"}


def get_console(*, record: bool = False, **console_kwargs: Any) -> Console:
    """Return a configured Rich :class:`Console`.

    Args:
        record: Forwarded to Console so output can be exported in tests.
        **console_kwargs: Additional keyword arguments for Console.
    """
    if rich_enabled():
        console = Console(record=record, **console_kwargs)
    else:
        # Disable colour, otherwise output may contain escape codes.
        console = Console(
            record=record,
            color_system=None,
            force_terminal=False,
            **console_kwargs,
        )
    install_rich_traceback(show_locals=False, console=console)
    return console
