"""Universal debug/logging utility for photognome.

Provides setup_logger(), used by the CLI to attach a stream handler to the
package logger. Modules log through ``logging.getLogger(__name__)``.
Debug output is controlled by the PHOTOGNOME_DEBUG environment variable.
"""

import logging
import os


def debug_enabled() -> bool:
    """Return True when ``PHOTOGNOME_DEBUG=1``."""
    return os.getenv("PHOTOGNOME_DEBUG", "0") == "1"


def setup_logger(verbose: bool = False) -> logging.Logger:
    """Configure and return the ``photognome`` package logger.

    Args:
        verbose: Force DEBUG level regardless of ``PHOTOGNOME_DEBUG``.
    """
    logger = logging.getLogger("photognome")
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "[%(levelname)s] %(asctime)s %(name)s: %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose or debug_enabled() else logging.WARNING)
    return logger

