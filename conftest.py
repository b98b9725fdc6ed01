"""Configure pytest.

Puts ``src`` on the import path and isolates every test from the real user
profile (config, undo ledger and saved plans).
"""

import os
import sys
from datetime import datetime
from pathlib import Path

import pytest

# Get the project root directory
root_dir = Path(__file__).parent

# Add src directory to Python path
src_path = str(root_dir / "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from tests.helpers.fake_metadata import StaticMetadataProvider  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_home(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Point HOME and XDG_CONFIG_HOME at a throwaway folder for every test.

    Also drops any PHOTOGNOME_* overrides from the environment.
    """
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    for key in list(os.environ):
        if key.startswith("PHOTOGNOME_"):
            monkeypatch.delenv(key)
    return home


@pytest.fixture
def jpg_dir(tmp_path: Path) -> Path:
    """An empty folder for JPEGs."""
    folder = tmp_path / "jpg"
    folder.mkdir()
    return folder


@pytest.fixture
def provider() -> StaticMetadataProvider:
    """An in-memory metadata provider with no entries."""
    return StaticMetadataProvider()


@pytest.fixture
def capture_time() -> datetime:
    """The capture time used across scenarios."""
    return datetime(2026, 2, 8, 10, 20, 30)
