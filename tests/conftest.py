import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from culator.logger import LOGGER


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Run every test against the built-in defaults, with debug output off."""
    monkeypatch.setenv("CULATOR_CONFIG", str(tmp_path / "no-config.json"))
    LOGGER.set_debug(False)
    yield
    LOGGER.set_debug(False)
