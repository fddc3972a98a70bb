# config_manager.py
import os
from pathlib import Path
import json

from .logger import LOGGER
from . import error as E

config_json = Path(__file__).resolve().parent / "config.json"

DEFAULTS = {
    "precision": 15,
    "keep_going": False,
    "copy_result": False,
    "max_depth": 200,
    "debug": False,
}

# Deeper parser recursion would run into the interpreter's recursion limit
LIMITS = {
    "max_depth": (1, 250),
}


def config_path():
    """Settings file, overridable with the CULATOR_CONFIG environment variable."""
    override = os.environ.get("CULATOR_CONFIG")
    if override:
        return Path(override)
    return config_json


def _is_valid(key, value):
    expected = type(DEFAULTS[key])
    if expected is int:
        # bool is an int subclass; "precision": true is still a typo
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, expected)


def load_setting_value(key_value):
    settings_dict = dict(DEFAULTS)
    try:
        with open(config_path(), 'r', encoding= 'utf-8') as f:
            loaded = json.load(f)

    except (FileNotFoundError, json.JSONDecodeError):
        loaded = {}

    if not isinstance(loaded, dict):
        loaded = {}

    for key, value in loaded.items():
        if key in DEFAULTS and _is_valid(key, value):
            if key in LIMITS:
                low, high = LIMITS[key]
                value = max(low, min(high, value))
            settings_dict[key] = value
        else:
            LOGGER.debug(E.ERROR_MESSAGES["5001"] + repr(key))

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)
