"""Persistent JSON config helpers.

Stores the UI theme, the opener command, and the reconnect interval.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import shlex
import sys
from pathlib import Path

from platformdirs import user_config_dir, user_log_dir

APP_NAME = "quickfile"
CONFIG_FILENAME = "config.json"
LOG_FILENAME = "quickfile.log"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
LOG_DIR = Path(user_log_dir(APP_NAME, appauthor=False))
DEFAULT_RECONNECT_SECONDS = 1.0


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON, ignoring write failures."""
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError):
        pass


def load_theme_name() -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    value = load_config().get("theme")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def save_theme_name(theme_name: str) -> None:
    stripped = str(theme_name).strip()
    if not stripped:
        return
    config = load_config()
    config["theme"] = stripped
    save_config(config)


def default_opener_command() -> list[str]:
    if sys.platform == "darwin":
        return ["open"]
    return ["xdg-open"]


def load_opener_command() -> list[str]:
    """Return the argv prefix used to open a confirmed file.

    Accepts either a shell-style string or a list of strings; anything else
    falls back to the platform default.
    """
    value = load_config().get("opener")
    if isinstance(value, str):
        try:
            parts = shlex.split(value)
        except ValueError:
            parts = []
        if parts:
            return parts
    if isinstance(value, list) and value and all(isinstance(part, str) and part for part in value):
        return list(value)
    return default_opener_command()


def load_reconnect_seconds() -> float:
    """Return the interactive reconnect interval; ``0`` disables reconnects."""
    value = load_config().get("reconnect_seconds")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_RECONNECT_SECONDS
    return max(0.0, float(value))
