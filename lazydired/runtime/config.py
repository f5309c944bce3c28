"""Persistent JSON config helpers.

Stores the dot-file visibility preference and the highlight style.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "lazydired"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_SHOW_DOT_FILES = True
DEFAULT_STYLE = "monokai"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep runtime behavior
    non-fatal when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def load_show_dot_files() -> bool:
    """Return persisted dot-file visibility.

    Only explicit boolean values are accepted; anything else falls back to
    showing dot files.
    """
    value = load_config().get("show_dot_files")
    return value if isinstance(value, bool) else DEFAULT_SHOW_DOT_FILES


def save_show_dot_files(show_dot_files: bool) -> None:
    config = load_config()
    config["show_dot_files"] = bool(show_dot_files)
    save_config(config)


def load_style_name() -> str:
    """Load persisted Pygments style name, defaulting when unset/invalid."""
    value = load_config().get("style")
    if not isinstance(value, str):
        return DEFAULT_STYLE
    stripped = value.strip()
    return stripped if stripped else DEFAULT_STYLE


def save_style_name(style: str) -> None:
    stripped = str(style).strip()
    if not stripped:
        return
    config = load_config()
    config["style"] = stripped
    save_config(config)
