"""Persistent JSON config helpers.

Stores favorite services, the AWS profile/region to connect with, and the
log level. All access is defensive: malformed or missing config falls back
safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

from ..services import ServiceKind

APP_NAME = "awsome"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


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

    Write failures are ignored so a read-only config directory never takes
    down the browser.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def _load_string(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def load_favorites() -> set[ServiceKind] | None:
    """Return the persisted favorite services, or ``None`` when never saved.

    Unknown short names are dropped; a non-list value counts as unset.
    """
    value = load_config().get("favorites")
    if not isinstance(value, list):
        return None
    by_short_name = {kind.short_name: kind for kind in ServiceKind}
    return {by_short_name[name] for name in value if isinstance(name, str) and name in by_short_name}


def save_favorites(favorites: list[ServiceKind]) -> None:
    """Persist favorites as short names, in catalog order."""
    config = load_config()
    config["favorites"] = [kind.short_name for kind in ServiceKind if kind in set(favorites)]
    save_config(config)


def load_aws_profile() -> str | None:
    """Named credentials profile, ``None`` for the default chain."""
    return _load_string("aws_profile")


def load_aws_region() -> str | None:
    return _load_string("aws_region")


def load_log_level() -> str | None:
    """Return a valid upper-cased level name, or ``None``."""
    value = _load_string("log_level")
    if value is None:
        return None
    level = value.upper()
    return level if level in LOG_LEVELS else None


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "LOG_LEVELS",
    "load_aws_profile",
    "load_aws_region",
    "load_config",
    "load_favorites",
    "load_log_level",
    "save_config",
    "save_favorites",
]
