from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

SETTINGS_DIR = Path.home() / ".config" / "svg2icon"
SETTINGS_FILE = SETTINGS_DIR / "settings.json"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class UserSettings:
    log_path: Optional[str] = None
    parallel: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserSettings":
        return cls(
            log_path=_coerce_str(data.get("log_path")),
            parallel=coerce_bool(data.get("parallel")),
        )


def load_user_settings(path: Path = SETTINGS_FILE) -> UserSettings:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return UserSettings()
    except OSError as exc:
        logging.getLogger(__name__).warning("Failed to read settings file %s: %s", path, exc)
        return UserSettings()

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        logging.getLogger(__name__).warning("Invalid JSON in settings file %s: %s", path, exc)
        return UserSettings()

    if not isinstance(data, dict):
        logging.getLogger(__name__).warning("Settings file %s must contain a JSON object.", path)
        return UserSettings()

    return UserSettings.from_dict(data)


def _coerce_str(value: Any) -> Optional[str]:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None


def coerce_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None
