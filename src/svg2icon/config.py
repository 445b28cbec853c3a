import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .settings import SETTINGS_FILE, coerce_bool, load_user_settings


DEFAULT_PARALLEL = True


@dataclass
class AppConfig:
    log_path: Optional[str] = None
    parallel: bool = DEFAULT_PARALLEL

    @classmethod
    def from_env(
        cls,
        log_path: Optional[str] = None,
        parallel: Optional[bool] = None,
        settings_path: Path = SETTINGS_FILE,
    ) -> "AppConfig":
        settings = load_user_settings(settings_path)

        log_path_value = log_path or os.environ.get("SVG2ICON_LOG_PATH") or settings.log_path
        parallel_value = _resolve_bool(
            parallel,
            os.environ.get("SVG2ICON_PARALLEL"),
            settings.parallel,
            DEFAULT_PARALLEL,
            "SVG2ICON_PARALLEL",
        )

        return cls(log_path=log_path_value, parallel=parallel_value)


def _resolve_bool(
    direct_value: Optional[bool],
    env_value: Optional[str],
    stored_value: Optional[bool],
    default_value: bool,
    env_name: str,
) -> bool:
    if direct_value is not None:
        return direct_value
    if env_value is not None:
        parsed = coerce_bool(env_value)
        if parsed is None:
            raise ValueError(f"Invalid boolean for {env_name}: {env_value}")
        return parsed
    if stored_value is not None:
        return stored_value
    return default_value
