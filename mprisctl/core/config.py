"""
Core configuration settings for mprisctl.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from mprisctl.core.constants import DEFAULT_SESSION_NAME
from mprisctl.core.errors import ConfigError

# Base paths
DATA_DIR = Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local/share")) / "mprisctl"
CONFIG_DIR = Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config")) / "mprisctl"

# Logging configuration
LOG_DIR = DATA_DIR / "logs"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

# Log types
LOG__GENERAL = "GENERAL"
LOG__DEBUG = "DEBUG"
LOG__USER = "USERMODE"

# Environment overrides
ENV_PLAYER = "MPRISCTL_PLAYER"
ENV_LOG_LEVEL = "MPRISCTL_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "INFO"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Settings:
    """Runtime settings read from ``config.yaml`` and the environment."""

    player: str = DEFAULT_SESSION_NAME
    log_level: str = DEFAULT_LOG_LEVEL
    log_to_file: bool = True


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigError(str(path), f"invalid YAML: {exc}") from exc
    except OSError as exc:
        raise ConfigError(str(path), str(exc)) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(str(path), "top level must be a mapping")
    return data


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """Load settings from *path* (default ``CONFIG_FILE``).

    A missing file yields the defaults.  Environment variables
    ``MPRISCTL_PLAYER`` and ``MPRISCTL_LOG_LEVEL`` take precedence over the
    file.

    Raises
    ------
    ConfigError
        If the file exists but is not a valid YAML mapping, or a key holds a
        value of the wrong type, or ``MPRISCTL_LOG_LEVEL`` names no log level.
    """
    cfg_path = Path(path) if path is not None else CONFIG_FILE
    data = _read_yaml(cfg_path) if cfg_path.exists() else {}

    settings = Settings()
    if "player" in data:
        if not isinstance(data["player"], str) or not data["player"]:
            raise ConfigError(str(cfg_path), "'player' must be a non-empty string")
        settings.player = data["player"]
    if "log_level" in data:
        if not isinstance(data["log_level"], str):
            raise ConfigError(str(cfg_path), "'log_level' must be a string")
        settings.log_level = data["log_level"].upper()
        if settings.log_level not in _LOG_LEVELS:
            raise ConfigError(str(cfg_path), f"unknown log level {settings.log_level!r}")
    if "log_to_file" in data:
        if not isinstance(data["log_to_file"], bool):
            raise ConfigError(str(cfg_path), "'log_to_file' must be true or false")
        settings.log_to_file = data["log_to_file"]

    env_player = os.getenv(ENV_PLAYER)
    if env_player:
        settings.player = env_player
    env_level = os.getenv(ENV_LOG_LEVEL)
    if env_level:
        if env_level.upper() not in _LOG_LEVELS:
            raise ConfigError(ENV_LOG_LEVEL, f"unknown log level {env_level!r}")
        settings.log_level = env_level.upper()

    return settings
