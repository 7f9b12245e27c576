"""Migration settings loaded from the environment.

Settings come from three places, highest priority first: a ``.env`` file,
the process environment, then ``DEFAULT_SETTINGS``. Every value is validated
on load; an invalid value raises ``ConfigurationError`` instead of silently
falling back to the default.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..core.exceptions import ConfigurationError
from .defaults import DEFAULT_SETTINGS, ENV_KEYS, LOG_LEVELS, PATH_STRATEGIES

logger = logging.getLogger(__name__)

_TRUE_VALUES = ('true', '1', 'yes', 'on')
_FALSE_VALUES = ('false', '0', 'no', 'off')


@dataclass(frozen=True)
class MigrationSettings:
    """Immutable settings for the registry and runner."""

    path_strategy: str = DEFAULT_SETTINGS["path_strategy"]
    strict_registration: bool = DEFAULT_SETTINGS["strict_registration"]
    allow_partial: bool = DEFAULT_SETTINGS["allow_partial"]
    version_key: Optional[str] = DEFAULT_SETTINGS["version_key"]
    log_level: str = DEFAULT_SETTINGS["log_level"]
    structured_logging: bool = DEFAULT_SETTINGS["structured_logging"]

    def __post_init__(self):
        SettingsValidator.validate_choice("path_strategy", self.path_strategy, PATH_STRATEGIES)
        SettingsValidator.validate_choice("log_level", self.log_level, LOG_LEVELS)

    def with_overrides(self, **overrides: Any) -> MigrationSettings:
        """Return a copy with the given fields replaced."""
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path_strategy': self.path_strategy,
            'strict_registration': self.strict_registration,
            'allow_partial': self.allow_partial,
            'version_key': self.version_key,
            'log_level': self.log_level,
            'structured_logging': self.structured_logging,
        }


class SettingsValidator:
    """Validates raw settings values read from the environment."""

    @staticmethod
    def validate_bool(name: str, value: str) -> bool:
        normalized = value.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
        raise ConfigurationError(f"Invalid boolean for {name}: {value!r}")

    @staticmethod
    def validate_choice(name: str, value: str, choices) -> str:
        if value not in choices:
            raise ConfigurationError(
                f"Invalid value for {name}: {value!r}. Expected one of {', '.join(choices)}"
            )
        return value


def load_env_file(env_path: Optional[Union[str, Path]] = None) -> Dict[str, str]:
    """Load variables from a .env file.

    Args:
        env_path: Path to .env file. Defaults to .env in current directory.

    Returns:
        dict: Loaded variables, empty when the file does not exist
    """
    env_file_path = Path(env_path) if env_path is not None else Path(".env")
    env_vars: Dict[str, str] = {}

    if not env_file_path.exists():
        logger.debug(f"Environment file {env_file_path} not found, using system environment only")
        return env_vars

    try:
        lines = env_file_path.read_text(encoding='utf-8').splitlines()
    except OSError as e:
        raise ConfigurationError(f"Error reading environment file {env_file_path}: {e}") from e

    for line_num, line in enumerate(lines, 1):
        line = line.strip()

        # Skip comments and empty lines
        if not line or line.startswith('#'):
            continue

        if '=' not in line:
            logger.warning(f"Invalid line format in {env_file_path}:{line_num}: {line}")
            continue

        key, value = line.split('=', 1)
        key = key.strip()
        value = value.strip()

        if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
            value = value[1:-1]

        env_vars[key] = value

    logger.debug(f"Loaded {len(env_vars)} variables from {env_file_path}")
    return env_vars


def get_env_var(key: str, default: Optional[str] = None,
                env_vars: Optional[Dict[str, str]] = None) -> Optional[str]:
    """Get a variable from the loaded .env values, then the process environment."""
    if env_vars and key in env_vars:
        return env_vars[key]
    return os.getenv(key, default)


def load_settings(env_file_path: Optional[Union[str, Path]] = None) -> MigrationSettings:
    """Load and validate migration settings.

    Args:
        env_file_path: Path to .env file

    Returns:
        MigrationSettings: Validated settings

    Raises:
        ConfigurationError: If a value is invalid
    """
    env_vars = load_env_file(env_file_path)
    validator = SettingsValidator()
    values: Dict[str, Any] = {}

    strategy = get_env_var(ENV_KEYS["path_strategy"], env_vars=env_vars)
    if strategy is not None:
        values["path_strategy"] = validator.validate_choice(
            "path_strategy", strategy.strip().lower(), PATH_STRATEGIES)

    for name in ("strict_registration", "allow_partial", "structured_logging"):
        raw = get_env_var(ENV_KEYS[name], env_vars=env_vars)
        if raw is not None:
            values[name] = validator.validate_bool(name, raw)

    version_key = get_env_var(ENV_KEYS["version_key"], env_vars=env_vars)
    if version_key is not None:
        values["version_key"] = version_key.strip() or None

    log_level = get_env_var(ENV_KEYS["log_level"], env_vars=env_vars)
    if log_level is not None:
        values["log_level"] = validator.validate_choice(
            "log_level", log_level.strip().upper(), LOG_LEVELS)

    settings = MigrationSettings(**values)
    logger.debug(f"Migration settings loaded: {settings.to_dict()}")
    return settings


__all__ = [
    "MigrationSettings", "SettingsValidator",
    "load_env_file", "get_env_var", "load_settings"
]
