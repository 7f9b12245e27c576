"""Default settings values."""

from typing import Any, Dict

DEFAULT_SETTINGS: Dict[str, Any] = {
    # Path resolution
    "path_strategy": "shortest",
    "strict_registration": True,

    # Runner
    "allow_partial": False,
    "version_key": "_schema_version",

    # Logging
    "log_level": "INFO",
    "structured_logging": False,
}

# Environment variable holding each setting
ENV_PREFIX = "DATAMIGRATE_"
ENV_KEYS: Dict[str, str] = {name: ENV_PREFIX + name.upper() for name in DEFAULT_SETTINGS}

PATH_STRATEGIES = ("shortest", "greedy")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
