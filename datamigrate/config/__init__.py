"""Settings management package."""

from .settings import MigrationSettings, load_settings
from .defaults import DEFAULT_SETTINGS

__all__ = ["MigrationSettings", "load_settings", "DEFAULT_SETTINGS"]
