"""
Semantic-version data migration resolver.
"""

__version__ = "1.0.0"
__author__ = "datamigrate developers"

from .config.settings import MigrationSettings, load_settings
from .core.exceptions import (
    DataMigrateError, VersionFormatError, MigrationError, IncompleteMigrationPath
)
from .core.version import Version
from .migrations import MigrationRegistry, MigrationRunner, MigrationPath, MigrationStep

__all__ = [
    "Version", "MigrationRegistry", "MigrationRunner", "MigrationPath", "MigrationStep",
    "MigrationSettings", "load_settings",
    "DataMigrateError", "VersionFormatError", "MigrationError", "IncompleteMigrationPath"
]
