"""Core value types, exceptions and logging."""

from .exceptions import (
    DataMigrateError, VersionFormatError, ConfigurationError, MigrationError,
    InvalidMigrationStepError, DuplicateMigrationError, IncompleteMigrationPath,
    StepExecutionError
)
from .version import Version

__all__ = [
    "Version",
    "DataMigrateError", "VersionFormatError", "ConfigurationError", "MigrationError",
    "InvalidMigrationStepError", "DuplicateMigrationError", "IncompleteMigrationPath",
    "StepExecutionError"
]
