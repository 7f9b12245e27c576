"""Custom exceptions for the migration system."""


class DataMigrateError(Exception):
    """Base datamigrate error."""
    pass


class VersionFormatError(DataMigrateError, ValueError):
    """Malformed semantic version text."""

    def __init__(self, text, reason: str = ""):
        self.text = text
        message = f"Invalid semantic version format: {text!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ConfigurationError(DataMigrateError):
    """Invalid migration settings."""
    pass


class MigrationError(DataMigrateError):
    """Base exception for registration and run failures."""
    pass


class InvalidMigrationStepError(MigrationError, ValueError):
    """A step whose target version does not come after its source version."""
    pass


class DuplicateMigrationError(MigrationError):
    """The same from -> to edge was registered twice."""
    pass


class IncompleteMigrationPath(MigrationError):
    """The registered steps do not connect the source to the target."""

    def __init__(self, source, target, reached_version, steps=()):
        self.source = source
        self.target = target
        self.reached_version = reached_version
        self.steps = tuple(steps)
        super().__init__(
            f"No complete migration path from {source} to {target}; "
            f"registered steps only reach {reached_version}"
        )


class StepExecutionError(MigrationError):
    """A step's transformation raised while a run was applying it."""

    def __init__(self, message: str, step=None, run=None):
        self.step = step
        self.run = run
        super().__init__(message)
