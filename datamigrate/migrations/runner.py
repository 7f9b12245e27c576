"""Applies resolved migration paths to data.

A run walks the path in order. Each step moves the run from APPLYING to
APPLIED; the first step that raises moves it to FAILED and nothing after it
is applied. The top-level mapping is copied before the first step, so the
caller's dict is not modified; nested values are shared with the copy.
"""
from __future__ import annotations

import inspect
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from ..config.settings import MigrationSettings
from ..core.exceptions import StepExecutionError, VersionFormatError
from ..core.logging_config import correlation_context
from ..core.version import Version
from .path import MigrationPath, PathStatus
from .registry import MigrationRegistry, VersionLike
from .step import MigrationData, MigrationStep

logger = logging.getLogger(__name__)


class RunState(Enum):
    NOT_STARTED = "not_started"
    APPLYING = "applying"
    APPLIED = "applied"
    FAILED = "failed"


@dataclass
class StepResult:
    """Outcome of applying one step."""
    step: MigrationStep
    succeeded: bool
    duration: float
    error: Optional[BaseException] = None


@dataclass
class MigrationRun:
    """State of one application of a migration path."""
    path: MigrationPath
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    state: RunState = RunState.NOT_STARTED
    current_step: Optional[MigrationStep] = None
    results: List[StepResult] = field(default_factory=list)
    error: Optional[BaseException] = None
    data: Optional[MigrationData] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def applied_steps(self) -> List[MigrationStep]:
        return [result.step for result in self.results if result.succeeded]

    @property
    def version(self) -> Version:
        """Version the data reached in this run."""
        applied = self.applied_steps
        return applied[-1].to_version if applied else self.path.source

    @property
    def duration(self) -> Optional[float]:
        if self.started_at is None or self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()


class MigrationRunner:
    """Runs migrations registered in a MigrationRegistry."""

    def __init__(self, registry: MigrationRegistry, settings: Optional[MigrationSettings] = None):
        self.registry = registry
        self.settings = settings or registry.settings

    def run(self, data: MigrationData, from_version: VersionLike, to_version: VersionLike) -> MigrationRun:
        """Migrate data from one version to another.

        Args:
            data: Data to migrate; the top-level dict is copied, not modified
            from_version: Version the data is at
            to_version: Target version

        Returns:
            MigrationRun: The finished run, with the migrated data in ``run.data``

        Raises:
            IncompleteMigrationPath: If the target is unreachable and partial runs are not allowed
            StepExecutionError: If a step's transformation fails
        """
        path = self.registry.resolve(from_version, to_version)
        run = MigrationRun(path=path)

        if path.status is PathStatus.PARTIAL and not self.settings.allow_partial:
            logger.error(f"Refusing incomplete migration path {path}")
            path.require_complete()

        with correlation_context(run.run_id):
            run.started_at = datetime.now()
            migrated = dict(data)

            for step in path:
                run.state = RunState.APPLYING
                run.current_step = step
                logger.info(f"Applying migration: {step}")
                if step.description:
                    logger.info(f"Migration description: {step.description}")

                started = datetime.now()
                try:
                    result = step.apply(migrated)
                    if inspect.iscoroutine(result):
                        result.close()
                        raise TypeError("transformation returned a coroutine; async transformations are not supported")
                    if not isinstance(result, Mapping):
                        raise TypeError(f"transformation returned {type(result).__name__}, expected a mapping")
                except Exception as e:
                    elapsed = (datetime.now() - started).total_seconds()
                    run.results.append(StepResult(step, False, elapsed, e))
                    run.state = RunState.FAILED
                    run.error = e
                    run.finished_at = datetime.now()
                    logger.error(f"Migration {step} failed: {e}")
                    raise StepExecutionError(f"Migration {step} failed: {e}", step=step, run=run) from e

                migrated = dict(result)
                run.results.append(StepResult(step, True, (datetime.now() - started).total_seconds()))
                run.state = RunState.APPLIED

            if run.results and self.settings.version_key:
                migrated[self.settings.version_key] = str(run.version)

            run.state = RunState.APPLIED
            run.current_step = None
            run.data = migrated
            run.finished_at = datetime.now()

            if path.status is PathStatus.PARTIAL:
                logger.warning(f"Migration stopped at {run.version}; target {path.target} is unreachable")
            elif run.results:
                logger.info(f"Data successfully migrated from {path.source} to {run.version}")
            else:
                logger.debug(f"No migration needed from {path.source} to {path.target}")

        return run

    def migrate(self, data: MigrationData, from_version: VersionLike, to_version: VersionLike) -> Dict[str, Any]:
        """Migrate data and return the migrated payload."""
        return self.run(data, from_version, to_version).data

    def can_migrate(self, from_version: VersionLike, to_version: VersionLike) -> bool:
        """Check if a complete migration (or none at all) exists between versions."""
        try:
            return self.registry.resolve(from_version, to_version).is_complete
        except VersionFormatError:
            return False


__all__ = ['RunState', 'StepResult', 'MigrationRun', 'MigrationRunner']
