"""Data migration system.

Resolves and applies migration paths between schema versions.
"""

from .step import (
    MigrationStep, Transformation, FunctionTransformation, ComposedTransformation
)
from .path import MigrationPath, PathStatus
from .registry import MigrationRegistry, PathStrategy
from .runner import MigrationRunner, MigrationRun, RunState, StepResult

__all__ = [
    'MigrationStep', 'Transformation', 'FunctionTransformation', 'ComposedTransformation',
    'MigrationPath', 'PathStatus', 'MigrationRegistry', 'PathStrategy',
    'MigrationRunner', 'MigrationRun', 'RunState', 'StepResult'
]
