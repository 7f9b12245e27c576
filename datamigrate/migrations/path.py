"""Result type for migration path resolution."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple

from ..core.exceptions import IncompleteMigrationPath
from ..core.version import Version
from .step import MigrationStep


class PathStatus(Enum):
    """Outcome of resolving a path between two versions."""
    EMPTY = "empty"          # source is already at or past the target
    COMPLETE = "complete"
    PARTIAL = "partial"      # the steps stop short of the target


@dataclass(frozen=True)
class MigrationPath:
    """Ordered steps from ``source`` towards ``target``."""
    source: Version
    target: Version
    steps: Tuple[MigrationStep, ...] = ()

    @property
    def reached_version(self) -> Version:
        """Version the data is at after applying every step."""
        return self.steps[-1].to_version if self.steps else self.source

    @property
    def status(self) -> PathStatus:
        if self.source >= self.target:
            return PathStatus.EMPTY
        if self.reached_version == self.target:
            return PathStatus.COMPLETE
        return PathStatus.PARTIAL

    @property
    def is_complete(self) -> bool:
        """True when applying the steps leaves the data at the target."""
        return self.status is not PathStatus.PARTIAL

    def require_complete(self) -> MigrationPath:
        """Return self, or raise IncompleteMigrationPath for a partial path."""
        if not self.is_complete:
            raise IncompleteMigrationPath(self.source, self.target, self.reached_version, self.steps)
        return self

    def __iter__(self) -> Iterator[MigrationStep]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def __str__(self) -> str:
        hops = ' -> '.join([str(self.source)] + [str(step.to_version) for step in self.steps])
        return f"{hops} [{self.status.value}, target {self.target}]"


__all__ = ['PathStatus', 'MigrationPath']
