"""Registry of migration steps and path resolution between versions.

Steps are directed edges ``from_version -> to_version`` with
``from_version < to_version``; the registry treats them as a graph and finds
the sequence of steps that takes data from a source version to a target.

Two resolution strategies are available:

``shortest`` (default)
    Breadth-first search over edges that do not overshoot the target. A
    complete path always has the fewest steps. Among equally short paths,
    each hop from the source prefers the step whose destination is closest
    to the target, then the earlier registered step. If the target cannot be
    reached, the path leads to the highest reachable version instead.

``greedy``
    At each hop take the first step, in ``from_version`` order, leaving the
    current version without overshooting the target. Never backtracks, so a
    dead-end branch registered first hides a complete route.
"""
from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..config.settings import MigrationSettings
from ..core.exceptions import DuplicateMigrationError
from ..core.version import Version
from .path import MigrationPath
from .step import MigrationFunc, MigrationStep, Transformation, as_transformation

logger = logging.getLogger(__name__)

VersionLike = Union[Version, str]


class PathStrategy(Enum):
    SHORTEST = "shortest"
    GREEDY = "greedy"


class MigrationRegistry:
    """Registry for all available data migrations."""

    def __init__(self, settings: Optional[MigrationSettings] = None):
        self.settings = settings or MigrationSettings()
        self.strategy = PathStrategy(self.settings.path_strategy)
        self._steps: List[MigrationStep] = []

    def register_migration(
        self,
        from_version: VersionLike,
        to_version: VersionLike,
        transformation: Union[Transformation, MigrationFunc],
        description: str = ""
    ) -> MigrationStep:
        """Register a migration step.

        Args:
            from_version: Version the step reads
            to_version: Version the step produces, strictly greater
            transformation: Transformation or plain ``data -> data`` callable
            description: Human-readable summary of the change

        Returns:
            MigrationStep: The registered step

        Raises:
            VersionFormatError: If either version cannot be parsed
            InvalidMigrationStepError: If ``to_version`` is not after ``from_version``
            DuplicateMigrationError: If the edge exists and registration is strict
        """
        step = MigrationStep(
            from_version=Version.coerce(from_version),
            to_version=Version.coerce(to_version),
            transformation=as_transformation(transformation),
            description=description
        )

        if self.settings.strict_registration:
            for existing in self._steps:
                if existing.edge == step.edge:
                    raise DuplicateMigrationError(f"Migration {step} is already registered")

        # Sorted copy swapped in whole; sort is stable so ties keep registration order
        self._steps = sorted(self._steps + [step], key=lambda s: s.from_version)

        logger.debug(f"Registered migration: {step} ({description or 'no description'})")
        return step

    def register(self, from_version: VersionLike, to_version: VersionLike,
                 description: str = "") -> Callable[[MigrationFunc], MigrationFunc]:
        """Decorator form of ``register_migration``."""
        def decorator(func: MigrationFunc) -> MigrationFunc:
            self.register_migration(from_version, to_version, func, description or (func.__doc__ or "").strip())
            return func
        return decorator

    def resolve(self, source_version: VersionLike, target_version: VersionLike) -> MigrationPath:
        """Resolve the migration path between two versions as a MigrationPath."""
        source = Version.coerce(source_version)
        target = Version.coerce(target_version)

        if source >= target:
            return MigrationPath(source, target)

        steps = self._steps
        if self.strategy is PathStrategy.GREEDY:
            found = self._greedy_path(steps, source, target)
        else:
            found = self._shortest_path(steps, source, target)

        path = MigrationPath(source, target, tuple(found))
        if path.is_complete:
            logger.debug(f"Resolved migration path {path}")
        else:
            logger.warning(f"Incomplete migration path {path}")
        return path

    def get_migration_path(self, source_version: VersionLike,
                           target_version: VersionLike) -> List[MigrationStep]:
        """Get the steps needed to migrate from source to target version.

        Returns an empty list when source is at or past target. When the
        target is unreachable the returned steps stop short of it.
        """
        return list(self.resolve(source_version, target_version).steps)

    def is_migration_needed(self, source_version: VersionLike, target_version: VersionLike) -> bool:
        """Check if any migrations apply between two versions."""
        return bool(self.get_migration_path(source_version, target_version))

    def steps_from(self, version: VersionLike) -> List[MigrationStep]:
        """Steps leaving ``version``, in registration order."""
        version = Version.coerce(version)
        return [step for step in self._steps if step.from_version == version]

    @property
    def registered_migrations(self) -> Tuple[MigrationStep, ...]:
        """All registered steps, sorted by from_version."""
        return tuple(self._steps)

    def clear(self) -> None:
        """Remove every registered migration."""
        self._steps = []
        logger.debug("Cleared migration registry")

    def __len__(self) -> int:
        return len(self._steps)

    @staticmethod
    def _greedy_path(steps: List[MigrationStep], source: Version, target: Version) -> List[MigrationStep]:
        path: List[MigrationStep] = []
        current = source

        while current < target:
            next_step = next(
                (step for step in steps
                 if step.from_version == current and step.to_version <= target),
                None
            )
            if next_step is None:
                break
            path.append(next_step)
            current = next_step.to_version

        return path

    @staticmethod
    def _shortest_path(steps: List[MigrationStep], source: Version, target: Version) -> List[MigrationStep]:
        by_version: Dict[Version, List[MigrationStep]] = {}
        for step in steps:
            by_version.setdefault(step.from_version, []).append(step)

        parents: Dict[Version, Optional[MigrationStep]] = {source: None}
        queue = deque([source])
        furthest = source

        while queue:
            current = queue.popleft()
            candidates = [s for s in by_version.get(current, []) if s.to_version <= target]
            # Closest to the target first; stable sort keeps registration order on ties
            candidates.sort(key=lambda s: s.to_version, reverse=True)

            for step in candidates:
                next_version = step.to_version
                if next_version in parents:
                    continue
                parents[next_version] = step

                if next_version == target:
                    return MigrationRegistry._walk_back(parents, next_version)

                if next_version > furthest:
                    furthest = next_version
                queue.append(next_version)

        return MigrationRegistry._walk_back(parents, furthest)

    @staticmethod
    def _walk_back(parents: Dict[Version, Optional[MigrationStep]], end: Version) -> List[MigrationStep]:
        path: List[MigrationStep] = []
        step = parents[end]
        while step is not None:
            path.append(step)
            step = parents[step.from_version]
        path.reverse()
        return path


__all__ = ['PathStrategy', 'MigrationRegistry']
