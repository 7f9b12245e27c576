"""Migration steps and the transformations they carry."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple, Union

from ..core.exceptions import InvalidMigrationStepError
from ..core.version import Version

MigrationData = Dict[str, Any]
MigrationFunc = Callable[[MigrationData], MigrationData]


class Transformation(ABC):
    """Turns data at one schema version into data at the next."""

    @abstractmethod
    def transform(self, data: MigrationData) -> MigrationData:
        """Return the transformed data. May raise on failure."""

    def __call__(self, data: MigrationData) -> MigrationData:
        return self.transform(data)


class FunctionTransformation(Transformation):
    """Transformation backed by a plain function."""

    def __init__(self, func: MigrationFunc):
        if not callable(func):
            raise TypeError(f"Transformation function must be callable, got {func!r}")
        self.func = func

    def transform(self, data: MigrationData) -> MigrationData:
        return self.func(data)

    def __repr__(self) -> str:
        name = getattr(self.func, '__qualname__', repr(self.func))
        return f"FunctionTransformation({name})"


class ComposedTransformation(Transformation):
    """Applies several transformations in order, as one step."""

    def __init__(self, *transformations: Union[Transformation, MigrationFunc]):
        if not transformations:
            raise ValueError("ComposedTransformation needs at least one transformation")
        self.transformations = tuple(as_transformation(t) for t in transformations)

    def transform(self, data: MigrationData) -> MigrationData:
        for transformation in self.transformations:
            data = transformation.transform(data)
        return data

    def __repr__(self) -> str:
        return f"ComposedTransformation({', '.join(map(repr, self.transformations))})"


def as_transformation(value: Union[Transformation, MigrationFunc]) -> Transformation:
    """Wrap a plain callable in a FunctionTransformation."""
    if isinstance(value, Transformation):
        return value
    return FunctionTransformation(value)


@dataclass(frozen=True)
class MigrationStep:
    """A registered edge from one schema version to a later one."""
    from_version: Version
    to_version: Version
    transformation: Transformation
    description: str = ""

    def __post_init__(self):
        if self.from_version >= self.to_version:
            raise InvalidMigrationStepError(
                f"Migration to_version must be greater than from_version "
                f"({self.from_version} -> {self.to_version})"
            )

    @property
    def edge(self) -> Tuple[Version, Version]:
        return (self.from_version, self.to_version)

    def apply(self, data: MigrationData) -> MigrationData:
        return self.transformation.transform(data)

    def __str__(self) -> str:
        return f"{self.from_version} -> {self.to_version}"


__all__ = [
    'MigrationData', 'MigrationFunc', 'Transformation', 'FunctionTransformation',
    'ComposedTransformation', 'as_transformation', 'MigrationStep'
]
