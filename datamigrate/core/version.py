"""Semantic version value type.

Versions follow ``major.minor.patch[-pre_release][+build]``. Ordering compares
the numeric core first, then puts a pre-release below its release; two
pre-releases are compared as plain strings. Build metadata is carried for
display only and never takes part in equality, ordering or hashing.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

from .exceptions import VersionFormatError

_NUMERIC = re.compile(r'[0-9]+')


@dataclass(frozen=True, eq=False)
class Version:
    """Immutable semantic version."""
    major: int
    minor: int = 0
    patch: int = 0
    pre_release: Optional[str] = None
    build: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ('major', 'minor', 'patch'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Version {name} must be an int, got {value!r}")
            if value < 0:
                raise ValueError(f"Version {name} must be non-negative, got {value}")

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse version text such as '1.2.3', 'v1.2', '1.2.3-alpha+build.1'.

        Missing minor/patch components default to zero.

        Raises:
            VersionFormatError: If a core component is not a decimal integer
        """
        if not isinstance(text, str):
            raise VersionFormatError(text, "expected a string")

        remainder = text[1:] if text.startswith('v') else text

        build = None
        if '+' in remainder:
            remainder, build = remainder.split('+', 1)

        pre_release = None
        if '-' in remainder:
            remainder, pre_release = remainder.split('-', 1)

        parts = remainder.split('.')
        while len(parts) < 3:
            parts.append('0')

        numbers = []
        for part in parts[:3]:
            if not _NUMERIC.fullmatch(part):
                raise VersionFormatError(text, f"component {part!r} is not a non-negative integer")
            numbers.append(int(part))

        return cls(numbers[0], numbers[1], numbers[2], pre_release, build)

    @classmethod
    def coerce(cls, value: Union[Version, str]) -> Version:
        """Return ``value`` unchanged if it is a Version, otherwise parse it."""
        if isinstance(value, Version):
            return value
        return cls.parse(value)

    def compare_to(self, other: Version) -> int:
        """Return -1, 0 or 1 as this version sorts before, equal to or after ``other``."""
        mine = (self.major, self.minor, self.patch)
        theirs = (other.major, other.minor, other.patch)
        if mine != theirs:
            return -1 if mine < theirs else 1

        if self.pre_release is None and other.pre_release is None:
            return 0
        if self.pre_release is None:
            return 1
        if other.pre_release is None:
            return -1
        if self.pre_release == other.pre_release:
            return 0
        return -1 if self.pre_release < other.pre_release else 1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_to(other) == 0

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_to(other) != 0

    def __lt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_to(other) < 0

    def __le__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_to(other) <= 0

    def __gt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_to(other) > 0

    def __ge__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_to(other) >= 0

    def __hash__(self) -> int:
        return hash((self.major, self.minor, self.patch, self.pre_release))

    def __str__(self) -> str:
        text = self.core_version
        if self.pre_release is not None:
            text += f"-{self.pre_release}"
        if self.build is not None:
            text += f"+{self.build}"
        return text

    @property
    def core_version(self) -> str:
        """Version without pre-release and build metadata."""
        return f"{self.major}.{self.minor}.{self.patch}"

    @property
    def is_pre_release(self) -> bool:
        return self.pre_release is not None


__all__ = ['Version']
