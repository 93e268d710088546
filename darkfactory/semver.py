"""Semantic version numbers of the form vX.Y.Z."""

from __future__ import annotations

import re
from dataclasses import dataclass

_VERSION_RE = re.compile(r"v(\d+)\.(\d+)\.(\d+)", re.ASCII)


class InvalidVersionError(ValueError):
    """Raised when a tag is not of the form vX.Y.Z."""


@dataclass(frozen=True, order=True)
class SemanticVersionNumber:
    """A parsed semantic version."""

    major: int = 0
    minor: int = 0
    patch: int = 0

    def __str__(self) -> str:
        return f"v{self.major}.{self.minor}.{self.patch}"

    def bump_patch(self) -> SemanticVersionNumber:
        """Return a version with the patch number incremented."""
        return SemanticVersionNumber(self.major, self.minor, self.patch + 1)

    def bump_minor(self) -> SemanticVersionNumber:
        """Return a version with the minor number incremented and patch reset."""
        return SemanticVersionNumber(self.major, self.minor + 1, 0)

    def less(self, other: SemanticVersionNumber) -> bool:
        """Return True if this version is lower than other."""
        return self < other


def parse_semantic_version_number(tag: str) -> SemanticVersionNumber:
    """Parse "vX.Y.Z"; raise InvalidVersionError for anything else."""
    match = _VERSION_RE.fullmatch(tag)
    if match is None:
        raise InvalidVersionError(f"invalid version tag: {tag}")
    major, minor, patch = (int(part) for part in match.groups())
    return SemanticVersionNumber(major, minor, patch)