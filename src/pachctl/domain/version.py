"""Semantic version value object."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import total_ordering

_VERSION_RE = re.compile(r"^v?(?P<major>\d+)\.(?P<minor>\d+)\.(?P<micro>\d+)(?:-(?P<additional>[0-9A-Za-z.\-]+))?$")


class VersionParseError(ValueError):
    """Raised when a string is not a major.minor.micro version."""


@total_ordering
@dataclass(frozen=True)
class Version:
    """A released version of pachctl or pachd.

    Comparison and equality only consider ``(major, minor, micro)``; the
    ``additional`` qualifier (``rc1``, a commit hash, ...) is kept for display.
    """

    major: int
    minor: int
    micro: int
    additional: str = field(default="", compare=False)

    @classmethod
    def parse(cls, raw: str) -> "Version":
        match = _VERSION_RE.match(raw.strip())
        if match is None:
            raise VersionParseError(f"Invalid version '{raw}': expected MAJOR.MINOR.MICRO[-QUALIFIER]")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            micro=int(match.group("micro")),
            additional=match.group("additional") or "",
        )

    @property
    def key(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.micro)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.key < other.key

    def pretty_no_additional(self) -> str:
        return f"{self.major}.{self.minor}.{self.micro}"

    def pretty(self) -> str:
        if self.additional:
            return f"{self.pretty_no_additional()}-{self.additional}"
        return self.pretty_no_additional()

    def __str__(self) -> str:
        return self.pretty()


__all__ = ["Version", "VersionParseError"]
