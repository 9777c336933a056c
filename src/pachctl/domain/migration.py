"""Migration request and dispatcher states."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pachctl.errors import ResolutionError


class MigrationState(str, Enum):
    START = "start"
    VERSIONS_RESOLVED = "versions-resolved"
    JOB_BUILT = "job-built"
    JOB_SERIALIZED = "job-serialized"
    SUBMITTED = "submitted"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class MigrationRequest:
    from_version: str
    to_version: str
    image: str
    namespace: str = "default"

    def __post_init__(self) -> None:
        if not self.from_version:
            raise ResolutionError("migration source version is unresolved")
        if not self.to_version:
            raise ResolutionError("migration target version is unresolved")
        if not self.image:
            raise ValueError("migration image must not be empty")

    @property
    def migrate_flag(self) -> str:
        return f"--migrate={self.from_version}-{self.to_version}"


__all__ = ["MigrationRequest", "MigrationState"]
