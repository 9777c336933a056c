"""Port definitions for the pachd control-plane API."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pachctl.domain.version import Version


class VersionSource(ABC):
    @abstractmethod
    def get_version(self, timeout: float) -> Version:
        """Return the version reported by the live server within ``timeout`` seconds."""


class ClusterAdmin(ABC):
    @abstractmethod
    def delete_all(self) -> None:
        """Delete every repo, commit, file, pipeline and job."""

    @abstractmethod
    def garbage_collect(self) -> None:
        """Remove unreferenced data from object storage."""
