"""Port definitions for the external systems pachctl drives."""

from .cluster import ClusterAdmin, VersionSource
from .confirm import Confirmer
from .process import CompletedCommand, ProcessRunner

__all__ = ["ClusterAdmin", "CompletedCommand", "Confirmer", "ProcessRunner", "VersionSource"]
