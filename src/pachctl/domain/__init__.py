"""Domain model for pachctl orchestration."""

from .forward import FailurePolicy, ForwardTask
from .job import Container, JobDescription, ObjectMeta, PodTemplate
from .migration import MigrationRequest, MigrationState
from .version import Version, VersionParseError

__all__ = [
    "Container",
    "FailurePolicy",
    "ForwardTask",
    "JobDescription",
    "MigrationRequest",
    "MigrationState",
    "ObjectMeta",
    "PodTemplate",
    "Version",
    "VersionParseError",
]
