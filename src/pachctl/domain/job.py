"""Batch job description submitted to Kubernetes.

Each record lists its fields in the order they are written to the manifest so
that serialising the same request twice yields identical bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from pachctl.domain.migration import MigrationRequest

MIGRATION_JOB_NAME = "pach-migration"
MIGRATION_CONTAINER = "migration"
SUITE_LABEL = ("suite", "pachyderm")
PACHD_BINARY = "/pachd"


@dataclass(frozen=True)
class ObjectMeta:
    name: str
    namespace: str
    labels: Tuple[Tuple[str, str], ...] = ()

    def to_manifest(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "namespace": self.namespace,
            "labels": {key: value for key, value in sorted(self.labels)},
        }


@dataclass(frozen=True)
class Container:
    name: str
    image: str
    command: Tuple[str, ...]

    def to_manifest(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "image": self.image,
            "command": list(self.command),
        }


@dataclass(frozen=True)
class PodTemplate:
    containers: Tuple[Container, ...]
    restart_policy: str = "OnFailure"

    def to_manifest(self) -> Dict[str, Any]:
        return {
            "spec": {
                "containers": [container.to_manifest() for container in self.containers],
                "restartPolicy": self.restart_policy,
            }
        }


@dataclass(frozen=True)
class JobDescription:
    metadata: ObjectMeta
    template: PodTemplate
    api_version: str = "batch/v1"
    kind: str = "Job"

    @classmethod
    def for_migration(cls, request: MigrationRequest) -> "JobDescription":
        container = Container(
            name=MIGRATION_CONTAINER,
            image=request.image,
            command=(PACHD_BINARY, request.migrate_flag),
        )
        return cls(
            metadata=ObjectMeta(
                name=MIGRATION_JOB_NAME,
                namespace=request.namespace,
                labels=(SUITE_LABEL,),
            ),
            template=PodTemplate(containers=(container,), restart_policy="OnFailure"),
        )

    def to_manifest(self) -> Dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata.to_manifest(),
            "spec": {"template": self.template.to_manifest()},
        }


__all__ = [
    "Container",
    "JobDescription",
    "MIGRATION_JOB_NAME",
    "ObjectMeta",
    "PodTemplate",
]
