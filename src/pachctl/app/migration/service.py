"""Build and submit the pachd migration job."""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

import yaml

from pachctl.adapters.kubectl import submit_manifest
from pachctl.app.version.service import ResolvedVersions, resolve_versions
from pachctl.domain.job import MIGRATION_JOB_NAME, JobDescription
from pachctl.domain.migration import MigrationRequest, MigrationState
from pachctl.domain.version import Version
from pachctl.errors import PachctlError, SubmissionError
from pachctl.ports.cluster import VersionSource
from pachctl.ports.process import ProcessRunner

LOGGER = logging.getLogger(__name__)

MIGRATION_IMAGE_REPOSITORY = "pachyderm/pachd"
MANIFEST_NAME = "pach-migration.yaml"


def migration_image(client_version: Version) -> str:
    return f"{MIGRATION_IMAGE_REPOSITORY}:{client_version.pretty()}"


def serialize_job(job: JobDescription) -> str:
    return yaml.safe_dump(
        job.to_manifest(),
        sort_keys=False,
        default_flow_style=False,
        indent=2,
        allow_unicode=True,
    )


@dataclass(frozen=True)
class MigrationOutcome:
    request: MigrationRequest
    manifest: str
    state: MigrationState
    output: str = ""


class MigrationFailure(PachctlError):
    """Wraps a migration error with the last state the dispatcher reached."""

    state = MigrationState.FAILED

    def __init__(self, stage: MigrationState, cause: PachctlError) -> None:
        super().__init__(str(cause))
        self.stage = stage
        self.cause = cause


class MigrationDispatcher:
    """Resolve versions, build the job, then submit it exactly once."""

    def __init__(
        self,
        version_source: VersionSource,
        runner: ProcessRunner,
        client_version: Version,
        address: str,
        out: TextIO,
    ) -> None:
        self._version_source = version_source
        self._runner = runner
        self._client_version = client_version
        self._address = address
        self._out = out
        self.transitions: list[MigrationState] = []

    def resolve(self, explicit_from: str | None, explicit_to: str | None) -> ResolvedVersions:
        return resolve_versions(
            explicit_from,
            explicit_to,
            self._client_version,
            self._version_source.get_version,
            address=self._address,
        )

    def build_request(self, versions: ResolvedVersions, namespace: str) -> MigrationRequest:
        return MigrationRequest(
            from_version=versions.from_version,
            to_version=versions.to_version,
            image=migration_image(self._client_version),
            namespace=namespace,
        )

    def render(self, explicit_from: str | None, explicit_to: str | None, namespace: str = "default") -> MigrationOutcome:
        request, manifest = self._prepare(explicit_from, explicit_to, namespace)
        return MigrationOutcome(request=request, manifest=manifest, state=MigrationState.JOB_SERIALIZED)

    def dispatch(self, explicit_from: str | None, explicit_to: str | None, namespace: str = "default") -> MigrationOutcome:
        request, manifest = self._prepare(explicit_from, explicit_to, namespace)

        with tempfile.TemporaryDirectory(prefix="pachctl-migrate-") as tmp:
            manifest_path = Path(tmp) / MANIFEST_NAME
            manifest_path.write_text(manifest, encoding="utf-8")
            LOGGER.debug("submitting %s", manifest_path)
            try:
                result = submit_manifest(self._runner, manifest_path)
            except PachctlError as exc:
                raise self._fail(exc) from exc
        self._advance(MigrationState.SUBMITTED)

        print(result.output, file=self._out)
        if not result.ok:
            raise self._fail(SubmissionError(result.returncode, result.output))
        print(
            f"Successfully launched migration.  To see the progress, use `kubectl logs job/{MIGRATION_JOB_NAME}`",
            file=self._out,
        )
        self._advance(MigrationState.SUCCEEDED)
        return MigrationOutcome(request=request, manifest=manifest, state=MigrationState.SUCCEEDED, output=result.output)

    def _prepare(self, explicit_from: str | None, explicit_to: str | None, namespace: str) -> tuple[MigrationRequest, str]:
        self.transitions = []
        self._advance(MigrationState.START)
        try:
            versions = self.resolve(explicit_from, explicit_to)
            self._advance(MigrationState.VERSIONS_RESOLVED)
            request = self.build_request(versions, namespace)
        except PachctlError as exc:
            raise self._fail(exc) from exc
        job = JobDescription.for_migration(request)
        self._advance(MigrationState.JOB_BUILT)
        LOGGER.debug("built migration job %s (%s)", MIGRATION_JOB_NAME, request.migrate_flag)
        manifest = serialize_job(job)
        self._advance(MigrationState.JOB_SERIALIZED)
        return request, manifest

    def _advance(self, state: MigrationState) -> None:
        LOGGER.debug("migration state: %s", state.value)
        self.transitions.append(state)

    def _fail(self, cause: PachctlError) -> MigrationFailure:
        stage = self.transitions[-1]
        self._advance(MigrationState.FAILED)
        return MigrationFailure(stage, cause)

__all__ = [
    "MIGRATION_IMAGE_REPOSITORY",
    "MigrationDispatcher",
    "MigrationFailure",
    "MigrationOutcome",
    "migration_image",
    "serialize_job",
]
