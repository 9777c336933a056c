"""kubectl command construction for port forwarding and job submission."""

from __future__ import annotations

import logging
import shlex
import sys
from pathlib import Path
from typing import IO, List

from pachctl.domain.forward import FailurePolicy, ForwardTask
from pachctl.errors import PortForwardError
from pachctl.ports.process import CompletedCommand, ProcessRunner

LOGGER = logging.getLogger(__name__)

KUBECTL = "kubectl"


class KubectlForwarder:
    """Run a single forward task against the first pod matching its selector."""

    def __init__(self, runner: ProcessRunner, kubectl_flags: str = "", *, stderr: IO[str] | None = None) -> None:
        self._runner = runner
        self._flags = shlex.split(kubectl_flags)
        self._stderr = stderr

    def base_command(self) -> List[str]:
        return [KUBECTL, *self._flags]

    def discover_command(self, task: ForwardTask) -> List[str]:
        return [
            *self.base_command(),
            "get",
            "pod",
            "-l",
            task.selector,
            "-o",
            "jsonpath={.items[0].metadata.name}",
        ]

    def forward_command(self, task: ForwardTask, pod: str) -> List[str]:
        return [*self.base_command(), "port-forward", pod, task.port_mapping]

    def discover_pod(self, task: ForwardTask) -> str:
        result = self._runner.capture(self.discover_command(task))
        pod = result.output.strip()
        if not result.ok or not pod:
            reason = result.output.strip() or f"no pod matches selector {task.selector}"
            raise PortForwardError(task.name, reason)
        return pod

    def __call__(self, task: ForwardTask) -> None:
        pod = self.discover_pod(task)
        LOGGER.debug("forwarding %s to pod %s (%s)", task.name, pod, task.port_mapping)
        stderr = None
        if task.policy is FailurePolicy.REQUIRED:
            stderr = self._stderr if self._stderr is not None else sys.stderr
        code = self._runner.run(self.forward_command(task, pod), stderr=stderr)
        if code != 0:
            raise PortForwardError(task.name, f"kubectl port-forward exited with status {code}")


def create_command(manifest: Path) -> List[str]:
    return [KUBECTL, "create", "--validate=false", "-f", str(manifest)]


def submit_manifest(runner: ProcessRunner, manifest: Path) -> CompletedCommand:
    return runner.capture(create_command(manifest))


__all__ = ["KUBECTL", "KubectlForwarder", "create_command", "submit_manifest"]
