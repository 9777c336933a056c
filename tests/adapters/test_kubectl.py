from __future__ import annotations

import io
from pathlib import Path

import pytest

from pachctl.adapters.kubectl import KubectlForwarder, create_command
from pachctl.domain.forward import FailurePolicy, ForwardTask
from pachctl.errors import PortForwardError
from pachctl.ports.process import CompletedCommand
from tests._fakes import ScriptedRunner

PACHD = ForwardTask("pachd", "app=pachd", 30650, 650, FailurePolicy.REQUIRED)


def _pod(name: str):
    def handler(args: list[str]) -> CompletedCommand:
        return CompletedCommand(tuple(args), 0, name)

    return handler


def test_forward_discovers_pod_then_forwards() -> None:
    runner = ScriptedRunner(capture_handler=_pod("pachd-5d9c7-abcde\n"))
    stderr = io.StringIO()
    KubectlForwarder(runner, "--kubeconfig '/tmp/my config' --context dev", stderr=stderr)(PACHD)
    flags = ["--kubeconfig", "/tmp/my config", "--context", "dev"]
    assert runner.captured == [
        ["kubectl", *flags, "get", "pod", "-l", "app=pachd", "-o", "jsonpath={.items[0].metadata.name}"]
    ]
    assert runner.ran == [["kubectl", *flags, "port-forward", "pachd-5d9c7-abcde", "30650:650"]]


def test_missing_pod_is_a_task_failure() -> None:
    runner = ScriptedRunner(capture_handler=_pod(""))
    with pytest.raises(PortForwardError) as excinfo:
        KubectlForwarder(runner)(PACHD)
    assert "app=pachd" in str(excinfo.value)
    assert runner.ran == []


def test_non_zero_exit_is_a_task_failure() -> None:
    runner = ScriptedRunner(capture_handler=_pod("pachd-1"), run_handler=lambda args: 1)
    with pytest.raises(PortForwardError) as excinfo:
        KubectlForwarder(runner)(PACHD)
    assert excinfo.value.task_name == "pachd"
    assert "status 1" in str(excinfo.value)


def test_create_command_relaxes_validation() -> None:
    assert create_command(Path("/tmp/job.yaml")) == ["kubectl", "create", "--validate=false", "-f", "/tmp/job.yaml"]
