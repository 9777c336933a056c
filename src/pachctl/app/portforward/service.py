"""Concurrent supervision of long-running port forwards."""

from __future__ import annotations

import logging
import sys
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, List, Sequence, TextIO

from pachctl.domain.forward import FailurePolicy, ForwardTask
from pachctl.errors import PachctlError, PortForwardError

LOGGER = logging.getLogger(__name__)

DEFAULT_PORT = 30650
DEFAULT_UI_PORT = 38080
DEFAULT_PROXY_PORT = 38081

PACHD_REMOTE_PORT = 650
DASH_UI_REMOTE_PORT = 8080
DASH_WEBSOCKET_REMOTE_PORT = 8081
DASH_ADVISORY = "UI not enabled, deploy with --dashboard"


def default_forward_tasks(
    port: int = DEFAULT_PORT,
    ui_port: int = DEFAULT_UI_PORT,
    proxy_port: int = DEFAULT_PROXY_PORT,
) -> List[ForwardTask]:
    return [
        ForwardTask("pachd", "app=pachd", port, PACHD_REMOTE_PORT, FailurePolicy.REQUIRED),
        ForwardTask(
            "dash-ui",
            "app=dash",
            ui_port,
            DASH_UI_REMOTE_PORT,
            FailurePolicy.BEST_EFFORT,
            advisory=DASH_ADVISORY,
        ),
        ForwardTask("dash-websocket", "app=dash", proxy_port, DASH_WEBSOCKET_REMOTE_PORT, FailurePolicy.SILENT),
    ]


def forward_banner(ui_port: int) -> str:
    return (
        "Pachd port forwarded\n"
        "Dash websocket port forwarded\n"
        f"Dash UI port forwarded, navigate to localhost:{ui_port}\n"
        "CTRL-C to exit"
    )


@dataclass(frozen=True)
class ForwardOutcome:
    task: ForwardTask
    error: PachctlError | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class PortForwardSupervisor:
    """Run forward tasks side by side and apply each task's failure policy.

    ``run`` returns only after every task has finished. Failures of required
    tasks are raised afterwards; best-effort failures print their advisory and
    silent failures are dropped.
    """

    def __init__(self, forwarder: Callable[[ForwardTask], None], out: TextIO | None = None) -> None:
        self._forwarder = forwarder
        self._out = out

    def _execute(self, task: ForwardTask) -> ForwardOutcome:
        try:
            self._forwarder(task)
        except PachctlError as exc:
            LOGGER.debug("forward task %s failed: %s", task.name, exc)
            if task.policy is FailurePolicy.BEST_EFFORT:
                print(task.advisory_message(), file=self._stream())
            return ForwardOutcome(task, exc)
        return ForwardOutcome(task)

    def _stream(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    def run(self, tasks: Sequence[ForwardTask]) -> List[ForwardOutcome]:
        if not tasks:
            return []
        with ThreadPoolExecutor(max_workers=len(tasks), thread_name_prefix="port-forward") as pool:
            futures = [pool.submit(self._execute, task) for task in tasks]
            wait(futures)
        outcomes = [future.result() for future in futures]
        self._raise_required(outcomes)
        return outcomes

    def _raise_required(self, outcomes: Sequence[ForwardOutcome]) -> None:
        first_required = next(
            (o for o in outcomes if o.failed and o.task.policy is FailurePolicy.REQUIRED),
            None,
        )
        if first_required is not None:
            error = first_required.error
            if isinstance(error, PortForwardError):
                raise error
            raise PortForwardError(first_required.task.name, str(error)) from error


__all__ = [
    "DEFAULT_PORT",
    "DEFAULT_PROXY_PORT",
    "DEFAULT_UI_PORT",
    "ForwardOutcome",
    "PortForwardSupervisor",
    "default_forward_tasks",
    "forward_banner",
]
