"""Error taxonomy shared by pachctl commands."""

from __future__ import annotations

import grpc


class PachctlError(RuntimeError):
    """Base class for failures reported to the top-level runner."""


class ConnectivityError(PachctlError):
    """Raised when the pachd server cannot be reached."""

    def __init__(self, message: str, *, address: str) -> None:
        super().__init__(message)
        self.address = address


class ResolutionError(PachctlError):
    """Raised when a version parameter is left unresolved."""


class PortForwardError(PachctlError):
    """Raised when a required forward task fails."""

    def __init__(self, task_name: str, reason: str) -> None:
        super().__init__(f"port forward {task_name} failed: {reason}")
        self.task_name = task_name
        self.reason = reason


class SubmissionError(PachctlError):
    """Raised when the scheduler rejects a job submission."""

    def __init__(self, returncode: int, output: str) -> None:
        super().__init__(f"kubectl create exited with status {returncode}")
        self.returncode = returncode
        self.output = output


class ConfirmationError(PachctlError):
    """Raised when the confirmation answer cannot be read."""


class RegistryError(PachctlError):
    """Raised when a command group cannot be composed into the dispatch tree."""


class ProcessSpawnError(PachctlError):
    """Raised when an external executable cannot be started."""

    def __init__(self, argv: list[str], reason: str) -> None:
        executable = argv[0] if argv else "<unknown>"
        super().__init__(f"unable to start {executable}: {reason}")
        self.argv = list(argv)


def sanitize_error(exc: BaseException) -> str:
    """Strip transport-level wrapping from RPC errors.

    gRPC errors carry status codes and debug strings next to the description
    the server produced; operators only need the description.
    """

    if isinstance(exc, grpc.RpcError):
        details = getattr(exc, "details", None)
        if callable(details):
            text = details()
            if text:
                return str(text)
    return str(exc)


__all__ = [
    "ConfirmationError",
    "ConnectivityError",
    "PachctlError",
    "PortForwardError",
    "ProcessSpawnError",
    "RegistryError",
    "ResolutionError",
    "SubmissionError",
    "sanitize_error",
]
