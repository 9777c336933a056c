"""Port definition for running external executables."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import IO, Sequence


@dataclass(frozen=True)
class CompletedCommand:
    argv: tuple[str, ...]
    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ProcessRunner(ABC):
    @abstractmethod
    def run(
        self,
        argv: Sequence[str],
        *,
        stdin: str | None = None,
        stdout: IO[str] | None = None,
        stderr: IO[str] | None = None,
    ) -> int:
        """Run ``argv`` to completion and return its exit status.

        ``stdin`` is bound to the child's standard input. ``None`` sinks discard
        the corresponding stream.
        """

    @abstractmethod
    def capture(self, argv: Sequence[str], *, stdin: str | None = None) -> CompletedCommand:
        """Run ``argv`` and return its combined stdout/stderr."""
