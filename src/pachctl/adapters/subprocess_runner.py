"""ProcessRunner backed by :mod:`subprocess`."""

from __future__ import annotations

import io
import logging
import subprocess
from typing import IO, Any, Sequence

from pachctl.errors import ProcessSpawnError
from pachctl.ports.process import CompletedCommand, ProcessRunner

LOGGER = logging.getLogger(__name__)


def _sink_target(sink: IO[str] | None) -> Any:
    if sink is None:
        return subprocess.DEVNULL
    try:
        sink.fileno()
    except (AttributeError, OSError, io.UnsupportedOperation):
        return subprocess.PIPE
    sink.flush()
    return sink


class SubprocessRunner(ProcessRunner):
    def run(
        self,
        argv: Sequence[str],
        *,
        stdin: str | None = None,
        stdout: IO[str] | None = None,
        stderr: IO[str] | None = None,
    ) -> int:
        args = list(argv)
        LOGGER.debug("exec %s", args)
        stdout_target = _sink_target(stdout)
        stderr_target = _sink_target(stderr)
        try:
            proc = subprocess.Popen(
                args,
                stdin=subprocess.PIPE if stdin is not None else subprocess.DEVNULL,
                stdout=stdout_target,
                stderr=stderr_target,
                text=True,
            )
        except OSError as exc:
            raise ProcessSpawnError(args, exc.strerror or str(exc)) from exc
        out, err = proc.communicate(stdin)
        if stdout_target is subprocess.PIPE and stdout is not None and out:
            stdout.write(out)
        if stderr_target is subprocess.PIPE and stderr is not None and err:
            stderr.write(err)
        LOGGER.debug("exec %s exited with %s", args[0], proc.returncode)
        return proc.returncode

    def capture(self, argv: Sequence[str], *, stdin: str | None = None) -> CompletedCommand:
        args = list(argv)
        LOGGER.debug("exec (captured) %s", args)
        try:
            result = subprocess.run(
                args,
                input=stdin,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise ProcessSpawnError(args, exc.strerror or str(exc)) from exc
        return CompletedCommand(argv=tuple(args), returncode=result.returncode, output=result.stdout or "")


__all__ = ["SubprocessRunner"]
