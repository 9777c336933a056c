"""Confirmer reading answers from a text stream."""

from __future__ import annotations

import sys
from typing import IO

from pachctl.errors import ConfirmationError


class StreamConfirmer:
    def __init__(self, stdin: IO[str] | None = None, stdout: IO[str] | None = None) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout

    def confirm(self, prompt: str) -> bool:
        print(prompt, file=self._stdout, flush=True)
        try:
            answer = self._stdin.readline()
        except (OSError, ValueError) as exc:
            raise ConfirmationError(f"unable to read confirmation: {exc}") from exc
        if not answer:
            raise ConfirmationError("unable to read confirmation: unexpected end of input")
        return answer[0] in ("y", "Y")


__all__ = ["StreamConfirmer"]
