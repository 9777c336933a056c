"""Port definition for interactive confirmation."""

from __future__ import annotations

from typing import Protocol


class Confirmer(Protocol):  # pragma: no cover
    def confirm(self, prompt: str) -> bool:
        ...
