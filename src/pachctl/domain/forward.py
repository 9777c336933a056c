"""Port forwarding descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FailurePolicy(str, Enum):
    """How a forward task's failure affects the supervisor."""

    REQUIRED = "required"
    BEST_EFFORT = "best-effort"
    SILENT = "silent"


@dataclass(frozen=True)
class ForwardTask:
    """Forward ``local_port`` to ``remote_port`` on the first pod matching ``selector``."""

    name: str
    selector: str
    local_port: int
    remote_port: int
    policy: FailurePolicy = FailurePolicy.REQUIRED
    advisory: str | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("Forward task name must not be empty")
        if not self.selector.strip():
            raise ValueError(f"Forward task {self.name} requires a pod selector")
        for port in (self.local_port, self.remote_port):
            if not 0 < port < 65536:
                raise ValueError(f"Forward task {self.name} has invalid port {port}")

    @property
    def port_mapping(self) -> str:
        return f"{self.local_port}:{self.remote_port}"

    def advisory_message(self) -> str:
        return self.advisory or f"{self.name} not enabled"


__all__ = ["FailurePolicy", "ForwardTask"]
