from .service import (
    DEFAULT_PORT,
    DEFAULT_PROXY_PORT,
    DEFAULT_UI_PORT,
    ForwardOutcome,
    PortForwardSupervisor,
    default_forward_tasks,
    forward_banner,
)

__all__ = [
    "DEFAULT_PORT",
    "DEFAULT_PROXY_PORT",
    "DEFAULT_UI_PORT",
    "ForwardOutcome",
    "PortForwardSupervisor",
    "default_forward_tasks",
    "forward_banner",
]
