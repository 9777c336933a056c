"""Logging configuration for a single pachctl invocation.

The CLI writes diagnostics to stderr only. gRPC emits its own records under the
``grpc`` logger namespace; unless ``--verbose`` is given those are limited to
fatal events while an RPC is in flight.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
RPC_LOGGER = "grpc"


@dataclass(frozen=True)
class LogConfig:
    """Verbosity settings threaded into RPC clients."""

    verbose: bool = False

    @property
    def level(self) -> int:
        return logging.DEBUG if self.verbose else logging.WARNING

    @property
    def rpc_level(self) -> int:
        return logging.DEBUG if self.verbose else logging.CRITICAL

    @contextmanager
    def scoped_rpc_logging(self) -> Iterator[logging.Logger]:
        logger = logging.getLogger(RPC_LOGGER)
        previous = logger.level
        logger.setLevel(self.rpc_level)
        try:
            yield logger
        finally:
            logger.setLevel(previous)


def setup_logging(config: LogConfig) -> logging.Logger:
    """Configure the ``pachctl`` logger hierarchy to write to stderr."""

    logger = logging.getLogger("pachctl")
    logger.setLevel(config.level)
    for existing in [h for h in logger.handlers if getattr(h, "_pachctl_handler", False)]:
        logger.removeHandler(existing)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(config.level)
    handler._pachctl_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False
    return logger


__all__ = ["LOG_FORMAT", "LogConfig", "RPC_LOGGER", "setup_logging"]
