"""Runtime settings for pachctl."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from pachctl import __version__

DEFAULT_ADDRESS = "0.0.0.0:30650"

_DISABLE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class RuntimeSettings:
    home_dir: Path
    log_dir: Path
    address: str = DEFAULT_ADDRESS
    metrics_enabled: bool = True
    cli_version: str = __version__

    @property
    def telemetry_file(self) -> Path:
        return self.log_dir / "telemetry.jsonl"


def _default_home_dir() -> Path:
    override = os.environ.get("PACHCTL_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".pachctl"


def load_settings() -> RuntimeSettings:
    base = _default_home_dir()
    address = os.environ.get("ADDRESS", "").strip() or DEFAULT_ADDRESS
    metrics = os.environ.get("PACHCTL_METRICS", "1").strip().lower() not in _DISABLE_VALUES
    return RuntimeSettings(
        home_dir=base,
        log_dir=base / "logs",
        address=address,
        metrics_enabled=metrics,
    )


SETTINGS = load_settings()
