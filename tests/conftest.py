from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
SANDBOX_HOME = ROOT / ".test_place" / "pachctl-home"
os.environ.setdefault("PACHCTL_HOME", str(SANDBOX_HOME))
os.environ.setdefault("PACHCTL_METRICS", "0")
for entry in (SRC, ROOT):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))

from pachctl import __version__  # noqa: E402
from pachctl.settings import RuntimeSettings  # noqa: E402


@pytest.fixture()
def runtime_settings(tmp_path: Path) -> RuntimeSettings:
    home = tmp_path / "pachctl-home"
    log_dir = home / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return RuntimeSettings(
        home_dir=home,
        log_dir=log_dir,
        address="127.0.0.1:30650",
        metrics_enabled=True,
        cli_version=__version__,
    )
