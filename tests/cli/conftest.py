from __future__ import annotations

import pytest

from pachctl.cli import main as cli_main
from pachctl.settings import RuntimeSettings


@pytest.fixture(autouse=True)
def cli_settings(runtime_settings: RuntimeSettings, monkeypatch: pytest.MonkeyPatch) -> RuntimeSettings:
    monkeypatch.setattr(cli_main, "SETTINGS", runtime_settings, raising=False)
    monkeypatch.setattr("pachctl.plugins.loader.iter_entry_points", lambda: [])
    return runtime_settings
