"""Local usage events for pachctl commands (disabled with --no-metrics)."""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from functools import lru_cache
from importlib import resources
from typing import Any, Iterator

import jsonschema

from pachctl.settings import RuntimeSettings

LEVELS = {"info", "warn", "error"}

LOGGER = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _validator() -> jsonschema.Draft202012Validator:
    schema_resource = resources.files("pachctl.resources") / "telemetry.schema.json"
    schema = json.loads(schema_resource.read_text(encoding="utf-8"))
    return jsonschema.Draft202012Validator(schema)


def record_event(
    settings: RuntimeSettings,
    event: str,
    *,
    payload: dict[str, Any] | None = None,
    level: str = "info",
    status: str | None = None,
    component: str | None = None,
    duration_ms: float | None = None,
) -> None:
    if not settings.metrics_enabled:
        return
    if level not in LEVELS:
        raise ValueError(f"Telemetry level '{level}' is not supported")
    record: dict[str, Any] = {
        "ts": time.time(),
        "event": event,
        "payload": payload or {},
        "level": level,
        "version": settings.cli_version,
    }
    if status:
        record["status"] = status
    if component:
        record["component"] = component
    if duration_ms is not None:
        record["durationMs"] = round(duration_ms, 3)
    _validator().validate(record)
    log_path = settings.telemetry_file
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        with log_path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(record, ensure_ascii=False) + "\n")
    except OSError as exc:
        LOGGER.debug("dropping usage event %s: %s", event, exc)


@contextmanager
def track_command(settings: RuntimeSettings, command: str) -> Iterator[None]:
    """Record start and finish events around a command invocation."""

    start = time.monotonic()
    record_event(settings, "command", payload={"command": command}, status="start", component=command)
    try:
        yield
    except BaseException as exc:
        record_event(
            settings,
            "command",
            payload={"command": command, "error": type(exc).__name__},
            level="error",
            status="error",
            component=command,
            duration_ms=(time.monotonic() - start) * 1000,
        )
        raise
    record_event(
        settings,
        "command",
        payload={"command": command},
        status="success",
        component=command,
        duration_ms=(time.monotonic() - start) * 1000,
    )


def iter_events(settings: RuntimeSettings) -> Iterator[dict[str, Any]]:
    log_path = settings.telemetry_file
    if not log_path.exists():
        return
    with log_path.open("r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError:
                continue


__all__ = ["iter_events", "record_event", "track_command"]
