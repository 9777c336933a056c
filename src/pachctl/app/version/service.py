"""Version discovery and reconciliation against the live pachd server."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, TextIO

import grpc

from pachctl.domain.version import Version
from pachctl.errors import ConnectivityError, ResolutionError, sanitize_error
from pachctl.ports.cluster import VersionSource

LOGGER = logging.getLogger(__name__)

LIVE_QUERY_TIMEOUT = 1.0

# Column layout matching a tabwriter with minwidth=20, padding=3.
_MIN_CELL = 20
_PADDING = 3


@dataclass(frozen=True)
class ResolvedVersions:
    from_version: str
    to_version: str


def resolve_versions(
    explicit_from: str | None,
    explicit_to: str | None,
    client_version: Version,
    query_live: Callable[[float], Version],
    *,
    address: str,
    timeout: float = LIVE_QUERY_TIMEOUT,
) -> ResolvedVersions:
    """Resolve the migration source and target versions.

    An explicit value always wins and the live server is only contacted when
    ``explicit_from`` is empty. A failed live query is fatal; the caller has
    to supply the source version instead.
    """

    if explicit_from:
        from_version = explicit_from
    else:
        LOGGER.debug("discovering cluster version from %s", address)
        try:
            live = query_live(timeout)
        except (grpc.RpcError, OSError, TimeoutError) as exc:
            raise ResolutionError(
                f"unable to discover cluster version from pachd at address ({address}); "
                f"please provide the --from flag.  Error: {sanitize_error(exc)}"
            ) from exc
        from_version = live.pretty_no_additional()

    if explicit_to:
        to_version = explicit_to
    else:
        to_version = client_version.pretty_no_additional()

    return ResolvedVersions(from_version=from_version, to_version=to_version)


def _cell(text: str) -> str:
    return text.ljust(max(len(text) + _PADDING, _MIN_CELL))


def format_version_table(rows: Iterable[tuple[str, str]]) -> str:
    lines = [_cell("COMPONENT") + _cell("VERSION")]
    for component, version in rows:
        lines.append(_cell(component) + version)
    return "\n".join(lines) + "\n"


class VersionService:
    """Implements ``pachctl version``."""

    def __init__(self, source: VersionSource, client_version: Version, address: str) -> None:
        self._source = source
        self._client_version = client_version
        self._address = address

    def report(self, out: TextIO) -> Version:
        out.write(format_version_table([("pachctl", self._client_version.pretty())]))
        out.flush()
        try:
            remote = self._source.get_version(LIVE_QUERY_TIMEOUT)
        except (grpc.RpcError, OSError, TimeoutError) as exc:
            message = (
                f"{_cell('pachd')}(version unknown) : error connecting to pachd server at address "
                f"({self._address}): {sanitize_error(exc)}\n\n"
                "please make sure pachd is up (`kubectl get all`) and portforwarding is enabled"
            )
            raise ConnectivityError(message, address=self._address) from exc
        out.write(_cell("pachd") + remote.pretty() + "\n")
        return remote


__all__ = [
    "LIVE_QUERY_TIMEOUT",
    "ResolvedVersions",
    "VersionService",
    "format_version_table",
    "resolve_versions",
]
