from .service import (
    LIVE_QUERY_TIMEOUT,
    ResolvedVersions,
    VersionService,
    format_version_table,
    resolve_versions,
)

__all__ = [
    "LIVE_QUERY_TIMEOUT",
    "ResolvedVersions",
    "VersionService",
    "format_version_table",
    "resolve_versions",
]
