"""Resolution entry points."""

from pipeline.resolve import (
    ResolverError,
    StartFileUnreadable,
    collect_sources,
    resolve,
    resolve_files,
)

__all__ = [
    "ResolverError",
    "StartFileUnreadable",
    "collect_sources",
    "resolve",
    "resolve_files",
]
