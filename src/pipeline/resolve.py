"""End-to-end resolution: scan, collect, index, close, synthesize."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from emit.source import render_generated_source
from graph.closure import resolve_declaration_closure, resolve_file_closure
from graph.index import build_file_index, build_reference_index
from log import get_logger
from models.resolution import FileResolution, SliceResult
from parse.treesitter_declarations import collect_file
from rules.builtins import build_builtin_predicate
from rules.config import SliceConfig
from scan.files import find_swift_files
from utils import normalize_path

if TYPE_CHECKING:
    import logging
    from collections.abc import Iterable

    from models.declarations import FileRecord


class ResolverError(Exception):
    """Base class for fatal resolution errors."""


class StartFileUnreadable(ResolverError):
    """Raised when the start file cannot be read; resolution is meaningless."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Cannot read start file: {path}")
        self.path = path


def _output_dir_name(config: SliceConfig) -> str:
    parts = Path(config.output_dir).parts
    return parts[0] if parts else ""


def _candidate_files(sources_dir: str | Path | None, config: SliceConfig) -> list[Path]:
    if sources_dir is None:
        return []
    return list(
        find_swift_files(
            Path(sources_dir),
            output_dir=_output_dir_name(config),
            include_patterns=config.include,
            exclude_patterns=config.exclude,
            nested_gitignore=config.nested_gitignore,
        )
    )


def collect_sources(
    start_file: str | Path,
    sources_dir: str | Path | None,
    *,
    config: SliceConfig | None = None,
    logger: logging.Logger | None = None,
) -> list[FileRecord]:
    """Parse every Swift file under ``sources_dir`` plus the start file.

    Unreadable files are logged and skipped; only the start file is fatal.
    Discovery indices run across files in scan order. ``sources_dir=None``
    collects the start file alone.

    Raises:
        StartFileUnreadable: The start file cannot be read.
    """
    config = config or SliceConfig()
    log = logger or get_logger("resolve")
    start = normalize_path(start_file)

    records: list[FileRecord] = []
    next_index = 0
    for file_path in _candidate_files(sources_dir, config):
        path = normalize_path(file_path)
        record = collect_file(Path(path), next_index, log)
        if record is None:
            log.warning("Could not read: %s", path)
            continue
        records.append(record)
        next_index += len(record.declarations)

    if not any(record.path == start for record in records):
        record = collect_file(Path(start), next_index, log)
        if record is None:
            raise StartFileUnreadable(start)
        records.append(record)

    log.debug(
        "Collected %d declarations from %d files",
        sum(len(record.declarations) for record in records),
        len(records),
    )
    return records


def resolve(
    start_file: str | Path,
    sources_dir: str | Path | None,
    seed_type_names: Iterable[str] = (),
    *,
    config: SliceConfig | None = None,
    logger: logging.Logger | None = None,
) -> SliceResult:
    """Slice the declarations needed by a start file and a set of seed types.

    Args:
        start_file: File whose own declarations are always included
        sources_dir: Directory scanned recursively for candidate files;
            missing or empty directories degrade to start-file-only slicing
        seed_type_names: Extra anchor names, typically from a preview body
        config: Scan filters and extra builtin names
        logger: Receives warnings for skipped files

    Returns:
        SliceResult with the resolved set and generated source text.

    Raises:
        StartFileUnreadable: The start file cannot be read.
    """
    config = config or SliceConfig()
    log = logger or get_logger("resolve")

    records = collect_sources(start_file, sources_dir, config=config, logger=log)
    index = build_reference_index(records)
    resolved = resolve_declaration_closure(
        index,
        normalize_path(start_file),
        seed_type_names,
        build_builtin_predicate(config.extra_builtin_types),
    )
    log.debug(
        "Resolved %d of %d declarations from %d files",
        resolved.resolved_declarations,
        resolved.total_declarations,
        len(resolved.contributing_files),
    )
    return SliceResult(
        resolved=resolved,
        generated_source=render_generated_source(resolved),
    )


def resolve_files(
    start_file: str | Path,
    sources_dir: str | Path | None,
    *,
    config: SliceConfig | None = None,
    logger: logging.Logger | None = None,
) -> FileResolution:
    """Whole-file resolution for callers that want file-level precision.

    Raises:
        StartFileUnreadable: The start file cannot be read.
    """
    config = config or SliceConfig()
    log = logger or get_logger("resolve")

    records = collect_sources(start_file, sources_dir, config=config, logger=log)
    return resolve_file_closure(
        build_file_index(records),
        normalize_path(start_file),
        build_builtin_predicate(config.extra_builtin_types),
    )


__all__ = [
    "ResolverError",
    "StartFileUnreadable",
    "collect_sources",
    "resolve",
    "resolve_files",
]
