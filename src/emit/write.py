from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import orjson

from contract.artifacts import GENERATED_SOURCE, HOST_APP_SOURCE, RESOLUTION_JSON
from emit.source import build_resolution_payload, render_host_app
from log import get_logger
from parse.snippet import extract_imports, extract_referenced_types, extract_snippet
from pipeline.resolve import resolve
from rules.config import load_config, resolve_output_dir
from utils import detect_module_name, detect_sources_dir, normalize_path

if TYPE_CHECKING:
    import logging
    from collections.abc import Iterable

    from models.resolution import SliceResult
    from rules.config import SliceConfig


@dataclass(frozen=True)
class SliceOutputs:
    """Everything the build step needs, rendered but not yet written."""

    result: SliceResult
    snippet_body: str
    seed_type_names: frozenset[str]
    host_app_source: str
    resolution: dict[str, object]


def _write_json(path: Path, obj: object) -> None:
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    path.write_bytes(orjson.dumps(obj, option=opts) + b"\n")


def build_slice(
    *,
    start_file: Path,
    root: Path,
    sources_dir: Path | None = None,
    config: SliceConfig | None = None,
    extra_seeds: Iterable[str] = (),
    module: str | None = None,
    logger: logging.Logger | None = None,
) -> SliceOutputs:
    """Extract the preview snippet of a file and slice what it needs.

    Args:
        start_file: Swift file carrying the ``#Preview`` block
        root: Project root used for config and sources-directory detection
        sources_dir: Directory to scan; detected under ``root`` when omitted
        config: Optional configuration (default: loaded from ``root``)
        extra_seeds: Seed type names added to those found in the snippet
        module: Module compiled in directly; detected from the path when omitted
        logger: Component logger

    Raises:
        SnippetError: The snippet cannot be extracted.
        StartFileUnreadable: The start file cannot be read.
    """
    if config is None:
        config = load_config(root)
    log = logger or get_logger("slice")

    start = Path(normalize_path(start_file))
    snippet_body = extract_snippet(start)
    seeds = frozenset(extract_referenced_types(snippet_body)) | frozenset(extra_seeds)
    log.debug("Preview references: %s", ", ".join(sorted(seeds)))

    if sources_dir is None:
        sources_dir = detect_sources_dir(start, root)
        if sources_dir is None:
            log.info("No sources directory detected; resolving %s alone", start.name)
        else:
            log.info("Running declaration resolver on %s", sources_dir)

    result = resolve(start, sources_dir, seeds, config=config, logger=log)

    app_module = module or detect_module_name(start, root)
    host_app_source = render_host_app(
        snippet_body,
        extract_imports(start, log),
        app_module=app_module,
        testable_modules=config.testable_modules,
    )

    return SliceOutputs(
        result=result,
        snippet_body=snippet_body,
        seed_type_names=seeds,
        host_app_source=host_app_source,
        resolution=build_resolution_payload(result, seeds),
    )


def write_slice(outputs: SliceOutputs, out_dir: Path) -> list[Path]:
    """Write generated source, host wrapper and resolution summary."""
    out_dir.mkdir(parents=True, exist_ok=True)

    generated_path = out_dir / GENERATED_SOURCE
    generated_path.write_text(outputs.result.generated_source, encoding="utf-8")

    host_path = out_dir / HOST_APP_SOURCE
    host_path.write_text(outputs.host_app_source, encoding="utf-8")

    resolution_path = out_dir / RESOLUTION_JSON
    _write_json(resolution_path, outputs.resolution)

    return [generated_path, host_path, resolution_path]


def generate_slice(
    *,
    start_file: Path,
    root: Path,
    out_dir: Path | None = None,
    sources_dir: Path | None = None,
    config: SliceConfig | None = None,
    extra_seeds: Iterable[str] = (),
    module: str | None = None,
    logger: logging.Logger | None = None,
) -> dict[str, object]:
    """Build a slice for ``start_file`` and write it to ``out_dir``.

    Returns:
        Dictionary with counts and the list of written paths.
    """
    if config is None:
        config = load_config(root)

    if out_dir is None:
        out_dir = resolve_output_dir(root, config.output_dir)

    log = logger or get_logger("slice")
    outputs = build_slice(
        start_file=start_file,
        root=root,
        sources_dir=sources_dir,
        config=config,
        extra_seeds=extra_seeds,
        module=module,
        logger=log,
    )
    written = write_slice(outputs, out_dir)

    result = outputs.result
    log.info(
        "Resolver: %d declarations from %d files",
        result.resolved_declarations,
        len(result.contributing_files),
    )
    log.debug(
        "Contributing files: %s",
        ", ".join(Path(path).name for path in result.contributing_files),
    )

    return {
        "resolved_declarations": result.resolved_declarations,
        "total_declarations": result.total_declarations,
        "contributing_file_count": len(result.contributing_files),
        "artifacts": [str(path) for path in written],
    }
