"""Command-line interface for previewslice."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import orjson

from emit.write import build_slice, write_slice
from log import configure_logging, get_logger
from parse.snippet import (
    SnippetError,
    extract_imports,
    extract_referenced_types,
    extract_snippet,
)
from pipeline.resolve import ResolverError, resolve_files
from rules.config import ConfigError, load_config, resolve_output_dir
from verify.verify import verify_determinism


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        default=".",
        help="Project root holding previewslice.toml (default: .)",
    )
    parser.add_argument(
        "--sources-dir",
        default=None,
        help="Directory scanned for declarations (default: detected under root)",
    )


def _add_logging_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log resolution details",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write log records to this file",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="previewslice")
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser(
        "extract", help="Print the body of the first #Preview block"
    )
    extract_parser.add_argument("file", help="Swift file with a #Preview block")
    extract_parser.add_argument(
        "--types",
        action="store_true",
        help="Print the type names referenced by the body instead",
    )
    extract_parser.add_argument(
        "--imports",
        action="store_true",
        help="Print the modules imported by the file instead",
    )

    slice_parser = subparsers.add_parser(
        "slice", help="Generate the minimal sources a preview needs"
    )
    slice_parser.add_argument("file", help="Swift file with a #Preview block")
    _add_common_paths(slice_parser)
    slice_parser.add_argument(
        "--out-dir",
        default=None,
        help="Output directory for generated sources (default: config output dir)",
    )
    slice_parser.add_argument(
        "--seed",
        action="append",
        default=[],
        help="Extra seed type name (repeatable)",
    )
    slice_parser.add_argument(
        "--module",
        default=None,
        help="Module compiled in directly (default: detected from the path)",
    )
    slice_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the generated source instead of writing files",
    )
    _add_logging_flags(slice_parser)

    resolve_parser = subparsers.add_parser(
        "resolve", help="Print the files a start file needs, as JSON"
    )
    resolve_parser.add_argument("--start", required=True, help="Start file")
    resolve_parser.add_argument(
        "--sources-dir", required=True, help="Directory scanned for Swift files"
    )
    _add_logging_flags(resolve_parser)

    verify_parser = subparsers.add_parser(
        "verify", help="Verify that generated sources are reproducible"
    )
    verify_parser.add_argument("file", help="Swift file with a #Preview block")
    _add_common_paths(verify_parser)
    verify_parser.add_argument(
        "--artifacts-dir",
        required=True,
        help="Directory holding previously generated sources",
    )
    _add_logging_flags(verify_parser)

    return parser


def _optional_path(value: str | None) -> Path | None:
    if value is None:
        return None
    return Path(value).expanduser().resolve()


def _fail(path: object, reason: object) -> int:
    sys.stderr.write(f"{path}: {reason}\n")
    return 1


def _handle_extract(file: Path, *, types: bool, imports: bool) -> int:
    if imports:
        for module in extract_imports(file):
            sys.stdout.write(f"{module}\n")
        return 0

    try:
        body = extract_snippet(file)
    except SnippetError as exc:
        return _fail(exc.path, exc)

    if types:
        for name in sorted(extract_referenced_types(body)):
            sys.stdout.write(f"{name}\n")
    else:
        sys.stdout.write(f"{body}\n")
    return 0


def _handle_slice(args: argparse.Namespace, root: Path) -> int:
    log = get_logger("cli")
    file = Path(args.file).expanduser().resolve()
    try:
        config = load_config(root)
        outputs = build_slice(
            start_file=file,
            root=root,
            sources_dir=_optional_path(args.sources_dir),
            config=config,
            extra_seeds=args.seed,
            module=args.module,
            logger=log,
        )
        if args.stdout:
            sys.stdout.write(outputs.result.generated_source)
            return 0
        out_dir = _optional_path(args.out_dir) or resolve_output_dir(
            root, config.output_dir
        )
    except SnippetError as exc:
        return _fail(exc.path, exc)
    except (ConfigError, ResolverError) as exc:
        return _fail(file, exc)

    try:
        written = write_slice(outputs, out_dir)
    except OSError as exc:
        return _fail(out_dir, exc.strerror or exc)

    result = outputs.result
    log.info(
        "Resolved %d of %d declarations from %d files",
        result.resolved_declarations,
        result.total_declarations,
        len(result.contributing_files),
    )
    for path in written:
        log.debug("Wrote %s", path)
    return 0


def _handle_resolve(start: Path, sources_dir: Path) -> int:
    try:
        resolution = resolve_files(start, sources_dir, logger=get_logger("cli"))
    except ResolverError as exc:
        return _fail(start, exc)

    payload = {
        "resolvedFiles": resolution.resolved_files,
        "excludedEntryPoints": resolution.excluded_entry_points,
        "stats": {
            "totalScanned": resolution.total_scanned,
            "resolved": len(resolution.resolved_files),
        },
    }
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    sys.stdout.write(orjson.dumps(payload, option=opts).decode())
    sys.stdout.write("\n")
    return 0


def _handle_verify(args: argparse.Namespace, root: Path) -> int:
    file = Path(args.file).expanduser().resolve()
    artifacts_dir = Path(args.artifacts_dir).expanduser().resolve()
    try:
        result = verify_determinism(
            start_file=file,
            root=root,
            artifacts_dir=artifacts_dir,
            sources_dir=_optional_path(args.sources_dir),
            logger=get_logger("cli"),
        )
    except (FileNotFoundError, NotADirectoryError) as exc:
        sys.stderr.write(f"artifacts-dir: {artifacts_dir}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2
    except SnippetError as exc:
        return _fail(exc.path, exc)
    except (ConfigError, ResolverError) as exc:
        return _fail(file, exc)

    if not result.ok:
        for label, paths in (
            ("missing", result.missing),
            ("extra", result.extra),
            ("mismatches", result.mismatches),
        ):
            for path in paths:
                sys.stderr.write(f"{label}: {path}\n")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "extract":
        file = Path(args.file).expanduser().resolve()
        return _handle_extract(file, types=args.types, imports=args.imports)

    configure_logging(verbose=args.verbose, log_file=_optional_path(args.log_file))

    if args.command == "slice":
        return _handle_slice(args, Path(args.root).expanduser().resolve())

    if args.command == "resolve":
        return _handle_resolve(
            Path(args.start).expanduser().resolve(),
            Path(args.sources_dir).expanduser().resolve(),
        )

    if args.command == "verify":
        return _handle_verify(args, Path(args.root).expanduser().resolve())

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
