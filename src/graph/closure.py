"""Closure computation over the declaration and file reference graphs."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from models.resolution import FileResolution, ResolvedSet
from rules.builtins import build_builtin_predicate

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from graph.index import FileReferenceIndex, ReferenceIndex


def _seed_queue(
    index: ReferenceIndex,
    start_file: str,
    seed_type_names: Iterable[str],
    is_builtin: Callable[[str], bool],
) -> list[int]:
    queue = [
        position
        for position, decl in enumerate(index.declarations)
        if decl.origin_file == start_file and not decl.has_entry_point
    ]
    for name in sorted(set(seed_type_names)):
        if is_builtin(name):
            continue
        queue.extend(index.declarers_of(name))
        queue.extend(index.extensions_of(name))
    return queue


def _apply_safety_net(index: ReferenceIndex, resolved: set[int]) -> None:
    """Pull in free functions and constants from already-contributing files.

    They have no type name under which a reference could reach them, so
    they ride along with their file.
    """
    contributing = {index.declarations[position].origin_file for position in resolved}
    for position, decl in enumerate(index.declarations):
        if (
            position not in resolved
            and not decl.has_entry_point
            and decl.is_free_standing
            and decl.origin_file in contributing
        ):
            resolved.add(position)


def resolve_declaration_closure(
    index: ReferenceIndex,
    start_file: str,
    seed_type_names: Iterable[str] = (),
    is_builtin: Callable[[str], bool] | None = None,
) -> ResolvedSet:
    """Compute the minimal declaration slice for a start file and seed types.

    Args:
        index: Reference graph over every collected declaration
        start_file: Normalized start file path; all of its declarations
            without an entry-point attribute are seeded
        seed_type_names: Externally supplied type names (e.g. from a preview body)
        is_builtin: Predicate for names that are never expanded

    Returns:
        ResolvedSet ordered by discovery index.
    """
    if is_builtin is None:
        is_builtin = build_builtin_predicate()

    queue = _seed_queue(index, start_file, seed_type_names, is_builtin)
    resolved: set[int] = set()

    head = 0
    while head < len(queue):
        position = queue[head]
        head += 1
        if position in resolved:
            continue

        decl = index.declarations[position]
        if decl.has_entry_point:
            continue
        resolved.add(position)

        for name in sorted(decl.referenced_type_names):
            if is_builtin(name):
                continue
            queue.extend(p for p in index.declarers_of(name) if p not in resolved)
            queue.extend(p for p in index.extensions_of(name) if p not in resolved)

        # Declared names are user-defined by construction; never filtered.
        for name in sorted(decl.declared_type_names | decl.member_type_names):
            queue.extend(p for p in index.extensions_of(name) if p not in resolved)

    _apply_safety_net(index, resolved)

    declarations = sorted(
        (index.declarations[position] for position in resolved),
        key=lambda d: d.discovery_index,
    )
    contributing_files = sorted({decl.origin_file for decl in declarations})
    imports: set[str] = set()
    for path in contributing_files:
        imports |= index.file_imports.get(path, frozenset())

    return ResolvedSet(
        declarations=declarations,
        contributing_files=contributing_files,
        resolved_imports=frozenset(imports),
        total_declarations=len(index.declarations),
        resolved_declarations=len(declarations),
    )


def resolve_file_closure(
    index: FileReferenceIndex,
    start_file: str,
    is_builtin: Callable[[str], bool] | None = None,
) -> FileResolution:
    """Whole-file variant of the closure.

    Files declaring an entry point are followed during the walk but dropped
    from the result afterwards. The start file is never dropped.
    """
    if is_builtin is None:
        is_builtin = build_builtin_predicate()

    resolved: set[str] = set()
    queue = [start_file]

    head = 0
    while head < len(queue):
        current = queue[head]
        head += 1
        if current in resolved:
            continue
        resolved.add(current)

        record = index.records.get(current)
        if record is None:
            continue

        declared = record.declared_type_names
        referenced = set(record.snippet_type_names)
        for decl in record.declarations:
            referenced |= decl.referenced_type_names
        referenced -= declared

        for name in sorted(referenced):
            if is_builtin(name):
                continue
            queue.extend(p for p in index.type_declarers.get(name, []) if p not in resolved)
            queue.extend(p for p in index.extensions.get(name, []) if p not in resolved)

        for name in sorted(declared):
            queue.extend(p for p in index.extensions.get(name, []) if p not in resolved)

    resolved_files: list[str] = []
    excluded: list[str] = []
    for path in sorted(resolved):
        record = index.records.get(path)
        if record is not None and path != start_file and record.has_entry_point:
            excluded.append(Path(path).name)
        else:
            resolved_files.append(path)

    return FileResolution(
        resolved_files=resolved_files,
        excluded_entry_points=excluded,
        total_scanned=len(index.records),
    )


__all__ = ["resolve_declaration_closure", "resolve_file_closure"]
