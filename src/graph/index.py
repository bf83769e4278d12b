"""Reverse lookup tables over collected declarations."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from models.declarations import Declaration, FileRecord


@dataclass
class ReferenceIndex:
    """Declaration-level reference graph.

    Declarations are addressed by their position in ``declarations``; the
    lookup tables map a type name to those positions.
    """

    declarations: list[Declaration] = field(default_factory=list)
    type_declarers: dict[str, list[int]] = field(default_factory=dict)
    extensions: dict[str, list[int]] = field(default_factory=dict)
    file_imports: dict[str, frozenset[str]] = field(default_factory=dict)

    def declarers_of(self, name: str) -> list[int]:
        return self.type_declarers.get(name, [])

    def extensions_of(self, name: str) -> list[int]:
        return self.extensions.get(name, [])


@dataclass
class FileReferenceIndex:
    """Whole-file reference graph used by the coarse resolver."""

    records: dict[str, FileRecord] = field(default_factory=dict)
    type_declarers: dict[str, list[str]] = field(default_factory=dict)
    extensions: dict[str, list[str]] = field(default_factory=dict)


def build_reference_index(records: Iterable[FileRecord]) -> ReferenceIndex:
    """Build type -> declaration and type -> extension lookups.

    Args:
        records: Parsed files in discovery order

    Returns:
        ReferenceIndex whose ``declarations`` preserve discovery order.
    """
    declarations: list[Declaration] = []
    type_declarers: dict[str, list[int]] = defaultdict(list)
    extensions: dict[str, list[int]] = defaultdict(list)
    file_imports: dict[str, frozenset[str]] = {}

    for record in records:
        file_imports[record.path] = record.imports
        for decl in record.declarations:
            position = len(declarations)
            declarations.append(decl)
            for name in sorted(decl.declared_type_names | decl.member_type_names):
                type_declarers[name].append(position)
            if decl.extended_type is not None:
                extensions[decl.extended_type].append(position)

    return ReferenceIndex(
        declarations=declarations,
        type_declarers=dict(type_declarers),
        extensions=dict(extensions),
        file_imports=file_imports,
    )


def build_file_index(records: Iterable[FileRecord]) -> FileReferenceIndex:
    """Build type -> file and extended type -> file lookups."""
    by_path: dict[str, FileRecord] = {}
    type_declarers: dict[str, list[str]] = defaultdict(list)
    extensions: dict[str, list[str]] = defaultdict(list)

    for record in records:
        by_path[record.path] = record
        for name in sorted(record.declared_type_names):
            type_declarers[name].append(record.path)
        for name in sorted(record.extended_types):
            extensions[name].append(record.path)

    return FileReferenceIndex(
        records=by_path,
        type_declarers=dict(type_declarers),
        extensions=dict(extensions),
    )


__all__ = [
    "FileReferenceIndex",
    "ReferenceIndex",
    "build_file_index",
    "build_reference_index",
]
