"""Declaration models for sliced Swift sources.

This module contains the per-declaration and per-file records produced by the
declaration collector.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DeclarationKind = Literal[
    "type",
    "extension",
    "typealias",
    "function",
    "constant",
    "other",
]


class Declaration(BaseModel):
    """One top-level unit parsed from a Swift source file."""

    model_config = ConfigDict(frozen=True)

    source_text: str
    kind: DeclarationKind
    declared_type_names: frozenset[str] = Field(default_factory=frozenset)
    member_type_names: frozenset[str] = Field(
        default_factory=frozenset,
        description="Types nested inside an extension body",
    )
    referenced_type_names: frozenset[str] = Field(default_factory=frozenset)
    extended_type: str | None = None
    has_entry_point: bool = False
    origin_file: str
    discovery_index: int
    start_line: int = 1
    end_line: int = 1

    @property
    def is_extension(self) -> bool:
        return self.extended_type is not None

    @property
    def is_free_standing(self) -> bool:
        """True for free functions, constants and other untyped items."""
        return not self.declared_type_names and not self.is_extension


class FileRecord(BaseModel):
    """A parsed Swift file: its imports and ordered top-level declarations."""

    path: str
    imports: frozenset[str] = Field(default_factory=frozenset)
    declarations: list[Declaration] = Field(default_factory=list)
    snippet_type_names: frozenset[str] = Field(
        default_factory=frozenset,
        description="Capitalized identifiers inside skipped #Preview blocks",
    )

    @property
    def declared_type_names(self) -> set[str]:
        names: set[str] = set()
        for decl in self.declarations:
            names |= decl.declared_type_names
            names |= decl.member_type_names
        return names

    @property
    def extended_types(self) -> set[str]:
        return {
            decl.extended_type
            for decl in self.declarations
            if decl.extended_type is not None
        }

    @property
    def has_entry_point(self) -> bool:
        return any(decl.has_entry_point for decl in self.declarations)


__all__ = ["Declaration", "DeclarationKind", "FileRecord"]
