"""Resolution result models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from models.declarations import Declaration


class ResolvedSet(BaseModel):
    """Fixed point of the declaration closure.

    ``declarations`` is kept in ``discovery_index`` order so that rendering
    never depends on queue visitation order.
    """

    declarations: list[Declaration] = Field(default_factory=list)
    contributing_files: list[str] = Field(default_factory=list)
    resolved_imports: frozenset[str] = Field(default_factory=frozenset)
    total_declarations: int = 0
    resolved_declarations: int = 0


class SliceResult(BaseModel):
    """A resolved set together with its synthesized source text."""

    resolved: ResolvedSet
    generated_source: str

    @property
    def contributing_files(self) -> list[str]:
        return self.resolved.contributing_files

    @property
    def resolved_imports(self) -> frozenset[str]:
        return self.resolved.resolved_imports

    @property
    def total_declarations(self) -> int:
        return self.resolved.total_declarations

    @property
    def resolved_declarations(self) -> int:
        return self.resolved.resolved_declarations


class FileResolution(BaseModel):
    """Result of the whole-file resolver."""

    resolved_files: list[str] = Field(default_factory=list)
    excluded_entry_points: list[str] = Field(
        default_factory=list,
        description="File names dropped for carrying an entry-point attribute",
    )
    total_scanned: int = 0


__all__ = ["FileResolution", "ResolvedSet", "SliceResult"]
