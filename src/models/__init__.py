"""Model namespace for previewslice records."""

from models.declarations import Declaration, DeclarationKind, FileRecord
from models.resolution import FileResolution, ResolvedSet, SliceResult

__all__ = [
    "Declaration",
    "DeclarationKind",
    "FileRecord",
    "FileResolution",
    "ResolvedSet",
    "SliceResult",
]
