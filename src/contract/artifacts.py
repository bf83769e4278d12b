"""Output file contract for generated slices.

The build collaborator locates its inputs by these names, so they are
stable identifiers.
"""

from __future__ import annotations

# Schema version for resolution.json.
RESOLUTION_SCHEMA_VERSION = 1

GENERATED_SOURCE = "_PreviewGenerated.swift"
HOST_APP_SOURCE = "PreviewHostApp.swift"
RESOLUTION_JSON = "resolution.json"

GENERATED_HEADER = "// Auto-generated by previewslice"
HOST_APP_HEADER = "// Auto-generated PreviewHost"


__all__ = [
    "GENERATED_HEADER",
    "GENERATED_SOURCE",
    "HOST_APP_HEADER",
    "HOST_APP_SOURCE",
    "RESOLUTION_JSON",
    "RESOLUTION_SCHEMA_VERSION",
]
