"""Stable output contract for previewslice.

Treat these exports as the boundary with the build collaborator that
compiles the generated sources.
"""

from contract.artifacts import (
    GENERATED_SOURCE,
    HOST_APP_SOURCE,
    RESOLUTION_JSON,
    RESOLUTION_SCHEMA_VERSION,
)

__all__ = [
    "GENERATED_SOURCE",
    "HOST_APP_SOURCE",
    "RESOLUTION_JSON",
    "RESOLUTION_SCHEMA_VERSION",
]
