"""Rendering of generated Swift sources."""

from __future__ import annotations

import textwrap
from typing import TYPE_CHECKING

from contract.artifacts import (
    GENERATED_HEADER,
    HOST_APP_HEADER,
    RESOLUTION_SCHEMA_VERSION,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from models.resolution import ResolvedSet, SliceResult

_HOST_APP_TEMPLATE = """\
{header}

import SwiftUI
{imports}
@main
struct PreviewHostApp: App {{
    var body: some Scene {{
        WindowGroup {{
            PreviewContent()
        }}
    }}
}}

struct PreviewContent: View {{
    var body: some View {{
{body}
    }}
}}
"""


def render_generated_source(resolved: ResolvedSet) -> str:
    """Render a resolved set as one Swift source text.

    Imports come first, sorted and unique, then every declaration in
    discovery order, each followed by a blank line. The text is not
    validated; compiling it is the build step's job.
    """
    output = (
        f"{GENERATED_HEADER}\n"
        f"// Resolved {resolved.resolved_declarations} declarations "
        f"from {len(resolved.contributing_files)} files\n\n"
    )

    imports = sorted(resolved.resolved_imports)
    for module in imports:
        output += f"import {module}\n"
    if imports:
        output += "\n"

    for decl in sorted(resolved.declarations, key=lambda d: d.discovery_index):
        output += decl.source_text
        output += "\n\n"

    return output


def render_host_app(
    snippet_body: str,
    imports: Iterable[str],
    *,
    app_module: str | None = None,
    testable_modules: Iterable[str] = (),
) -> str:
    """Render the ``@main`` wrapper that displays a preview body.

    Args:
        snippet_body: Dedented ``#Preview`` body
        imports: Modules the preview's file imports
        app_module: Module whose sources are compiled in directly; not imported
        testable_modules: Modules imported with ``@testable``
    """
    testable = set(testable_modules)
    seen: set[str] = {"SwiftUI"}
    import_lines: list[str] = []
    for module in imports:
        if module in seen or module == app_module:
            continue
        seen.add(module)
        prefix = "@testable import" if module in testable else "import"
        import_lines.append(f"{prefix} {module}\n")

    return _HOST_APP_TEMPLATE.format(
        header=HOST_APP_HEADER,
        imports="".join(import_lines),
        body=textwrap.indent(snippet_body, " " * 8),
    )


def build_resolution_payload(
    result: SliceResult,
    seed_type_names: Iterable[str] = (),
) -> dict[str, object]:
    """Summarize a slice for resolution.json."""
    return {
        "schema_version": RESOLUTION_SCHEMA_VERSION,
        "total_declarations": result.total_declarations,
        "resolved_declarations": result.resolved_declarations,
        "contributing_files": list(result.contributing_files),
        "resolved_imports": sorted(result.resolved_imports),
        "seed_types": sorted(set(seed_type_names)),
    }


__all__ = [
    "build_resolution_payload",
    "render_generated_source",
    "render_host_app",
]
