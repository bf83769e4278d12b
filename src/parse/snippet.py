"""Extraction of ``#Preview`` snippet bodies, seed types and imports."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

from log import get_logger
from parse.treesitter_declarations import (
    _get_parser,
    collect_capitalized_identifiers,
    import_module_name,
    is_snippet_node,
    iter_subtree,
)

if TYPE_CHECKING:
    import logging
    from pathlib import Path

    from tree_sitter import Node


class SnippetError(Exception):
    """Base class for fatal snippet extraction failures."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path


class SnippetFileNotFound(SnippetError):
    """Raised when the snippet file cannot be read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(path, f"File not found: {path}: {reason}")


class NoSnippetFound(SnippetError):
    """Raised when a file has no ``#Preview`` block with a closure body."""

    def __init__(self, path: str) -> None:
        super().__init__(path, f"No #Preview macro found in {path}")


class EmptySnippetBody(SnippetError):
    """Raised when the first ``#Preview`` block has nothing in it."""

    def __init__(self, path: str) -> None:
        super().__init__(path, f"#Preview body is empty in {path}")


def _indent_width(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


def dedent(text: str) -> str:
    """Drop surrounding blank lines and the minimum leading indentation.

    Spaces and tabs each count as one column, so mixed indentation still
    loses its shared width.
    """
    lines = text.replace("\r\n", "\n").split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    if not lines:
        return ""

    width = min(_indent_width(line) for line in lines if line.strip())
    return "\n".join(
        line[width:] if line.strip() else "" for line in lines
    ).rstrip()


def _outermost_closure(node: Node) -> Node | None:
    queue = deque(node.children)
    while queue:
        current = queue.popleft()
        if current.type == "lambda_literal":
            return current
        queue.extend(current.children)
    return None


def _find_snippet_closure(source_bytes: bytes, root: Node) -> Node | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if is_snippet_node(source_bytes, node):
            closure = _outermost_closure(node)
            if closure is not None:
                return closure
            continue
        stack.extend(reversed(node.children))
    return None


def _closure_body(source_bytes: bytes, closure: Node) -> str:
    """Return the text between a closure literal's outer braces."""
    start = closure.start_byte
    end = closure.end_byte
    for child in closure.children:
        if child.type == "{":
            start = child.end_byte
            break
    for child in reversed(closure.children):
        if child.type == "}":
            end = child.start_byte
            break
    return source_bytes[start:end].decode("utf8", errors="replace")


def find_snippet_body(source: str | bytes) -> str | None:
    """Return the raw body of the first ``#Preview`` closure, if any."""
    source_bytes = source.encode("utf8") if isinstance(source, str) else source
    tree = _get_parser().parse(source_bytes)
    closure = _find_snippet_closure(source_bytes, tree.root_node)
    if closure is None:
        return None
    return _closure_body(source_bytes, closure)


def extract_snippet(file_path: Path) -> str:
    """Extract the dedented body of the first ``#Preview { ... }`` in a file.

    The block is located on the syntax tree, so braces inside string
    literals and comments do not confuse it.

    Raises:
        SnippetFileNotFound: The file cannot be read.
        NoSnippetFound: No ``#Preview`` with a trailing closure exists.
        EmptySnippetBody: The closure body is blank.
    """
    try:
        source_bytes = file_path.read_bytes()
    except OSError as exc:
        raise SnippetFileNotFound(str(file_path), exc.strerror or str(exc)) from exc

    body = find_snippet_body(source_bytes)
    if body is None:
        raise NoSnippetFound(str(file_path))

    dedented = dedent(body)
    if not dedented.strip():
        raise EmptySnippetBody(str(file_path))
    return dedented


def extract_referenced_types(source: str) -> set[str]:
    """Return every capitalized identifier referenced in a source fragment.

    No scope awareness: a same-named value is indistinguishable from a type.
    """
    if not source.strip():
        return set()
    source_bytes = source.encode("utf8")
    tree = _get_parser().parse(source_bytes)
    return collect_capitalized_identifiers(source_bytes, tree.root_node)


def extract_imports(
    file_path: Path,
    logger: logging.Logger | None = None,
) -> list[str]:
    """Return the sorted, unique module names imported by a Swift file."""
    log = logger or get_logger("snippet")
    try:
        source_bytes = file_path.read_bytes()
    except OSError as exc:
        log.warning("Cannot read file for imports: %s: %s", file_path, exc)
        return []

    tree = _get_parser().parse(source_bytes)
    modules: set[str] = set()
    for node in iter_subtree(tree.root_node):
        if node.type == "import_declaration":
            module = import_module_name(source_bytes, node)
            if module:
                modules.add(module)
    return sorted(modules)


__all__ = [
    "EmptySnippetBody",
    "NoSnippetFound",
    "SnippetError",
    "SnippetFileNotFound",
    "dedent",
    "extract_imports",
    "extract_referenced_types",
    "extract_snippet",
    "find_snippet_body",
]
