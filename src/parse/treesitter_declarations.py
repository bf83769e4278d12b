"""Tree-sitter based declaration collection for Swift sources.

Each top-level item of a file is classified into one of a closed set of item
kinds and turned into at most one ``Declaration``. Nested types never split a
declaration: a struct declared inside another struct is recorded on the
outer declaration. A top-level ``#if`` ... ``#endif`` block is kept whole as a
single declaration spanning its directives.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Literal

from tree_sitter import Language, Node, Parser
from tree_sitter_swift import language as get_swift_language

from log import get_logger
from models.declarations import Declaration, DeclarationKind, FileRecord

if TYPE_CHECKING:
    import logging
    from collections.abc import Iterator
    from pathlib import Path

ItemKind = Literal[
    "import",
    "type",
    "extension",
    "typealias",
    "function",
    "constant",
    "snippet",
    "other",
]

ENTRY_POINT_ATTRIBUTES = frozenset({"main", "UIApplicationMain", "NSApplicationMain"})

SNIPPET_MACRO = "Preview"

_TRIVIA_NODES = frozenset(
    {"comment", "multiline_comment", "directive", "diagnostic", "shebang_line"}
)
_IDENTIFIER_NODES = frozenset({"type_identifier", "simple_identifier"})
_TYPE_DECLARATION_NODES = frozenset(
    {"class_declaration", "protocol_declaration", "typealias_declaration"}
)
_DECLARATION_KEYWORDS = frozenset(
    {"class", "struct", "enum", "actor", "extension", "protocol"}
)
_SNIPPET_PATTERN = re.compile(rb"#\s*" + SNIPPET_MACRO.encode() + rb"(?![A-Za-z0-9_])")
_DIRECTIVE_PATTERN = re.compile(rb"#\s*(if|elseif|else|endif)\b")
_IMPORT_PATTERN = re.compile(
    r"\bimport\s+(?:(?:typealias|struct|class|enum|protocol|let|var|func|actor)\s+)?"
    r"([A-Za-z_][\w.]*)"
)

_PARSER: Parser | None = None


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with the Swift grammar."""
    global _PARSER
    if _PARSER is None:
        lang = Language(get_swift_language())
        _PARSER = Parser(lang)

    return _PARSER


def _node_text(source_bytes: bytes, node: Node) -> str:
    return source_bytes[node.start_byte : node.end_byte].decode("utf8", errors="replace")


def iter_subtree(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants in source order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def is_capitalized(name: str) -> bool:
    first = name[:1]
    return first.isalpha() and first.isupper()


def collect_capitalized_identifiers(source_bytes: bytes, node: Node) -> set[str]:
    """Return every capitalized identifier token under ``node``.

    Comments and string literal contents are never identifier nodes, so
    braces or type-like words inside them do not leak into the result.
    """
    names: set[str] = set()
    for current in iter_subtree(node):
        if current.type in _IDENTIFIER_NODES:
            name = _node_text(source_bytes, current).strip("` ")
            if is_capitalized(name):
                names.add(name)
    return names


def is_snippet_node(source_bytes: bytes, node: Node) -> bool:
    """True when ``node`` starts with the ``#Preview`` macro."""
    if node.type == "source_file":
        return False
    return _SNIPPET_PATTERN.match(source_bytes, node.start_byte, node.end_byte) is not None


def _declaration_keyword(node: Node) -> str | None:
    kind_node = node.child_by_field_name("declaration_kind")
    if kind_node is not None and kind_node.text:
        return kind_node.text.decode("utf8")
    for child in node.children:
        if child.type in _DECLARATION_KEYWORDS:
            return child.type
    return None


def _declared_name(source_bytes: bytes, node: Node) -> str | None:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        for child in node.children:
            if child.type in _IDENTIFIER_NODES or child.type == "user_type":
                name_node = child
                break
    if name_node is None:
        return None
    name = "".join(_node_text(source_bytes, name_node).split())
    return name or None


def _attribute_name(source_bytes: bytes, node: Node) -> str:
    text = _node_text(source_bytes, node).strip().lstrip("@")
    return text.split("(", 1)[0].strip()


def _has_entry_point_attribute(source_bytes: bytes, node: Node) -> bool:
    """Check the attribute list attached to a type declaration node."""
    for child in node.children:
        candidates = child.children if child.type == "modifiers" else [child]
        for attr in candidates:
            if (
                attr.type == "attribute"
                and _attribute_name(source_bytes, attr) in ENTRY_POINT_ATTRIBUTES
            ):
                return True
    return False


def classify_item(source_bytes: bytes, node: Node) -> ItemKind:
    """Map a top-level syntax node onto the closed set of item kinds."""
    if node.type == "import_declaration":
        return "import"
    if is_snippet_node(source_bytes, node):
        return "snippet"
    if node.type == "class_declaration":
        if _declaration_keyword(node) == "extension":
            return "extension"
        return "type"
    if node.type == "protocol_declaration":
        return "type"
    if node.type == "typealias_declaration":
        return "typealias"
    if node.type == "function_declaration":
        return "function"
    if node.type == "property_declaration":
        return "constant"
    return "other"


def import_module_name(source_bytes: bytes, node: Node) -> str | None:
    """Return the dotted module path of an import declaration."""
    for child in node.children:
        if child.type == "identifier":
            return "".join(_node_text(source_bytes, child).split())
    match = _IMPORT_PATTERN.search(_node_text(source_bytes, node))
    return match.group(1) if match else None


def _scan_types(source_bytes: bytes, node: Node) -> tuple[set[str], bool]:
    """Collect declared type names and the entry-point flag under ``node``."""
    declared: set[str] = set()
    has_entry_point = False
    for current in iter_subtree(node):
        if current.type not in _TYPE_DECLARATION_NODES:
            continue
        if current.type == "class_declaration":
            if _declaration_keyword(current) == "extension":
                continue
            if _has_entry_point_attribute(source_bytes, current):
                has_entry_point = True
        name = _declared_name(source_bytes, current)
        if name:
            declared.add(name)
    return declared, has_entry_point


def _extension_references(source_bytes: bytes, node: Node) -> set[str]:
    names: set[str] = set()
    for child in node.children:
        if child.type == "inheritance_specifier":
            names.add("".join(_node_text(source_bytes, child).split()))
    return names


def _directive_keyword(source_bytes: bytes, node: Node) -> str | None:
    if node.type != "directive":
        return None
    match = _DIRECTIVE_PATTERN.match(source_bytes, node.start_byte, node.end_byte)
    return match.group(1).decode("ascii") if match else None


def _conditional_block_end(source_bytes: bytes, nodes: list[Node], start: int) -> int:
    """Return the position of the ``#endif`` closing the ``#if`` at ``start``.

    An unterminated block runs to the last node.
    """
    depth = 0
    for position in range(start, len(nodes)):
        keyword = _directive_keyword(source_bytes, nodes[position])
        if keyword == "if":
            depth += 1
        elif keyword == "endif":
            depth -= 1
            if depth == 0:
                return position
    return len(nodes) - 1


def _build_declaration(
    source_bytes: bytes,
    items: list[Node],
    kind: DeclarationKind,
    file_path: str,
    discovery_index: int,
    span: tuple[Node, Node] | None = None,
) -> Declaration:
    """Summarize one top-level item, or a conditional block of items.

    A conditional block is ``other`` unless it only extends a single type,
    in which case it is indexed as that type's extension.
    """
    first, last = span or (items[0], items[-1])

    referenced: set[str] = set()
    declared: set[str] = set()
    member: set[str] = set()
    extended: set[str] = set()
    has_entry_point = False
    for item in items:
        referenced |= collect_capitalized_identifiers(source_bytes, item)
        nested, item_entry_point = _scan_types(source_bytes, item)
        has_entry_point = has_entry_point or item_entry_point
        if classify_item(source_bytes, item) == "extension":
            name = _declared_name(source_bytes, item)
            if name:
                extended.add(name)
            referenced |= _extension_references(source_bytes, item)
            member |= nested
        else:
            declared |= nested

    referenced |= extended
    extended_type: str | None = None
    if kind == "extension" or (kind == "other" and not declared and len(extended) == 1):
        kind = "extension" if extended else kind
        extended_type = next(iter(extended), None)
    else:
        declared |= member
        member = set()

    return Declaration(
        source_text=source_bytes[first.start_byte : last.end_byte].decode(
            "utf8", errors="replace"
        ),
        kind=kind,
        declared_type_names=frozenset(declared),
        member_type_names=frozenset(member - {extended_type}),
        referenced_type_names=frozenset(referenced - declared - member),
        extended_type=extended_type,
        has_entry_point=has_entry_point,
        origin_file=file_path,
        discovery_index=discovery_index,
        start_line=first.start_point[0] + 1,
        end_line=last.end_point[0] + 1,
    )


def collect_source(
    source: str | bytes,
    file_path: str,
    start_index: int = 0,
    logger: logging.Logger | None = None,
) -> FileRecord:
    """Parse one Swift source unit into a ``FileRecord``.

    Args:
        source: File contents
        file_path: Absolute path recorded as each declaration's origin
        start_index: First ``discovery_index`` to assign
        logger: Receives parse diagnostics (default: module logger)

    Returns:
        FileRecord with the file's imports and ordered declarations.
    """
    log = logger or get_logger("collect")
    source_bytes = source.encode("utf8") if isinstance(source, str) else source

    tree = _get_parser().parse(source_bytes)
    root_node = tree.root_node
    if root_node.has_error:
        log.debug("Syntax errors while parsing %s; continuing", file_path)

    imports: set[str] = set()
    snippet_types: set[str] = set()
    declarations: list[Declaration] = []

    children = root_node.children
    position = 0
    while position < len(children):
        node = children[position]
        position += 1

        if _directive_keyword(source_bytes, node) == "if":
            end = _conditional_block_end(source_bytes, children, position - 1)
            block = children[position - 1 : end + 1]
            position = end + 1
            items = [
                child
                for child in block
                if child.is_named and child.type not in _TRIVIA_NODES
            ]
            if not items:
                continue
            if all(classify_item(source_bytes, item) == "snippet" for item in items):
                for item in items:
                    snippet_types |= collect_capitalized_identifiers(source_bytes, item)
                continue
            # Imports inside the block stay in its text and are not hoisted.
            declarations.append(
                _build_declaration(
                    source_bytes,
                    items,
                    "other",
                    file_path,
                    start_index + len(declarations),
                    span=(block[0], block[-1]),
                )
            )
            continue

        if node.type in _TRIVIA_NODES or not node.is_named:
            continue

        kind = classify_item(source_bytes, node)
        if kind == "import":
            module = import_module_name(source_bytes, node)
            if module:
                imports.add(module)
            continue
        if kind == "snippet":
            snippet_types |= collect_capitalized_identifiers(source_bytes, node)
            continue

        declarations.append(
            _build_declaration(
                source_bytes,
                [node],
                kind,
                file_path,
                start_index + len(declarations),
            )
        )

    return FileRecord(
        path=file_path,
        imports=frozenset(imports),
        declarations=declarations,
        snippet_type_names=frozenset(snippet_types),
    )


def collect_file(
    file_path: Path,
    start_index: int = 0,
    logger: logging.Logger | None = None,
) -> FileRecord | None:
    """Collect declarations from a file on disk.

    Returns None when the file cannot be read or is not UTF-8; the caller
    decides whether that is fatal.
    """
    try:
        source_bytes = file_path.read_bytes()
        source_bytes.decode("utf8")
    except (OSError, UnicodeDecodeError):
        return None

    return collect_source(source_bytes, str(file_path), start_index, logger)


__all__ = [
    "ENTRY_POINT_ATTRIBUTES",
    "ItemKind",
    "classify_item",
    "collect_capitalized_identifiers",
    "collect_file",
    "collect_source",
    "import_module_name",
    "is_snippet_node",
    "iter_subtree",
]
