"""Parsing utilities for previewslice."""

from parse.snippet import (
    EmptySnippetBody,
    NoSnippetFound,
    SnippetError,
    SnippetFileNotFound,
    extract_imports,
    extract_referenced_types,
    extract_snippet,
)
from parse.treesitter_declarations import collect_file, collect_source

__all__ = [
    "EmptySnippetBody",
    "NoSnippetFound",
    "SnippetError",
    "SnippetFileNotFound",
    "collect_file",
    "collect_source",
    "extract_imports",
    "extract_referenced_types",
    "extract_snippet",
]
