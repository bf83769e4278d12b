"""Shared path utilities for previewslice."""

from __future__ import annotations

from pathlib import Path

_MODULE_CONTAINERS = ("Modules", "Sources")


def normalize_path(file_path: str | Path) -> str:
    """Return the absolute, symlink-resolved form of a path as a string.

    Every component compares file identity through this form, so a start
    file given relatively still matches the same file found by scanning.
    """
    return str(Path(file_path).expanduser().resolve())


def detect_module_name(
    file_path: str | Path,
    project_dir: str | Path | None = None,
) -> str | None:
    """Guess the module that owns a Swift file from its path.

    Args:
        file_path: Swift file path
        project_dir: Optional project directory the path is relative to

    Returns:
        The directory name following the first ``Modules/`` or ``Sources/``
        component, or None when the path has neither.

    Examples:
        >>> detect_module_name("Modules/Feature/Views/Card.swift")
        'Feature'
        >>> detect_module_name("Packages/Core/Sources/CoreKit/Model.swift")
        'CoreKit'
        >>> detect_module_name("App/ContentView.swift") is None
        True
    """
    path = Path(file_path)
    if project_dir is not None:
        try:
            path = path.relative_to(project_dir)
        except ValueError:
            pass

    parts = path.parts[:-1]
    for container in _MODULE_CONTAINERS:
        if container in parts:
            position = parts.index(container)
            if position + 1 < len(parts):
                return parts[position + 1]
    return None


def detect_sources_dir(file_path: str | Path, project_dir: str | Path) -> Path | None:
    """Find the top-level source directory of the project that holds a file.

    The first path component below ``project_dir`` wins; a file sitting
    directly in ``project_dir`` or outside of it has no sources directory.
    """
    project = Path(normalize_path(project_dir))
    path = Path(normalize_path(file_path))
    try:
        relative = path.relative_to(project)
    except ValueError:
        return None

    if len(relative.parts) < 2:
        return None

    candidate = project / relative.parts[0]
    return candidate if candidate.is_dir() else None
