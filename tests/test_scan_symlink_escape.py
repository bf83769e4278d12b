from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from scan.files import _build_gitignore_matcher, find_swift_files

if TYPE_CHECKING:
    from pathlib import Path


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_find_swift_files_skips_symlinked_dirs(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    project_root.mkdir()
    (project_root / "Feature").mkdir()
    (project_root / "Feature" / "Card.swift").write_text(
        "struct Card {}\n", encoding="utf-8"
    )

    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / "Leak.swift").write_text("struct Leak {}\n", encoding="utf-8")

    symlink_dir = project_root / "linked"
    symlink_dir.symlink_to(external_root, target_is_directory=True)

    results = [
        path.relative_to(project_root).as_posix()
        for path in find_swift_files(project_root)
    ]

    assert "Feature/Card.swift" in results
    assert "linked/Leak.swift" not in results


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_nested_gitignore_skips_symlinked_gitignore(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    project_root.mkdir()
    (project_root / "Feature").mkdir()
    (project_root / "Feature" / "Card.swift").write_text(
        "struct Card {}\n", encoding="utf-8"
    )
    (project_root / ".gitignore").write_text("*.xcuserstate\n", encoding="utf-8")

    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / "outside.gitignore").write_text(
        "Feature/Card.swift\n", encoding="utf-8"
    )

    symlink_gitignore = project_root / "linked.gitignore"
    symlink_gitignore.symlink_to(external_root / "outside.gitignore")

    matcher = _build_gitignore_matcher(project_root, nested_gitignore=True)
    assert matcher is not None
    assert matcher(str(project_root / "Feature" / "Card.swift")) is False


def test_find_swift_files_honors_filters(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    for rel in ("Feature/Card.swift", "Tests/CardTests.swift", "Feature/notes.txt"):
        path = project_root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("// swift\n", encoding="utf-8")
    (project_root / ".gitignore").write_text("Generated/\n", encoding="utf-8")
    (project_root / "Generated").mkdir()
    (project_root / "Generated" / "Assets.swift").write_text("", encoding="utf-8")

    results = [
        path.relative_to(project_root).as_posix()
        for path in find_swift_files(project_root, exclude_patterns=["Tests/*"])
    ]

    assert results == ["Feature/Card.swift"]


def test_find_swift_files_of_missing_dir_is_empty(tmp_path: Path) -> None:
    assert list(find_swift_files(tmp_path / "missing")) == []


def test_find_swift_files_skips_build_and_dependency_dirs(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    for rel in (
        "Feature/Card.swift",
        ".build/checkouts/Dep/Card.swift",
        "DerivedData/App/Build/Card.swift",
        "Pods/Dep/Card.swift",
        "Carthage/Checkouts/Dep/Card.swift",
        "App.xcodeproj/Generated.swift",
        "App.xcworkspace/Generated.swift",
        "Feature/Pods.swift",
    ):
        path = project_root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("struct Card {}\n", encoding="utf-8")

    results = [
        path.relative_to(project_root).as_posix()
        for path in find_swift_files(project_root)
    ]

    assert results == ["Feature/Card.swift", "Feature/Pods.swift"]


def test_find_swift_files_can_keep_build_dirs(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    (project_root / "Pods" / "Dep").mkdir(parents=True)
    (project_root / "Pods" / "Dep" / "Card.swift").write_text(
        "struct Card {}\n", encoding="utf-8"
    )

    results = [
        path.relative_to(project_root).as_posix()
        for path in find_swift_files(project_root, skip_build_dirs=False)
    ]

    assert results == ["Pods/Dep/Card.swift"]
