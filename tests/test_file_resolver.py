from __future__ import annotations

from pathlib import Path

import pytest

from pipeline.resolve import StartFileUnreadable, resolve_files


def _write_swift_file(directory: Path, name: str, source: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(source.strip() + "\n", encoding="utf-8")
    return path


def _write_app(sources: Path) -> None:
    _write_swift_file(
        sources,
        "App.swift",
        """
@main
struct DemoApp {
    let card: Card
}
""",
    )
    _write_swift_file(sources, "Card.swift", "struct Card {}")
    _write_swift_file(sources, "Unused.swift", "struct Unused {}")


def test_entry_point_files_are_followed_then_dropped(tmp_path: Path) -> None:
    sources = (tmp_path / "Sources").resolve()
    _write_app(sources)
    start = _write_swift_file(
        sources,
        "Preview.swift",
        """
struct Badge {}

#Preview {
    DemoApp()
}
""",
    )

    resolution = resolve_files(start, sources)

    assert resolution.resolved_files == [
        str(sources / "Card.swift"),
        str(sources / "Preview.swift"),
    ]
    assert resolution.excluded_entry_points == ["App.swift"]
    assert resolution.total_scanned == 4


def test_start_file_with_entry_point_is_kept(tmp_path: Path) -> None:
    sources = (tmp_path / "Sources").resolve()
    _write_app(sources)

    resolution = resolve_files(sources / "App.swift", sources)

    assert resolution.resolved_files == [
        str(sources / "App.swift"),
        str(sources / "Card.swift"),
    ]
    assert resolution.excluded_entry_points == []


def test_extension_files_of_declared_types_are_included(tmp_path: Path) -> None:
    sources = (tmp_path / "Sources").resolve()
    _write_swift_file(sources, "Card.swift", "struct Card {}")
    _write_swift_file(sources, "Card+Extras.swift", "extension Card {}")
    start = _write_swift_file(sources, "Screen.swift", "struct Screen { let card: Card }")

    resolution = resolve_files(start, sources)

    assert str(sources / "Card+Extras.swift") in resolution.resolved_files


def test_unreadable_start_file_is_fatal(tmp_path: Path) -> None:
    sources = tmp_path / "Sources"
    sources.mkdir()

    with pytest.raises(StartFileUnreadable):
        resolve_files(sources / "Missing.swift", sources)


def test_dependency_checkouts_are_not_resolved(tmp_path: Path) -> None:
    sources = (tmp_path / "Sources").resolve()
    _write_swift_file(sources, "Card.swift", "struct Card {}")
    checkout = sources / ".build" / "checkouts" / "Dep"
    _write_swift_file(checkout, "Card.swift", "struct Card {}")
    start = _write_swift_file(
        sources,
        "Preview.swift",
        """
#Preview {
    Card()
}
""",
    )

    resolution = resolve_files(start, sources)

    assert resolution.resolved_files == [
        str(sources / "Card.swift"),
        str(sources / "Preview.swift"),
    ]
    assert resolution.total_scanned == 2
