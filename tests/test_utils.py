from __future__ import annotations

from pathlib import Path

import pytest

from rules.builtins import BUILTIN_TYPES, build_builtin_predicate, is_builtin_type
from utils import detect_module_name, detect_sources_dir, normalize_path


def test_normalize_path_is_absolute_and_resolved(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "Sources").mkdir()
    monkeypatch.chdir(tmp_path)

    assert normalize_path("Sources/../Sources/Card.swift") == str(
        tmp_path.resolve() / "Sources" / "Card.swift"
    )


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("Modules/Feature/Views/Card.swift", "Feature"),
        ("Packages/Core/Sources/CoreKit/Model.swift", "CoreKit"),
        ("App/ContentView.swift", None),
        ("Sources/Card.swift", None),
    ],
)
def test_detect_module_name(path: str, expected: str | None) -> None:
    assert detect_module_name(path) == expected


def test_detect_module_name_relative_to_project(tmp_path: Path) -> None:
    project = tmp_path / "Sources"
    path = project / "App" / "Card.swift"

    assert detect_module_name(path, project) is None
    assert detect_module_name(path) == "App"


def test_detect_sources_dir(tmp_path: Path) -> None:
    feature = tmp_path / "App" / "Feature"
    feature.mkdir(parents=True)
    card = feature / "Card.swift"
    card.write_text("struct Card {}\n", encoding="utf-8")

    assert detect_sources_dir(card, tmp_path) == (tmp_path / "App").resolve()


def test_detect_sources_dir_without_subdirectory(tmp_path: Path) -> None:
    card = tmp_path / "Card.swift"
    card.write_text("struct Card {}\n", encoding="utf-8")

    assert detect_sources_dir(card, tmp_path) is None
    assert detect_sources_dir(card, tmp_path / "elsewhere") is None


def test_builtin_registry_covers_platform_types() -> None:
    for name in ("String", "Int", "View", "Text", "Date", "URL", "App"):
        assert name in BUILTIN_TYPES
    assert not is_builtin_type("Card")


def test_extra_builtins_extend_defaults() -> None:
    is_builtin = build_builtin_predicate(["Card"])

    assert is_builtin("Card")
    assert is_builtin("String")
    assert not is_builtin("Badge")
    assert is_builtin_type("Card", extra=["Card"])


def test_builtin_predicate_uses_registry_lookup(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[tuple[str, frozenset[str]]] = []

    def _recording_lookup(name: str, extra: frozenset[str] | None = None) -> bool:
        seen.append((name, frozenset(extra or ())))
        return False

    monkeypatch.setattr("rules.builtins.is_builtin_type", _recording_lookup)
    is_builtin = build_builtin_predicate(["Card"])

    assert is_builtin("String") is False
    assert seen == [("String", frozenset({"Card"}))]
