from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from emit.write import generate_slice
from verify.verify import DeterminismResult, verify_determinism

if TYPE_CHECKING:
    from pathlib import Path


def _write_minimal_project(root: Path) -> Path:
    sources = root / "Sources"
    sources.mkdir(parents=True, exist_ok=True)
    (sources / "Card.swift").write_text("struct Card {}\n", encoding="utf-8")
    preview = sources / "Preview.swift"
    preview.write_text("#Preview {\n    Card()\n}\n", encoding="utf-8")
    return preview


def test_verify_determinism_requires_artifacts_dir(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    preview = _write_minimal_project(project_root)

    missing_dir = tmp_path / "missing"
    with pytest.raises(FileNotFoundError, match="Artifacts directory does not exist"):
        verify_determinism(
            start_file=preview, root=project_root, artifacts_dir=missing_dir
        )


def test_verify_determinism_rejects_file_as_artifacts_dir(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    preview = _write_minimal_project(project_root)

    with pytest.raises(NotADirectoryError):
        verify_determinism(start_file=preview, root=project_root, artifacts_dir=preview)


def test_verify_determinism_accepts_fresh_slice(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    preview = _write_minimal_project(project_root)
    artifacts_dir = tmp_path / "artifacts"

    summary = generate_slice(start_file=preview, root=project_root, out_dir=artifacts_dir)
    result = verify_determinism(
        start_file=preview, root=project_root, artifacts_dir=artifacts_dir
    )

    assert summary["resolved_declarations"] == 1
    assert result == DeterminismResult(ok=True)


def test_verify_determinism_relative_paths_and_sorted_mismatches(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    project_root = tmp_path / "project"
    preview = _write_minimal_project(project_root)

    artifacts_dir = tmp_path / "artifacts"
    artifacts_dir.mkdir()

    for rel_path, content in (
        ("b.swift", "b-original"),
        ("a.swift", "a-original"),
        ("stale.swift", "stale"),
    ):
        path = artifacts_dir / rel_path
        path.write_text(content, encoding="utf-8")

    def _fake_generate_slice(*, out_dir: Path, **_: object) -> dict[str, object]:
        (out_dir / "a.swift").write_text("a-original", encoding="utf-8")
        (out_dir / "b.swift").write_text("b-regenerated", encoding="utf-8")
        (out_dir / "new.swift").write_text("new", encoding="utf-8")
        return {"artifacts": [str(out_dir / "a.swift"), str(out_dir / "b.swift")]}

    monkeypatch.setattr(
        "verify.verify.generate_slice",
        _fake_generate_slice,
    )

    result = verify_determinism(
        start_file=preview, root=project_root, artifacts_dir=artifacts_dir
    )

    assert result == DeterminismResult(
        ok=False,
        mismatches=("b.swift",),
        missing=("stale.swift",),
        extra=("new.swift",),
    )
