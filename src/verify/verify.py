"""Determinism verification for previewslice outputs."""

from __future__ import annotations

import filecmp
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from emit.write import generate_slice

if TYPE_CHECKING:
    import logging

    from rules.config import SliceConfig


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    mismatches: tuple[str, ...] = field(default_factory=tuple)
    missing: tuple[str, ...] = field(default_factory=tuple)
    extra: tuple[str, ...] = field(default_factory=tuple)


def _list_relative_files(root: Path) -> set[Path]:
    return {path.relative_to(root) for path in root.rglob("*") if path.is_file()}


def verify_determinism(
    *,
    start_file: Path,
    root: Path,
    artifacts_dir: Path,
    sources_dir: Path | None = None,
    config: SliceConfig | None = None,
    logger: logging.Logger | None = None,
) -> DeterminismResult:
    """Verify that a previously written slice is reproduced byte-for-byte.

    Regenerates the slice for ``start_file`` into a temporary directory and
    compares it against ``artifacts_dir`` on relative paths.

    Raises:
        FileNotFoundError: If artifacts_dir does not exist.
        NotADirectoryError: If artifacts_dir is not a directory.
    """
    if not artifacts_dir.exists():
        msg = f"Artifacts directory does not exist: {artifacts_dir}"
        raise FileNotFoundError(msg)
    if not artifacts_dir.is_dir():
        msg = f"Artifacts path is not a directory: {artifacts_dir}"
        raise NotADirectoryError(msg)

    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir)
        generate_slice(
            start_file=start_file,
            root=root,
            out_dir=temp_path,
            sources_dir=sources_dir,
            config=config,
            logger=logger,
        )

        original_files = _list_relative_files(artifacts_dir)
        regenerated_files = _list_relative_files(temp_path)

        missing = sorted(str(path) for path in original_files - regenerated_files)
        extra = sorted(str(path) for path in regenerated_files - original_files)

        mismatches = [
            str(path)
            for path in sorted(original_files & regenerated_files)
            if not filecmp.cmp(artifacts_dir / path, temp_path / path, shallow=False)
        ]

    ok = not missing and not extra and not mismatches
    return DeterminismResult(
        ok=ok,
        mismatches=tuple(mismatches),
        missing=tuple(missing),
        extra=tuple(extra),
    )
