from __future__ import annotations

from pathlib import Path

import pytest

from rules.config import ConfigError, load_config, resolve_output_dir


def _write_config(project_root: Path, toml_content: str) -> None:
    (project_root / "previewslice.toml").write_text(toml_content, encoding="utf-8")


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_unknown_section_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[layers]
unclassified = "deny"
""".strip(),
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "exclude = [")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


def test_valid_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
exclude = ["Tests/**"]
extra_builtin_types = ["Color"]
testable_modules = ["CoreKit"]
nested_gitignore = true
""".strip(),
    )

    config = load_config(tmp_path)

    assert config.exclude == ["Tests/**"]
    assert config.extra_builtin_types == ["Color"]
    assert config.testable_modules == ["CoreKit"]
    assert config.nested_gitignore is True


def test_non_identifier_builtin_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, 'extra_builtin_types = ["Not A Type"]')

    with pytest.raises(ConfigError, match="Invalid config"):
        load_config(tmp_path)


def test_empty_config_accepted(tmp_path: Path) -> None:
    _write_config(tmp_path, "")

    config = load_config(tmp_path)

    assert config.output_dir == ".previewslice"
    assert config.include == []
    assert config.exclude == []
    assert config.extra_builtin_types == []


def test_missing_config_gives_defaults(tmp_path: Path) -> None:
    assert load_config(tmp_path).output_dir == ".previewslice"


def test_resolve_output_dir_inside_root(tmp_path: Path) -> None:
    assert resolve_output_dir(tmp_path, "build/preview") == (
        tmp_path.resolve() / "build" / "preview"
    )


@pytest.mark.parametrize("output_dir", ["", "/tmp/out", "~/out", "../outside"])
def test_resolve_output_dir_rejects_unsafe_paths(tmp_path: Path, output_dir: str) -> None:
    with pytest.raises(ConfigError):
        resolve_output_dir(tmp_path, output_dir)
