from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "previewslice.toml"

_SWIFT_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class SliceConfig(BaseModel):
    """Configuration for previewslice source slicing."""

    model_config = ConfigDict(extra="forbid")

    output_dir: str = Field(
        default=".previewslice",
        description="Output directory for generated sources",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all Swift files)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to exclude",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    extra_builtin_types: list[str] = Field(
        default_factory=list,
        description="Additional type names never used as expansion anchors",
    )
    testable_modules: list[str] = Field(
        default_factory=list,
        description="Modules imported with @testable in the host wrapper",
    )

    @field_validator("extra_builtin_types", "testable_modules", mode="before")
    @classmethod
    def validate_identifiers(cls, v: Any) -> Any:
        """Validate that every entry is a plain Swift identifier.

        Runs in `mode="before"` so the error names the raw TOML value.
        """

        if v is None:
            return []

        if not isinstance(v, list):
            msg = "expected a list of identifiers"
            raise TypeError(msg)

        for name in v:
            if not isinstance(name, str) or not _SWIFT_IDENTIFIER.match(name):
                msg = f"Invalid Swift identifier {name!r}"
                raise ValueError(msg)

        return v


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_output_dir(root: Path, output_dir: str) -> Path:
    """Resolve a config-provided output_dir safely within the project root.

    The config output_dir must be a non-empty relative path that remains
    within the project root after resolution. Absolute paths and paths
    that escape the root are rejected.
    """
    if not output_dir:
        msg = "output_dir must be a non-empty relative path"
        raise ConfigError(msg)

    if output_dir.startswith("~"):
        msg = "output_dir must be a relative path within the project root"
        raise ConfigError(msg)

    output_path = Path(output_dir)
    if output_path.is_absolute():
        msg = "output_dir must be a relative path within the project root"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved_output = (resolved_root / output_path).resolve()
    except OSError as exc:
        msg = f"Failed to resolve output_dir '{output_dir}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved_output.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"output_dir '{output_dir}' escapes the project root"
        raise ConfigError(msg) from exc

    return resolved_output


def load_config(root: Path) -> SliceConfig:
    """Load configuration from previewslice.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return SliceConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return SliceConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
