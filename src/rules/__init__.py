"""Configuration and builtin-name rules for previewslice."""

from rules.builtins import BUILTIN_TYPES, build_builtin_predicate, is_builtin_type
from rules.config import (
    ConfigError,
    SliceConfig,
    load_config,
    resolve_output_dir,
)

__all__ = [
    "BUILTIN_TYPES",
    "ConfigError",
    "SliceConfig",
    "build_builtin_predicate",
    "is_builtin_type",
    "load_config",
    "resolve_output_dir",
]
