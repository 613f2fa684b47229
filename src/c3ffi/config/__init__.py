"""Configuration modules for c3ffi."""

from .build_env import BuildEnvironment, BuildEnvironmentError
from .ini_parser import C3Config, C3ConfigError, LibrarySettings
from .target_triple import (
    TargetError,
    TargetTriple,
    UnrecognizedTarget,
    normalize_target,
    parse_target,
)

__all__ = [
    "BuildEnvironment",
    "BuildEnvironmentError",
    "C3Config",
    "C3ConfigError",
    "LibrarySettings",
    "TargetError",
    "TargetTriple",
    "UnrecognizedTarget",
    "normalize_target",
    "parse_target",
]
