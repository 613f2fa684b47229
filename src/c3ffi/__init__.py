"""c3ffi - build C3 libraries from another project's build step.

Usage:
    from c3ffi import C3FFI, OptimizationLevel

    C3FFI().optimization_level(OptimizationLevel.O2).file("extern/thing.c3").compile("thing")
"""

from .build import (
    CompilationError,
    CompileResult,
    FlagBuilderError,
    LinkingMode,
    OptimizationLevel,
)
from .builder import Build, C3FFI
from .config import (
    BuildEnvironment,
    BuildEnvironmentError,
    C3ConfigError,
    TargetError,
    normalize_target,
    parse_target,
)
from .errors import C3FFIError

__version__ = "0.1.0"

__all__ = [
    "Build",
    "BuildEnvironment",
    "BuildEnvironmentError",
    "C3ConfigError",
    "C3FFI",
    "C3FFIError",
    "CompilationError",
    "CompileResult",
    "FlagBuilderError",
    "LinkingMode",
    "OptimizationLevel",
    "TargetError",
    "normalize_target",
    "parse_target",
]
