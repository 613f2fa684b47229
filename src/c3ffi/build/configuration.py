"""Compilation configuration.

Holds every option collected for one library build. Collections are ordered
and deduplicated: adding a value that is already present has no effect, and
nothing is ever removed.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple, TypeVar, Union

from .options import LinkingMode, OptimizationLevel

DEFAULT_COMPILER = "c3c"

PathLike = Union[str, bytes, "os.PathLike[str]", "os.PathLike[bytes]"]

T = TypeVar("T")


def to_path(value: PathLike) -> Path:
    """Normalize a path-like value to Path (bytes are decoded with os.fsdecode)."""
    return Path(os.fsdecode(value))


def append_unique(items: List[T], value: T) -> bool:
    """Append value unless already present. Returns True if it was appended."""
    if value in items:
        return False
    items.append(value)
    return True


@dataclass
class Configuration:
    """Options for a single c3c library build."""

    compiler_path: str = DEFAULT_COMPILER
    linking_mode: LinkingMode = LinkingMode.STATIC
    optimization_level: OptimizationLevel = OptimizationLevel.O0
    debug_info: bool = True
    register_rerun_triggers: bool = False
    files: List[Path] = field(default_factory=list)
    features: List[str] = field(default_factory=list)
    args: List[str] = field(default_factory=list)
    linker_arguments: List[str] = field(default_factory=list)
    environment_variables: List[Tuple[str, str]] = field(default_factory=list)
    compiled_lib_dirs: List[Path] = field(default_factory=list)
    compiled_libs: List[Path] = field(default_factory=list)
    c3_lib_dirs: List[Path] = field(default_factory=list)
    c3_libs: List[Path] = field(default_factory=list)
