"""Compilation Flag Builder.

This module translates an accumulated Configuration into the exact argument
list and environment overrides passed to c3c.

Design:
    - Pure function of the configuration, output directory and c3 target
    - Fixed group order regardless of accumulation order across kinds;
      within a group, insertion order is kept
    - Values that are not valid UTF-8 text, or that hold NUL characters,
      fail translation; so do empty environment variable names and names
      containing '='

Argument order:
    <static-lib|dynamic-lib> <-g|-g0> -<level> --output-dir <dir> -o lib<name>
    --target <os-arch> [-D feature]* [-z linker-arg]* [-L dir]* [-l lib]*
    [--libdir dir]* [--lib lib]* <file>* <raw-arg>*
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Union

from ..errors import C3FFIError
from .configuration import Configuration


class FlagBuilderError(C3FFIError):
    """Raised when a configuration value cannot be rendered as an argument."""
    pass


@dataclass
class Invocation:
    """A fully translated compiler invocation."""

    compiler: str
    args: List[str] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)

    @property
    def command(self) -> List[str]:
        """Compiler followed by its arguments, ready for subprocess."""
        return [self.compiler, *self.args]


def _as_text(value: Union[str, Path], what: str) -> str:
    """Render a value as a command argument.

    Raises:
        FlagBuilderError: If the value holds undecodable bytes or a NUL
    """
    text = os.fspath(value)
    if "\0" in text:
        raise FlagBuilderError(f"{what} {text!r} contains a NUL character")
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise FlagBuilderError(
            f"{what} {text!r} is not valid UTF-8 and cannot be passed to the compiler"
        ) from e
    return text


class FlagBuilder:
    """Builds the c3c argument list from a Configuration.

    Usage:
        builder = FlagBuilder(config, out_dir=Path("target/out"), c3_target="linux-x64")
        invocation = builder.build_invocation("thing")
        subprocess.run(invocation.command, env={**os.environ, **invocation.env})
    """

    def __init__(self, config: Configuration, out_dir: Union[str, Path], c3_target: str):
        """Initialize flag builder.

        Args:
            config: Accumulated configuration
            out_dir: Directory c3c writes the library into
            c3_target: Normalized ``<os>-<arch>`` target
        """
        self.config = config
        self.out_dir = out_dir
        self.c3_target = c3_target

    def debug_flag(self) -> str:
        return "-g" if self.config.debug_info else "-g0"

    @staticmethod
    def output_name(name: str) -> str:
        """Artifact base name passed to ``-o``."""
        return f"lib{name}"

    def base_flags(self, name: str) -> List[str]:
        """Command, debug/optimization flags, output and target arguments."""
        return [
            self.config.linking_mode.command,
            self.debug_flag(),
            self.config.optimization_level.flag,
            "--output-dir",
            _as_text(self.out_dir, "Output directory"),
            "-o",
            _as_text(self.output_name(name), "Library name"),
            "--target",
            _as_text(self.c3_target, "Target"),
        ]

    def _repeated(self, flag: str, values: Iterable[Union[str, Path]], what: str) -> List[str]:
        args = []
        for value in values:
            args.extend([flag, _as_text(value, what)])
        return args

    def build_args(self, name: str) -> List[str]:
        """Render the full, ordered argument list (without the compiler)."""
        config = self.config
        args = self.base_flags(name)
        args.extend(self._repeated("-D", config.features, "Feature"))
        args.extend(self._repeated("-z", config.linker_arguments, "Linker argument"))
        args.extend(self._repeated("-L", config.compiled_lib_dirs, "Library directory"))
        args.extend(self._repeated("-l", config.compiled_libs, "Library"))
        args.extend(self._repeated("--libdir", config.c3_lib_dirs, "C3 library directory"))
        args.extend(self._repeated("--lib", config.c3_libs, "C3 library"))
        args.extend(_as_text(f, "Source file") for f in config.files)
        args.extend(_as_text(a, "Argument") for a in config.args)
        return args

    def build_env(self) -> Dict[str, str]:
        """Resolve environment variable pairs; the last value for a key wins."""
        env: Dict[str, str] = {}
        for key, value in self.config.environment_variables:
            key = _as_text(key, "Environment variable name")
            if not key or "=" in key:
                raise FlagBuilderError(
                    f"Environment variable name {key!r} must be non-empty and without '='"
                )
            env[key] = _as_text(value, f"Environment variable {key}")
        return env

    def build_invocation(self, name: str) -> Invocation:
        """Translate the configuration into an Invocation.

        Args:
            name: Library base name (the artifact is ``lib<name>``)

        Returns:
            Invocation with compiler, ordered args and environment overrides

        Raises:
            FlagBuilderError: If any value cannot be rendered as text
        """
        return Invocation(
            compiler=_as_text(self.config.compiler_path, "Compiler path"),
            args=self.build_args(name),
            env=self.build_env(),
        )
