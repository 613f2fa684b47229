"""
Command-line interface for c3ffi.

This module provides the `c3ffi` CLI tool for building C3 libraries outside
of (or from) a build script.
"""

import argparse
import os
import shlex
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from c3ffi import __version__
from c3ffi.build.options import LinkingMode, OptimizationLevel
from c3ffi.builder import C3FFI
from c3ffi.cli_utils import ErrorFormatter, setup_logging
from c3ffi.config.build_env import OUT_DIR_VAR, TARGET_VAR, BuildEnvironment
from c3ffi.config.ini_parser import C3Config, C3ConfigError
from c3ffi.config.target_triple import UnrecognizedTarget, parse_target
from c3ffi.errors import C3FFIError


@dataclass
class BuildArgs:
    """Arguments for the build command."""

    name: Optional[str] = None
    config: Optional[Path] = None
    files: List[Path] = field(default_factory=list)
    out_dir: Optional[str] = None
    target: Optional[str] = None
    compiler: Optional[str] = None
    dynamic: bool = False
    optimization_level: Optional[OptimizationLevel] = None
    no_debug_info: bool = False
    features: List[str] = field(default_factory=list)
    linker_arguments: List[str] = field(default_factory=list)
    compiled_lib_dirs: List[Path] = field(default_factory=list)
    compiled_libs: List[str] = field(default_factory=list)
    c3_lib_dirs: List[Path] = field(default_factory=list)
    c3_libs: List[str] = field(default_factory=list)
    environment_variables: List[str] = field(default_factory=list)
    args: List[str] = field(default_factory=list)
    rerun_if_changed: bool = False
    dry_run: bool = False
    verbose: bool = False


def resolve_build_environment(args: BuildArgs) -> BuildEnvironment:
    """Combine OUT_DIR/TARGET from the environment with CLI overrides."""
    environ = dict(os.environ)
    if args.out_dir is not None:
        environ[OUT_DIR_VAR] = args.out_dir
    if args.target is not None:
        environ[TARGET_VAR] = args.target
    return BuildEnvironment.from_environ(environ)


def resolve_library_name(args: BuildArgs) -> str:
    """Library name from the command line, else the first one in --config."""
    if args.name:
        return args.name
    if args.config is None:
        raise ValueError("A library name is required when no --config is given")
    name = C3Config(args.config).get_default_library()
    if name is None:
        raise C3ConfigError(f"No [c3ffi:<name>] sections in {args.config}")
    return name


def make_builder(args: BuildArgs, name: str) -> C3FFI:
    """Create a builder from the config file (if any) plus CLI options."""
    if args.config is not None:
        builder = C3FFI.from_ini(args.config, name)
    else:
        builder = C3FFI()

    if args.compiler:
        builder.compiler(args.compiler)
    if args.dynamic:
        builder.linking_mode(LinkingMode.DYNAMIC)
    if args.optimization_level is not None:
        builder.optimization_level(args.optimization_level)
    if args.no_debug_info:
        builder.debug_info(False)
    if args.rerun_if_changed:
        builder.rerun_if_changed()

    for pair in args.environment_variables:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Environment variable '{pair}' must be KEY=VALUE")
        builder.environment_variable((key, value))

    return (
        builder.files(args.files)
        .features(args.features)
        .linker_arguments(args.linker_arguments)
        .compiled_lib_dirs(args.compiled_lib_dirs)
        .compiled_libs(args.compiled_libs)
        .c3_lib_dirs(args.c3_lib_dirs)
        .c3_libs(args.c3_libs)
        .args(args.args)
    )


def build_command(args: BuildArgs) -> None:
    """Build a C3 library.

    Examples:
        c3ffi build thing -f extern/thing.c3 --out-dir out --target x86_64-unknown-linux-gnu
        c3ffi build -c c3ffi.ini                 # First library in c3ffi.ini
        c3ffi build thing -c c3ffi.ini -O O2     # Override a setting
        c3ffi build thing -f a.c3 --dry-run      # Print the c3c command only
    """
    setup_logging(args.verbose)

    try:
        name = resolve_library_name(args)
        builder = make_builder(args, name)

        build_env = resolve_build_environment(args)

        if args.dry_run:
            invocation = builder.invocation(name, build_env)
            env_prefix = " ".join(f"{k}={shlex.quote(v)}" for k, v in invocation.env.items())
            command = shlex.join(invocation.command)
            print(f"{env_prefix} {command}" if env_prefix else command)
            sys.exit(0)

        result = builder.attempt_compilation(name, build_env)
        if result.success:
            ErrorFormatter.print_success(f"Built lib{name} in {build_env.out_dir}")
            sys.exit(0)
        else:
            ErrorFormatter.print_error("Build failed!", "\n".join(
                part for part in (result.message, result.stderr.rstrip(), result.stdout.rstrip()) if part
            ))
            sys.exit(1)

    except (C3FFIError, ValueError) as e:
        ErrorFormatter.print_error("Build failed!", str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def target_command(triple: str) -> None:
    """Print the c3c target for a target triple.

    Examples:
        c3ffi target x86_64-pc-windows-gnu      # mingw-x64
    """
    parsed = parse_target(triple)
    if isinstance(parsed, UnrecognizedTarget):
        ErrorFormatter.print_error("Unrecognized target", f"{parsed.identifier}: {parsed.reason}")
        sys.exit(1)
    print(parsed.c3_target())
    sys.exit(0)


def _optimization_level(text: str) -> OptimizationLevel:
    try:
        return OptimizationLevel.parse(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def main() -> None:
    """c3ffi - build C3 libraries for use from other languages."""
    parser = argparse.ArgumentParser(
        prog="c3ffi",
        description="c3ffi - build C3 libraries with c3c",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"c3ffi {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Build command
    build_parser = subparsers.add_parser(
        "build",
        help="Compile C3 sources into a library",
    )
    build_parser.add_argument(
        "name",
        nargs="?",
        default=None,
        help="Library name; produces lib<name> (default: first library in --config)",
    )
    build_parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="c3ffi.ini file to read library settings from",
    )
    build_parser.add_argument(
        "-f",
        "--file",
        dest="files",
        action="append",
        type=Path,
        default=[],
        help="Source file to compile (repeatable)",
    )
    build_parser.add_argument(
        "--out-dir",
        default=None,
        help=f"Output directory (default: ${OUT_DIR_VAR})",
    )
    build_parser.add_argument(
        "--target",
        default=None,
        help=f"Target triple (default: ${TARGET_VAR})",
    )
    build_parser.add_argument(
        "--compiler",
        default=None,
        help="Path to c3c (default: c3c on PATH)",
    )
    build_parser.add_argument(
        "--dynamic",
        action="store_true",
        help="Build a dynamic library instead of a static one",
    )
    build_parser.add_argument(
        "-O",
        "--optimization-level",
        type=_optimization_level,
        default=None,
        help="Optimization level: O0-O5, Os, Oz; -O2 and -Os also work (default: O0)",
    )
    build_parser.add_argument(
        "--no-debug-info",
        action="store_true",
        help="Omit debug information (-g0)",
    )
    build_parser.add_argument(
        "-D",
        "--feature",
        dest="features",
        action="append",
        default=[],
        help="Enable a feature (repeatable)",
    )
    build_parser.add_argument(
        "-z",
        "--linker-argument",
        dest="linker_arguments",
        action="append",
        default=[],
        help="Argument passed to the linker (repeatable); use -z=ARG for dashed values",
    )
    build_parser.add_argument(
        "-L",
        "--compiled-lib-dir",
        dest="compiled_lib_dirs",
        action="append",
        type=Path,
        default=[],
        help="Directory containing compiled libraries (repeatable)",
    )
    build_parser.add_argument(
        "-l",
        "--compiled-lib",
        dest="compiled_libs",
        action="append",
        default=[],
        help="Compiled library to link (repeatable)",
    )
    build_parser.add_argument(
        "--libdir",
        dest="c3_lib_dirs",
        action="append",
        type=Path,
        default=[],
        help="Directory containing C3 libraries (repeatable)",
    )
    build_parser.add_argument(
        "--lib",
        dest="c3_libs",
        action="append",
        default=[],
        help="C3 library to use (repeatable)",
    )
    build_parser.add_argument(
        "-e",
        "--env",
        dest="environment_variables",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Environment variable for the compiler (repeatable)",
    )
    build_parser.add_argument(
        "--arg",
        dest="args",
        action="append",
        default=[],
        help="Raw argument passed to c3c after the sources; use --arg=--flag (repeatable)",
    )
    build_parser.add_argument(
        "--rerun-if-changed",
        action="store_true",
        help="Emit rerun-if-changed directives for each source file",
    )
    build_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the c3c command instead of running it",
    )
    build_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    # Target command
    target_parser = subparsers.add_parser(
        "target",
        help="Show the c3c target for a target triple",
    )
    target_parser.add_argument("triple", help="Target triple, e.g. x86_64-unknown-linux-gnu")

    parsed_args = parser.parse_args()

    if parsed_args.command == "build":
        build_args = BuildArgs(
            name=parsed_args.name,
            config=parsed_args.config,
            files=parsed_args.files,
            out_dir=parsed_args.out_dir,
            target=parsed_args.target,
            compiler=parsed_args.compiler,
            dynamic=parsed_args.dynamic,
            optimization_level=parsed_args.optimization_level,
            no_debug_info=parsed_args.no_debug_info,
            features=parsed_args.features,
            linker_arguments=parsed_args.linker_arguments,
            compiled_lib_dirs=parsed_args.compiled_lib_dirs,
            compiled_libs=parsed_args.compiled_libs,
            c3_lib_dirs=parsed_args.c3_lib_dirs,
            c3_libs=parsed_args.c3_libs,
            environment_variables=parsed_args.environment_variables,
            args=parsed_args.args,
            rerun_if_changed=parsed_args.rerun_if_changed,
            dry_run=parsed_args.dry_run,
            verbose=parsed_args.verbose,
        )
        build_command(build_args)
    elif parsed_args.command == "target":
        target_command(parsed_args.triple)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
