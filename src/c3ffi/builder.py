"""C3 library builder.

Fluent front end for build scripts: collect options on a C3FFI instance,
then call compile() to run c3c and emit linkage directives.

Example:
    C3FFI() \\
        .optimization_level(OptimizationLevel.O2) \\
        .files(["extern/thingmabob.c3", "extern/thingmajane.c3"]) \\
        .feature("FOO") \\
        .compile("thing")
"""

import logging
import os
from pathlib import Path
from typing import Iterable, Optional, Tuple

from .build.compilation_executor import CompilationError, CompilationExecutor, CompileResult
from .build.configuration import Configuration, PathLike, append_unique, to_path
from .build.directives import DirectiveWriter
from .build.flag_builder import FlagBuilder, Invocation
from .build.options import LinkingMode, OptimizationLevel
from .config.build_env import BuildEnvironment
from .config.ini_parser import C3Config, C3ConfigError, LibrarySettings
from .config.target_triple import normalize_target

logger = logging.getLogger(__name__)


class C3FFI:
    """Builder for a C3 library linked into the calling project.

    Every setter returns the builder itself so calls can be chained. Adding
    a value that is already present is a no-op.
    """

    def __init__(
        self,
        executor: Optional[CompilationExecutor] = None,
        directives: Optional[DirectiveWriter] = None,
    ):
        self.config = Configuration()
        self.executor = executor or CompilationExecutor()
        self.directives = directives or DirectiveWriter()

    @classmethod
    def from_ini(cls, ini_path: Path, name: Optional[str] = None, **kwargs) -> "C3FFI":
        """Create a builder seeded from a c3ffi.ini library section.

        Args:
            ini_path: Path to the INI file
            name: Library section to load (default: the first one)

        Raises:
            C3ConfigError: If the file or library section is invalid
        """
        ini = C3Config(ini_path)
        if name is None:
            name = ini.get_default_library()
        if name is None:
            raise C3ConfigError(f"No [c3ffi:<name>] sections in {ini_path}")
        return cls(**kwargs).apply(ini.get_library(name))

    def apply(self, settings: LibrarySettings) -> "C3FFI":
        """Merge settings read from a configuration file."""
        if settings.compiler is not None:
            self.compiler(settings.compiler)
        if settings.linking_mode is not None:
            self.linking_mode(settings.linking_mode)
        if settings.optimization_level is not None:
            self.optimization_level(settings.optimization_level)
        if settings.debug_info is not None:
            self.debug_info(settings.debug_info)
        return (
            self.files(settings.files)
            .features(settings.features)
            .args(settings.args)
            .linker_arguments(settings.linker_arguments)
            .environment_variables(settings.environment_variables)
            .compiled_lib_dirs(settings.compiled_lib_dirs)
            .compiled_libs(settings.compiled_libs)
            .c3_lib_dirs(settings.c3_lib_dirs)
            .c3_libs(settings.c3_libs)
        )

    # Scalar settings

    def compiler(self, compiler: PathLike) -> "C3FFI":
        """Path to c3c; a bare name is looked up on PATH. Default: ``c3c``."""
        self.config.compiler_path = os.fsdecode(compiler)
        return self

    def linking_mode(self, linking_mode: LinkingMode) -> "C3FFI":
        """Static or dynamic library. Default: LinkingMode.STATIC."""
        self.config.linking_mode = linking_mode
        return self

    def optimization_level(self, optimization_level: OptimizationLevel) -> "C3FFI":
        """Default: OptimizationLevel.O0."""
        self.config.optimization_level = optimization_level
        return self

    def debug_info(self, debug_info: bool) -> "C3FFI":
        """Emit debug info (``-g``) or not (``-g0``). Default: True."""
        self.config.debug_info = debug_info
        return self

    def rerun_if_changed(self, enabled: bool = True) -> "C3FFI":
        """Register source files as rebuild triggers with the host build system."""
        self.config.register_rerun_triggers = enabled
        return self

    # Accumulated settings

    def file(self, file: PathLike) -> "C3FFI":
        """Add a source file to compile."""
        append_unique(self.config.files, to_path(file))
        return self

    def files(self, files: Iterable[PathLike]) -> "C3FFI":
        for file in files:
            self.file(file)
        return self

    def feature(self, feature: str) -> "C3FFI":
        """Enable a feature (``-D <feature>``)."""
        append_unique(self.config.features, str(feature))
        return self

    def features(self, features: Iterable[str]) -> "C3FFI":
        for feature in features:
            self.feature(feature)
        return self

    def arg(self, arg: str) -> "C3FFI":
        """Pass a raw argument to c3c, after the source files."""
        append_unique(self.config.args, str(arg))
        return self

    def args(self, args: Iterable[str]) -> "C3FFI":
        for arg in args:
            self.arg(arg)
        return self

    def linker_argument(self, linker_argument: str) -> "C3FFI":
        """Pass an argument to the linker (``-z <arg>``)."""
        append_unique(self.config.linker_arguments, str(linker_argument))
        return self

    def linker_arguments(self, linker_arguments: Iterable[str]) -> "C3FFI":
        for linker_argument in linker_arguments:
            self.linker_argument(linker_argument)
        return self

    def environment_variable(self, environment_variable: Tuple[str, str]) -> "C3FFI":
        """Set an environment variable for the compiler process.

        Pairs are kept in order; if a key is set more than once, the last
        value is the one the compiler sees.
        """
        key, value = environment_variable
        append_unique(self.config.environment_variables, (str(key), str(value)))
        return self

    def environment_variables(self, environment_variables: Iterable[Tuple[str, str]]) -> "C3FFI":
        for environment_variable in environment_variables:
            self.environment_variable(environment_variable)
        return self

    def compiled_lib_dir(self, compiled_lib_dir: PathLike) -> "C3FFI":
        """Directory containing compiled libraries (``-L <dir>``)."""
        append_unique(self.config.compiled_lib_dirs, to_path(compiled_lib_dir))
        return self

    def compiled_lib_dirs(self, compiled_lib_dirs: Iterable[PathLike]) -> "C3FFI":
        for compiled_lib_dir in compiled_lib_dirs:
            self.compiled_lib_dir(compiled_lib_dir)
        return self

    def compiled_lib(self, compiled_lib: PathLike) -> "C3FFI":
        """Link a compiled library (``-l <lib>``)."""
        append_unique(self.config.compiled_libs, to_path(compiled_lib))
        return self

    def compiled_libs(self, compiled_libs: Iterable[PathLike]) -> "C3FFI":
        for compiled_lib in compiled_libs:
            self.compiled_lib(compiled_lib)
        return self

    def c3_lib_dir(self, c3_lib_dir: PathLike) -> "C3FFI":
        """Directory containing C3 libraries (``--libdir <dir>``)."""
        append_unique(self.config.c3_lib_dirs, to_path(c3_lib_dir))
        return self

    def c3_lib_dirs(self, c3_lib_dirs: Iterable[PathLike]) -> "C3FFI":
        for c3_lib_dir in c3_lib_dirs:
            self.c3_lib_dir(c3_lib_dir)
        return self

    def c3_lib(self, c3_lib: PathLike) -> "C3FFI":
        """Use a C3 library (``--lib <lib>``)."""
        append_unique(self.config.c3_libs, to_path(c3_lib))
        return self

    def c3_libs(self, c3_libs: Iterable[PathLike]) -> "C3FFI":
        for c3_lib in c3_libs:
            self.c3_lib(c3_lib)
        return self

    # Compilation

    def invocation(self, name: str, build_env: Optional[BuildEnvironment] = None) -> Invocation:
        """Translate the configuration without running anything.

        Raises:
            BuildEnvironmentError: If OUT_DIR or TARGET is missing
            TargetError: If TARGET is not a recognizable triple
            FlagBuilderError: If a value cannot be rendered as text
        """
        if build_env is None:
            build_env = BuildEnvironment.from_environ()
        c3_target = normalize_target(build_env.target)
        logger.debug("Target %s -> %s", build_env.target, c3_target)
        return FlagBuilder(self.config, build_env.out_dir, c3_target).build_invocation(name)

    def attempt_compilation(
        self, name: str, build_env: Optional[BuildEnvironment] = None
    ) -> CompileResult:
        """Compile the library, returning the outcome instead of raising.

        Linkage directives are emitted only when c3c succeeds.

        Args:
            name: Library name; c3c produces ``lib<name>``
            build_env: Output directory and target (default: read from the
                OUT_DIR and TARGET environment variables)

        Raises:
            BuildEnvironmentError, TargetError, FlagBuilderError: If the
                invocation cannot be built at all
        """
        if build_env is None:
            build_env = BuildEnvironment.from_environ()
        invocation = self.invocation(name, build_env)

        if self.config.register_rerun_triggers:
            self.directives.rerun_if_changed(self.config.files)

        result = self.executor.run(invocation)
        if result.success:
            logger.info("Built lib%s in %s", name, build_env.out_dir)
            self.directives.link_library(build_env.out_dir, name)
        return result

    def compile(self, name: str, build_env: Optional[BuildEnvironment] = None) -> CompileResult:
        """Compile the library, raising if c3c fails.

        Raises:
            CompilationError: If the compiler could not be run or exited non-zero
        """
        result = self.attempt_compilation(name, build_env)
        if not result.success:
            message = result.message
            if result.stderr:
                message += f"\n{result.stderr.rstrip()}"
            raise CompilationError(message, result)
        return result


Build = C3FFI
