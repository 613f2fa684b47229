"""
Build system components for c3ffi.

This module provides the pieces that turn a configuration into a c3c run:
- Option enums (linking mode, optimization level)
- Configuration accumulation
- Flag building (argument list and environment)
- Compilation execution (c3c subprocess)
- Linkage directives for the host build system
"""

from .compilation_executor import CompilationError, CompilationExecutor, CompileResult
from .configuration import Configuration
from .directives import DirectiveWriter
from .flag_builder import FlagBuilder, FlagBuilderError, Invocation
from .options import LinkingMode, OptimizationLevel

__all__ = [
    'CompilationError',
    'CompilationExecutor',
    'CompileResult',
    'Configuration',
    'DirectiveWriter',
    'FlagBuilder',
    'FlagBuilderError',
    'Invocation',
    'LinkingMode',
    'OptimizationLevel',
]
