"""Compilation Executor.

This module runs a translated c3c invocation as a subprocess and reports
the outcome.

Design:
    - Wraps subprocess.run; blocks until the compiler exits
    - Inherits the current process environment, overridden by the
      invocation's environment variables
    - Never retries and never times out
    - Spawn failures and non-zero exits become unsuccessful results; the
      compiler's own diagnostics are carried back in stdout/stderr
"""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..errors import C3FFIError
from .flag_builder import Invocation

logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
    """Result of a c3c run."""

    success: bool
    returncode: Optional[int]
    stdout: str = ""
    stderr: str = ""
    command: List[str] = field(default_factory=list)
    message: str = ""


class CompilationError(C3FFIError):
    """Raised when compilation fails and the caller asked for a fatal error."""

    def __init__(self, message: str, result: Optional[CompileResult] = None):
        self.result = result
        super().__init__(message)

    @property
    def stderr(self) -> str:
        return self.result.stderr if self.result else ""


class CompilationExecutor:
    """Executes compiler invocations.

    Usage:
        executor = CompilationExecutor()
        result = executor.run(invocation)
        if not result.success:
            print(result.message)
    """

    def __init__(self, base_env: Optional[Dict[str, str]] = None):
        """Initialize compilation executor.

        Args:
            base_env: Environment the overrides are applied to
                (default: the current process environment at run time)
        """
        self.base_env = base_env

    def build_env(self, invocation: Invocation) -> Dict[str, str]:
        env = dict(os.environ if self.base_env is None else self.base_env)
        env.update(invocation.env)
        return env

    def run(self, invocation: Invocation) -> CompileResult:
        """Run the compiler and wait for it to exit.

        Args:
            invocation: Translated compiler invocation

        Returns:
            CompileResult; ``success`` is False on spawn failure (returncode
            None) or non-zero exit
        """
        cmd = invocation.command
        logger.info("Running %s", " ".join(cmd))
        if invocation.env:
            logger.debug("Environment overrides: %s", invocation.env)

        try:
            proc = subprocess.run(
                cmd,
                env=self.build_env(invocation),
                capture_output=True,
                text=True,
            )
        except FileNotFoundError:
            message = f"Compiler '{invocation.compiler}' not found. Is c3c installed and on PATH?"
            logger.error(message)
            return CompileResult(success=False, returncode=None, command=cmd, message=message)
        except PermissionError:
            message = f"Permission denied executing compiler '{invocation.compiler}'"
            logger.error(message)
            return CompileResult(success=False, returncode=None, command=cmd, message=message)
        except OSError as e:
            message = f"Failed to start compiler '{invocation.compiler}': {e}"
            logger.error(message)
            return CompileResult(success=False, returncode=None, command=cmd, message=message)

        if proc.returncode != 0:
            message = f"c3c failed (exit {proc.returncode})"
            logger.error("%s\nstderr: %s", message, proc.stderr)
            return CompileResult(
                success=False,
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
                command=cmd,
                message=message,
            )

        if proc.stderr:
            logger.debug("c3c stderr: %s", proc.stderr)

        return CompileResult(
            success=True,
            returncode=0,
            stdout=proc.stdout,
            stderr=proc.stderr,
            command=cmd,
            message="Compilation succeeded",
        )
