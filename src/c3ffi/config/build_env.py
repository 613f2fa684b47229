"""Build host environment.

The host build system hands the build step its output directory and target
triple through environment variables. Both are required.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

from ..errors import C3FFIError

OUT_DIR_VAR = "OUT_DIR"
TARGET_VAR = "TARGET"


class BuildEnvironmentError(C3FFIError):
    """Raised when a required build environment value is missing."""
    pass


@dataclass(frozen=True)
class BuildEnvironment:
    """Values supplied by the host build system.

    OUT_DIR is kept as given so the compiler and the link-search directive
    see it exactly as configured.
    """

    out_dir: Union[str, Path]
    target: str

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "BuildEnvironment":
        """Read OUT_DIR and TARGET from the environment.

        Args:
            environ: Mapping to read from (default: os.environ)

        Raises:
            BuildEnvironmentError: If either variable is missing or empty
        """
        if environ is None:
            environ = os.environ

        missing = [name for name in (OUT_DIR_VAR, TARGET_VAR) if not environ.get(name)]
        if missing:
            raise BuildEnvironmentError(
                f"Required environment variable(s) not set: {', '.join(missing)}. "
                + "Run from a build script or pass --out-dir/--target."
            )

        return cls(out_dir=environ[OUT_DIR_VAR], target=environ[TARGET_VAR])
