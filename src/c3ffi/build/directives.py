"""Build metadata directives.

Lines written to the host build system's metadata channel (stdout, as read
by cargo build scripts) telling it where the compiled library lives.
"""

import sys
from pathlib import Path
from typing import Iterable, Optional, TextIO, Union

DIRECTIVE_PREFIX = "cargo:"


class DirectiveWriter:
    """Writes linkage and rerun directives to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None):
        """
        Args:
            stream: Metadata channel (default: sys.stdout at write time)
        """
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def emit(self, directive: str) -> None:
        self.stream.write(f"{DIRECTIVE_PREFIX}{directive}\n")
        self.stream.flush()

    def rerun_if_changed(self, files: Iterable[Path]) -> None:
        """Register each file as a rebuild trigger."""
        for path in files:
            self.emit(f"rerun-if-changed={path}")

    def link_library(self, out_dir: Union[str, Path], name: str) -> None:
        """Emit the search path and the static link directive, in that order."""
        self.emit(f"rustc-link-search=native={out_dir}")
        self.emit(f"rustc-link-lib=static={name}")
