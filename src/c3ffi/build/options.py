"""Compiler option enums.

Linking modes and optimization levels understood by c3c, each carrying the
exact token it renders to on the command line.
"""

from enum import Enum


class LinkingMode(Enum):
    """Whether the library is statically or dynamically linked."""

    STATIC = "static-lib"
    DYNAMIC = "dynamic-lib"

    @property
    def command(self) -> str:
        """The c3c command corresponding to this linking mode."""
        return self.value

    @classmethod
    def parse(cls, text: str) -> "LinkingMode":
        """Parse a linking mode from 'static'/'dynamic' (or the command name).

        Raises:
            ValueError: If the text names no linking mode
        """
        key = text.strip().lower()
        for mode in cls:
            if key in (mode.name.lower(), mode.value):
                return mode
        raise ValueError(f"Unknown linking mode: {text!r} (expected 'static' or 'dynamic')")


class OptimizationLevel(Enum):
    """c3c optimization levels, from safest to most aggressive.

    O0: safe, no optimizations, emit debug info.
    O1: safe, high optimization, emit debug info.
    O2: unsafe, high optimization, emit debug info.
    O3: unsafe, high optimization, single module, emit debug info.
    O4: unsafe, highest optimization, relaxed maths, single module,
        no panic messages.
    O5: unsafe, highest optimization, fast maths, single module,
        no panic messages, no backtrace.
    Os: unsafe, high optimization, small code, single module, no debug info.
    Oz: unsafe, high optimization, tiny code, single module, no debug info,
        no backtrace.
    """

    O0 = "O0"
    O1 = "O1"
    O2 = "O2"
    O3 = "O3"
    O4 = "O4"
    O5 = "O5"
    Os = "Os"
    Oz = "Oz"

    @property
    def flag(self) -> str:
        """Command-line flag, e.g. '-O2'."""
        return f"-{self.value}"

    @classmethod
    def parse(cls, text: str) -> "OptimizationLevel":
        """Parse a level from 'O2', '-O2', 'o2' or a bare '2'.

        The bare form is what argparse hands over for '-O2' or '-Os'.

        Raises:
            ValueError: If the text names no optimization level
        """
        key = text.strip().lstrip("-")
        if len(key) == 1:
            key = f"O{key}"
        for level in cls:
            if key.lower() == level.value.lower():
                return level
        valid = ", ".join(level.value for level in cls)
        raise ValueError(f"Unknown optimization level: {text!r} (expected one of {valid})")
