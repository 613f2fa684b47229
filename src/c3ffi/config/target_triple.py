"""Target Triple Normalization.

This module parses build-host target triples (e.g. ``x86_64-unknown-linux-gnu``)
and maps them onto the ``<os>-<arch>`` naming used by c3c's ``--target`` flag.

Design:
    - Fields are recognized by name, not only by position: a known vendor
      is detected explicitly, so three-field triples with a vendor
      (``aarch64-apple-darwin``) parse the same as four-field ones
    - Parsing yields either a TargetTriple or an UnrecognizedTarget, so
      callers decide whether an unknown format is fatal
    - Renaming rules are case-insensitive

Renaming Rules:
    - OS ``windows`` with toolchain ``gnu`` or ``gnullvm`` -> ``mingw``
    - Architecture ``x86_64`` -> ``x64``
"""

from dataclasses import dataclass
from typing import Optional, Union

from ..errors import C3FFIError


class TargetError(C3FFIError):
    """Raised when a target triple cannot be interpreted."""
    pass


KNOWN_VENDORS = frozenset({
    "unknown",
    "pc",
    "apple",
    "nvidia",
    "fortanix",
    "uwp",
    "wrs",
    "sun",
    "ibm",
    "esp",
    "espressif",
    "kmc",
    "nintendo",
    "sony",
    "openwrt",
    "win7",
    "risc0",
    "unikraft",
})

MINGW_TOOLCHAINS = frozenset({"gnu", "gnullvm"})


@dataclass(frozen=True)
class TargetTriple:
    """A recognized target triple split into named components."""

    architecture: str
    os: str
    vendor: Optional[str] = None
    toolchain: Optional[str] = None

    def c3_os(self) -> str:
        """OS name as c3c spells it."""
        toolchain = (self.toolchain or "").lower()
        if self.os.lower() == "windows" and toolchain in MINGW_TOOLCHAINS:
            return "mingw"
        return self.os

    def c3_architecture(self) -> str:
        """Architecture name as c3c spells it."""
        if self.architecture.lower() == "x86_64":
            return "x64"
        return self.architecture

    def c3_target(self) -> str:
        """Render the ``<os>-<arch>`` identifier passed to ``--target``."""
        return f"{self.c3_os()}-{self.c3_architecture()}"

    def __str__(self) -> str:
        parts = [self.architecture]
        if self.vendor is not None:
            parts.append(self.vendor)
        parts.append(self.os)
        if self.toolchain is not None:
            parts.append(self.toolchain)
        return "-".join(parts)


@dataclass(frozen=True)
class UnrecognizedTarget:
    """A target identifier whose format could not be parsed."""

    identifier: str
    reason: str


ParsedTarget = Union[TargetTriple, UnrecognizedTarget]


def parse_target(identifier: str) -> ParsedTarget:
    """Parse a target identifier into its named components.

    Args:
        identifier: Target triple such as ``x86_64-pc-windows-gnu``

    Returns:
        TargetTriple when the format is recognized, otherwise
        UnrecognizedTarget describing why not

    Example:
        >>> parse_target("aarch64-apple-darwin")
        TargetTriple(architecture='aarch64', os='darwin', vendor='apple', toolchain=None)
    """
    fields = identifier.strip().split("-")

    if len(fields) < 2:
        return UnrecognizedTarget(identifier, "expected at least '<arch>-<os>'")
    if any(not field for field in fields):
        return UnrecognizedTarget(identifier, "empty field in target triple")

    architecture, rest = fields[0], fields[1:]

    vendor = None
    if len(rest) >= 2 and (rest[0].lower() in KNOWN_VENDORS or len(fields) >= 4):
        vendor, rest = rest[0], rest[1:]

    os_name = rest[0]
    toolchain = "-".join(rest[1:]) or None

    return TargetTriple(
        architecture=architecture,
        os=os_name,
        vendor=vendor,
        toolchain=toolchain,
    )


def normalize_target(identifier: str) -> str:
    """Translate a target triple into c3c's ``<os>-<arch>`` naming.

    Raises:
        TargetError: If the identifier is not a recognizable triple
    """
    parsed = parse_target(identifier)
    if isinstance(parsed, UnrecognizedTarget):
        raise TargetError(f"Unrecognized target '{parsed.identifier}': {parsed.reason}")
    return parsed.c3_target()
