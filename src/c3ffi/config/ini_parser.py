"""
c3ffi.ini configuration parser.

This module parses INI files describing one or more C3 libraries so build
options can live in a file rather than in build-script code.

Example c3ffi.ini:
    [c3ffi]
    optimization_level = O2

    [c3ffi:thing]
    files =
        extern/thingmabob.c3
        extern/thingmajane.c3
    features = FOO
    environment_variables =
        C3_LOG=1
"""

import configparser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..build.options import LinkingMode, OptimizationLevel
from ..errors import C3FFIError

SECTION = "c3ffi"
SECTION_PREFIX = f"{SECTION}:"


class C3ConfigError(C3FFIError):
    """Exception raised for c3ffi.ini configuration errors."""

    pass


@dataclass
class LibrarySettings:
    """Options for one library read from the INI file."""

    name: str
    compiler: Optional[str] = None
    linking_mode: Optional[LinkingMode] = None
    optimization_level: Optional[OptimizationLevel] = None
    debug_info: Optional[bool] = None
    files: List[Path] = field(default_factory=list)
    features: List[str] = field(default_factory=list)
    args: List[str] = field(default_factory=list)
    linker_arguments: List[str] = field(default_factory=list)
    environment_variables: List[Tuple[str, str]] = field(default_factory=list)
    compiled_lib_dirs: List[Path] = field(default_factory=list)
    compiled_libs: List[Path] = field(default_factory=list)
    c3_lib_dirs: List[Path] = field(default_factory=list)
    c3_libs: List[Path] = field(default_factory=list)


class C3Config:
    """
    Parser for c3ffi.ini configuration files.

    Each ``[c3ffi:<name>]`` section describes a library; an optional
    ``[c3ffi]`` section provides defaults every library inherits.

    Usage:
        config = C3Config(Path("c3ffi.ini"))
        names = config.get_libraries()
        settings = config.get_library("thing")
    """

    # Whitespace-separated
    LIST_KEYS = ("features", "args", "linker_arguments")
    # One entry per line, so paths may contain spaces
    PATH_KEYS = ("files", "compiled_lib_dirs", "c3_lib_dirs")
    # Library names that may also be paths; relative entries stay as written
    NAME_KEYS = ("compiled_libs", "c3_libs")

    def __init__(self, ini_path: Path):
        """
        Initialize the parser with a c3ffi.ini file.

        Args:
            ini_path: Path to the INI file

        Raises:
            C3ConfigError: If the file doesn't exist or cannot be parsed
        """
        self.ini_path = ini_path

        if not ini_path.exists():
            raise C3ConfigError(f"Configuration file not found: {ini_path}")

        self.config = configparser.ConfigParser(
            allow_no_value=True, interpolation=configparser.ExtendedInterpolation()
        )

        try:
            self.config.read(ini_path, encoding="utf-8")
        except configparser.Error as e:
            raise C3ConfigError(f"Failed to parse {ini_path}: {e}") from e

    @property
    def base_dir(self) -> Path:
        return self.ini_path.resolve().parent

    def get_libraries(self) -> List[str]:
        """
        Get list of all library names defined in the config.

        Example:
            For [c3ffi:thing], [c3ffi:other], returns ['thing', 'other']
        """
        return [
            section.split(":", 1)[1]
            for section in self.config.sections()
            if section.startswith(SECTION_PREFIX)
        ]

    def get_default_library(self) -> Optional[str]:
        """First library in the file, or None if there are none."""
        libraries = self.get_libraries()
        return libraries[0] if libraries else None

    def _get_section(self, name: str) -> Dict[str, str]:
        section = f"{SECTION_PREFIX}{name}"

        if section not in self.config:
            available = ", ".join(self.get_libraries())
            raise C3ConfigError(
                f"Library '{name}' not found. "
                + f"Available libraries: {available or 'none'}"
            )

        values: Dict[str, str] = {}
        if SECTION in self.config:
            values.update(self._section_items(SECTION))
        # Library-specific values override base values
        values.update(self._section_items(section))
        return values

    def _section_items(self, section: str) -> Dict[str, str]:
        try:
            return {key: (value or "").strip() for key, value in self.config[section].items()}
        except configparser.Error as e:
            raise C3ConfigError(f"Invalid value in [{section}]: {e}") from e

    @staticmethod
    def _split_list(value: str) -> List[str]:
        """Split on whitespace and newlines, filtering empty strings."""
        return [item for item in value.split() if item]

    @staticmethod
    def _split_lines(value: str) -> List[str]:
        """Split on newlines only, filtering blank lines."""
        return [line.strip() for line in value.splitlines() if line.strip()]

    def _resolve(self, value: str) -> Path:
        path = Path(value).expanduser()
        return path if path.is_absolute() else self.base_dir / path

    def _parse_environment(self, name: str, value: str) -> List[Tuple[str, str]]:
        pairs = []
        for line in value.splitlines():
            line = line.strip()
            if not line:
                continue
            key, sep, val = line.partition("=")
            if not sep or not key.strip():
                raise C3ConfigError(
                    f"Library '{name}': environment variable '{line}' must be KEY=VALUE"
                )
            pairs.append((key.strip(), val.strip()))
        return pairs

    def get_library(self, name: str) -> LibrarySettings:
        """
        Get settings for a specific library.

        Args:
            name: Library name (e.g., 'thing' for [c3ffi:thing])

        Raises:
            C3ConfigError: If the library is not found or a value is invalid
        """
        values = self._get_section(name)
        settings = LibrarySettings(name=name)

        if values.get("compiler"):
            settings.compiler = values["compiler"]

        try:
            if values.get("linking_mode"):
                settings.linking_mode = LinkingMode.parse(values["linking_mode"])
            if values.get("optimization_level"):
                settings.optimization_level = OptimizationLevel.parse(values["optimization_level"])
        except ValueError as e:
            raise C3ConfigError(f"Library '{name}': {e}") from e

        if values.get("debug_info"):
            raw = values["debug_info"].lower()
            if raw not in configparser.ConfigParser.BOOLEAN_STATES:
                raise C3ConfigError(f"Library '{name}': debug_info must be a boolean, got '{raw}'")
            settings.debug_info = configparser.ConfigParser.BOOLEAN_STATES[raw]

        for key in self.LIST_KEYS:
            setattr(settings, key, self._split_list(values.get(key, "")))
        for key in self.PATH_KEYS:
            setattr(settings, key, [self._resolve(v) for v in self._split_lines(values.get(key, ""))])
        for key in self.NAME_KEYS:
            setattr(settings, key, [Path(v) for v in self._split_lines(values.get(key, ""))])

        settings.environment_variables = self._parse_environment(
            name, values.get("environment_variables", "")
        )

        return settings
