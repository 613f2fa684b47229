"""CLI utility functions for c3ffi.

This module provides common utilities used across CLI commands including:
- Logging setup
- Error handling and formatting
"""

import logging
import sys
from typing import NoReturn

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class CLIHandler(logging.StreamHandler):
    """Stderr handler installed by the CLI on the c3ffi logger."""

    pass


def setup_logging(verbose: bool = False) -> None:
    """Send library logs to stderr; stdout stays reserved for directives."""
    logger = logging.getLogger("c3ffi")
    level = logging.DEBUG if verbose else logging.WARNING
    logger.setLevel(level)

    handler = next((h for h in logger.handlers if isinstance(h, CLIHandler)), None)
    if handler is None:
        handler = CLIHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    else:
        handler.setStream(sys.stderr)

    handler.setLevel(level)


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message to stderr.

        Args:
            title: Error title (e.g., "Build failed")
            message: Error message details
        """
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}", file=sys.stderr)
        if message:
            print(message, file=sys.stderr)

    @staticmethod
    def print_success(message: str) -> None:
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}", file=sys.stderr)

    @staticmethod
    def handle_keyboard_interrupt() -> NoReturn:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool) -> NoReturn:
        """Report an unexpected exception and exit with code 1."""
        ErrorFormatter.print_error("Unexpected error", f"{type(error).__name__}: {error}")
        if verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)
