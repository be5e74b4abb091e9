"""CLI utility functions for simple-webpack.

This module provides common utilities used by the CLI including:
- Logging setup
- Error handling and formatting
- Parsing of comma separated option values
"""

import logging
import sys
from typing import List, Optional

from simplewebpack.errors import ErrorReporter, SimpleWebpackError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """Setup logging for CLI runs.

    Args:
        verbose: Log debug messages instead of warnings and errors only
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)


def parse_list(value: Optional[str]) -> List[str]:
    """Split a comma separated option value, dropping empty items.

    Example:
        parse_list("a.js,,b.js") -> ['a.js', 'b.js']
    """
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_size_limits(value: Optional[str]) -> List[int]:
    """Parse comma separated KiB limits into byte values.

    Args:
        value: String like "200,400,500"

    Returns:
        Byte limits (e.g. [204800, 409600, 512000])

    Raises:
        ValueError: If an item is not an integer
    """
    return [int(item, 10) * 1024 for item in parse_list(value)]


class ErrorFormatter:
    """Formats and displays messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    CYAN = "\033[36m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str = "") -> None:
        """Print formatted error message.

        Args:
            title: Error title (e.g., "Build failed")
            message: Error message details
        """
        print()
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}")
        if message:
            print()
            print(message)
        print()

    @staticmethod
    def print_success(message: str) -> None:
        """Print formatted success message."""
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def print_warning(message: str) -> None:
        """Print formatted warning message."""
        print(f"{ErrorFormatter.YELLOW}! {message}{ErrorFormatter.RESET}")

    @staticmethod
    def print_info(message: str) -> None:
        """Print formatted info message."""
        print(f"{ErrorFormatter.CYAN}{message}{ErrorFormatter.RESET}")

    @staticmethod
    def handle_build_error(error: SimpleWebpackError, verbose: bool = False) -> None:
        """Handle a simple-webpack error: print it and exit 1.

        Args:
            error: The error to handle
            verbose: Print the full cause chain
        """
        ErrorFormatter.print_error("Something went wrong", ErrorReporter(verbose).format(error))
        sys.exit(1)

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Build interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:")
            print(traceback.format_exc())

        sys.exit(1)
