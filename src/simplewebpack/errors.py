"""Error taxonomy and error rendering for simple-webpack.

Resolution-time errors (NotFoundError, EmptySourceError, ConfigError,
TargetNotADirectoryError) always abort a run. CompileError is the only error
subject to the strict/loose failure policy.
"""

import logging
import traceback
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

Cause = Union[BaseException, str, None]


class SimpleWebpackError(Exception):
    """Base class for all simple-webpack errors.

    Args:
        message: Short, single-line description
        cause: Optional underlying exception or text
        details: Optional multi-line detail text (shown in verbose output)
    """

    def __init__(self, message: str, cause: Cause = None, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details
        if isinstance(cause, BaseException):
            self.__cause__ = cause

    def summary(self) -> str:
        """Single-line representation used in non-verbose output."""
        text = f"{type(self).__name__}: {self.message}"
        if isinstance(self.cause, BaseException):
            text += f" ({type(self.cause).__name__}: {self.cause})"
        elif self.cause:
            text += f" ({str(self.cause).strip().splitlines()[0]})"
        return text


class NotFoundError(SimpleWebpackError):
    """Raised when the source path does not exist."""
    pass


class EmptySourceError(SimpleWebpackError):
    """Raised when a source directory yields no matching files."""
    pass


class ConfigError(SimpleWebpackError):
    """Raised for structural misconfiguration of a run."""
    pass


class TargetNotADirectoryError(SimpleWebpackError):
    """Raised when the target path exists but is not a directory."""
    pass


class ExtensionLoadError(SimpleWebpackError):
    """Raised when a config extension file cannot be loaded or has the wrong shape."""
    pass


class CompileError(SimpleWebpackError):
    """Raised when webpack cannot be invoked or reports compile errors."""

    def __init__(self, message: str, cause: Cause = None, details: Optional[str] = None):
        super().__init__(message, cause=cause, details=details)
        self.elapsed: Optional[float] = None
        self.result: Any = None


class ErrorReporter:
    """Formats errors consistently for a given verbosity.

    Verbose output contains the full traceback chain and any detail text,
    normal output a single summary line.
    """

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def format(self, error: Union[BaseException, str], no_trace: bool = False) -> str:
        """Render an error for output.

        Args:
            error: Exception instance or plain message
            no_trace: Never include the traceback, even in verbose mode

        Returns:
            Formatted error text
        """
        if not isinstance(error, BaseException):
            return str(error)

        if self.verbose and not no_trace:
            text = "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            ).rstrip()
            details = getattr(error, "details", None)
            if details:
                text += "\n" + details.rstrip()
            cause = getattr(error, "cause", None)
            if isinstance(cause, str) and cause:
                text += "\n" + cause.rstrip()
            return text

        if isinstance(error, SimpleWebpackError):
            return error.summary()
        return f"{type(error).__name__}: {error}"

    def report(self, error: Union[BaseException, str]) -> None:
        """Emit a formatted error through the error channel."""
        logger.error(self.format(error))
