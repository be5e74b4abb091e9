"""
simple-webpack: directory-convention-driven webpack builds.

This package resolves a source directory or file into webpack entries,
synthesizes the webpack configuration, runs webpack once and turns the
compile result into a size-graded build report.
"""

__version__ = "0.1.0"

from .errors import (
    CompileError,
    ConfigError,
    EmptySourceError,
    ErrorReporter,
    ExtensionLoadError,
    NotFoundError,
    SimpleWebpackError,
    TargetNotADirectoryError,
)

__all__ = [
    "__version__",
    "SimpleWebpackError",
    "NotFoundError",
    "EmptySourceError",
    "ConfigError",
    "TargetNotADirectoryError",
    "CompileError",
    "ExtensionLoadError",
    "ErrorReporter",
]
