"""
Webpack config extensions.

An extension either mutates the synthesized config in place (Mutator) or is
shallow-merged over its top level (Overrides). Extension files are resolved
into one of the two variants once, when they are loaded.

Extension file formats:
    extend.webpack.config.py    module defining `extend` as a dict or a
                                callable (config, source, target, pipeline)
    *.json                      a JSON object used as overrides
"""

import importlib.util
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Union

from ..errors import ExtensionLoadError

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION_FILE = "extend.webpack.config.py"
EXTENSION_ATTRIBUTE = "extend"


@dataclass(frozen=True)
class Mutator:
    """Extension function called as func(config, source, target, context)."""

    func: Callable[..., Any]


@dataclass(frozen=True)
class Overrides:
    """Top-level config keys replacing the synthesized values."""

    values: Mapping[str, Any]


Extension = Union[Mutator, Overrides]


def as_extension(value: Any, origin: str = "extension") -> Extension:
    """
    Wrap a loaded value as an extension variant.

    Args:
        value: Callable or mapping
        origin: Where the value came from, for error messages

    Returns:
        Mutator for callables, Overrides for mappings

    Raises:
        ExtensionLoadError: If the value is neither
    """
    if isinstance(value, (Mutator, Overrides)):
        return value
    if callable(value):
        return Mutator(value)
    if isinstance(value, Mapping):
        return Overrides(dict(value))
    raise ExtensionLoadError(
        f"Invalid extension format in {origin}, must be a mapping or function "
        f"(got {type(value).__name__})"
    )


def load_extension(path: Union[str, Path]) -> Extension:
    """
    Load a config extension file.

    Args:
        path: Python module or JSON file

    Returns:
        The extension variant the file defines

    Raises:
        ExtensionLoadError: If the file is missing, fails to load or has the wrong shape
    """
    path = Path(path).resolve()
    if not path.is_file():
        raise ExtensionLoadError(f"Failed to load config extension: {path}")

    if path.suffix == ".json":
        try:
            value = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ExtensionLoadError(f"Failed to load config extension: {path}", cause=e) from e
        return as_extension(value, str(path))

    spec = importlib.util.spec_from_file_location("simplewebpack_extend", path)
    if spec is None or spec.loader is None:
        raise ExtensionLoadError(f"Failed to load config extension: {path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ExtensionLoadError(f"Failed to load config extension: {path}", cause=e) from e

    if not hasattr(module, EXTENSION_ATTRIBUTE):
        raise ExtensionLoadError(
            f"Config extension {path} must define '{EXTENSION_ATTRIBUTE}'"
        )

    logger.debug("Loaded config extension %s", path)
    return as_extension(getattr(module, EXTENSION_ATTRIBUTE), str(path))
