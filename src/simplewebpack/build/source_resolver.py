"""
Source resolution.

This module handles:
- Resolving the source path to a canonical absolute path
- Choosing the read filter for the read mode (none, index, recursive)
- Listing matching source files in a stable lexical order
- Mapping files to root-relative "./" specifiers for webpack entries
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union

from ..errors import ConfigError, EmptySourceError, NotFoundError
from .filesystem import FileSystem
from .read_filter import DEFAULT_FILTER, INDEX_FILTER, ReadFilter

logger = logging.getLogger(__name__)


class ReadMode(str, Enum):
    """How a source directory is read."""

    NONE = "none"
    INDEX = "index"
    RECURSIVE = "recursive"


@dataclass(frozen=True)
class ReadOptions:
    """Source read options.

    Attributes:
        mode: Read mode
        read_filter: Custom filter; required for recursive mode
    """

    mode: ReadMode = ReadMode.NONE
    read_filter: Optional[ReadFilter] = None


@dataclass(frozen=True)
class SourceDescriptor:
    """Resolved build source."""

    source: str                 # Source path as given
    root: Path                  # Directory entries are relative to
    resolved: Path              # Canonical absolute source path
    read_mode: ReadMode
    files: Tuple[str, ...]      # "./"-prefixed root-relative specifiers


class SourceResolver:
    """
    Resolves a source path into an ordered, root-relative file list.

    A single file resolves to itself with its parent directory as root. A
    directory is listed with the filter the read mode selects:
    - none: all .js files, non-recursive
    - index: .js files with "index" in their name, recursive
    - recursive: the caller's filter, recursive
    A filter's own recursive flag overrides the mode default.
    """

    def __init__(self, filesystem: Optional[FileSystem] = None):
        self.filesystem = filesystem or FileSystem()

    async def resolve(
        self,
        source: Union[str, Path],
        options: Optional[ReadOptions] = None,
    ) -> SourceDescriptor:
        """
        Resolve a source path.

        Args:
            source: Source file or directory ("" means the working directory)
            options: Read options

        Returns:
            SourceDescriptor with a non-empty file list

        Raises:
            NotFoundError: If the source does not exist
            ConfigError: If recursive mode has no read filter
            EmptySourceError: If a directory yields no matching files
        """
        options = options or ReadOptions()
        resolved = Path(source).resolve()

        if not await self.filesystem.exists(resolved):
            raise NotFoundError(f"Source not found: {resolved}")

        if await self.filesystem.is_directory(resolved):
            root = resolved
            read_filter, recursive = self._select_filter(options)
            paths = await self.filesystem.list_files(resolved, read_filter, recursive)
            if not paths:
                raise EmptySourceError(f"Source is empty: {resolved}")
        else:
            root = resolved.parent
            paths = [resolved]

        files = tuple(
            "./" + self.filesystem.relative_to_root(path, root) for path in paths
        )
        logger.debug("Resolved %d source file(s) from %s (%s mode)", len(files), resolved, options.mode.value)

        return SourceDescriptor(
            source=str(source),
            root=root,
            resolved=resolved,
            read_mode=options.mode,
            files=files,
        )

    @staticmethod
    def _select_filter(options: ReadOptions) -> Tuple[ReadFilter, bool]:
        """Pick the read filter and recursion for a read mode."""
        if options.mode is ReadMode.RECURSIVE:
            if options.read_filter is None:
                raise ConfigError("Source mode recursive requires a read filter")
            return options.read_filter, options.read_filter.is_recursive(True)

        if options.mode is ReadMode.INDEX:
            read_filter = options.read_filter or INDEX_FILTER
            return read_filter, read_filter.is_recursive(True)

        read_filter = options.read_filter or DEFAULT_FILTER
        return read_filter, read_filter.is_recursive(False)
