"""
Filesystem access used by the source and target resolvers.

Every operation is a coroutine running the blocking call in a worker thread,
so the pipeline awaits each filesystem step in sequence.
"""

import asyncio
from pathlib import Path
from typing import List

from .read_filter import ReadFilter

# Directories never descended into when listing sources
EXCLUDED_DIRS = {"node_modules", ".git"}


class FileSystem:
    """Async filesystem collaborator."""

    async def exists(self, path: Path) -> bool:
        return await asyncio.to_thread(Path(path).exists)

    async def is_directory(self, path: Path) -> bool:
        return await asyncio.to_thread(Path(path).is_dir)

    async def ensure_directory(self, path: Path) -> bool:
        """
        Create a directory tree if it does not exist.

        Args:
            path: Directory to create

        Returns:
            True if the directory was created, False if it already existed
        """
        return await asyncio.to_thread(self._ensure_directory, Path(path))

    async def list_files(self, directory: Path, read_filter: ReadFilter, recursive: bool) -> List[Path]:
        """
        List files below a directory that pass a filter.

        Entries are visited depth-first in lexical name order, so the result is
        stable for an unchanged filesystem.

        Args:
            directory: Directory to list
            read_filter: Filter applied to directory-relative POSIX paths
            recursive: Descend into subdirectories

        Returns:
            Ordered list of absolute file paths
        """
        directory = Path(directory)
        return await asyncio.to_thread(self._walk, directory, directory, read_filter, recursive)

    @staticmethod
    def relative_to_root(file: Path, root: Path) -> str:
        """Path of file relative to root, in POSIX form."""
        return Path(file).relative_to(root).as_posix()

    @staticmethod
    def _ensure_directory(path: Path) -> bool:
        if path.is_dir():
            return False
        path.mkdir(parents=True, exist_ok=True)
        return True

    def _walk(self, directory: Path, base: Path, read_filter: ReadFilter, recursive: bool) -> List[Path]:
        files: List[Path] = []
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            if entry.is_dir():
                if recursive and entry.name not in EXCLUDED_DIRS:
                    files.extend(self._walk(entry, base, read_filter, recursive))
            elif entry.is_file() and read_filter.matches(entry.relative_to(base).as_posix()):
                files.append(entry)
        return files
