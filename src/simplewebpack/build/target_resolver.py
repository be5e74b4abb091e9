"""Target directory resolution."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..errors import TargetNotADirectoryError
from .filesystem import FileSystem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TargetDescriptor:
    """Resolved build output directory."""

    target: str
    resolved: Path
    existed_before: bool
    was_created: bool


class TargetResolver:
    """Resolves the output directory, creating it when missing."""

    def __init__(self, filesystem: Optional[FileSystem] = None):
        self.filesystem = filesystem or FileSystem()

    async def resolve(self, target: Union[str, Path]) -> TargetDescriptor:
        """
        Resolve and, if needed, create the target directory.

        Calling this again for the same path reports the directory as
        existing and creates nothing.

        Args:
            target: Output directory path

        Returns:
            TargetDescriptor for a directory that exists

        Raises:
            TargetNotADirectoryError: If the path exists but is not a directory,
                or cannot be created as one
        """
        resolved = Path(target).resolve()

        existed_before = await self.filesystem.exists(resolved)
        was_created = False
        if not existed_before:
            try:
                was_created = await self.filesystem.ensure_directory(resolved)
            except OSError as e:
                raise TargetNotADirectoryError(f"Cannot create target directory: {resolved}", cause=e) from e
            if was_created:
                logger.debug("Created target directory %s", resolved)
        elif not await self.filesystem.is_directory(resolved):
            raise TargetNotADirectoryError(f"Target must be a directory: {resolved}")

        return TargetDescriptor(
            target=str(target),
            resolved=resolved,
            existed_before=existed_before,
            was_created=was_created,
        )
