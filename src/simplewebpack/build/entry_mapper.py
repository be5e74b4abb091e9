"""
Webpack entry mapping.

Converts a resolved source file list into named webpack entries, either one
combined bundle or one entry per source file.
"""

import logging
import posixpath
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Union

from ..errors import ConfigError
from .source_resolver import SourceDescriptor

logger = logging.getLogger(__name__)

EntryValue = Union[str, Tuple[str, ...]]
EntryMap = Mapping[str, EntryValue]


@dataclass(frozen=True)
class EntryOptions:
    """Entry options.

    Attributes:
        combined_name: Bundle all sources into one entry with this name
        prepend: Modules placed before the sources in a combined entry
    """

    combined_name: Optional[str] = None
    prepend: Tuple[str, ...] = ()


class EntryMapper:
    """Builds the read-only entry map for a source."""

    def map(self, source: SourceDescriptor, options: Optional[EntryOptions] = None) -> EntryMap:
        """
        Build the entry map.

        Combined mode maps the name to the prepended modules followed by the
        source files. Individual mode maps each file's base name (without
        extension) to the file; on a name collision the later file wins.

        Args:
            source: Resolved source
            options: Entry options

        Returns:
            Read-only entry map

        Raises:
            ConfigError: If the combined entry name is empty
        """
        options = options or EntryOptions()
        entry: Dict[str, EntryValue] = {}

        if options.combined_name is not None:
            if not options.combined_name:
                raise ConfigError("Entry name must be a non-empty string")
            entry[options.combined_name] = tuple(options.prepend) + tuple(source.files)
        else:
            for file in source.files:
                name = self.entry_name(file)
                if name in entry:
                    logger.warning(
                        "Entry name collision for '%s': %s replaces %s", name, file, entry[name]
                    )
                entry[name] = file

        return MappingProxyType(entry)

    @staticmethod
    def entry_name(file: str) -> str:
        """Base filename without its extension."""
        base = posixpath.basename(file)
        return posixpath.splitext(base)[0]
