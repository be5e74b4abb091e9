"""
Source read filters.

A ReadFilter is a predicate pair: an include pattern every accepted file must
match and an exclude pattern no accepted file may match. Patterns are searched
against the file path relative to the directory being listed, in POSIX form.
"""

import re
from dataclasses import dataclass, replace
from typing import Optional, Pattern, Union

PatternLike = Union[str, Pattern[str], None]

JS_FILES = re.compile(r"\.js$")

# Any .js file whose base name does not contain "index"
NON_INDEX_FILES = re.compile(r"(?:^|/)(?![^/]*index)[^/]*\.js$")


def _compile(pattern: PatternLike) -> Optional[Pattern[str]]:
    if pattern is None or isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern)


@dataclass(frozen=True)
class ReadFilter:
    """Include/exclude predicate pair for source listing.

    Attributes:
        include: Pattern a file must match (None accepts everything)
        exclude: Pattern a file must not match (None excludes nothing)
        recursive: Descend into subdirectories; None lets the read mode decide
    """

    include: Optional[Pattern[str]] = None
    exclude: Optional[Pattern[str]] = None
    recursive: Optional[bool] = None

    @classmethod
    def from_patterns(
        cls,
        include: PatternLike = None,
        exclude: PatternLike = None,
        recursive: Optional[bool] = None,
    ) -> "ReadFilter":
        """
        Build a filter from pattern strings or compiled patterns.

        Raises:
            re.error: If a pattern string is not a valid regular expression
        """
        return cls(include=_compile(include), exclude=_compile(exclude), recursive=recursive)

    def matches(self, relative_path: str) -> bool:
        """Check whether a root-relative POSIX path passes the filter."""
        if self.include is not None and not self.include.search(relative_path):
            return False
        if self.exclude is not None and self.exclude.search(relative_path):
            return False
        return True

    def is_recursive(self, default: bool) -> bool:
        """Resolve the recursion flag against a read mode default."""
        return default if self.recursive is None else self.recursive

    def with_recursive(self, recursive: Optional[bool]) -> "ReadFilter":
        return replace(self, recursive=recursive)


# Plain mode: every .js file in the source directory
DEFAULT_FILTER = ReadFilter(include=JS_FILES)

# Index mode: only files named like index, collected recursively
INDEX_FILTER = ReadFilter(include=JS_FILES, exclude=NON_INDEX_FILES)
