"""
simplewebpack.ini project configuration parser.

This module parses the optional simplewebpack.ini file found in the working
directory. Its values provide defaults for the command-line options.
"""

import configparser
import shlex
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import SimpleWebpackError


class ProjectConfigError(SimpleWebpackError):
    """Exception raised for simplewebpack.ini configuration errors."""

    pass


class ProjectConfig:
    """
    Parser for simplewebpack.ini configuration files.

    Values live in the [simplewebpack] section. A mode-specific section such as
    [simplewebpack:production] overrides the base section for that mode.

    Example simplewebpack.ini:
        [simplewebpack]
        read = index
        colors = 100, 250, 400
        extend = build/extend.webpack.config.py

        [simplewebpack:production]
        public = /static/js/

    Usage:
        config = ProjectConfig.find(Path.cwd())
        if config:
            values = config.get_values("production")
    """

    FILE_NAME = "simplewebpack.ini"
    SECTION = "simplewebpack"
    TRUE_VALUES = {"1", "yes", "true", "on"}
    FALSE_VALUES = {"0", "no", "false", "off"}

    def __init__(self, ini_path: Path):
        """
        Initialize the parser with a simplewebpack.ini file.

        Args:
            ini_path: Path to the ini file

        Raises:
            ProjectConfigError: If the file doesn't exist or cannot be parsed
        """
        self.ini_path = Path(ini_path)

        if not self.ini_path.exists():
            raise ProjectConfigError(f"Configuration file not found: {self.ini_path}")

        self.config = configparser.ConfigParser(
            allow_no_value=True, interpolation=configparser.ExtendedInterpolation()
        )

        try:
            self.config.read(self.ini_path, encoding="utf-8")
        except configparser.Error as e:
            raise ProjectConfigError(f"Failed to parse {self.ini_path}: {e}", cause=e) from e

    @classmethod
    def find(cls, directory: Path) -> Optional["ProjectConfig"]:
        """
        Load simplewebpack.ini from a directory if it exists.

        Args:
            directory: Directory to look in

        Returns:
            ProjectConfig, or None when the directory has no simplewebpack.ini
        """
        ini_path = Path(directory) / cls.FILE_NAME
        if not ini_path.is_file():
            return None
        return cls(ini_path)

    def get_values(self, mode: Optional[str] = None) -> Dict[str, str]:
        """
        Get all configured values, with mode-specific overrides applied.

        Args:
            mode: Optional build mode ('production' or 'development')

        Returns:
            Dictionary of stripped string values
        """
        values: Dict[str, str] = {}
        if self.SECTION in self.config:
            for key, value in self.config[self.SECTION].items():
                values[key] = (value or "").strip()

        if mode:
            section = f"{self.SECTION}:{mode}"
            if section in self.config:
                for key, value in self.config[section].items():
                    values[key] = (value or "").strip()

        return values

    def get(self, key: str, default: Optional[str] = None, mode: Optional[str] = None) -> Optional[str]:
        """Get a single string value, or default when unset or empty."""
        value = self.get_values(mode).get(key)
        return value if value else default

    def get_bool(self, key: str, default: bool = False, mode: Optional[str] = None) -> bool:
        """
        Get a boolean value.

        Raises:
            ProjectConfigError: If the value is not a recognised boolean
        """
        value = self.get(key, mode=mode)
        if value is None:
            return default
        lowered = value.lower()
        if lowered in self.TRUE_VALUES:
            return True
        if lowered in self.FALSE_VALUES:
            return False
        raise ProjectConfigError(f"Invalid boolean for '{key}' in {self.ini_path}: {value}")

    def get_list(self, key: str, mode: Optional[str] = None) -> List[str]:
        """
        Get a comma or newline separated list value.

        Example:
            For modules = polyfills.js, vendor/shim.js
            Returns: ['polyfills.js', 'vendor/shim.js']
        """
        value = self.get(key, mode=mode)
        if not value:
            return []

        items = []
        for line in value.split("\n"):
            for item in line.split(","):
                item = item.strip()
                if item:
                    items.append(item)
        return items

    def get_colors(self, mode: Optional[str] = None) -> List[int]:
        """
        Get the size coloring limits in KiB.

        Raises:
            ProjectConfigError: If a limit is not an integer
        """
        try:
            return [int(item) for item in self.get_list("colors", mode=mode)]
        except ValueError as e:
            raise ProjectConfigError(f"Invalid colors in {self.ini_path}: {e}", cause=e) from e

    def get_engine_command(self, mode: Optional[str] = None) -> Optional[List[str]]:
        """
        Get the webpack command line, split shell-style.

        Example:
            For engine = node node_modules/webpack/bin/webpack.js
            Returns: ['node', 'node_modules/webpack/bin/webpack.js']
        """
        value = self.get("engine", mode=mode)
        if not value:
            return None
        return shlex.split(value)
