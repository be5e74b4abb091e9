"""Configuration modules for simple-webpack."""

from .ini_parser import ProjectConfig, ProjectConfigError
from .settings import BuildMode, RunSettings

__all__ = [
    "BuildMode",
    "RunSettings",
    "ProjectConfig",
    "ProjectConfigError",
]
