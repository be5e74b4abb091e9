"""
Run settings shared by every pipeline component.

Settings are resolved once at the process boundary and passed explicitly at
construction time; no component reads the environment mid-pipeline.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional


class BuildMode(str, Enum):
    """Webpack build mode."""

    PRODUCTION = "production"
    DEVELOPMENT = "development"


@dataclass(frozen=True)
class RunSettings:
    """Process-wide settings for one build run.

    Attributes:
        mode: Production or development build
        strict: Abort on compile errors (strict) or report and continue (loose)
        verbose: Show full error traces and per-asset details
        project_root: Directory webpack runs in and resolves node modules from
    """

    mode: BuildMode = BuildMode.DEVELOPMENT
    strict: bool = True
    verbose: bool = False
    project_root: Path = field(default_factory=Path.cwd)

    @property
    def production(self) -> bool:
        """True when building in production mode."""
        return self.mode is BuildMode.PRODUCTION

    def with_mode(self, mode: Optional[BuildMode]) -> "RunSettings":
        """Return a copy with the mode replaced, or self when mode is None."""
        if mode is None:
            return self
        return replace(self, mode=mode)

    @classmethod
    def from_environment(
        cls,
        environ: Mapping[str, str],
        strict: bool = True,
        verbose: bool = False,
        project_root: Optional[Path] = None,
    ) -> "RunSettings":
        """
        Build settings from an environment mapping.

        NODE_ENV=production selects production mode, anything else development.

        Args:
            environ: Environment mapping (usually os.environ)
            strict: Failure policy
            verbose: Verbosity
            project_root: Working directory (defaults to the current directory)

        Returns:
            RunSettings instance
        """
        mode = BuildMode.PRODUCTION if environ.get("NODE_ENV") == "production" else BuildMode.DEVELOPMENT
        return cls(
            mode=mode,
            strict=strict,
            verbose=verbose,
            project_root=Path(project_root) if project_root else Path.cwd(),
        )
