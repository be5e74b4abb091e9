"""
Default config deployment.

This module writes the bundled eslint and babel config templates into a
project directory. Existing files are never overwritten.
"""

import json
import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import List, Tuple, Union

logger = logging.getLogger(__name__)

# (destination file name, template in simplewebpack/assets)
DEFAULT_CONFIGS: Tuple[Tuple[str, str], ...] = (
    (".eslintrc", "eslintrc.json"),
    (".babelrc", "babelrc.json"),
)


@dataclass
class DeploymentResult:
    """Result of deploying one default config file."""

    path: Path
    written: bool
    message: str


def load_template(template: str) -> dict:
    """Load a JSON config template shipped with the package."""
    text = resources.files("simplewebpack").joinpath("assets").joinpath(template).read_text(encoding="utf-8")
    return json.loads(text)


def deploy_default_config(name: str, template: str, target: Union[str, Path]) -> DeploymentResult:
    """Deploy one default config file.

    Args:
        name: Destination file name (e.g. '.eslintrc')
        template: Template file name in the package assets
        target: Directory to write into

    Returns:
        DeploymentResult; written is False if the file already existed
    """
    resolved = Path(target).resolve() / name
    if resolved.exists():
        logger.info("Config file already exists: %s", resolved)
        return DeploymentResult(resolved, False, f"Config file already exists: {resolved}")

    data = load_template(template)
    resolved.parent.mkdir(parents=True, exist_ok=True)
    resolved.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    logger.debug("Wrote %s from template %s", resolved, template)
    return DeploymentResult(resolved, True, f"Created defaults config: {resolved}")


def deploy_default_configs(target: Union[str, Path]) -> List[DeploymentResult]:
    """Deploy every default config file into a directory."""
    return [deploy_default_config(name, template, target) for name, template in DEFAULT_CONFIGS]
