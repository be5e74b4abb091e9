"""Default config deployment for simple-webpack projects."""

from .defaults import DEFAULT_CONFIGS, DeploymentResult, deploy_default_config, deploy_default_configs

__all__ = [
    "DEFAULT_CONFIGS",
    "DeploymentResult",
    "deploy_default_config",
    "deploy_default_configs",
]
