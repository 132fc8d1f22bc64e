"""Default configuration values for package-curator."""

from __future__ import annotations

from package_curator.models.config import CuratorConfig

# Default configuration file names to search for
DEFAULT_CONFIG_NAMES = [".package-curator.yaml", ".package-curator.yml"]


def get_default_config() -> CuratorConfig:
    """Get the default configuration.

    Returns:
        CuratorConfig with all defaults.
    """
    return CuratorConfig()
