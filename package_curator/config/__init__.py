"""Configuration handling for package-curator."""
from __future__ import annotations

from package_curator.config.defaults import DEFAULT_CONFIG_NAMES, get_default_config
from package_curator.config.loader import (
    find_config_file,
    load_config,
    load_config_file,
)
from package_curator.models.config import CuratorConfig

__all__ = [
    "CuratorConfig",
    "DEFAULT_CONFIG_NAMES",
    "find_config_file",
    "get_default_config",
    "load_config",
    "load_config_file",
]
