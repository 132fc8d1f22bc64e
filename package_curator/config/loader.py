"""YAML document loading for configuration and snapshot files.

Both file kinds go through load_yaml_document: read, safe_load, check for a
mapping root, then pydantic validation. Every failure surfaces as the
caller's error type with the file path in the message.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from package_curator.config.defaults import DEFAULT_CONFIG_NAMES, get_default_config
from package_curator.exceptions import ConfigurationError, PackageCuratorError
from package_curator.models.config import CuratorConfig

ModelT = TypeVar("ModelT", bound=BaseModel)


def format_validation_errors(error: ValidationError) -> str:
    """Join pydantic errors into "location: message" pairs."""
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'root'}: {err['msg']}"
        for err in error.errors()
    )


def load_yaml_document(
    path: Path,
    model_type: type[ModelT],
    error_type: type[PackageCuratorError],
    kind: str,
) -> Optional[ModelT]:
    """Read a YAML (or JSON) file and validate it as a pydantic model.

    Args:
        path: File to read.
        model_type: Model the root mapping is validated against.
        error_type: Exception raised for any failure.
        kind: Human readable file kind used in messages, e.g. "snapshot".

    Returns:
        The validated model, or None if the file is empty or only has comments.

    Raises:
        PackageCuratorError: Of error_type, if the file cannot be read, is
            not valid YAML, has no mapping at its root or fails validation.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise error_type(f"Cannot read {kind} file '{path}': {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise error_type(f"Invalid YAML syntax in '{path}': {e}") from e

    if data is None:
        return None

    if not isinstance(data, dict):
        raise error_type(
            f"Invalid {kind} in '{path}': "
            f"expected a mapping at root level, got {type(data).__name__}"
        )

    try:
        return model_type.model_validate(data)
    except ValidationError as e:
        raise error_type(
            f"Invalid {kind} in '{path}': {format_validation_errors(e)}"
        ) from e


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Return the first of DEFAULT_CONFIG_NAMES present in start_dir (default: cwd)."""
    search_dir = start_dir or Path.cwd()
    return next(
        (search_dir / name for name in DEFAULT_CONFIG_NAMES if (search_dir / name).exists()),
        None,
    )


def load_config_file(path: Path) -> CuratorConfig:
    """Load a configuration file.

    A relative snapshot path is resolved against the directory of the
    configuration file, so a config can sit next to its snapshot.

    Raises:
        ConfigurationError: If the file is unreadable or invalid.
    """
    config = load_yaml_document(path, CuratorConfig, ConfigurationError, "configuration")
    if config is None:
        return get_default_config()

    if config.snapshot is not None and not Path(config.snapshot).is_absolute():
        config = config.model_copy(
            update={"snapshot": str(path.parent / config.snapshot)}
        )
    return config


def load_config(config_path: str | None = None) -> CuratorConfig:
    """Load the given configuration file, else a discovered one, else defaults.

    Raises:
        ConfigurationError: If the specified or discovered config file is invalid.
    """
    if config_path is not None:
        return load_config_file(Path(config_path))

    discovered = find_config_file()
    if discovered is None:
        return get_default_config()
    return load_config_file(discovered)
