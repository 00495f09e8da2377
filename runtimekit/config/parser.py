"""YAML project configuration parser for RuntimeKit.

This module parses the optional runtimekit.yaml file that supplies project
defaults. Environment variables override anything set here.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging

import yaml

from ..core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "runtimekit.yaml"

VALID_BUILD_TYPES = ["debug", "release", "production"]


@dataclass
class ProjectConfig:
    """Project-level defaults read from runtimekit.yaml."""

    target: Optional[str] = None  # 'wasm', 'riscv'
    toolchain: Optional[str] = None  # rustup toolchain, e.g. 'nightly-2024-01-01'
    build_type: Optional[str] = None  # 'debug', 'release', 'production'
    build_std: Optional[bool] = None
    offline: Optional[bool] = None
    rustflags: Optional[str] = None
    target_directory: Optional[str] = None
    color: Optional[bool] = None


def find_config_file(project_root: Path) -> Optional[Path]:
    """
    Locate runtimekit.yaml in a project root.

    Args:
        project_root: Project root directory

    Returns:
        Path to the config file or None if absent
    """
    candidate = project_root / CONFIG_FILE_NAME
    return candidate if candidate.is_file() else None


def parse_config(config_path: Path) -> ProjectConfig:
    """
    Parse a runtimekit.yaml configuration file.

    Args:
        config_path: Path to runtimekit.yaml

    Returns:
        Parsed configuration (all fields None for an empty file)

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    logger.debug(f"Loading configuration from {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return ProjectConfig()

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration file {config_path} must contain a mapping"
        )

    return _parse_and_validate(data)


def _parse_and_validate(data: dict) -> ProjectConfig:
    """Parse and validate configuration data."""
    known = set(ProjectConfig.__dataclass_fields__)
    for key in data:
        if key not in known:
            logger.warning(f"Ignoring unknown configuration key: {key}")

    build_type = _optional_str(data, "build_type")
    if build_type is not None and build_type not in VALID_BUILD_TYPES:
        raise ConfigurationError(
            f"Invalid build_type: {build_type} (expected one of {VALID_BUILD_TYPES})",
            name="build_type",
        )

    target_directory = _optional_str(data, "target_directory")
    if target_directory is not None and not Path(target_directory).is_absolute():
        raise ConfigurationError(
            f"target_directory must be an absolute path: {target_directory}",
            name="target_directory",
        )

    return ProjectConfig(
        target=_optional_str(data, "target"),
        toolchain=_optional_str(data, "toolchain"),
        build_type=build_type,
        build_std=_optional_bool(data, "build_std"),
        offline=_optional_bool(data, "offline"),
        rustflags=_optional_str(data, "rustflags"),
        target_directory=target_directory,
        color=_optional_bool(data, "color"),
    )


def _optional_str(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, (str, int, float)) or isinstance(value, bool):
        raise ConfigurationError(f"{key} must be a string", name=key)
    return str(value)


def _optional_bool(data: dict, key: str) -> Optional[bool]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ConfigurationError(f"{key} must be true or false", name=key)
    return value
