"""
Cargo manifest helpers.

Reads the package name of a runtime project, which selects its
``SKIP_<PROJECT_NAME>_WASM_BUILD`` variable.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from ..core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def read_package_name(manifest_path: Path) -> Optional[str]:
    """
    Read ``package.name`` from a Cargo.toml.

    Args:
        manifest_path: Path to Cargo.toml

    Returns:
        Package name, or None for a missing manifest or a virtual workspace

    Raises:
        ConfigurationError: If the manifest is not valid TOML
    """
    if not manifest_path.is_file():
        logger.debug(f"No manifest at {manifest_path}")
        return None

    try:
        with open(manifest_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid Cargo manifest {manifest_path}: {e}") from e

    package = data.get("package")
    if not isinstance(package, dict) or not isinstance(package.get("name"), str):
        return None
    return package["name"]

