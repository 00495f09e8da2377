"""
Shared utilities for CLI commands.

Provides common functionality used across multiple CLI commands to
eliminate duplication and ensure consistent behavior.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from runtimekit.config.parser import find_config_file
from runtimekit.config.settings import BuildSettings
from runtimekit.toolchain.target import RuntimeTarget

logger = logging.getLogger(__name__)


def resolve_config_file(args) -> Optional[Path]:
    """
    Find the configuration file for a command.

    Args:
        args: Parsed arguments with config and project_root

    Returns:
        Explicit --config path, runtimekit.yaml in the project root, or None
    """
    if getattr(args, "config", None):
        return Path(args.config)

    project_root = Path(getattr(args, "project_root", None) or Path.cwd())
    config_file = find_config_file(project_root)
    if config_file is None:
        logger.debug(f"No config file in {project_root}")
    return config_file


def load_settings(args) -> BuildSettings:
    """
    Build settings from the config file, the environment and CLI flags.

    Args:
        args: Parsed command-line arguments

    Returns:
        BuildSettings for this invocation

    Raises:
        ConfigurationError: If any configured value is invalid
    """
    settings = BuildSettings.load(os.environ, resolve_config_file(args))

    if getattr(args, "target", None):
        settings = settings.with_target(RuntimeTarget.from_name(args.target))

    return settings


def safe_print(text: str, file=None) -> None:
    """
    Print text, replacing characters the console encoding cannot show.

    Args:
        text: Text to print
        file: Stream to print to (sys.stdout if None)
    """
    stream = file or sys.stdout
    try:
        print(text, file=stream)
    except UnicodeEncodeError:
        encoding = getattr(stream, "encoding", None) or "ascii"
        print(text.encode(encoding, errors="replace").decode(encoding), file=stream)
