"""
Configuration for RuntimeKit.

Project defaults come from runtimekit.yaml; environment variables override
them. Both are folded into one BuildSettings per invocation.
"""

from .parser import (
    CONFIG_FILE_NAME,
    ProjectConfig,
    find_config_file,
    parse_config,
)
from .settings import BuildSettings, get_bool_environment_variable

__all__ = [
    "CONFIG_FILE_NAME",
    "ProjectConfig",
    "find_config_file",
    "parse_config",
    "BuildSettings",
    "get_bool_environment_variable",
]
