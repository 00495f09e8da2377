"""
Core functionality for RuntimeKit.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
    RuntimeKitError,
    ConfigurationError,
    ToolchainError,
    NoSuitableToolchainError,
    PrerequisiteError,
)

__all__ = [
    "RuntimeKitError",
    "ConfigurationError",
    "ToolchainError",
    "NoSuitableToolchainError",
    "PrerequisiteError",
]
