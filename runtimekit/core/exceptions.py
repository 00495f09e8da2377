"""
Centralized exception hierarchy for RuntimeKit.

Probe failures are never represented here: they degrade to ``None`` inside
the probe layer. Only configuration mistakes and a failed resolution become
exceptions.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class RuntimeKitError(Exception):
    """Base exception for all RuntimeKit errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigurationError(RuntimeKitError):
    """Raised when an environment variable or config file value is invalid."""

    def __init__(self, message: str, name: str = ""):
        self.name = name
        super().__init__(message)


# ============================================================================
# Toolchain-related Exceptions
# ============================================================================


class ToolchainError(RuntimeKitError):
    """Base exception for toolchain-related errors."""

    pass


class NoSuitableToolchainError(ToolchainError):
    """Raised when no candidate toolchain can compile for the requested target."""

    def __init__(self, target, message: str = ""):
        self.target = target
        if not message:
            message = f"No Rust toolchain found that supports the {target} runtime target"
        super().__init__(message)


class PrerequisiteError(ToolchainError):
    """Raised when a chosen toolchain is missing something required to build."""

    pass
