"""
RuntimeKit - Rust toolchain resolution for runtime builds.

Finds a cargo toolchain able to compile a WASM or RISC-V runtime and builds
the exact command line needed to invoke it.
"""

__version__ = "0.1.0"

from .core.exceptions import (
    RuntimeKitError,
    ConfigurationError,
    ToolchainError,
    NoSuitableToolchainError,
    PrerequisiteError,
)
from .toolchain import (
    Capability,
    CandidateCommand,
    CommandProbe,
    ResolvedToolchain,
    RuntimeTarget,
    ToolchainResolver,
    Version,
    check_prerequisites,
)
from .config import BuildSettings
from .build import BuildInvocation, build_invocation

__all__ = [
    "__version__",
    "RuntimeKitError",
    "ConfigurationError",
    "ToolchainError",
    "NoSuitableToolchainError",
    "PrerequisiteError",
    "Capability",
    "CandidateCommand",
    "CommandProbe",
    "ResolvedToolchain",
    "RuntimeTarget",
    "ToolchainResolver",
    "Version",
    "check_prerequisites",
    "BuildSettings",
    "BuildInvocation",
    "build_invocation",
]
