"""
Toolchain resolution module for RuntimeKit.

This module provides functionality for:
- Parsing and ordering Rust toolchain versions
- Probing cargo commands for their version and target list
- Selecting the cargo command that can build a runtime
- Checking build prerequisites
"""

from .version import Version, MINIMUM_WASM_VERSION
from .target import RuntimeTarget
from .probe import CommandProbe, CommandRunner, RunResult, SubprocessRunner
from .candidate import Capability, CandidateCommand
from .resolver import ResolvedToolchain, ToolchainResolver
from .prerequisites import check_prerequisites, missing_toolchain_message

__all__ = [
    # Version
    "Version",
    "MINIMUM_WASM_VERSION",
    # Targets
    "RuntimeTarget",
    # Probe
    "CommandProbe",
    "CommandRunner",
    "RunResult",
    "SubprocessRunner",
    # Candidates
    "Capability",
    "CandidateCommand",
    # Resolver
    "ResolvedToolchain",
    "ToolchainResolver",
    "check_prerequisites",
    "missing_toolchain_message",
]
