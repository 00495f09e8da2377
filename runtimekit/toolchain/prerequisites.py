"""
Prerequisite checks for a runtime build.

Turns the resolver's result into a ResolvedToolchain, or into an error
message that tells the user what to install.
"""

import logging
from typing import TYPE_CHECKING, Optional

from ..core.exceptions import NoSuitableToolchainError, PrerequisiteError
from .resolver import ResolvedToolchain, ToolchainResolver
from .target import RuntimeTarget
from .version import MINIMUM_WASM_VERSION

if TYPE_CHECKING:
    from ..config.settings import BuildSettings

logger = logging.getLogger(__name__)


def missing_toolchain_message(target: RuntimeTarget) -> str:
    """
    Actionable message for a target no toolchain supports.

    Args:
        target: Runtime target

    Returns:
        Human-readable explanation with a fix suggestion
    """
    if target is RuntimeTarget.WASM:
        return (
            "Cannot compile the WASM runtime: no compatible Rust compiler found!\n"
            f"Install at least Rust {MINIMUM_WASM_VERSION} or a recent nightly "
            "version, then run:\n"
            f"  rustup target add {target.rustc_target}"
        )
    return (
        "Cannot compile the RISC-V runtime: no compatible Rust compiler found!\n"
        "Install a toolchain that supports the "
        f"'{target.rustc_target}' target and select it with WASM_BUILD_TOOLCHAIN."
    )


def check_prerequisites(
    settings: "BuildSettings",
    resolver: Optional[ToolchainResolver] = None,
    target: Optional[RuntimeTarget] = None,
) -> ResolvedToolchain:
    """
    Resolve a toolchain and make sure it can build the runtime.

    Args:
        settings: Build settings
        resolver: Resolver to use (one built from settings if None)
        target: Runtime target (settings.target if None)

    Returns:
        ResolvedToolchain with the exact rustc version

    Raises:
        NoSuitableToolchainError: If no candidate supports the target
        PrerequisiteError: If the chosen toolchain cannot be used
    """
    if resolver is None:
        resolver = ToolchainResolver(settings)
    if target is None:
        target = settings.target

    command = resolver.resolve(target)
    if command is None:
        raise NoSuitableToolchainError(target, missing_toolchain_message(target))

    if not command.supports(target, settings.rustc_bootstrap):
        # Only a pinned toolchain gets here.
        raise PrerequisiteError(
            f"The requested toolchain '{settings.toolchain}' ({command}) does not "
            f"support the {target} runtime target.\n"
            + missing_toolchain_message(target)
        )

    rustc_version = resolver.probe.probe_compiler_version(command.program, command.args)
    if rustc_version is None:
        raise PrerequisiteError(
            f"Could not determine the rustc version used by '{command}'"
        )

    logger.info(f"Using {command} with {rustc_version}")
    return ResolvedToolchain(command=command, rustc_version=rustc_version)
