"""
Resolve command implementation.

Selects the cargo toolchain that builds the runtime and prints it.
"""

import json
import logging

from runtimekit.cli.utils import load_settings, safe_print
from runtimekit.toolchain.prerequisites import check_prerequisites

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resolve command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)

    Raises:
        NoSuitableToolchainError: If no toolchain supports the target
        PrerequisiteError: If the chosen toolchain cannot be used
    """
    settings = load_settings(args)
    resolved = check_prerequisites(settings)
    command = resolved.command

    if getattr(args, "json", False):
        safe_print(
            json.dumps(
                {
                    "target": settings.target.value,
                    "rustc_target": settings.target.rustc_target,
                    "program": command.program,
                    "args": list(command.args),
                    "version": str(command.version) if command.version else None,
                    "rustc_version": resolved.rustc_version,
                    "cache_key": resolved.cache_key,
                },
                indent=2,
            )
        )
        return 0

    safe_print(f"Target:   {settings.target} ({settings.target.rustc_target})")
    safe_print(f"Command:  {command}")
    safe_print(f"Version:  {command.version if command.version else 'unknown'}")
    safe_print(f"Compiler: {resolved.rustc_version}")
    return 0
