"""
Candidates command implementation.

Probes every toolchain the resolver would consider and shows what each one
supports.
"""

import logging

from runtimekit.cli.utils import load_settings, safe_print
from runtimekit.toolchain.resolver import ToolchainResolver
from runtimekit.toolchain.target import RuntimeTarget

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the candidates command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if any candidate supports the requested target)
    """
    settings = load_settings(args)
    resolver = ToolchainResolver(settings)
    candidates = resolver.all_candidates()

    safe_print(f"Requested target: {settings.target}")
    any_supported = False

    for source, command in candidates:
        version = str(command.version) if command.version else "unknown"
        capabilities = ", ".join(
            f"{target}={command.capability(target, settings.rustc_bootstrap).value}"
            for target in RuntimeTarget
        )
        safe_print(f"  [{source}] {command}")
        safe_print(f"      version {version}; {capabilities}")
        if command.supports(settings.target, settings.rustc_bootstrap):
            any_supported = True

    if not any_supported:
        logger.warning(f"No candidate supports the {settings.target} runtime target")
        return 1
    return 0
