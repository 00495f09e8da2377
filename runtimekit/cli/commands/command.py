"""
Command command implementation.

Prints the exact cargo command line and environment for the runtime build.
"""

import json
import logging
import shlex
from pathlib import Path

from runtimekit.build.invocation import build_invocation
from runtimekit.build.manifest import read_package_name
from runtimekit.cli.utils import load_settings, safe_print
from runtimekit.config.settings import project_skip_variable
from runtimekit.toolchain.prerequisites import check_prerequisites

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the command command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    settings = load_settings(args)

    if settings.skip_build:
        logger.info("SKIP_WASM_BUILD is set, skipping runtime build")
        return 0

    project_root = Path(
        getattr(args, "project_root", None) or settings.workspace_hint or Path.cwd()
    ).resolve()
    manifest_path = getattr(args, "manifest_path", None) or project_root / "Cargo.toml"

    package_name = getattr(args, "package", None) or read_package_name(manifest_path)
    if settings.skips_project(package_name):
        logger.info(
            f"{project_skip_variable(package_name)} is set, skipping runtime build"
        )
        return 0

    resolved = check_prerequisites(settings)
    invocation = build_invocation(resolved, settings, project_root, manifest_path)

    if getattr(args, "json", False):
        safe_print(json.dumps(invocation.to_dict(), indent=2))
        return 0

    for name in invocation.env_remove:
        safe_print(f"unset {name}")
    for name, value in invocation.env.items():
        safe_print(f"export {name}={shlex.quote(value)}")
    safe_print(invocation.shell_command())
    if invocation.copy_to:
        safe_print(f"# copy the built runtime to {invocation.copy_to}")
    return 0
