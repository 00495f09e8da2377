"""
Runtime build command construction.

Builds the exact cargo command line and environment for compiling a runtime
with a resolved toolchain. Running it is left to the caller.
"""

import hashlib
import json
import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from ..config.settings import BuildSettings
from ..toolchain.resolver import ResolvedToolchain
from ..toolchain.target import RuntimeTarget

logger = logging.getLogger(__name__)

# Profile names passed to cargo for each build type.
PROFILES = {
    "debug": "dev",
    "release": "release",
    "production": "production",
}

DEFAULT_BUILD_TYPE = "release"

# Variables cleared from the child so the outer build cannot leak into it.
REMOVED_ENV = ["CARGO_ENCODED_RUSTFLAGS", "RUSTC"]


def default_rustflags(target: RuntimeTarget) -> List[str]:
    """Rustflags every runtime build of the target gets."""
    flags = ["--cfg", "substrate_runtime"]
    if target is RuntimeTarget.WASM:
        flags += [
            "-C",
            "target-cpu=mvp",
            "-C",
            "target-feature=-sign-ext",
            "-C",
            "link-arg=--export-table",
        ]
    return flags


@dataclass
class BuildInvocation:
    """
    A fully specified cargo invocation.

    Attributes:
        argv: Program and arguments
        env: Variables to set for the child
        env_remove: Variables to remove from the child
        target_dir: Cargo target directory for this runtime target
        copy_to: Directory the built runtime gets copied to, if any
        rustc_version: Exact compiler version the build uses
        force_build: Value of FORCE_WASM_BUILD, if any
    """

    argv: List[str]
    env: Dict[str, str] = field(default_factory=dict)
    env_remove: List[str] = field(default_factory=list)
    target_dir: Optional[Path] = None
    copy_to: Optional[Path] = None
    rustc_version: str = ""
    force_build: Optional[str] = None

    def shell_command(self) -> str:
        """The command line quoted for a POSIX shell."""
        return shlex.join(self.argv)

    def child_environment(self, base: Dict[str, str]) -> Dict[str, str]:
        """Apply removals and overrides to a base environment."""
        env = {k: v for k, v in base.items() if k not in self.env_remove}
        env.update(self.env)
        return env

    def fingerprint(self) -> str:
        """SHA-256 that changes whenever the build must be redone."""
        payload = {
            "argv": self.argv,
            "env": self.env,
            "env_remove": self.env_remove,
            "rustc_version": self.rustc_version,
            "force_build": self.force_build,
        }
        return hashlib.sha256(
            json.dumps(payload, sort_keys=True).encode("utf-8")
        ).hexdigest()

    def to_dict(self) -> Dict[str, object]:
        return {
            "argv": self.argv,
            "command": self.shell_command(),
            "env": self.env,
            "env_remove": self.env_remove,
            "target_dir": str(self.target_dir) if self.target_dir else None,
            "copy_to": str(self.copy_to) if self.copy_to else None,
            "rustc_version": self.rustc_version,
            "fingerprint": self.fingerprint(),
        }


def build_invocation(
    resolved: ResolvedToolchain,
    settings: BuildSettings,
    project_dir: Path,
    manifest_path: Optional[Path] = None,
) -> BuildInvocation:
    """
    Build the cargo command for compiling a runtime.

    Args:
        resolved: Resolved toolchain
        settings: Build settings
        project_dir: Runtime project directory
        manifest_path: Cargo.toml to build (project_dir/Cargo.toml if None)

    Returns:
        BuildInvocation ready to run
    """
    target = settings.target
    if manifest_path is None:
        manifest_path = project_dir / "Cargo.toml"

    build_type = settings.build_type or DEFAULT_BUILD_TYPE
    target_dir = project_dir / "target" / target.build_subdirectory

    argv = resolved.command_line(
        "rustc",
        f"--target={target.rustc_target}",
        f"--manifest-path={manifest_path}",
    )
    if settings.color:
        argv.append("--color=always")
    argv += ["--profile", PROFILES[build_type]]
    if settings.offline:
        argv.append("--offline")

    rustflags = default_rustflags(target)
    if settings.rustflags:
        # Cargo splits RUSTFLAGS on whitespace; user flags are appended as given.
        rustflags.append(settings.rustflags)

    env = {
        "RUSTFLAGS": " ".join(rustflags),
        "CARGO_TARGET_DIR": str(target_dir),
        # Keeps a nested runtime build from recursing.
        "SKIP_WASM_BUILD": "",
    }

    if settings.build_std_required:
        argv += ["-Z", "build-std"]
        if not resolved.command.supports_nightly_features(settings.rustc_bootstrap):
            env["RUSTC_BOOTSTRAP"] = "1"

    invocation = BuildInvocation(
        argv=argv,
        env=env,
        env_remove=list(REMOVED_ENV),
        target_dir=target_dir,
        copy_to=settings.target_directory,
        rustc_version=resolved.rustc_version,
        force_build=settings.force_build,
    )
    logger.debug(f"Build command: {invocation.shell_command()}")
    return invocation
