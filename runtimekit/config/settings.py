"""
Build settings for a single RuntimeKit invocation.

Every environment variable RuntimeKit understands is read here, once, into a
frozen BuildSettings instance that is passed to the resolver and the build
invocation. Nothing else in the package reads os.environ.
"""

import logging
import os
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import FrozenSet, Mapping, Optional

from ..core.exceptions import ConfigurationError
from ..toolchain.target import RuntimeTarget
from .parser import VALID_BUILD_TYPES, ProjectConfig, parse_config

logger = logging.getLogger(__name__)

# Skips building any runtime binary.
SKIP_BUILD_ENV = "SKIP_WASM_BUILD"

# Skips a single project: SKIP_<PROJECT_NAME>_WASM_BUILD.
PROJECT_SKIP_ENV_PATTERN = re.compile(r"^SKIP_.+_WASM_BUILD$")

# Passes --offline to every cargo process when set to "true".
OFFLINE_ENV = "CARGO_NET_OFFLINE"

# Forces "debug", "release" or "production" for the runtime build.
WASM_BUILD_TYPE_ENV = "WASM_BUILD_TYPE"

# Appended to the RUSTFLAGS of the runtime build.
WASM_BUILD_RUSTFLAGS_ENV = "WASM_BUILD_RUSTFLAGS"

# Absolute directory the final binary gets copied to.
WASM_TARGET_DIRECTORY_ENV = "WASM_TARGET_DIRECTORY"

# Disables color output of the runtime build.
WASM_BUILD_NO_COLOR_ENV = "WASM_BUILD_NO_COLOR"

# Rustup toolchain to build with, e.g. "nightly-2020-02-20".
WASM_BUILD_TOOLCHAIN_ENV = "WASM_BUILD_TOOLCHAIN"

# Changing its value forces a rebuild.
FORCE_WASM_BUILD_ENV = "FORCE_WASM_BUILD"

# Workspace being built, when it cannot be found from the target directory.
WASM_BUILD_WORKSPACE_HINT_ENV = "WASM_BUILD_WORKSPACE_HINT"

# Whether core/std get rebuilt for the runtime target ("1" or "0").
WASM_BUILD_STD_ENV = "WASM_BUILD_STD"

# Runtime target, "wasm" (default) or "riscv".
RUNTIME_TARGET_ENV = "SUBSTRATE_RUNTIME_TARGET"

# Cargo program chosen by the outer build.
CARGO_ENV = "CARGO"

# Makes a stable compiler accept nightly features.
RUSTC_BOOTSTRAP_ENV = "RUSTC_BOOTSTRAP"

DEFAULT_CARGO_PROGRAM = "cargo"
DEFAULT_RUSTUP_PROGRAM = "rustup"


def get_bool_environment_variable(
    environ: Mapping[str, str], name: str
) -> Optional[bool]:
    """
    Read a boolean environment variable.

    Args:
        environ: Environment mapping
        name: Variable name

    Returns:
        True for "1", False for "0", None when unset

    Raises:
        ConfigurationError: If the variable holds any other value
    """
    value = environ.get(name)
    if value is None:
        return None
    if value == "1":
        return True
    if value == "0":
        return False
    raise ConfigurationError(
        f"the '{name}' environment variable has an invalid value; "
        f"it must be either '1' or '0'",
        name=name,
    )


def project_skip_variable(package_name: str) -> str:
    """
    Name of the variable that skips one project's runtime build.

    Example:
        >>> project_skip_variable("node-runtime")
        'SKIP_NODE_RUNTIME_WASM_BUILD'
    """
    return f"SKIP_{package_name.upper().replace('-', '_')}_WASM_BUILD"


@dataclass(frozen=True)
class BuildSettings:
    """
    Consolidated configuration for one resolution and build.

    Attributes:
        target: Requested runtime target
        toolchain: Pinned rustup toolchain identifier
        cargo_program: Cargo program designated by the outer build (CARGO)
        default_program: Fallback cargo program name
        rustup_program: Toolchain switcher program name
        rustc_bootstrap: Whether RUSTC_BOOTSTRAP is present
        skip_build: Whether the runtime build should be skipped
        skipped_projects: Per-project skip variables present in the environment
        build_type: 'debug', 'release', 'production' or None for the default
        rustflags: Extra rustflags for the runtime build
        target_directory: Absolute directory to copy results to
        color: Whether to force colored cargo output
        force_build: Value of FORCE_WASM_BUILD, part of the build fingerprint
        workspace_hint: Workspace root hint
        build_std: Explicit build-std choice, None for the per-target default
        offline: Whether to pass --offline
    """

    target: RuntimeTarget = RuntimeTarget.WASM
    toolchain: Optional[str] = None
    cargo_program: Optional[str] = None
    default_program: str = DEFAULT_CARGO_PROGRAM
    rustup_program: str = DEFAULT_RUSTUP_PROGRAM
    rustc_bootstrap: bool = False
    skip_build: bool = False
    skipped_projects: FrozenSet[str] = frozenset()
    build_type: Optional[str] = None
    rustflags: str = ""
    target_directory: Optional[Path] = None
    color: bool = True
    force_build: Optional[str] = None
    workspace_hint: Optional[Path] = None
    build_std: Optional[bool] = None
    offline: bool = False

    @property
    def build_std_required(self) -> bool:
        """Whether core/std must be rebuilt; defaults to on for WASM only."""
        if self.build_std is not None:
            return self.build_std
        return self.target is RuntimeTarget.WASM

    def skips_project(self, package_name: Optional[str]) -> bool:
        """
        Whether the build of the named project should be skipped.

        Args:
            package_name: Cargo package name, None if unknown

        Returns:
            True if SKIP_WASM_BUILD or the project's own skip variable is set
        """
        if self.skip_build:
            return True
        if not package_name:
            return False
        return project_skip_variable(package_name) in self.skipped_projects

    def with_target(self, target: RuntimeTarget) -> "BuildSettings":
        """Return a copy of these settings requesting another target."""
        return replace(self, target=target)

    @classmethod
    def load(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        config_file: Optional[Path] = None,
    ) -> "BuildSettings":
        """
        Build settings from a config file and the environment.

        Environment variables take precedence over the config file.

        Args:
            environ: Environment mapping (os.environ if None)
            config_file: Optional runtimekit.yaml path

        Returns:
            BuildSettings instance

        Raises:
            ConfigurationError: If any value is invalid
        """
        project = parse_config(config_file) if config_file else ProjectConfig()
        return cls.from_environment(environ, project)

    @classmethod
    def from_environment(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        project: Optional[ProjectConfig] = None,
    ) -> "BuildSettings":
        """
        Build settings from the environment, layered over project defaults.

        Args:
            environ: Environment mapping (os.environ if None)
            project: Parsed project configuration

        Returns:
            BuildSettings instance

        Raises:
            ConfigurationError: If any value is invalid
        """
        if environ is None:
            environ = os.environ
        if project is None:
            project = ProjectConfig()

        target_name = environ.get(RUNTIME_TARGET_ENV, project.target)
        if target_name is None:
            target = RuntimeTarget.WASM
        else:
            try:
                target = RuntimeTarget.from_name(target_name)
            except ConfigurationError:
                name, source = _value_source(environ, RUNTIME_TARGET_ENV, "target")
                raise ConfigurationError(
                    f"{source} has an invalid value '{target_name}'; "
                    f"it must be either 'wasm' or 'riscv'",
                    name=name,
                ) from None

        build_type = environ.get(WASM_BUILD_TYPE_ENV, project.build_type)
        if build_type is not None and build_type not in VALID_BUILD_TYPES:
            name, source = _value_source(environ, WASM_BUILD_TYPE_ENV, "build_type")
            raise ConfigurationError(
                f"{source} has an invalid value '{build_type}'; "
                f"expected one of {VALID_BUILD_TYPES}",
                name=name,
            )

        target_directory = environ.get(
            WASM_TARGET_DIRECTORY_ENV, project.target_directory
        )
        if target_directory is not None and not Path(target_directory).is_absolute():
            name, source = _value_source(
                environ, WASM_TARGET_DIRECTORY_ENV, "target_directory"
            )
            raise ConfigurationError(
                f"{source} must be an absolute path, got '{target_directory}'",
                name=name,
            )

        build_std = get_bool_environment_variable(environ, WASM_BUILD_STD_ENV)
        if build_std is None:
            build_std = project.build_std

        if OFFLINE_ENV in environ:
            offline = environ[OFFLINE_ENV] == "true"
        else:
            offline = bool(project.offline)

        if WASM_BUILD_NO_COLOR_ENV in environ:
            color = False
        else:
            color = project.color if project.color is not None else True

        rustflags = environ.get(WASM_BUILD_RUSTFLAGS_ENV, project.rustflags or "")
        hint = environ.get(WASM_BUILD_WORKSPACE_HINT_ENV)

        settings = cls(
            target=target,
            toolchain=environ.get(WASM_BUILD_TOOLCHAIN_ENV) or project.toolchain,
            cargo_program=environ.get(CARGO_ENV) or None,
            rustc_bootstrap=RUSTC_BOOTSTRAP_ENV in environ,
            skip_build=SKIP_BUILD_ENV in environ,
            skipped_projects=frozenset(
                name for name in environ if PROJECT_SKIP_ENV_PATTERN.match(name)
            ),
            build_type=build_type,
            rustflags=rustflags,
            target_directory=Path(target_directory) if target_directory else None,
            color=color,
            force_build=environ.get(FORCE_WASM_BUILD_ENV),
            workspace_hint=Path(hint) if hint else None,
            build_std=build_std,
            offline=offline,
        )
        logger.debug(f"Loaded build settings: {settings}")
        return settings


def _value_source(environ: Mapping[str, str], env_name: str, key: str):
    """Name and description of where a setting's value came from."""
    if env_name in environ:
        return env_name, f"the '{env_name}' environment variable"
    return key, f"'{key}' in runtimekit.yaml"
