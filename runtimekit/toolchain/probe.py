"""
Process probing for Rust toolchains.

Runs cargo/rustup/rustc with query flags and extracts:
- The toolchain version (``--version``)
- The supported compilation targets (``--print target-list``)
- The exact rustc version string

Every failure (missing program, non-zero exit, undecodable output, garbage
text) collapses to None. Nothing here raises to the caller.
"""

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence

from .version import Version

logger = logging.getLogger(__name__)

# Removed from the target-list probe so a RUSTC set by an outer build
# cannot override the toolchain rustup picked.
RUSTC_ENV = "RUSTC"

TARGET_LIST_ARGS = ["rustc", "-Z", "unstable-options", "--print", "target-list"]


@dataclass
class RunResult:
    """Outcome of one external process invocation."""

    returncode: int
    stdout: bytes
    stderr: bytes = b""


class CommandRunner(ABC):
    """Abstract process runner, substituted by a fake in tests."""

    @abstractmethod
    def run(
        self, argv: Sequence[str], env: Optional[Mapping[str, str]] = None
    ) -> RunResult:
        """
        Run a program to completion.

        Args:
            argv: Program and arguments
            env: Full child environment, or None to inherit

        Returns:
            RunResult with exit code and captured output

        Raises:
            OSError: If the program cannot be launched
            subprocess.TimeoutExpired: If a timeout is configured and hit
        """
        pass


class SubprocessRunner(CommandRunner):
    """CommandRunner backed by subprocess.run."""

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize runner.

        Args:
            timeout: Seconds before a probe is abandoned; None waits forever
        """
        self.timeout = timeout

    def run(
        self, argv: Sequence[str], env: Optional[Mapping[str, str]] = None
    ) -> RunResult:
        result = subprocess.run(
            list(argv),
            capture_output=True,
            env=dict(env) if env is not None else None,
            timeout=self.timeout,
            check=False,
        )
        return RunResult(
            returncode=result.returncode, stdout=result.stdout, stderr=result.stderr
        )


class CommandProbe:
    """
    Extract version and target information from a cargo command.

    Example:
        >>> probe = CommandProbe()
        >>> probe.probe_version("rustup", ["run", "stable", "cargo"])
        Version(major=1, minor=75, patch=0, is_nightly=False)
    """

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize probe.

        Args:
            runner: Process runner (SubprocessRunner if None)
            environ: Base environment for child processes (os.environ if None)
        """
        self.runner = runner or SubprocessRunner()
        self.environ = environ

    def _base_environment(self) -> Dict[str, str]:
        return dict(self.environ if self.environ is not None else os.environ)

    def _capture(
        self, argv: List[str], env: Optional[Mapping[str, str]] = None
    ) -> Optional[str]:
        """Run argv and return decoded stdout, or None on any failure."""
        try:
            result = self.runner.run(argv, env)
        except subprocess.TimeoutExpired:
            logger.debug(f"Timeout running {' '.join(argv)}")
            return None
        except OSError as e:
            logger.debug(f"Failed to run {' '.join(argv)}: {e}")
            return None

        if result.returncode != 0:
            logger.debug(f"{' '.join(argv)} returned {result.returncode}")
            return None

        try:
            return result.stdout.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug(f"Output of {' '.join(argv)} is not valid UTF-8")
            return None

    def probe_version(
        self, program: str, fixed_args: Sequence[str] = ()
    ) -> Optional[Version]:
        """
        Query the version of a cargo command.

        Args:
            program: Program to run
            fixed_args: Leading arguments (e.g. ``["run", "stable", "cargo"]``)

        Returns:
            Parsed Version or None if it could not be determined
        """
        output = self._capture([program, *fixed_args, "--version"])
        if output is None:
            return None

        version = Version.parse(output)
        if version is None:
            logger.debug(f"Could not parse version from output: {output[:200]}")
        else:
            logger.debug(f"Extracted version {version} from {program}")
        return version

    def probe_target_list(
        self, program: str, fixed_args: Sequence[str] = ()
    ) -> Optional[FrozenSet[str]]:
        """
        Query the compilation targets a cargo command supports.

        Uses an unstable rustc option, so most stable toolchains fail this
        probe. None means "cannot confirm", not "unsupported".

        Args:
            program: Program to run
            fixed_args: Leading arguments

        Returns:
            Set of target triples or None if the probe failed
        """
        env = self._base_environment()
        env.pop(RUSTC_ENV, None)

        output = self._capture([program, *fixed_args, *TARGET_LIST_ARGS], env)
        if output is None:
            return None

        targets = frozenset(
            line.strip() for line in output.strip().split("\n") if line.strip()
        )
        logger.debug(f"{program} reports {len(targets)} targets")
        return targets

    def probe_compiler_version(
        self, program: str, fixed_args: Sequence[str] = ()
    ) -> Optional[str]:
        """
        Query the exact rustc version behind a cargo command.

        For ``rustup run <toolchain> cargo`` the same toolchain's rustc is
        asked. For a cargo path a sibling rustc is preferred, then ``rustc``.

        Args:
            program: Cargo program
            fixed_args: Leading arguments

        Returns:
            First line of ``rustc --version`` or None
        """
        argv = self._rustc_command(program, fixed_args) + ["--version"]
        env = self._base_environment()
        env.pop(RUSTC_ENV, None)

        output = self._capture(argv, env)
        if output is None:
            return None

        lines = output.strip().splitlines()
        if not lines:
            return None
        return lines[0].strip()

    def list_toolchains(self, rustup_program: str) -> List[str]:
        """
        List the toolchains installed through rustup.

        Lines look like ``stable-x86_64-unknown-linux-gnu (default)``; the
        annotation after the first space is dropped.

        Args:
            rustup_program: rustup program name or path

        Returns:
            Toolchain identifiers in rustup's order (empty on failure)
        """
        output = self._capture([rustup_program, "toolchain", "list"])
        if output is None:
            return []

        toolchains = []
        for line in output.splitlines():
            if line.startswith("no installed toolchains"):
                continue
            name = line.strip().split(" ")[0]
            if name:
                toolchains.append(name)

        logger.debug(f"rustup reports {len(toolchains)} installed toolchains")
        return toolchains

    def _rustc_command(self, program: str, fixed_args: Sequence[str]) -> List[str]:
        """Map a cargo command to the rustc of the same toolchain."""
        args = list(fixed_args)
        if args and Path(args[-1]).name in ("cargo", "cargo.exe"):
            return [program, *args[:-1], "rustc"]

        cargo_path = Path(program)
        if cargo_path.parent != Path("."):
            sibling = cargo_path.with_name("rustc" + cargo_path.suffix)
            if sibling.exists():
                return [str(sibling)]

        return ["rustc"]
