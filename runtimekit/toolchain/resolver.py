"""
Toolchain resolution.

Picks the cargo command used to build a runtime, in this order:

1. A toolchain pinned with WASM_BUILD_TOOLCHAIN (returned unconditionally)
2. The cargo designated by the outer build (CARGO)
3. The default ``cargo``
4. The newest rustup toolchain that supports the target

Probe failures never raise; they make a candidate unsupported and the
search moves on.
"""

import hashlib
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

from ..core.exceptions import NoSuitableToolchainError
from .candidate import CandidateCommand
from .probe import CommandProbe
from .target import RuntimeTarget

if TYPE_CHECKING:
    from ..config.settings import BuildSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedToolchain:
    """
    A chosen cargo command and the exact rustc version it uses.

    Downstream caches key on the rustc version, not just on the program.

    Attributes:
        command: The chosen cargo command
        rustc_version: First line of ``rustc --version``
    """

    command: CandidateCommand
    rustc_version: str

    @property
    def program(self) -> str:
        return self.command.program

    @property
    def args(self) -> Tuple[str, ...]:
        return self.command.args

    def command_line(self, *extra: str) -> List[str]:
        return self.command.command_line(*extra)

    @property
    def cache_key(self) -> str:
        """Stable SHA-256 over program, arguments and rustc version."""
        hasher = hashlib.sha256()
        for part in (self.program, *self.args, self.rustc_version):
            hasher.update(part.encode("utf-8"))
            hasher.update(b"\0")
        return hasher.hexdigest()


class ToolchainResolver:
    """
    Resolve the cargo command for a runtime build.

    Example:
        >>> settings = BuildSettings.from_environment()
        >>> resolver = ToolchainResolver(settings)
        >>> command = resolver.resolve()
        >>> command.command_line("build")
        ['rustup', 'run', 'nightly', 'cargo', 'build']
    """

    def __init__(self, settings: "BuildSettings", probe: Optional[CommandProbe] = None):
        """
        Initialize resolver.

        Args:
            settings: Build settings for this invocation
            probe: Command probe (a default CommandProbe if None)
        """
        self.settings = settings
        self.probe = probe or CommandProbe()

    def rustup_command(self, toolchain: str) -> CandidateCommand:
        """Probe ``rustup run <toolchain> cargo``."""
        return CandidateCommand.from_program_with_args(
            self.settings.rustup_program, ["run", toolchain, "cargo"], self.probe
        )

    def _supports(self, command: CandidateCommand, target: RuntimeTarget) -> bool:
        return command.supports(target, self.settings.rustc_bootstrap)

    def resolve(
        self, target: Optional[RuntimeTarget] = None
    ) -> Optional[CandidateCommand]:
        """
        Find the cargo command to build with.

        Args:
            target: Runtime target (settings.target if None)

        Returns:
            Chosen CandidateCommand or None if nothing qualifies
        """
        if target is None:
            target = self.settings.target

        # An explicitly requested toolchain is never second-guessed.
        if self.settings.toolchain:
            logger.info(f"Using pinned toolchain {self.settings.toolchain}")
            return self.rustup_command(self.settings.toolchain)

        if self.settings.cargo_program:
            env_cargo = CandidateCommand.from_program(
                self.settings.cargo_program, self.probe
            )
            if self._supports(env_cargo, target):
                logger.info(f"Using build cargo {env_cargo} for {target}")
                return env_cargo
            logger.debug(f"Build cargo {env_cargo} does not support {target}")

        default_cargo = CandidateCommand.from_program(
            self.settings.default_program, self.probe
        )
        if self._supports(default_cargo, target):
            logger.info(f"Using default cargo {default_cargo} for {target}")
            return default_cargo
        logger.debug(f"Default cargo {default_cargo} does not support {target}")

        best = self.best_rustup_command(target)
        if best is None:
            logger.info(f"No cargo command supports the {target} runtime target")
        return best

    def resolve_or_raise(self, target: Optional[RuntimeTarget] = None) -> CandidateCommand:
        """
        Like resolve(), but raise when nothing qualifies.

        Raises:
            NoSuitableToolchainError: If no candidate supports the target
        """
        if target is None:
            target = self.settings.target

        command = self.resolve(target)
        if command is None:
            raise NoSuitableToolchainError(target)
        return command

    def rustup_candidates(self) -> List[Tuple[str, CandidateCommand]]:
        """Probe every installed rustup toolchain, in rustup's order."""
        return [
            (toolchain, self.rustup_command(toolchain))
            for toolchain in self.probe.list_toolchains(self.settings.rustup_program)
        ]

    def best_rustup_command(
        self, target: Optional[RuntimeTarget] = None
    ) -> Optional[CandidateCommand]:
        """
        Pick the newest installed rustup toolchain that supports the target.

        Ranking is purely by numeric version. Equal versions are broken by the
        lexicographically smallest toolchain name.

        Args:
            target: Runtime target (settings.target if None)

        Returns:
            Best CandidateCommand or None
        """
        if target is None:
            target = self.settings.target

        qualifying = []
        for toolchain, command in self.rustup_candidates():
            if not self._supports(command, target):
                logger.debug(f"Skipping {toolchain}: does not support {target}")
                continue
            if command.version is None:
                logger.debug(f"Skipping {toolchain}: unknown version")
                continue
            qualifying.append((toolchain, command))

        if not qualifying:
            return None

        qualifying.sort(key=lambda entry: entry[0])
        toolchain, best = max(qualifying, key=lambda entry: entry[1].version)
        logger.info(f"Selected rustup toolchain {toolchain} ({best.version})")
        return best

    def all_candidates(self) -> List[Tuple[str, CandidateCommand]]:
        """
        Probe every candidate the resolver would consider.

        Returns:
            (source, command) pairs; source is 'pinned', 'build', 'default'
            or 'rustup:<toolchain>'
        """
        candidates = []
        if self.settings.toolchain:
            candidates.append(("pinned", self.rustup_command(self.settings.toolchain)))
        if self.settings.cargo_program:
            candidates.append(
                (
                    "build",
                    CandidateCommand.from_program(
                        self.settings.cargo_program, self.probe
                    ),
                )
            )
        candidates.append(
            (
                "default",
                CandidateCommand.from_program(self.settings.default_program, self.probe),
            )
        )
        for toolchain, command in self.rustup_candidates():
            candidates.append((f"rustup:{toolchain}", command))
        return candidates
