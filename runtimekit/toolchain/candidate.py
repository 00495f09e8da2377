"""
Candidate cargo commands.

A CandidateCommand is one way of invoking cargo (a program plus fixed
leading arguments) together with what probing it revealed. Probing happens
once, at construction; the instance is immutable afterwards.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional, Sequence, Tuple

from .probe import CommandProbe
from .target import RuntimeTarget
from .version import MINIMUM_WASM_VERSION, Version

logger = logging.getLogger(__name__)


class Capability(Enum):
    """What is known about a candidate's support for a runtime target."""

    UNKNOWN = "unknown"
    CAPABLE = "capable"
    INCAPABLE = "incapable"


@dataclass(frozen=True)
class CandidateCommand:
    """
    A probed cargo invocation.

    Attributes:
        program: Program to execute ('cargo', '/path/to/cargo', 'rustup')
        args: Fixed leading arguments (e.g. ('run', 'stable', 'cargo'))
        version: Probed version, None if unknown
        target_list: Probed target triples, None if unknown
    """

    program: str
    args: Tuple[str, ...] = ()
    version: Optional[Version] = None
    target_list: Optional[FrozenSet[str]] = field(default=None, repr=False)

    @classmethod
    def from_program(cls, program: str, probe: CommandProbe) -> "CandidateCommand":
        """
        Probe a bare program.

        Args:
            program: Program name or path
            probe: Probe used to query version and targets

        Returns:
            Probed CandidateCommand
        """
        return cls.from_program_with_args(program, (), probe)

    @classmethod
    def from_program_with_args(
        cls, program: str, args: Sequence[str], probe: CommandProbe
    ) -> "CandidateCommand":
        """
        Probe a program invoked with fixed leading arguments.

        Args:
            program: Program name or path
            args: Fixed leading arguments
            probe: Probe used to query version and targets

        Returns:
            Probed CandidateCommand
        """
        args = tuple(args)
        return cls(
            program=program,
            args=args,
            version=probe.probe_version(program, args),
            target_list=probe.probe_target_list(program, args),
        )

    def command_line(self, *extra: str) -> List[str]:
        """Full argv: program, fixed arguments, then extra arguments."""
        return [self.program, *self.args, *extra]

    def supports_nightly_features(self, rustc_bootstrap: bool = False) -> bool:
        """
        Whether this toolchain accepts unstable features.

        Args:
            rustc_bootstrap: Whether RUSTC_BOOTSTRAP is set

        Returns:
            True for nightly toolchains or when bootstrapping is forced
        """
        return rustc_bootstrap or (self.version is not None and self.version.is_nightly)

    def capability(
        self, target: RuntimeTarget, rustc_bootstrap: bool = False
    ) -> Capability:
        """
        Determine support for a runtime target.

        Args:
            target: Runtime target
            rustc_bootstrap: Whether RUSTC_BOOTSTRAP is set

        Returns:
            Capability for the target
        """
        if target is RuntimeTarget.WASM:
            return self._wasm_capability(rustc_bootstrap)
        return self._riscv_capability()

    def supports(self, target: RuntimeTarget, rustc_bootstrap: bool = False) -> bool:
        """
        Check if this command can build a runtime for the target.

        Unknown capability counts as unsupported.

        Args:
            target: Runtime target
            rustc_bootstrap: Whether RUSTC_BOOTSTRAP is set

        Returns:
            True only if support is confirmed
        """
        return self.capability(target, rustc_bootstrap) is Capability.CAPABLE

    def _wasm_capability(self, rustc_bootstrap: bool) -> Capability:
        # RUSTC_BOOTSTRAP makes any rustc behave like a nightly one.
        if rustc_bootstrap:
            return Capability.CAPABLE

        if self.version is None:
            return Capability.UNKNOWN

        if self.version >= MINIMUM_WASM_VERSION or self.version.is_nightly:
            return Capability.CAPABLE
        return Capability.INCAPABLE

    def _riscv_capability(self) -> Capability:
        if self.target_list is None:
            return Capability.UNKNOWN

        # The custom triple exists on no upstream toolchain, so its presence
        # is enough; no version check.
        if RuntimeTarget.RISCV.rustc_target in self.target_list:
            return Capability.CAPABLE
        return Capability.INCAPABLE

    def __str__(self) -> str:
        return " ".join(self.command_line())
