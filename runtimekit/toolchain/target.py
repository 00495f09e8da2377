"""
Runtime target kinds.

Each target maps to the rustc target triple it compiles for and to the
build subdirectory its artifacts live in.
"""

from enum import Enum

from ..core.exceptions import ConfigurationError


class RuntimeTarget(Enum):
    """The runtime binary formats RuntimeKit can build for."""

    WASM = "wasm"
    RISCV = "riscv"

    @property
    def rustc_target(self) -> str:
        """Compiler target triple for this runtime."""
        if self is RuntimeTarget.WASM:
            return "wasm32-unknown-unknown"
        return "riscv32ema-unknown-none-elf"

    @property
    def build_subdirectory(self) -> str:
        """
        Directory name under the target directory.

        Kept distinct per target so switching between them does not
        invalidate the other's incremental build.
        """
        if self is RuntimeTarget.WASM:
            return "wbuild"
        return "rbuild"

    @classmethod
    def from_name(cls, value: str) -> "RuntimeTarget":
        """
        Parse a target selector value.

        Args:
            value: Selector value, ``wasm`` or ``riscv``

        Returns:
            Matching RuntimeTarget

        Raises:
            ConfigurationError: If the value names no known target
        """
        for target in cls:
            if target.value == value:
                return target
        raise ConfigurationError(
            f"Invalid runtime target '{value}'; it must be either 'wasm' or 'riscv'"
        )

    def __str__(self) -> str:
        return self.value
