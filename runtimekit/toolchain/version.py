"""
Rust toolchain version parsing and ordering.

Versions are extracted from free-form ``--version`` output such as
``cargo 1.68.0 (115f34552 2023-02-26)`` or ``rustc 1.70.0-nightly
(f63ccaf25 2023-03-06)``.

Ordering only looks at the numeric triple. The nightly flag records whether
the toolchain offers unstable features and never affects ranking.

Example:
    >>> v1 = Version.parse("cargo 1.70.0-nightly (f63ccaf25 2023-03-06)")
    >>> v2 = Version(1, 70, 0)
    >>> v1 == v2
    True
    >>> v1.is_nightly
    True
"""

import re
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Optional

# First MAJOR.MINOR.PATCH in the text, with an optional attached suffix.
_VERSION_PATTERN = re.compile(r"(?<!\d)(\d+)\.(\d+)\.(\d+)(-[0-9A-Za-z.\-]+)?")
_DATE_SUFFIX_PATTERN = re.compile(r"^-\d{4}-\d{2}-\d{2}$")
_NIGHTLY_PATTERN = re.compile(r"nightly", re.IGNORECASE)


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """
    Semantic version of a Rust toolchain.

    Attributes:
        major: Major version number
        minor: Minor version number
        patch: Patch version number
        is_nightly: Whether this is a nightly/dev build
    """

    major: int
    minor: int
    patch: int
    is_nightly: bool = field(default=False)

    @property
    def triple(self) -> tuple:
        """The (major, minor, patch) key used for ordering."""
        return (self.major, self.minor, self.patch)

    @classmethod
    def parse(cls, text: str) -> Optional["Version"]:
        """
        Extract a version from free-form version output.

        The nightly flag is set when the text mentions "nightly", or the
        version carries a ``-dev`` or a date suffix (``1.70.0-2023-05-01``).
        A date in the trailing commit annotation does not count.

        Args:
            text: Output of ``cargo --version`` or similar

        Returns:
            Parsed Version, or None if the text holds no MAJOR.MINOR.PATCH
        """
        if not text:
            return None

        match = _VERSION_PATTERN.search(text)
        if not match:
            return None

        suffix = match.group(4) or ""
        is_nightly = bool(
            _NIGHTLY_PATTERN.search(text)
            or suffix == "-dev"
            or _DATE_SUFFIX_PATTERN.match(suffix)
        )

        return cls(
            major=int(match.group(1)),
            minor=int(match.group(2)),
            patch=int(match.group(3)),
            is_nightly=is_nightly,
        )

    def __eq__(self, other: object) -> bool:
        """Equality on the numeric triple only."""
        if not isinstance(other, Version):
            return NotImplemented
        return self.triple == other.triple

    def __lt__(self, other: "Version") -> bool:
        """Less than comparison."""
        if not isinstance(other, Version):
            return NotImplemented
        return self.triple < other.triple

    def __hash__(self) -> int:
        return hash(self.triple)

    def __str__(self) -> str:
        """String representation."""
        base = f"{self.major}.{self.minor}.{self.patch}"
        return f"{base}-nightly" if self.is_nightly else base


# Oldest stable release that can build a WASM runtime.
MINIMUM_WASM_VERSION = Version(1, 68, 0)
