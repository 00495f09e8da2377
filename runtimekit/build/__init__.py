"""
Runtime build command construction for RuntimeKit.
"""

from .invocation import BuildInvocation, build_invocation, default_rustflags
from .manifest import read_package_name

__all__ = [
    "BuildInvocation",
    "build_invocation",
    "default_rustflags",
    "read_package_name",
]
