"""
Mock implementations for testing RuntimeKit components.

This package provides mock implementations of external processes to enable
isolated, deterministic testing.
"""

from .process import FakeRunner, TARGET_LIST_ARGS

__all__ = [
    "FakeRunner",
    "TARGET_LIST_ARGS",
]
