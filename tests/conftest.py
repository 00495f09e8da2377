"""
Pytest configuration and shared fixtures for RuntimeKit tests.
"""

import pytest

from runtimekit.config.settings import BuildSettings
from runtimekit.toolchain.probe import CommandProbe
from runtimekit.toolchain.resolver import ToolchainResolver
from runtimekit.toolchain.target import RuntimeTarget
from tests.mocks.process import FakeRunner

RISCV_TRIPLE = "riscv32ema-unknown-none-elf"

STANDARD_TARGETS = [
    "aarch64-unknown-linux-gnu",
    "wasm32-unknown-unknown",
    "x86_64-unknown-linux-gnu",
]


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests that run real cargo/rustup binaries",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Empty fake process runner; unknown commands fail to launch."""
    return FakeRunner()


@pytest.fixture
def probe(fake_runner) -> CommandProbe:
    """CommandProbe wired to the fake runner with an isolated environment."""
    return CommandProbe(
        runner=fake_runner, environ={"PATH": "/usr/bin", "RUSTC": "/outer/rustc"}
    )


@pytest.fixture
def wasm_settings() -> BuildSettings:
    """Settings requesting a WASM runtime with nothing pinned."""
    return BuildSettings(target=RuntimeTarget.WASM)


@pytest.fixture
def riscv_settings() -> BuildSettings:
    """Settings requesting a RISC-V runtime with nothing pinned."""
    return BuildSettings(target=RuntimeTarget.RISCV)


@pytest.fixture
def make_resolver(probe):
    """Factory building a resolver over the fake probe."""

    def _make(settings: BuildSettings) -> ToolchainResolver:
        return ToolchainResolver(settings, probe)

    return _make


@pytest.fixture
def isolated_env(monkeypatch):
    """Clear every environment variable RuntimeKit reads."""
    for name in [
        "SKIP_WASM_BUILD",
        "CARGO_NET_OFFLINE",
        "WASM_BUILD_TYPE",
        "WASM_BUILD_RUSTFLAGS",
        "WASM_TARGET_DIRECTORY",
        "WASM_BUILD_NO_COLOR",
        "WASM_BUILD_TOOLCHAIN",
        "FORCE_WASM_BUILD",
        "WASM_BUILD_WORKSPACE_HINT",
        "WASM_BUILD_STD",
        "SUBSTRATE_RUNTIME_TARGET",
        "CARGO",
        "RUSTC_BOOTSTRAP",
    ]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
