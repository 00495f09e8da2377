"""
Tests for runtimekit.toolchain.resolver module.
"""

import dataclasses

import pytest

from runtimekit.config.settings import BuildSettings
from runtimekit.core.exceptions import NoSuitableToolchainError
from runtimekit.toolchain.candidate import CandidateCommand
from runtimekit.toolchain.resolver import ResolvedToolchain
from runtimekit.toolchain.target import RuntimeTarget
from runtimekit.toolchain.version import Version

RISCV_TRIPLE = "riscv32ema-unknown-none-elf"

TOOLCHAIN_LIST = (
    "1.66.0-x86_64-unknown-linux-gnu\n"
    "nightly-2023-04-01-x86_64-unknown-linux-gnu\n"
    "stable-x86_64-unknown-linux-gnu (default)\n"
)


@pytest.fixture
def installed_toolchains(fake_runner):
    """rustup reporting 1.66.0, 1.70.0-nightly and 1.68.0 toolchains."""
    fake_runner.add(["rustup", "toolchain", "list"], TOOLCHAIN_LIST)
    fake_runner.add_rustup_toolchain(
        "1.66.0-x86_64-unknown-linux-gnu", "cargo 1.66.0 (d65d197ad 2022-11-15)"
    )
    fake_runner.add_rustup_toolchain(
        "nightly-2023-04-01-x86_64-unknown-linux-gnu",
        "cargo 1.70.0-nightly (145219a9f 2023-03-27)",
    )
    fake_runner.add_rustup_toolchain(
        "stable-x86_64-unknown-linux-gnu", "cargo 1.68.0 (115f34552 2023-02-26)"
    )
    return fake_runner


class TestPinnedToolchain:
    """Tests for step 1: a pinned toolchain."""

    def test_pinned_returned_without_gating(self, fake_runner, make_resolver):
        """Test that a pinned toolchain is returned even with no version."""
        settings = BuildSettings(toolchain="nightly-2020-02-20")
        resolver = make_resolver(settings)

        command = resolver.resolve()

        assert command.program == "rustup"
        assert command.args == ("run", "nightly-2020-02-20", "cargo")
        assert command.version is None
        assert command.supports(RuntimeTarget.WASM) is False

    def test_pinned_skips_other_candidates(self, fake_runner, make_resolver):
        """Test that nothing else is probed when a toolchain is pinned."""
        fake_runner.add_cargo(["cargo"], "cargo 1.75.0 (abc 2023-11-20)")
        settings = BuildSettings(toolchain="stable", cargo_program="/outer/cargo")

        make_resolver(settings).resolve()

        assert not fake_runner.called(["cargo", "--version"])
        assert not fake_runner.called(["/outer/cargo", "--version"])
        assert not fake_runner.called(["rustup", "toolchain", "list"])

    def test_pinned_uses_configured_rustup(self, make_resolver):
        """Test that the rustup program name comes from settings."""
        settings = BuildSettings(toolchain="stable", rustup_program="/opt/rustup")

        command = make_resolver(settings).resolve()

        assert command.command_line() == ["/opt/rustup", "run", "stable", "cargo"]


class TestBuildAndDefaultCargo:
    """Tests for steps 2 and 3."""

    def test_build_cargo_preferred(self, fake_runner, make_resolver):
        """Test that a capable CARGO wins over the default."""
        fake_runner.add_cargo(["/outer/cargo"], "cargo 1.70.0 (abc 2023-05-01)")
        fake_runner.add_cargo(["cargo"], "cargo 1.75.0 (abc 2023-11-20)")
        settings = BuildSettings(cargo_program="/outer/cargo")

        command = make_resolver(settings).resolve()

        assert command.program == "/outer/cargo"
        assert not fake_runner.called(["cargo", "--version"])

    def test_default_cargo_when_build_cargo_too_old(self, fake_runner, make_resolver):
        """Test falling through to the default cargo."""
        fake_runner.add_cargo(["/outer/cargo"], "cargo 1.60.0 (abc 2022-04-07)")
        fake_runner.add_cargo(["cargo"], "cargo 1.75.0 (abc 2023-11-20)")
        settings = BuildSettings(cargo_program="/outer/cargo")

        command = make_resolver(settings).resolve()

        assert command.program == "cargo"
        assert command.version == Version(1, 75, 0)

    def test_default_cargo_without_build_cargo(self, fake_runner, make_resolver, wasm_settings):
        """Test that an unset CARGO goes straight to the default cargo."""
        fake_runner.add_cargo(["cargo"], "cargo 1.68.0 (abc 2023-02-26)")

        command = make_resolver(wasm_settings).resolve()

        assert command.program == "cargo"
        assert not fake_runner.called(["rustup", "toolchain", "list"])

    def test_bootstrap_makes_default_capable(self, fake_runner, make_resolver):
        """Test that RUSTC_BOOTSTRAP accepts an old default cargo."""
        fake_runner.add_cargo(["cargo"], "cargo 1.50.0 (abc 2021-02-11)")
        settings = BuildSettings(rustc_bootstrap=True)

        command = make_resolver(settings).resolve()

        assert command.program == "cargo"


class TestRustupSearch:
    """Tests for step 4: searching rustup toolchains."""

    def test_highest_version_wins(self, installed_toolchains, make_resolver, wasm_settings):
        """Test the default 1.65.0 falls through and 1.70.0-nightly is picked."""
        installed_toolchains.add_cargo(["cargo"], "cargo 1.65.0 (4c1d96df5 2022-11-01)")

        command = make_resolver(wasm_settings).resolve()

        assert command.args == (
            "run",
            "nightly-2023-04-01-x86_64-unknown-linux-gnu",
            "cargo",
        )
        assert command.version.triple == (1, 70, 0)
        assert command.version.is_nightly is True

    def test_stable_not_preferred_over_newer_nightly(
        self, installed_toolchains, make_resolver, wasm_settings
    ):
        """Test that ranking is purely numeric."""
        command = make_resolver(wasm_settings).best_rustup_command()

        assert command.version == Version(1, 70, 0)

    def test_higher_stable_beats_lower_nightly(self, fake_runner, make_resolver, wasm_settings):
        """Test that a nightly flag does not lift a lower version."""
        fake_runner.add(["rustup", "toolchain", "list"], "nightly\nstable\n")
        fake_runner.add_rustup_toolchain("nightly", "cargo 1.71.0-nightly (abc 2023-05-01)")
        fake_runner.add_rustup_toolchain("stable", "cargo 1.72.0 (abc 2023-08-23)")

        command = make_resolver(wasm_settings).resolve()

        assert command.args == ("run", "stable", "cargo")

    def test_tie_broken_by_toolchain_name(self, fake_runner, make_resolver, wasm_settings):
        """Test that equal versions pick the lexicographically smallest name."""
        fake_runner.add(
            ["rustup", "toolchain", "list"], "zeta (default)\nalpha\nmid\n"
        )
        fake_runner.add_rustup_toolchain("zeta", "cargo 1.70.0 (abc 2023-06-01)")
        fake_runner.add_rustup_toolchain("alpha", "cargo 1.70.0-nightly (abc 2023-04-01)")
        fake_runner.add_rustup_toolchain("mid", "cargo 1.70.0 (abc 2023-06-01)")

        command = make_resolver(wasm_settings).resolve()

        assert command.args == ("run", "alpha", "cargo")

    def test_unsupported_toolchains_filtered(self, fake_runner, make_resolver, wasm_settings):
        """Test that old and unprobeable toolchains are skipped."""
        fake_runner.add(["rustup", "toolchain", "list"], "old\nbroken\ngood\n")
        fake_runner.add_rustup_toolchain("old", "cargo 1.67.1 (abc 2023-02-01)")
        fake_runner.add_rustup_toolchain("broken", None)
        fake_runner.add_rustup_toolchain("good", "cargo 1.68.0 (abc 2023-02-26)")

        command = make_resolver(wasm_settings).resolve()

        assert command.args == ("run", "good", "cargo")

    def test_versionless_toolchain_skipped_under_bootstrap(self, fake_runner, make_resolver):
        """Test that a toolchain without a version cannot be ranked."""
        fake_runner.add(["rustup", "toolchain", "list"], "mystery\n")
        fake_runner.add_rustup_toolchain("mystery", None)
        resolver = make_resolver(BuildSettings(rustc_bootstrap=True))

        assert resolver.best_rustup_command() is None

    def test_riscv_requires_target(self, fake_runner, make_resolver, riscv_settings):
        """Test that RISC-V picks the toolchain shipping the custom triple."""
        fake_runner.add_cargo(
            ["cargo"], "cargo 1.80.0 (abc 2024-07-21)", ["wasm32-unknown-unknown"]
        )
        fake_runner.add(["rustup", "toolchain", "list"], "stable\nriscv\n")
        fake_runner.add_rustup_toolchain(
            "stable", "cargo 1.80.0 (abc 2024-07-21)", ["wasm32-unknown-unknown"]
        )
        fake_runner.add_rustup_toolchain(
            "riscv", "cargo 1.75.0-dev", ["wasm32-unknown-unknown", RISCV_TRIPLE]
        )

        command = make_resolver(riscv_settings).resolve()

        assert command.args == ("run", "riscv", "cargo")

    def test_explicit_target_overrides_settings(self, fake_runner, make_resolver, wasm_settings):
        """Test that resolve(target) wins over settings.target."""
        fake_runner.add_cargo(["cargo"], "cargo 1.80.0 (abc 2024-07-21)", None)

        assert make_resolver(wasm_settings).resolve(RuntimeTarget.WASM) is not None
        assert make_resolver(wasm_settings).resolve(RuntimeTarget.RISCV) is None


class TestNoCandidate:
    """Tests for step 5: nothing qualifies."""

    def test_resolve_returns_none(self, fake_runner, make_resolver, wasm_settings):
        """Test that a machine with no usable toolchain yields None."""
        fake_runner.add_cargo(["cargo"], "cargo 1.60.0 (abc 2022-04-07)")

        assert make_resolver(wasm_settings).resolve() is None

    def test_resolve_without_any_programs(self, make_resolver, wasm_settings):
        """Test that missing cargo and rustup degrade to None."""
        assert make_resolver(wasm_settings).resolve() is None

    def test_resolve_or_raise(self, make_resolver, riscv_settings):
        """Test that resolve_or_raise reports the target."""
        with pytest.raises(NoSuitableToolchainError) as exc_info:
            make_resolver(riscv_settings).resolve_or_raise()

        assert exc_info.value.target is RuntimeTarget.RISCV
        assert "riscv" in str(exc_info.value)


class TestIdempotence:
    """Tests for repeatable resolution."""

    def test_same_inputs_same_result(self, installed_toolchains, make_resolver, wasm_settings):
        """Test that resolving twice gives equal commands."""
        installed_toolchains.add_cargo(["cargo"], "cargo 1.65.0 (abc 2022-11-01)")
        resolver = make_resolver(wasm_settings)

        first = resolver.resolve()
        second = resolver.resolve()

        assert first == second
        assert first.command_line() == second.command_line()


class TestAllCandidates:
    """Tests for ToolchainResolver.all_candidates."""

    def test_lists_every_source(self, installed_toolchains, make_resolver):
        """Test that each candidate is labelled with where it came from."""
        settings = BuildSettings(toolchain="pinned-tc", cargo_program="/outer/cargo")

        sources = [source for source, _ in make_resolver(settings).all_candidates()]

        assert sources == [
            "pinned",
            "build",
            "default",
            "rustup:1.66.0-x86_64-unknown-linux-gnu",
            "rustup:nightly-2023-04-01-x86_64-unknown-linux-gnu",
            "rustup:stable-x86_64-unknown-linux-gnu",
        ]


class TestResolvedToolchain:
    """Tests for ResolvedToolchain."""

    def test_cache_key_depends_on_rustc_version(self):
        """Test that a different rustc changes the cache key."""
        command = CandidateCommand(program="rustup", args=("run", "stable", "cargo"))
        first = ResolvedToolchain(command, "rustc 1.75.0 (82e1608df 2023-12-21)")
        second = ResolvedToolchain(command, "rustc 1.76.0 (07dca489a 2024-02-04)")

        assert first.cache_key != second.cache_key
        assert len(first.cache_key) == 64

    def test_cache_key_is_stable(self):
        """Test that equal inputs give equal keys."""
        command = CandidateCommand(program="cargo")

        assert (
            ResolvedToolchain(command, "rustc 1.75.0").cache_key
            == ResolvedToolchain(command, "rustc 1.75.0").cache_key
        )

    def test_delegates_to_command(self):
        """Test program, args and command_line passthrough."""
        command = CandidateCommand(program="rustup", args=("run", "beta", "cargo"))
        resolved = ResolvedToolchain(command, "rustc 1.76.0-beta.1")

        assert resolved.program == "rustup"
        assert resolved.args == ("run", "beta", "cargo")
        assert resolved.command_line("build") == ["rustup", "run", "beta", "cargo", "build"]

    def test_immutable(self):
        """Test that a resolved toolchain cannot be changed."""
        resolved = ResolvedToolchain(CandidateCommand(program="cargo"), "rustc 1.75.0")

        with pytest.raises(dataclasses.FrozenInstanceError):
            resolved.rustc_version = "other"
