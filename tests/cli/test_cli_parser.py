"""
Tests for the RuntimeKit CLI parser.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from runtimekit.cli.parser import CLI, main
from runtimekit.core.exceptions import (
    ConfigurationError,
    NoSuitableToolchainError,
)
from runtimekit.toolchain.target import RuntimeTarget


class TestCLIParser:
    """Tests for argument parsing."""

    def test_parser_creation(self):
        """Test that the parser is created with the right program name."""
        cli = CLI()

        assert cli.parser is not None
        assert cli.parser.prog == "rtkit"

    def test_version(self, capsys):
        """Test --version output."""
        with pytest.raises(SystemExit) as exc_info:
            CLI().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert "RuntimeKit" in capsys.readouterr().out

    def test_global_options(self):
        """Test global options before the subcommand."""
        args = CLI().parse_args(
            [
                "-v",
                "--config",
                "custom.yaml",
                "--project-root",
                "/src/node",
                "--target",
                "riscv",
                "resolve",
                "--json",
            ]
        )

        assert args.verbose is True
        assert args.config == Path("custom.yaml")
        assert args.project_root == Path("/src/node")
        assert args.target == "riscv"
        assert args.command == "resolve"
        assert args.json is True

    def test_invalid_target(self):
        """Test that --target only accepts known targets."""
        with pytest.raises(SystemExit):
            CLI().parse_args(["--target", "arm", "resolve"])

    def test_candidates_command(self):
        """Test parsing the candidates subcommand."""
        args = CLI().parse_args(["candidates"])

        assert args.command == "candidates"
        assert args.target is None

    def test_command_command(self):
        """Test parsing the command subcommand."""
        args = CLI().parse_args(
            ["command", "--manifest-path", "runtime/Cargo.toml", "--json"]
        )

        assert args.command == "command"
        assert args.manifest_path == Path("runtime/Cargo.toml")
        assert args.json is True
        assert args.package is None
        assert args.project_root is None

    def test_command_package_option(self):
        """Test the --package option of the command subcommand."""
        args = CLI().parse_args(["command", "--package", "node-runtime"])

        assert args.package == "node-runtime"


class TestCLIRun:
    """Tests for CLI.run dispatch and error handling."""

    def test_no_command_prints_help(self, capsys):
        """Test that running without a command shows help."""
        assert CLI().run([]) == 1
        assert "usage" in capsys.readouterr().out.lower()

    def test_dispatch(self):
        """Test that the subcommand module's run() is called."""
        with patch("runtimekit.cli.commands.resolve.run", return_value=0) as mock_run:
            assert CLI().run(["resolve"]) == 0

        mock_run.assert_called_once()
        assert mock_run.call_args.args[0].command == "resolve"

    def test_configuration_error(self):
        """Test that configuration errors map to exit code 1."""
        error = ConfigurationError("bad WASM_BUILD_STD")
        with patch("runtimekit.cli.commands.resolve.run", side_effect=error):
            with patch("runtimekit.cli.parser.logger") as mock_logger:
                assert CLI().run(["resolve"]) == 1

        mock_logger.error.assert_called_once_with(
            "Invalid configuration: bad WASM_BUILD_STD"
        )

    def test_no_toolchain(self):
        """Test that a failed resolution maps to exit code 1."""
        error = NoSuitableToolchainError(RuntimeTarget.WASM)
        with patch("runtimekit.cli.commands.candidates.run", side_effect=error):
            with patch("runtimekit.cli.parser.logger") as mock_logger:
                assert CLI().run(["candidates"]) == 1

        assert "wasm" in mock_logger.error.call_args.args[0]

    def test_keyboard_interrupt(self):
        """Test that Ctrl-C maps to exit code 130."""
        with patch("runtimekit.cli.commands.command.run", side_effect=KeyboardInterrupt):
            assert CLI().run(["command"]) == 130

    def test_unexpected_error(self):
        """Test that unexpected errors map to exit code 1."""
        with patch("runtimekit.cli.commands.resolve.run", side_effect=RuntimeError("boom")):
            assert CLI().run(["-q", "resolve"]) == 1

    def test_main_exits_with_code(self):
        """Test that main() exits with the command's code."""
        with patch("sys.argv", ["rtkit", "resolve"]):
            with patch("runtimekit.cli.commands.resolve.run", return_value=0):
                with pytest.raises(SystemExit) as exc_info:
                    main()

        assert exc_info.value.code == 0
