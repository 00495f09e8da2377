"""
RuntimeKit CLI argument parser.

This module implements the command-line interface for RuntimeKit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from runtimekit import __version__
from runtimekit.core.exceptions import ConfigurationError, RuntimeKitError

logger = logging.getLogger(__name__)


class CLI:
    """RuntimeKit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="rtkit",
            description="RuntimeKit - Rust toolchain resolution for runtime builds",
            epilog='Use "rtkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"RuntimeKit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./runtimekit.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            help="Project root directory (default: WASM_BUILD_WORKSPACE_HINT or "
            "the current directory)",
        )
        parser.add_argument(
            "--target",
            choices=["wasm", "riscv"],
            metavar="TARGET",
            help="Runtime target (wasm|riscv), overrides SUBSTRATE_RUNTIME_TARGET",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_resolve_command(subparsers)
        self._add_candidates_command(subparsers)
        self._add_command_command(subparsers)

        return parser

    def _add_resolve_command(self, subparsers):
        """Add 'resolve' subcommand."""
        parser = subparsers.add_parser(
            "resolve",
            help="Resolve the toolchain used to build the runtime",
            description="Select the cargo toolchain that can build the runtime",
        )
        parser.add_argument(
            "--json", action="store_true", help="Print the result as JSON"
        )

    def _add_candidates_command(self, subparsers):
        """Add 'candidates' subcommand."""
        subparsers.add_parser(
            "candidates",
            help="List every candidate toolchain",
            description="Probe every candidate toolchain and show its capabilities",
        )

    def _add_command_command(self, subparsers):
        """Add 'command' subcommand."""
        parser = subparsers.add_parser(
            "command",
            help="Print the runtime build command",
            description="Print the exact cargo command line used to build the runtime",
        )
        parser.add_argument(
            "--manifest-path",
            type=Path,
            metavar="PATH",
            help="Cargo.toml of the runtime (default: PROJECT_ROOT/Cargo.toml)",
        )
        parser.add_argument(
            "--package",
            metavar="NAME",
            help="Cargo package name used for SKIP_<NAME>_WASM_BUILD "
            "(default: read from the manifest)",
        )
        parser.add_argument(
            "--json", action="store_true", help="Print the result as JSON"
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        # Configure logging
        self._configure_logging(parsed_args)

        # Check if command specified
        if not parsed_args.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except ConfigurationError as e:
            logger.error(f"Invalid configuration: {e}")
            return 1
        except RuntimeKitError as e:
            logger.error(str(e))
            return 1
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "resolve": "runtimekit.cli.commands.resolve",
            "candidates": "runtimekit.cli.commands.candidates",
            "command": "runtimekit.cli.commands.command",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
