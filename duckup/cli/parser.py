"""
duckup CLI argument parser.

This module implements the command-line interface for duckup using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from duckup.cli.utils import print_error
from duckup.core.exceptions import DuckupError

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("duckup")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

COMMAND_MAP = {
    "install": "duckup.cli.commands.install",
    "update": "duckup.cli.commands.update",
    "list": "duckup.cli.commands.list",
    "use": "duckup.cli.commands.use",
    "run": "duckup.cli.commands.run",
    "env": "duckup.cli.commands.env",
}


class CLI:
    """duckup command-line interface."""

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
            prog="duckup",
            description="The duck compiler toolchain manager",
            epilog='Use "duckup COMMAND --help" for command-specific help',
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"duckup {__version__}"
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
            help="Path to settings file (default: <data dir>/config.yaml)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        install = subparsers.add_parser(
            "install",
            help="Install a toolchain version",
            description="Install a toolchain version and stage its dependencies",
        )
        install.add_argument(
            "version", help="Version tag to install, or 'latest'"
        )

        subparsers.add_parser(
            "update",
            help="Install and switch to the latest version",
            description="Install the latest release and make it active",
        )

        subparsers.add_parser(
            "list",
            help="List installed toolchains",
            description="List installed toolchains and mark the active one",
        )

        use = subparsers.add_parser(
            "use",
            help="Switch the active toolchain",
            description="Make an installed version active and restage its dependencies",
        )
        use.add_argument("version", help="Installed version tag to activate")

        run = subparsers.add_parser(
            "run",
            help="Run the active dargo binary",
            description="Run the active dargo binary with the given arguments",
        )
        run.add_argument(
            "args",
            nargs=argparse.REMAINDER,
            help="Arguments passed verbatim to dargo",
        )

        subparsers.add_parser(
            "env",
            help="Show duckup directories",
            description="Show the directories duckup uses and PATH status",
        )

        return parser

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        argv = list(sys.argv[1:] if args is None else args)

        # Everything after 'run' belongs to dargo, including option-like
        # arguments argparse would otherwise reject
        if "run" in argv:
            index = argv.index("run")
            parsed = self.parser.parse_args(argv[: index + 1])
            if parsed.command == "run":
                parsed.args = argv[index + 1 :]
                return parsed

        return self.parser.parse_args(argv)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except DuckupError as e:
            print_error(str(e), getattr(e, "hint", None))
            if parsed_args.verbose:
                logger.debug("Traceback:", exc_info=True)
            return 1
        except OSError as e:
            print_error(f"Filesystem error: {e}")
            if parsed_args.verbose:
                logger.debug("Traceback:", exc_info=True)
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
        module_name = COMMAND_MAP.get(args.command)
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
