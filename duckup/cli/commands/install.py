"""
Install command implementation.

Resolves a version, stages its dependencies and installs the compiler.
"""

import logging

from duckup.cli.utils import create_manager

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    manager = create_manager(args)
    try:
        outcome = manager.install(args.version)
    finally:
        manager.close()

    if not outcome.install.was_installed:
        logger.info(f"Run 'duckup use {outcome.tag}' to make it active.")
    return 0
