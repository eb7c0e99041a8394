"""
Use command implementation.

Switches the active toolchain and restages the dependencies it needs.
"""

from duckup.cli.utils import create_manager


def run(args) -> int:
    """
    Run the use command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    manager = create_manager(args)
    try:
        manager.use(args.version)
    finally:
        manager.close()
    return 0
