"""
Update command implementation.

Installs the latest release and switches to it.
"""

from duckup.cli.utils import create_manager


def run(args) -> int:
    """
    Run the update command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    manager = create_manager(args)
    try:
        manager.update()
    finally:
        manager.close()
    return 0
