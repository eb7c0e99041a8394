"""
Run command implementation.

Forwards its arguments verbatim to the active dargo binary and propagates
the exit code.
"""

import logging
import subprocess

from duckup.cli.utils import create_manager

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the active binary.

    Args:
        args: Parsed command-line arguments with 'args' to forward

    Returns:
        Exit code of the binary
    """
    manager = create_manager(args)
    try:
        binary = manager.active_binary()
    finally:
        manager.close()

    forwarded = list(args.args or [])
    # argparse.REMAINDER keeps a leading "--" separator
    if forwarded and forwarded[0] == "--":
        forwarded = forwarded[1:]

    logger.debug(f"Running {binary} {forwarded}")
    result = subprocess.run([str(binary), *forwarded])
    return result.returncode
