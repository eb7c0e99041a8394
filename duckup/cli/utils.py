"""
Shared utilities for CLI commands.
"""

import logging
import sys
from typing import Optional

from duckup.core.download import DownloadProgress
from duckup.toolchain.manager import ToolchainManager

logger = logging.getLogger(__name__)


def log_progress(progress: DownloadProgress) -> None:
    """Progress callback that reports downloads at debug level."""
    logger.debug(f"  {progress}")


def create_manager(args) -> ToolchainManager:
    """
    Build a ToolchainManager for a parsed command line.

    Args:
        args: Parsed arguments with an optional 'config' path
    """
    return ToolchainManager.create(
        config_file=getattr(args, "config", None),
        progress_callback=log_progress,
    )


def print_error(message: str, hint: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        hint: Optional corrective action
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if hint:
        print(f"  {hint}", file=sys.stderr)
