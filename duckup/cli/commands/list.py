"""
List command implementation.
"""

from duckup.cli.utils import create_manager
from duckup.core.filesystem import IDENTITY_IS_PRECISE


def run(args) -> int:
    """
    Print installed toolchains, marking the active one.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    manager = create_manager(args)
    try:
        toolchains = list(manager.list())
    finally:
        manager.close()

    print("installed toolchains:")
    if not toolchains:
        print("  (No toolchains found)")
        return 0

    for toolchain in toolchains:
        if toolchain.is_active:
            print(f"  {toolchain.tag} (active)")
        else:
            print(f"  {toolchain.tag}")

    if not IDENTITY_IS_PRECISE and sum(t.is_active for t in toolchains) > 1:
        print("  (active detection compares file sizes on this platform)")
    return 0
