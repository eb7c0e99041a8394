"""
Env command implementation.

Reports where duckup keeps its files and whether the binary directory is on
PATH.
"""

import os

from duckup.core.directory import resolve_environment


def run(args) -> int:
    """
    Print environment information.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    env = resolve_environment()

    print("Duckup Environment")

    any_not_set = False
    for name, default in (
        ("XDG_DATA_HOME", env.data_dir),
        ("XDG_BIN_HOME", env.bin_dir),
    ):
        value = os.environ.get(name)
        if value:
            print(f"  {name}: {value}")
        else:
            print(f"  {name}: not set (using default {default})")
            any_not_set = True

    if any_not_set:
        print(
            "preferring xdg base directories from env "
            "(read more here: https://wiki.archlinux.org/title/XDG_Base_Directory)"
        )

    print("-" * 39)
    print(f"toolchain dir: {env.toolchains_dir}")
    print(f"binary dir   : {env.bin_dir}")
    print(f"global dir   : {env.global_dir}")
    print()

    path_entries = os.environ.get("PATH", "").split(os.pathsep)
    if any(os.path.normpath(p) == os.path.normpath(env.bin_dir) for p in path_entries if p):
        print("binary directory is in your PATH")
    else:
        print("WARNING: binary directory is NOT in your PATH")
        print("   add this to your shell profile:")
        print(f'   export PATH="$PATH:{env.bin_dir}"')
    return 0
