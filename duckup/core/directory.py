"""
Directory layout for duckup.

All mutable state lives under three roots, resolved once and passed to
every component as a DuckupEnvironment:

    Data directory ($XDG_DATA_HOME/duckup or ~/.local/share/duckup):
        - toolchains/{tag}/{binary}  : Immutable per-tag installs
        - cache/source/{tag}/        : Extracted source trees
        - cache/go/{version}/        : Extracted runtime bundles
        - config.yaml                : Optional settings

    Binary directory ($XDG_BIN_HOME or ~/.local/bin):
        - {binary}                   : The active link

    Global dependency root (~/.duck):
        - go-compiler/               : Staged runtime bundle
        - std/                       : Staged standard library
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from duckup.core.exceptions import DuckupError


class DirectoryError(DuckupError):
    """Raised when the directory layout cannot be determined."""

    pass


@dataclass(frozen=True)
class DuckupEnvironment:
    """
    Resolved filesystem locations shared by every component.

    Attributes:
        data_dir: Root for toolchains and caches
        bin_dir: Directory holding the active link
        global_dir: Global dependency staging root
        binary_name: File name of the compiler binary on disk
    """

    data_dir: Path
    bin_dir: Path
    global_dir: Path
    binary_name: str = "dargo"

    @property
    def toolchains_dir(self) -> Path:
        return self.data_dir / "toolchains"

    @property
    def cache_dir(self) -> Path:
        return self.data_dir / "cache"

    @property
    def runtime_staging_dir(self) -> Path:
        return self.global_dir / "go-compiler"

    @property
    def std_staging_dir(self) -> Path:
        return self.global_dir / "std"

    @property
    def active_link(self) -> Path:
        return self.bin_dir / self.binary_name

    def toolchain_dir(self, tag: str) -> Path:
        """Get the install directory for a tag."""
        return self.toolchains_dir / tag

    def toolchain_binary(self, tag: str) -> Path:
        """Get the installed binary path for a tag."""
        return self.toolchain_dir(tag) / self.binary_name

    def ensure_structure(self) -> None:
        """Create the toolchain store, cache and binary directories."""
        for path in (self.toolchains_dir, self.cache_dir, self.bin_dir):
            path.mkdir(parents=True, exist_ok=True)


def resolve_environment(
    environ: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
    os_name: Optional[str] = None,
    binary_name: str = "dargo",
) -> DuckupEnvironment:
    """
    Resolve the directory layout from environment variables.

    Args:
        environ: Environment mapping (defaults to os.environ)
        home: Home directory (defaults to Path.home())
        os_name: 'windows', 'linux' or 'macos' (defaults to the running OS)
        binary_name: Base name of the compiler binary

    Returns:
        DuckupEnvironment with absolute paths

    Example:
        >>> env = resolve_environment({"XDG_DATA_HOME": "/data"}, Path("/home/u"), "linux")
        >>> env.toolchains_dir
        PosixPath('/data/duckup/toolchains')
    """
    environ = os.environ if environ is None else environ
    if os_name is None:
        os_name = "windows" if os.name == "nt" else "posix"
    is_windows = os_name == "windows"

    if home is None:
        try:
            home = Path.home()
        except RuntimeError as e:
            raise DirectoryError(f"Could not find home directory: {e}") from e

    if environ.get("XDG_DATA_HOME"):
        data_dir = Path(environ["XDG_DATA_HOME"]) / "duckup"
    elif is_windows:
        local_app_data = environ.get("LOCALAPPDATA")
        base = Path(local_app_data) if local_app_data else home / "AppData" / "Local"
        data_dir = base / "duck-compiler" / "duckup"
    else:
        data_dir = home / ".local" / "share" / "duckup"

    if environ.get("XDG_BIN_HOME"):
        bin_dir = Path(environ["XDG_BIN_HOME"])
    elif is_windows:
        bin_dir = data_dir / "bin"
    else:
        bin_dir = home / ".local" / "bin"

    if is_windows and not binary_name.endswith(".exe"):
        binary_name = f"{binary_name}.exe"

    return DuckupEnvironment(
        data_dir=data_dir,
        bin_dir=bin_dir,
        global_dir=home / ".duck",
        binary_name=binary_name,
    )


__all__ = [
    "DirectoryError",
    "DuckupEnvironment",
    "resolve_environment",
]
