"""
Platform detection and asset naming for duckup.

The release host and the runtime-dependency host publish binaries under two
independent naming schemes. This module detects the running platform and
maps it onto each scheme, failing closed for anything outside the fixed
tables.

Usage:
    from duckup.core.platform import detect_platform, release_asset_name

    info = detect_platform()
    print(release_asset_name(info.os, info.arch))  # dargo-linux-x86_64
"""

import functools
import platform
from dataclasses import dataclass

from duckup.core.exceptions import UnsupportedPlatformError

# Release host: dargo-{os}-{arch}[.exe]
RELEASE_OS = {
    "linux": "linux",
    "macos": "macos",
    "windows": "windows",
}
RELEASE_ARCH = {
    "x86_64": "x86_64",
    "aarch64": "aarch64",
    "arm": "armv7",
}

# Runtime host: go{version}.{os}-{arch}.{ext}
RUNTIME_OS = {
    "macos": "darwin",
    "linux": "linux",
    "windows": "windows",
}
RUNTIME_ARCH = {
    "x86_64": "amd64",
    "aarch64": "arm64",
    "x86": "386",
    "arm": "armv6l",
}


@dataclass(frozen=True)
class PlatformInfo:
    """
    Normalized host platform.

    Attributes:
        os: 'linux', 'macos', 'windows', or the raw lowercase system name
        arch: 'x86_64', 'aarch64', 'x86', 'arm', or the raw machine name
    """

    os: str
    arch: str

    def platform_string(self) -> str:
        """
        Get canonical platform string.

        Example:
            >>> PlatformInfo("linux", "x86_64").platform_string()
            'linux-x86_64'
        """
        return f"{self.os}-{self.arch}"

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    def __str__(self) -> str:
        return self.platform_string()


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.

    Returns:
        PlatformInfo for the running interpreter
    """
    return PlatformInfo(os=_detect_os(), arch=_detect_architecture())


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        Normalized OS name, or the raw lowercase name if unknown
    """
    system = platform.system().lower()

    if system == "darwin":
        return "macos"
    return system


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture, or the raw lowercase machine name if unknown
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x86_64"
    elif machine in ("aarch64", "arm64"):
        return "aarch64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    else:
        return machine


def release_asset_name(os_name: str, arch: str, binary_name: str = "dargo") -> str:
    """
    Get the compiler asset filename published on the release host.

    Args:
        os_name: Normalized OS name
        arch: Normalized architecture
        binary_name: Base name of the compiler binary

    Returns:
        Asset filename, e.g. 'dargo-linux-x86_64' or 'dargo-windows-x86_64.exe'

    Raises:
        UnsupportedPlatformError: If the pair is outside the release table
    """
    release_os = RELEASE_OS.get(os_name)
    release_arch = RELEASE_ARCH.get(arch)
    if release_os is None or release_arch is None:
        raise UnsupportedPlatformError(os_name, arch, host="release")

    ext = ".exe" if release_os == "windows" else ""
    return f"{binary_name}-{release_os}-{release_arch}{ext}"


def runtime_archive_name(version: str, os_name: str, arch: str) -> str:
    """
    Get the runtime bundle filename published on the runtime host.

    Args:
        version: Runtime version (e.g. '1.25.0')
        os_name: Normalized OS name
        arch: Normalized architecture

    Returns:
        Archive filename, e.g. 'go1.25.0.linux-amd64.tar.gz'

    Raises:
        UnsupportedPlatformError: If the pair is outside the runtime table
    """
    runtime_os = RUNTIME_OS.get(os_name)
    runtime_arch = RUNTIME_ARCH.get(arch)
    if runtime_os is None or runtime_arch is None:
        raise UnsupportedPlatformError(os_name, arch, host="runtime")

    ext = "zip" if runtime_os == "windows" else "tar.gz"
    return f"go{version}.{runtime_os}-{runtime_arch}.{ext}"


def clear_platform_cache():
    """
    Clear the platform detection cache.

    Useful for testing or when platform information changes.
    """
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "release_asset_name",
    "runtime_archive_name",
    "clear_platform_cache",
]
