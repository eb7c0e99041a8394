"""
Centralized exception hierarchy for duckup.

Every fatal condition raised by the toolchain lifecycle derives from
DuckupError so the command line can report it uniformly.
"""

from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class DuckupError(Exception):
    """Base exception for all duckup errors."""

    pass


class ConfigurationError(DuckupError):
    """Raised when the settings file cannot be used."""

    pass


# ============================================================================
# Platform Exceptions
# ============================================================================


class UnsupportedPlatformError(DuckupError):
    """Raised when an OS/architecture pair has no published asset."""

    def __init__(self, os_name: str, arch: str, host: str = "release"):
        self.os_name = os_name
        self.arch = arch
        self.host = host
        super().__init__(
            f"Unsupported platform for {host} host: {os_name}/{arch}"
        )


# ============================================================================
# Network Exceptions
# ============================================================================


class NetworkError(DuckupError):
    """Raised when a request fails or returns a non-success status."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.url = url
        self.status_code = status_code
        if status_code is not None:
            message = f"{message} (HTTP {status_code})"
        super().__init__(message)


# ============================================================================
# Toolchain Exceptions
# ============================================================================


class ResolutionError(DuckupError):
    """Raised when no release can be discovered for a symbolic request."""

    pass


class AssetNotFoundError(DuckupError):
    """Raised when a release or its platform asset does not exist."""

    def __init__(self, tag: str, asset_name: Optional[str] = None):
        self.tag = tag
        self.asset_name = asset_name
        if asset_name:
            msg = f"Could not find binary '{asset_name}' in release {tag}"
        else:
            msg = f"Release {tag} not found on the release host"
        super().__init__(msg)


class NotInstalledError(DuckupError):
    """Raised when an operation needs a toolchain that is not installed."""

    def __init__(self, message: str, hint: Optional[str] = None):
        self.hint = hint
        super().__init__(message)


class ArchiveLayoutError(DuckupError):
    """Raised when an extracted bundle lacks its expected root directory."""

    pass


__all__ = [
    "DuckupError",
    "ConfigurationError",
    "UnsupportedPlatformError",
    "NetworkError",
    "ResolutionError",
    "AssetNotFoundError",
    "NotInstalledError",
    "ArchiveLayoutError",
]
