"""
Core functionality for duckup.

This package contains the foundational modules that the toolchain
lifecycle depends on.
"""

from .exceptions import (
    DuckupError,
    ConfigurationError,
    UnsupportedPlatformError,
    NetworkError,
    ResolutionError,
    AssetNotFoundError,
    NotInstalledError,
    ArchiveLayoutError,
)

from .platform import (
    PlatformInfo,
    detect_platform,
    release_asset_name,
    runtime_archive_name,
    clear_platform_cache,
)

from .config import (
    DuckupSettings,
    load_settings,
)

from .directory import (
    DirectoryError,
    DuckupEnvironment,
    resolve_environment,
)

from .download import (
    DownloadProgress,
    HttpClient,
    format_progress,
)

from .cache import (
    ArtifactCache,
    CacheKeyError,
    CacheEntry,
    CacheKind,
)

__all__ = [
    "DuckupError",
    "ConfigurationError",
    "UnsupportedPlatformError",
    "NetworkError",
    "ResolutionError",
    "AssetNotFoundError",
    "NotInstalledError",
    "ArchiveLayoutError",
    "PlatformInfo",
    "detect_platform",
    "release_asset_name",
    "runtime_archive_name",
    "clear_platform_cache",
    "DuckupSettings",
    "load_settings",
    "DirectoryError",
    "DuckupEnvironment",
    "resolve_environment",
    "DownloadProgress",
    "HttpClient",
    "format_progress",
    "ArtifactCache",
    "CacheKeyError",
    "CacheEntry",
    "CacheKind",
]
