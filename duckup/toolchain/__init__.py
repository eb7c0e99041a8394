"""
Toolchain lifecycle for duckup.

This package provides:
- Release lookup and version resolution
- Dependency bootstrapping (runtime bundle and standard library)
- Per-tag installation
- Active toolchain switching and listing
"""

from duckup.toolchain.releases import Asset, Release, ReleaseClient
from duckup.toolchain.resolver import LATEST, VersionResolver
from duckup.toolchain.bootstrap import (
    BootstrapResult,
    DependencyBootstrapper,
    DependencyManifest,
    read_manifest,
)
from duckup.toolchain.installer import InstalledToolchain, InstallResult, Installer
from duckup.toolchain.linking import ActiveLinkManager, LinkType
from duckup.toolchain.lister import ListedToolchain, Lister
from duckup.toolchain.manager import InstallOutcome, ToolchainManager

__all__ = [
    "Asset",
    "Release",
    "ReleaseClient",
    "LATEST",
    "VersionResolver",
    "BootstrapResult",
    "DependencyBootstrapper",
    "DependencyManifest",
    "read_manifest",
    "InstalledToolchain",
    "InstallResult",
    "Installer",
    "ActiveLinkManager",
    "LinkType",
    "ListedToolchain",
    "Lister",
    "InstallOutcome",
    "ToolchainManager",
]
