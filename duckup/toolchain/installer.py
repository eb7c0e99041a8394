"""
Per-tag compiler installation.

Each tag is installed once into its own directory of the toolchain store:

    toolchains/{tag}/{binary}

The directory's existence is the only "already installed" check. Creation,
download and chmod are separate steps, so an interrupted install can leave a
truncated or non-executable binary that later installs will not repair.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from duckup.core.config import DuckupSettings
from duckup.core.directory import DuckupEnvironment
from duckup.core.download import HttpClient, ProgressCallback
from duckup.core.exceptions import AssetNotFoundError
from duckup.core.filesystem import make_executable
from duckup.core.platform import PlatformInfo, detect_platform, release_asset_name
from duckup.toolchain.releases import ReleaseClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstalledToolchain:
    """A toolchain present in the store."""

    tag: str
    directory: Path
    binary_path: Path


@dataclass
class InstallResult:
    """Result of an install operation."""

    toolchain: InstalledToolchain
    """Installed toolchain"""

    was_installed: bool
    """Whether the tag was already installed (nothing was downloaded)"""


class Installer:
    """Installs compiler binaries from the release host."""

    def __init__(
        self,
        env: DuckupEnvironment,
        settings: DuckupSettings,
        http: HttpClient,
        releases: ReleaseClient,
        platform: Optional[PlatformInfo] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self.env = env
        self.settings = settings
        self.http = http
        self.releases = releases
        self.platform = platform or detect_platform()
        self.progress_callback = progress_callback

    def installed(self, tag: str) -> InstalledToolchain:
        return InstalledToolchain(
            tag=tag,
            directory=self.env.toolchain_dir(tag),
            binary_path=self.env.toolchain_binary(tag),
        )

    def is_installed(self, tag: str) -> bool:
        return self.env.toolchain_dir(tag).exists()

    def install(self, tag: str) -> InstallResult:
        """
        Install a tag unless its directory already exists.

        Raises:
            UnsupportedPlatformError: If no asset is published for this host
            AssetNotFoundError: If the release or its platform asset is missing
            NetworkError: If the release host cannot be reached
        """
        toolchain = self.installed(tag)
        if self.is_installed(tag):
            logger.info(f"Version {tag} is already installed.")
            return InstallResult(toolchain=toolchain, was_installed=True)

        logger.info(f"Installing {tag}...")

        asset_name = release_asset_name(
            self.platform.os, self.platform.arch, self.settings.binary_name
        )
        logger.info(f"Detected platform: {asset_name}")

        release = self.releases.get_release(tag)
        if release is None:
            raise AssetNotFoundError(tag)

        asset = release.find_asset(asset_name)
        if asset is None:
            raise AssetNotFoundError(tag, asset_name)

        toolchain.directory.mkdir(parents=True)
        self.http.download_file(
            asset.browser_download_url,
            toolchain.binary_path,
            self.progress_callback,
        )
        make_executable(toolchain.binary_path)

        logger.info(f"Installed {tag} successfully.")
        return InstallResult(toolchain=toolchain, was_installed=False)


__all__ = [
    "InstalledToolchain",
    "InstallResult",
    "Installer",
]
