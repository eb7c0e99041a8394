"""
Toolchain lifecycle orchestration.

This module wires the lifecycle components together in the order the
command line runs them:

    VersionResolver -> DependencyBootstrapper -> Installer -> ActiveLinkManager

Example:
    >>> manager = ToolchainManager.create()
    >>> outcome = manager.update()
    >>> print(f"Now using {outcome.tag}")
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from duckup.core.cache import ArtifactCache
from duckup.core.config import DuckupSettings, load_settings
from duckup.core.directory import DuckupEnvironment, resolve_environment
from duckup.core.download import HttpClient, ProgressCallback
from duckup.core.platform import PlatformInfo, detect_platform
from duckup.toolchain.bootstrap import BootstrapResult, DependencyBootstrapper
from duckup.toolchain.installer import InstallResult, Installer
from duckup.toolchain.linking import ActiveLinkManager
from duckup.toolchain.lister import ListedToolchain, Lister
from duckup.toolchain.releases import ReleaseClient
from duckup.toolchain.resolver import LATEST, VersionResolver

logger = logging.getLogger(__name__)


@dataclass
class InstallOutcome:
    """Result of install/update."""

    tag: str
    """Resolved version tag"""

    bootstrap: BootstrapResult
    """Staged dependencies"""

    install: InstallResult
    """Installed toolchain"""

    activated: bool = False
    """Whether the tag was made active"""


class ToolchainManager:
    """Runs the toolchain lifecycle against one environment."""

    def __init__(
        self,
        env: DuckupEnvironment,
        settings: DuckupSettings,
        http: Optional[HttpClient] = None,
        platform: Optional[PlatformInfo] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self.env = env
        self.settings = settings
        self.http = http or HttpClient(settings.user_agent, settings.timeout)
        self.platform = platform or detect_platform()

        self.releases = ReleaseClient(self.http, settings)
        self.resolver = VersionResolver(self.releases)
        self.bootstrapper = DependencyBootstrapper(
            env,
            settings,
            self.http,
            self.releases,
            cache=ArtifactCache(env.cache_dir),
            platform=self.platform,
            progress_callback=progress_callback,
        )
        self.installer = Installer(
            env,
            settings,
            self.http,
            self.releases,
            platform=self.platform,
            progress_callback=progress_callback,
        )
        self.links = ActiveLinkManager(env)
        self.lister = Lister(env)

    @classmethod
    def create(
        cls,
        config_file: Optional[Path] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> "ToolchainManager":
        """
        Build a manager from the process environment.

        Args:
            config_file: Optional settings file (default: {data_dir}/config.yaml)
            progress_callback: Optional download progress callback
        """
        env = resolve_environment()
        settings = load_settings(config_file, data_dir=env.data_dir)
        if settings.binary_name != "dargo":
            env = resolve_environment(binary_name=settings.binary_name)
        return cls(env, settings, progress_callback=progress_callback)

    def install(self, version: str) -> InstallOutcome:
        """Resolve version, stage its dependencies and install it."""
        tag = self.resolver.resolve(version)
        self.env.ensure_structure()
        bootstrap = self.bootstrapper.bootstrap(tag)
        install = self.installer.install(tag)
        return InstallOutcome(tag=tag, bootstrap=bootstrap, install=install)

    def update(self) -> InstallOutcome:
        """Install the latest release and make it active."""
        logger.info("Checking for updates...")
        tag = self.resolver.resolve(LATEST)
        logger.info(f"Found latest nightly: {tag}")

        outcome = self.install(tag)
        self.links.activate(tag)
        outcome.activated = True
        return outcome

    def use(self, version: str) -> BootstrapResult:
        """
        Make an installed tag active and restage its dependencies.

        Raises:
            NotInstalledError: If the tag is not installed (nothing is modified)
        """
        tag = self.resolver.resolve(version)
        self.links.activate(tag)
        return self.bootstrapper.bootstrap(tag)

    def list(self) -> Iterator[ListedToolchain]:
        return self.lister.list()

    def active_binary(self) -> Path:
        return self.links.active_binary()

    def close(self) -> None:
        self.http.close()


__all__ = [
    "InstallOutcome",
    "ToolchainManager",
]
