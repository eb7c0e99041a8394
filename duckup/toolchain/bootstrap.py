"""
Dependency bootstrapping.

Every compiler tag needs a Go runtime and the duck standard library. This
module caches the tag's source tree, reads the runtime version it pins,
caches that runtime bundle and stages both into the global dependency root:

    ~/.duck/go-compiler/   : Copy of cache/go/{version}/
    ~/.duck/std/           : Copy of cache/source/{tag}/std/

Staging is global, not per tag. Only the most recently bootstrapped tag's
dependencies are staged at any time.
"""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from duckup.core.cache import ArtifactCache, CacheKind
from duckup.core.config import DuckupSettings
from duckup.core.directory import DuckupEnvironment
from duckup.core.download import HttpClient, ProgressCallback
from duckup.core.exceptions import ArchiveLayoutError
from duckup.core.filesystem import (
    extract_archive,
    find_single_directory,
    replace_directory,
)
from duckup.core.platform import PlatformInfo, detect_platform, runtime_archive_name
from duckup.toolchain.releases import ReleaseClient

logger = logging.getLogger(__name__)

# Version tokens become cache directory names and URL segments
_VERSION_PATTERN = re.compile(r"[0-9A-Za-z][0-9A-Za-z.+-]*")


@dataclass(frozen=True)
class DependencyManifest:
    """Runtime requirements declared by a source tree."""

    runtime_version: str


@dataclass
class BootstrapResult:
    """Result of a bootstrap operation."""

    tag: str
    """Tag whose dependencies were staged"""

    runtime_version: str
    """Runtime version staged into go-compiler/"""

    source_dir: Path
    """Cached source tree"""

    runtime_dir: Path
    """Cached runtime bundle"""

    std_staged: bool
    """Whether std/ was replaced (False when the source tree has none)"""


def read_manifest(
    source_dir: Path, manifest_file: str, fallback_version: str
) -> DependencyManifest:
    """
    Read the runtime requirement from a source tree.

    A missing or malformed manifest is not an error: the fallback version
    is used and a warning is logged.

    Args:
        source_dir: Root of an extracted source tree
        manifest_file: Manifest file name (duck-version-info.json)
        fallback_version: Runtime version to use when the manifest is unusable

    Returns:
        DependencyManifest
    """
    manifest_path = source_dir / manifest_file

    if not manifest_path.is_file():
        logger.warning(f"{manifest_file} not found in source")
    else:
        try:
            data = json.loads(manifest_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to parse {manifest_file}: {e}")
        else:
            version = data.get("go") if isinstance(data, dict) else None
            if isinstance(version, str):
                version = version.strip()
            if isinstance(version, str) and _VERSION_PATTERN.fullmatch(version):
                logger.info(f"Detected go version requirement: {version}")
                return DependencyManifest(runtime_version=version)
            logger.warning(
                f"Failed to parse {manifest_file}: invalid 'go' version {version!r}"
            )

    logger.warning(f"Using fallback go version: {fallback_version}")
    return DependencyManifest(runtime_version=fallback_version)


class DependencyBootstrapper:
    """
    Stages the runtime bundle and standard library required by a tag.

    Example:
        >>> bootstrapper = DependencyBootstrapper(env, settings, http, releases)
        >>> result = bootstrapper.bootstrap("nightly-2024-01-01")
        >>> print(result.runtime_version)
    """

    def __init__(
        self,
        env: DuckupEnvironment,
        settings: DuckupSettings,
        http: HttpClient,
        releases: ReleaseClient,
        cache: Optional[ArtifactCache] = None,
        platform: Optional[PlatformInfo] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self.env = env
        self.settings = settings
        self.http = http
        self.releases = releases
        self.cache = cache or ArtifactCache(env.cache_dir)
        self.platform = platform or detect_platform()
        self.progress_callback = progress_callback

    def bootstrap(self, tag: str) -> BootstrapResult:
        """
        Cache and stage the dependencies of a tag.

        Raises:
            NetworkError: If a bundle download fails
            ArchiveLayoutError: If a bundle lacks its expected root directory
            UnsupportedPlatformError: If no runtime bundle exists for this host
        """
        source_dir = self.ensure_source(tag)

        manifest = read_manifest(
            source_dir,
            self.settings.manifest_file,
            self.settings.fallback_runtime_version,
        )

        runtime_dir = self.ensure_runtime(manifest.runtime_version)

        replace_directory(runtime_dir, self.env.runtime_staging_dir)
        logger.info(
            f"Updated {self.env.runtime_staging_dir} ({manifest.runtime_version})"
        )

        std_staged = self.stage_std(source_dir)

        return BootstrapResult(
            tag=tag,
            runtime_version=manifest.runtime_version,
            source_dir=source_dir,
            runtime_dir=runtime_dir,
            std_staged=std_staged,
        )

    def ensure_source(self, tag: str) -> Path:
        """Get the cached source tree for a tag, downloading it on a miss."""

        def produce(scratch: Path) -> Path:
            logger.info(f"Caching source code for {tag}...")
            archive_path = scratch / "source.tar.gz"
            self.http.download_file(
                self.releases.source_archive_url(tag),
                archive_path,
                self.progress_callback,
            )

            extract_dir = scratch / "out"
            extract_archive(archive_path, extract_dir)

            root = find_single_directory(extract_dir)
            if root is None:
                raise ArchiveLayoutError(
                    f"Could not find root directory in source archive for {tag}"
                )
            return root

        return self.cache.ensure(tag, CacheKind.SOURCE, produce)

    def ensure_runtime(self, version: str) -> Path:
        """Get the cached runtime bundle for a version, downloading it on a miss."""

        def produce(scratch: Path) -> Path:
            filename = runtime_archive_name(
                version, self.platform.os, self.platform.arch
            )
            logger.info(f"Caching go {version}...")
            archive_path = scratch / filename
            self.http.download_file(
                self.runtime_url(filename), archive_path, self.progress_callback
            )

            extract_dir = scratch / "out"
            extract_archive(archive_path, extract_dir)

            root = extract_dir / self.settings.runtime_root
            if not root.is_dir():
                raise ArchiveLayoutError(
                    f"Runtime bundle {filename} has no top-level "
                    f"'{self.settings.runtime_root}' directory"
                )
            return root

        return self.cache.ensure(version, CacheKind.RUNTIME, produce)

    def runtime_url(self, filename: str) -> str:
        return f"{self.settings.runtime_url.rstrip('/')}/dl/{filename}"

    def stage_std(self, source_dir: Path) -> bool:
        """
        Replace the staged standard library with the one in source_dir.

        Returns:
            False, leaving any previously staged library untouched, when the
            source tree has no std/ directory
        """
        std_source = source_dir / "std"
        if not std_source.is_dir():
            logger.warning("'std' folder not found in source code")
            return False

        replace_directory(std_source, self.env.std_staging_dir)
        logger.info(f"Updated {self.env.std_staging_dir}")
        return True


__all__ = [
    "DependencyManifest",
    "BootstrapResult",
    "read_manifest",
    "DependencyBootstrapper",
]
