"""
Release host client.

Wraps the read-only release API of the compiler repository:

    GET {api}/repos/{owner}/{repo}/releases/tags/{tag}
    GET {api}/repos/{owner}/{repo}/releases/latest
    GET {api}/repos/{owner}/{repo}/releases?per_page=1
    GET {web}/{owner}/{repo}/archive/refs/tags/{tag}.tar.gz
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from duckup.core.config import DuckupSettings
from duckup.core.download import HttpClient
from duckup.core.exceptions import NetworkError

logger = logging.getLogger(__name__)


@dataclass
class Asset:
    """A downloadable file attached to a release."""

    name: str
    browser_download_url: str


@dataclass
class Release:
    """Release metadata as published by the release host."""

    tag_name: str
    assets: List[Asset] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> Optional["Release"]:
        """
        Parse a release object.

        Returns:
            Release, or None if data has no usable 'tag_name'
        """
        if not isinstance(data, dict):
            return None
        tag_name = data.get("tag_name")
        if not isinstance(tag_name, str) or not tag_name:
            return None

        assets = []
        for item in data.get("assets") or []:
            if not isinstance(item, dict):
                continue
            name = item.get("name")
            url = item.get("browser_download_url")
            if isinstance(name, str) and isinstance(url, str):
                assets.append(Asset(name=name, browser_download_url=url))

        return cls(tag_name=tag_name, assets=assets)

    def find_asset(self, name: str) -> Optional[Asset]:
        """Find the asset named exactly name."""
        for asset in self.assets:
            if asset.name == name:
                return asset
        return None


class ReleaseClient:
    """Queries release metadata for the configured repository."""

    def __init__(self, http: HttpClient, settings: DuckupSettings):
        self.http = http
        self.settings = settings

    def release_url(self, tag: str) -> str:
        return f"{self.settings.repo_api_url}/releases/tags/{tag}"

    def latest_url(self) -> str:
        return f"{self.settings.repo_api_url}/releases/latest"

    def listing_url(self, limit: int = 1) -> str:
        return f"{self.settings.repo_api_url}/releases?per_page={limit}"

    def source_archive_url(self, tag: str) -> str:
        return f"{self.settings.repo_web_url}/archive/refs/tags/{tag}.tar.gz"

    def get_release(self, tag: str) -> Optional[Release]:
        """
        Fetch the release for a tag.

        Returns:
            Release, or None if the host reports no such release (404)

        Raises:
            NetworkError: For any other failure
        """
        try:
            data = self.http.get_json(self.release_url(tag))
        except NetworkError as e:
            if e.status_code == 404:
                return None
            raise

        release = Release.from_json(data)
        if release is None:
            raise NetworkError(
                f"Malformed release metadata for {tag}", url=self.release_url(tag)
            )
        return release

    def get_latest_release(self) -> Optional[Release]:
        """
        Fetch the release marked latest.

        Raises:
            NetworkError: If the request fails
        """
        return Release.from_json(self.http.get_json(self.latest_url()))

    def list_releases(self, limit: int = 1) -> List[Release]:
        """
        Fetch the most recent releases, newest first.

        Raises:
            NetworkError: If the request fails
        """
        data = self.http.get_json(self.listing_url(limit))
        if not isinstance(data, list):
            logger.debug(f"Release listing is not a list: {type(data).__name__}")
            return []

        releases = []
        for item in data:
            release = Release.from_json(item)
            if release is not None:
                releases.append(release)
        return releases


__all__ = [
    "Asset",
    "Release",
    "ReleaseClient",
]
