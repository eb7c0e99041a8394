"""
Version resolution.

Turns the symbolic request 'latest' into a concrete release tag and passes
explicit tags through unchanged.
"""

import logging

from duckup.core.exceptions import NetworkError, ResolutionError
from duckup.toolchain.releases import ReleaseClient

logger = logging.getLogger(__name__)

LATEST = "latest"


class VersionResolver:
    """
    Resolves version requests against the release host.

    Example:
        >>> resolver = VersionResolver(ReleaseClient(http, settings))
        >>> resolver.resolve("nightly-2024-01-01")
        'nightly-2024-01-01'
        >>> resolver.resolve("latest")
        'nightly-2024-03-09'
    """

    def __init__(self, releases: ReleaseClient):
        self.releases = releases

    def resolve(self, request: str) -> str:
        """
        Resolve a version request to a tag.

        Explicit tags are not checked for existence here.

        Raises:
            ResolutionError: If 'latest' cannot be resolved
        """
        if request != LATEST:
            return request
        return self.fetch_latest_tag()

    def fetch_latest_tag(self) -> str:
        """
        Query the latest release tag.

        Tries the 'latest release' endpoint first and falls back to the
        newest entry of the release listing.

        Raises:
            ResolutionError: If neither endpoint yields a tag
        """
        try:
            release = self.releases.get_latest_release()
        except NetworkError as e:
            logger.debug(f"Latest release endpoint failed: {e}")
            release = None

        if release is not None:
            logger.debug(f"Latest release: {release.tag_name}")
            return release.tag_name

        logger.debug("Falling back to release listing")
        try:
            releases = self.releases.list_releases(limit=1)
        except NetworkError as e:
            raise ResolutionError(f"Could not query releases: {e}") from e

        if not releases:
            raise ResolutionError("No releases found")

        return releases[0].tag_name


__all__ = [
    "LATEST",
    "VersionResolver",
]
