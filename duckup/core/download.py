"""
HTTP access to the release and runtime hosts.

This module provides:
- JSON queries against the release host API
- Streaming file downloads with progress reporting

There are no retries: every failure is surfaced immediately as NetworkError,
carrying the HTTP status when one was received.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

import requests
from requests.exceptions import RequestException

from duckup.core.exceptions import NetworkError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second
    eta_seconds: float  # estimated time remaining

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


ProgressCallback = Callable[[DownloadProgress], None]


class HttpClient:
    """
    Blocking HTTP client shared by every duckup component.

    Example:
        >>> client = HttpClient(user_agent="duckup")
        >>> release = client.get_json("https://api.github.com/repos/o/r/releases/latest")
        >>> client.download_file(url, Path("/tmp/asset"))
    """

    def __init__(
        self,
        user_agent: str = "duckup",
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            user_agent: User-Agent header for every request
            timeout: Request timeout in seconds (None waits indefinitely)
            session: Optional pre-configured session
        """
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = user_agent

    def _get(self, url: str, stream: bool = False) -> requests.Response:
        try:
            response = self.session.get(
                url, stream=stream, timeout=self.timeout, allow_redirects=True
            )
        except RequestException as e:
            raise NetworkError(f"Request to {url} failed: {e}", url=url) from e

        if not response.ok:
            response.close()
            raise NetworkError(
                f"Request to {url} failed",
                url=url,
                status_code=response.status_code,
            )
        return response

    def get_json(self, url: str) -> Any:
        """
        GET a URL and decode its JSON body.

        Raises:
            NetworkError: On connection failure, non-success status or
                a body that is not JSON
        """
        logger.debug(f"Querying {url}")
        response = self._get(url)
        try:
            return response.json()
        except ValueError as e:
            raise NetworkError(
                f"Invalid JSON response from {url}: {e}", url=url
            ) from e

    def download_file(
        self,
        url: str,
        destination: Path,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> Path:
        """
        Stream a URL to a local file.

        The file is written in place; a failure mid-stream leaves a
        truncated file behind.

        Args:
            url: URL to download from
            destination: Local path to save file
            progress_callback: Optional callback for progress updates

        Returns:
            Path to downloaded file

        Raises:
            NetworkError: If the request fails or returns a non-success status
        """
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"Downloading {url}")
        response = self._get(url, stream=True)

        content_length = response.headers.get("content-length")
        total_size = int(content_length) if content_length else 0

        downloaded = 0
        start_time = time.time()
        last_progress_time = start_time

        try:
            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    f.write(chunk)
                    downloaded += len(chunk)

                    # Report progress (max once per 0.5 seconds)
                    current_time = time.time()
                    if progress_callback and (
                        current_time - last_progress_time >= 0.5
                        or downloaded == total_size
                    ):
                        progress_callback(
                            _make_progress(
                                downloaded, total_size, current_time - start_time
                            )
                        )
                        last_progress_time = current_time
        except RequestException as e:
            raise NetworkError(f"Download of {url} interrupted: {e}", url=url) from e
        finally:
            response.close()

        logger.debug(f"Download complete: {destination} ({downloaded} bytes)")
        return destination

    def close(self) -> None:
        self.session.close()


def _make_progress(downloaded: int, total_size: int, elapsed: float) -> DownloadProgress:
    speed = downloaded / elapsed if elapsed > 0 else 0
    remaining = total_size - downloaded if total_size > 0 else 0
    eta = remaining / speed if speed > 0 else 0

    return DownloadProgress(
        bytes_downloaded=downloaded,
        total_bytes=total_size if total_size > 0 else downloaded,
        percentage=(downloaded / total_size * 100) if total_size > 0 else 0,
        speed_bps=speed,
        eta_seconds=eta,
    )


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Args:
        progress: Download progress information

    Returns:
        Formatted progress string

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.percentage > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s "
            f"ETA: {progress.eta_seconds:.0f}s"
        )
    else:
        # Unknown total size
        return f"{mb_downloaded:.1f} MB " f"at {speed_mbps:.1f} MB/s"


__all__ = [
    "DownloadProgress",
    "ProgressCallback",
    "HttpClient",
    "format_progress",
]
