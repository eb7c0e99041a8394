"""
Unit tests for download module.

Tests HTTP access with mocked network requests.
"""

import pytest
import requests
import responses

from duckup.core.download import (
    DownloadProgress,
    HttpClient,
    format_progress,
)
from duckup.core.exceptions import NetworkError


class TestFormatProgress:
    """Test format_progress function."""

    def test_format_with_known_size(self):
        progress = DownloadProgress(
            bytes_downloaded=10485760,  # 10 MB
            total_bytes=104857600,  # 100 MB
            percentage=10.0,
            speed_bps=2097152,  # 2 MB/s
            eta_seconds=45,
        )

        result = format_progress(progress)

        assert "10.0/100.0 MB" in result
        assert "(10.0%)" in result
        assert "2.0 MB/s" in result
        assert "ETA: 45s" in result

    def test_format_with_unknown_size(self):
        progress = DownloadProgress(
            bytes_downloaded=10485760,
            total_bytes=10485760,
            percentage=0.0,
            speed_bps=1048576,
            eta_seconds=0,
        )

        result = str(progress)

        assert "10.0 MB" in result
        assert "ETA" not in result


class TestGetJson:
    """Test HttpClient.get_json."""

    @responses.activate
    def test_returns_decoded_body(self, http):
        url = "https://api.example.com/thing"
        responses.add(responses.GET, url, json={"tag_name": "v1"}, status=200)

        assert http.get_json(url) == {"tag_name": "v1"}

    @responses.activate
    def test_sends_user_agent(self, http):
        url = "https://api.example.com/thing"
        responses.add(responses.GET, url, json={}, status=200)

        http.get_json(url)

        assert responses.calls[0].request.headers["User-Agent"] == "duckup-tests"

    @responses.activate
    def test_non_success_status(self, http):
        url = "https://api.example.com/missing"
        responses.add(responses.GET, url, json={"message": "Not Found"}, status=404)

        with pytest.raises(NetworkError) as exc_info:
            http.get_json(url)

        assert exc_info.value.status_code == 404
        assert exc_info.value.url == url
        assert "HTTP 404" in str(exc_info.value)

    @responses.activate
    def test_connection_error(self, http):
        url = "https://api.example.com/down"
        responses.add(
            responses.GET, url, body=requests.exceptions.ConnectionError("refused")
        )

        with pytest.raises(NetworkError) as exc_info:
            http.get_json(url)

        assert exc_info.value.status_code is None

    @responses.activate
    def test_invalid_json(self, http):
        url = "https://api.example.com/html"
        responses.add(responses.GET, url, body="<html></html>", status=200)

        with pytest.raises(NetworkError, match="Invalid JSON"):
            http.get_json(url)

    @responses.activate
    def test_no_retries(self, http):
        url = "https://api.example.com/flaky"
        responses.add(responses.GET, url, status=503)

        with pytest.raises(NetworkError):
            http.get_json(url)

        assert len(responses.calls) == 1


class TestDownloadFile:
    """Test HttpClient.download_file."""

    @responses.activate
    def test_simple_download(self, http, tmp_path):
        url = "https://example.com/file.bin"
        content = b"binary content"
        destination = tmp_path / "nested" / "file.bin"

        responses.add(
            responses.GET,
            url,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )

        result = http.download_file(url, destination)

        assert result == destination
        assert destination.read_bytes() == content

    @responses.activate
    def test_progress_callback(self, http, tmp_path):
        url = "https://example.com/file.bin"
        content = b"x" * 20000
        updates = []

        responses.add(
            responses.GET,
            url,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )

        http.download_file(url, tmp_path / "file.bin", updates.append)

        assert updates
        assert updates[-1].bytes_downloaded == len(content)
        assert updates[-1].percentage == 100.0

    @responses.activate
    def test_error_status_writes_nothing(self, http, tmp_path):
        url = "https://example.com/missing.bin"
        destination = tmp_path / "missing.bin"
        responses.add(responses.GET, url, status=404)

        with pytest.raises(NetworkError) as exc_info:
            http.download_file(url, destination)

        assert exc_info.value.status_code == 404
        assert not destination.exists()
