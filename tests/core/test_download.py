"""
Unit tests for download module.

Tests download functionality with mocked network requests.
"""

import pytest
import requests
import responses

from jdkkit.core.download import (
    DownloadError,
    DownloadProgress,
    download_file,
    format_progress,
)
from jdkkit.core.exceptions import TransientFetchError


class TestDownloadProgress:
    """Test DownloadProgress dataclass."""

    def test_progress_to_string(self):
        """Test progress string representation."""
        progress = DownloadProgress(
            bytes_downloaded=52428800,  # 50 MB
            total_bytes=104857600,  # 100 MB
            percentage=50.0,
            speed_bps=1048576,  # 1 MB/s
            eta_seconds=50,
        )

        result = str(progress)

        assert "50.0/100.0 MB" in result
        assert "50.0%" in result
        assert "1.0 MB/s" in result
        assert "ETA: 50s" in result

    def test_format_with_unknown_size(self):
        """Test formatting progress with unknown total size."""
        progress = DownloadProgress(
            bytes_downloaded=10485760,
            total_bytes=0,
            percentage=0.0,
            speed_bps=1048576,
            eta_seconds=0,
        )

        result = format_progress(progress)

        assert "10.0 MB" in result
        assert "ETA" not in result


class TestDownloadFile:
    """Test download_file function."""

    @responses.activate
    def test_simple_download(self, tmp_path):
        """Test simple download."""
        url = "https://example.com/jdk.tar.gz"
        content = b"archive bytes"
        destination = tmp_path / "jdk.tar.gz"

        responses.add(
            responses.GET,
            url,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )

        result = download_file(url, destination)

        assert result == destination
        assert destination.read_bytes() == content

    @responses.activate
    def test_follows_redirect(self, tmp_path):
        """The binary API answers with a redirect to the actual archive."""
        api_url = "https://api.example.com/v3/binary/latest/11"
        file_url = "https://github.example.com/jdk-11.tar.gz"
        destination = tmp_path / "jdk.tar.gz"

        responses.add(
            responses.GET, api_url, status=307, headers={"Location": file_url}
        )
        responses.add(responses.GET, file_url, body=b"redirected", status=200)

        download_file(api_url, destination)

        assert destination.read_bytes() == b"redirected"

    @responses.activate
    def test_creates_parent_directory(self, tmp_path):
        url = "https://example.com/jdk.zip"
        destination = tmp_path / "nested" / "dir" / "jdk.zip"
        responses.add(responses.GET, url, body=b"zip", status=200)

        download_file(url, destination)

        assert destination.exists()

    @responses.activate
    def test_http_error_raises_download_error(self, tmp_path):
        """Test HTTP errors are reported as transient download errors."""
        url = "https://example.com/missing.tar.gz"
        destination = tmp_path / "missing.tar.gz"
        responses.add(responses.GET, url, status=404)

        with pytest.raises(DownloadError) as exc_info:
            download_file(url, destination)

        assert exc_info.value.status_code == 404
        assert isinstance(exc_info.value, TransientFetchError)
        assert not destination.exists()

    @responses.activate
    def test_connection_error_raises_download_error(self, tmp_path):
        url = "https://example.com/jdk.tar.gz"
        responses.add(
            responses.GET, url, body=requests.exceptions.ConnectionError("refused")
        )

        with pytest.raises(DownloadError, match="refused"):
            download_file(url, tmp_path / "jdk.tar.gz")

    @responses.activate
    def test_download_with_progress_callback(self, tmp_path):
        """Test download reports progress."""
        url = "https://example.com/jdk.tar.gz"
        content = b"x" * 100000
        responses.add(
            responses.GET,
            url,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )

        progress_updates = []
        download_file(url, tmp_path / "jdk.tar.gz", progress_callback=progress_updates.append)

        assert len(progress_updates) > 0
        assert progress_updates[-1].bytes_downloaded == len(content)

    def test_empty_url_rejected(self, tmp_path):
        with pytest.raises(ValueError, match="URL cannot be empty"):
            download_file("", tmp_path / "x")
