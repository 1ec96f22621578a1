"""
Single-attempt network download with progress tracking.

This module performs exactly one HTTP(S) download per call:
- Streaming download with redirects followed
- Progress reporting (bytes, percentage, speed, ETA)
- Per-request timeout
- Partial file cleanup on failure

Retrying is not done here; wrap the call with jdkkit.core.retry.retry().
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from jdkkit.core.exceptions import TransientFetchError

logger = logging.getLogger(__name__)


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


class DownloadError(TransientFetchError):
    """Exception raised when a single download attempt fails."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed to download {url}: {reason}")


def download_file(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: int = 30,
) -> Path:
    """
    Download file from URL to destination in a single attempt.

    Args:
        url: URL to download from
        destination: Local path to save file
        progress_callback: Optional callback for progress updates
        timeout: Request timeout in seconds

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If the request fails or returns an error status
        ValueError: If URL or destination is invalid

    Example:
        >>> from jdkkit.core.download import download_file
        >>> download_file("https://example.com/jdk.tar.gz", Path("/tmp/jdk.tar.gz"))
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    logger.debug(f"Downloading from {url}")

    try:
        response = requests.get(url, stream=True, timeout=timeout, allow_redirects=True)
        response.raise_for_status()
        _stream_to_file(response, destination, progress_callback)
    except RequestException as e:
        _remove_partial(destination)
        status = getattr(getattr(e, "response", None), "status_code", None)
        raise DownloadError(url, str(e), status_code=status) from e
    except OSError as e:
        _remove_partial(destination)
        raise DownloadError(url, str(e)) from e

    logger.debug(f"Download complete: {destination}")
    return destination


def _stream_to_file(
    response: requests.Response,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]],
) -> None:
    """Write a streaming response body to disk, reporting progress."""
    content_length = response.headers.get("content-length")
    total_size = int(content_length) if content_length else 0

    downloaded = 0
    start_time = time.time()
    last_progress_time = start_time

    with open(destination, "wb") as f:
        for chunk in response.iter_content(chunk_size=8192):
            if not chunk:
                continue
            f.write(chunk)
            downloaded += len(chunk)

            # Report progress (max once per 0.5 seconds to avoid spam)
            current_time = time.time()
            if progress_callback and (
                current_time - last_progress_time >= 0.5 or downloaded == total_size
            ):
                elapsed = current_time - start_time
                speed = downloaded / elapsed if elapsed > 0 else 0
                remaining = total_size - downloaded if total_size > 0 else 0
                eta = remaining / speed if speed > 0 else 0

                progress_callback(
                    DownloadProgress(
                        bytes_downloaded=downloaded,
                        total_bytes=total_size if total_size > 0 else downloaded,
                        percentage=(downloaded / total_size * 100)
                        if total_size > 0
                        else 0,
                        speed_bps=speed,
                        eta_seconds=eta,
                    )
                )
                last_progress_time = current_time


def _remove_partial(destination: Path) -> None:
    try:
        destination.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Failed to remove partial download {destination}: {e}")


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

    if progress.total_bytes > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s "
            f"ETA: {progress.eta_seconds:.0f}s"
        )
    else:
        # Unknown total size
        return f"{mb_downloaded:.1f} MB " f"at {speed_mbps:.1f} MB/s"
