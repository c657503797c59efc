"""
Network access for setup-gauge.

This module provides the two HTTP operations the installer needs:
- Streaming download of a release archive to a local file
- Fetching a JSON document (release metadata)

Failures are never retried; any HTTP or connection error is reported as a
NetworkError naming the URL.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import requests
from requests.exceptions import RequestException

from setup_gauge.core.exceptions import NetworkError

logger = logging.getLogger(__name__)

USER_AGENT = "setup-gauge"


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second

    def __str__(self) -> str:
        return format_progress(self)


def _default_headers(extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    headers = {"User-Agent": USER_AGENT}
    if extra:
        headers.update(extra)
    return headers


def download_file(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: Optional[float] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Path:
    """
    Download file from URL to destination.

    Args:
        url: URL to download from
        destination: Local path to save file
        progress_callback: Optional callback for progress updates
        timeout: Request timeout in seconds (None waits indefinitely)
        headers: Additional request headers

    Returns:
        Path to downloaded file

    Raises:
        NetworkError: If the request fails or returns a non-success status
        ValueError: If URL or destination is empty

    Example:
        >>> download_file(
        ...     "https://github.com/getgauge/gauge/releases/download/v1.5.6/gauge-1.5.6-linux.x86_64.zip",
        ...     Path("/tmp/gauge.zip"),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    logger.debug(f"Downloading from {url}")

    try:
        response = requests.get(
            url,
            headers=_default_headers(headers),
            stream=True,
            timeout=timeout,
            allow_redirects=True,
        )
        response.raise_for_status()

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

                # Report at most twice per second
                current_time = time.time()
                if progress_callback and (
                    current_time - last_progress_time >= 0.5
                    or downloaded == total_size
                ):
                    elapsed = current_time - start_time
                    progress_callback(
                        DownloadProgress(
                            bytes_downloaded=downloaded,
                            total_bytes=total_size if total_size > 0 else downloaded,
                            percentage=(downloaded / total_size * 100)
                            if total_size > 0
                            else 0,
                            speed_bps=downloaded / elapsed if elapsed > 0 else 0,
                        )
                    )
                    last_progress_time = current_time

    except RequestException as e:
        logger.error(f"Error during download: {e}")
        if destination.exists():
            destination.unlink()
        raise NetworkError(url, str(e)) from e

    logger.debug(f"Download complete: {destination}")
    return destination


def fetch_json(
    url: str,
    timeout: Optional[float] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Any:
    """
    GET a URL and decode the response body as JSON.

    Args:
        url: URL to query
        timeout: Request timeout in seconds (None waits indefinitely)
        headers: Additional request headers

    Returns:
        Decoded JSON document

    Raises:
        NetworkError: If the request fails or returns a non-success status
        ValueError: If the body is not valid JSON
    """
    try:
        response = requests.get(url, headers=_default_headers(headers), timeout=timeout)
        response.raise_for_status()
    except RequestException as e:
        raise NetworkError(url, str(e)) from e

    return response.json()


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.total_bytes > 0 and progress.percentage > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s"
        )
    return f"{mb_downloaded:.1f} MB at {speed_mbps:.1f} MB/s"


__all__ = ["DownloadProgress", "download_file", "fetch_json", "format_progress"]
