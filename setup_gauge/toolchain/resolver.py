"""
Version resolution for Gauge installs.

Turns the requested version string into one of:
- SourceBuild: the source-build marker ("master") was requested
- DownloadTarget: a release archive URL plus the version it contains

An empty request resolves to the newest published release, looked up through
the GitHub release-metadata API.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from setup_gauge.config.settings import Settings
from setup_gauge.core.download import fetch_json
from setup_gauge.core.exceptions import (
    InvalidVersionError,
    MalformedReleaseMetadataError,
)
from setup_gauge.core.platform import PlatformInfo, detect_platform

logger = logging.getLogger(__name__)

# SemVer 2.0.0 grammar (https://semver.org)
SEMVER_PATTERN = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


@dataclass(frozen=True)
class DownloadTarget:
    """A release archive to install."""

    url: str
    version: str


@dataclass(frozen=True)
class SourceBuild:
    """Instruction to build Gauge from its source repository."""

    ref: str


Resolution = Union[SourceBuild, DownloadTarget]


def clean_version(version: str) -> Optional[str]:
    """
    Validate a semantic version string.

    Surrounding whitespace and a single leading '=' and/or 'v' are tolerated.

    Returns:
        The bare version (e.g. '1.5.6'), or None if the string is not a
        valid semantic version

    Example:
        >>> clean_version("v1.5.6")
        '1.5.6'
        >>> clean_version("1.5") is None
        True
    """
    candidate = version.strip()
    if candidate.startswith("="):
        candidate = candidate[1:]
    if candidate.startswith("v"):
        candidate = candidate[1:]
    if SEMVER_PATTERN.match(candidate):
        return candidate
    return None


class VersionResolver:
    """
    Resolve requested Gauge versions.

    Example:
        >>> resolver = VersionResolver(Settings())
        >>> resolver.resolve("1.5.6")
        DownloadTarget(url='https://github.com/getgauge/gauge/releases/download/v1.5.6/gauge-1.5.6-linux.x86_64.zip', version='1.5.6')
    """

    def __init__(
        self,
        settings: Settings,
        platform_info: Optional[PlatformInfo] = None,
        fetch: Callable[..., Any] = fetch_json,
    ):
        """
        Initialize resolver.

        Args:
            settings: Installer settings (repository and API URLs)
            platform_info: Target platform (default: detected platform)
            fetch: JSON fetcher used for the latest-release lookup
        """
        self.settings = settings
        self.platform_info = platform_info or detect_platform()
        self._fetch = fetch

    def resolve(self, version_spec: str) -> Resolution:
        """
        Resolve a version request.

        Args:
            version_spec: '' for latest, the source marker, or a semantic version

        Returns:
            SourceBuild or DownloadTarget

        Raises:
            InvalidVersionError: If version_spec is not a semantic version
            MalformedReleaseMetadataError: If the latest release has no usable tag
            NetworkError: If the latest-release lookup fails
        """
        spec = (version_spec or "").strip()

        if spec == self.settings.source_marker:
            logger.debug(f"Building {self.settings.tool_name} from source")
            return SourceBuild(ref=spec)

        if spec:
            logger.debug(f"Download version = {spec}")
            version = clean_version(spec)
            if version is None:
                raise InvalidVersionError(spec, self.settings.releases_url)
            return DownloadTarget(url=self.download_url(version), version=version)

        logger.debug("Downloading latest release because no version selected")
        version = self.latest_version()
        return DownloadTarget(url=self.download_url(version), version=version)

    def download_url(self, version: str) -> str:
        """Build the release archive URL for version on the target platform."""
        tool = self.settings.tool_name
        return (
            f"{self.settings.releases_url}/download/v{version}/"
            f"{tool}-{version}-{self.platform_info.artifact_suffix()}.zip"
        )

    def latest_version(self) -> str:
        """
        Query the newest published release.

        Returns:
            The release version without its leading 'v'

        Raises:
            MalformedReleaseMetadataError: If tag_name is missing or invalid
            NetworkError: If the request fails
        """
        url = self.settings.api_url
        headers = {"Accept": "application/vnd.github+json"}
        if self.settings.github_token:
            headers["Authorization"] = f"Bearer {self.settings.github_token}"

        try:
            release = self._fetch(
                url, timeout=self.settings.http_timeout, headers=headers
            )
        except ValueError as e:
            raise MalformedReleaseMetadataError(
                f"Release metadata from {url} is not valid JSON: {e}"
            ) from e

        tag_name = release.get("tag_name") if isinstance(release, dict) else None
        logger.debug(f"latest version = {tag_name}")

        if not isinstance(tag_name, str) or not tag_name.strip():
            raise MalformedReleaseMetadataError(
                f"Release metadata from {url} has no tag_name field"
            )

        version = clean_version(tag_name)
        if version is None:
            raise MalformedReleaseMetadataError(
                f"Latest release tag '{tag_name}' from {url} is not a valid version"
            )
        return version


__all__ = [
    "DownloadTarget",
    "SourceBuild",
    "Resolution",
    "VersionResolver",
    "clean_version",
]
