"""
Gauge acquisition.

This module materializes exactly one Gauge installation per invocation and
exposes it on the executable search path. Three routes lead there:

1. BuildFromSource: clone the repository, run its build, cache bin/<os>_<arch>
2. CacheHit: reuse the tool-cache entry for the resolved version
3. CacheMissDownload: download the release zip, extract it, cache it

Every route ends by prepending the installation directory to the search path.
The search path and the working directories are explicit values; the
installer never touches os.environ or the process working directory.
"""

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple

from setup_gauge.config.inputs import InstallRequest
from setup_gauge.config.settings import Settings
from setup_gauge.core.download import download_file, format_progress
from setup_gauge.core.exceptions import PluginInstallError, SourceBuildError
from setup_gauge.core.filesystem import (
    FilesystemError,
    ensure_directory,
    extract_zip,
    safe_rmtree,
)
from setup_gauge.core.platform import PlatformInfo, detect_platform
from setup_gauge.core.process import run_command
from setup_gauge.core.runner import ActionsRunner, prepend_path
from setup_gauge.core.tool_cache import ToolCache
from setup_gauge.toolchain.plugins import PluginInstaller, PluginReport
from setup_gauge.toolchain.resolver import (
    DownloadTarget,
    Resolution,
    SourceBuild,
    VersionResolver,
)

logger = logging.getLogger(__name__)

ROUTE_SOURCE = "source"
ROUTE_CACHE = "cache"
ROUTE_DOWNLOAD = "download"


@dataclass(frozen=True)
class InstallationResult:
    """A Gauge installation exposed on the search path."""

    tool_path: Path
    """Directory containing the gauge executable"""

    version: str
    """Installed version ('master' for source builds)"""

    route: str
    """How the installation was obtained: 'source', 'cache' or 'download'"""

    search_path: Tuple[str, ...]
    """Search path with tool_path first"""

    @property
    def was_cached(self) -> bool:
        return self.route == ROUTE_CACHE


def new_scratch_id() -> str:
    """Collision-resistant name component for scratch directories."""
    return uuid.uuid4().hex


class GaugeInstaller:
    """
    Acquires a Gauge installation for a resolved version.

    Example:
        >>> installer = GaugeInstaller(Settings(), ToolCache(), Path("/tmp"))
        >>> target = VersionResolver(Settings()).resolve("1.5.6")
        >>> result = installer.install(target, ("/usr/bin",))
        >>> result.search_path[0]
        '/home/runner/.setup-gauge/toolcache/gauge/1.5.6/x64'
    """

    def __init__(
        self,
        settings: Settings,
        tool_cache: ToolCache,
        temp_root: Path,
        platform_info: Optional[PlatformInfo] = None,
        run: Callable[..., int] = run_command,
        download: Callable[..., Path] = download_file,
        extract: Callable[..., Path] = extract_zip,
        id_factory: Callable[[], str] = new_scratch_id,
    ):
        """
        Initialize installer.

        Args:
            settings: Installer settings
            tool_cache: Cache to look up and store installations
            temp_root: Directory for downloads and scratch directories
            platform_info: Target platform (default: detected platform)
            run: Command runner (args, cwd=..., env=...) -> exit code
            download: Downloader (url, destination, ...) -> path
            extract: Zip extractor (archive, destination) -> path
            id_factory: Source of unique scratch directory names
        """
        self.settings = settings
        self.tool_cache = tool_cache
        self.temp_root = Path(temp_root)
        self.platform_info = platform_info or detect_platform()
        self._run = run
        self._download = download
        self._extract = extract
        self._new_id = id_factory

    def install(
        self, resolution: Resolution, search_path: Sequence[str]
    ) -> InstallationResult:
        """
        Materialize the resolved installation and expose it.

        Args:
            resolution: SourceBuild or DownloadTarget from VersionResolver
            search_path: Current executable search path

        Returns:
            InstallationResult with the extended search path

        Raises:
            SourceBuildError: If clone or build fails
            NetworkError: If the download fails
            ArchiveExtractionError: If the archive cannot be extracted
            ToolCacheError: If the directory cannot be cached
        """
        if isinstance(resolution, SourceBuild):
            tool_path = self.install_from_source(resolution)
            version = resolution.ref
            route = ROUTE_SOURCE
        else:
            version = resolution.version
            tool_path = self.tool_cache.find(self.settings.tool_name, version)
            if tool_path:
                logger.debug(f"Tool found in cache {tool_path}")
                route = ROUTE_CACHE
            else:
                tool_path = self.install_released_version(resolution)
                route = ROUTE_DOWNLOAD

        logger.debug(f"adding {self.settings.tool_name} to path: {tool_path}")
        return InstallationResult(
            tool_path=tool_path,
            version=version,
            route=route,
            search_path=prepend_path(search_path, str(tool_path)),
        )

    def install_released_version(self, target: DownloadTarget) -> Path:
        """
        Download, extract and cache a release archive.

        Returns:
            The cached installation directory
        """
        tool = self.settings.tool_name
        scratch_id = self._new_id()
        archive_path = self.temp_root / f"{scratch_id}.zip"
        extract_dir = self.temp_root / f"temp_{scratch_id}"

        logger.debug(f"Tool not found in cache. Download tool from url: {target.url}")
        downloaded = None
        try:
            downloaded = self._download(
                target.url,
                archive_path,
                progress_callback=lambda p: logger.debug(format_progress(p)),
                timeout=self.settings.http_timeout,
            )
            logger.debug(f"Downloaded file: {downloaded}")

            ensure_directory(extract_dir)
            self._extract(downloaded, extract_dir)
            logger.debug(f"{tool} extracted to {extract_dir}")

            logger.debug(f"caching directory containing version {target.version}")
            return self.tool_cache.cache_dir(extract_dir, tool, target.version)
        finally:
            self._cleanup(extract_dir, Path(downloaded or archive_path))

    def install_from_source(self, build: SourceBuild) -> Path:
        """
        Clone the repository, build it and cache the build output.

        Returns:
            The cached installation directory

        Raises:
            SourceBuildError: If git clone or the build exits non-zero
        """
        tool = self.settings.tool_name
        scratch_dir = self.temp_root / f"temp_{self._new_id()}"
        source_dir = scratch_dir / tool
        ensure_directory(scratch_dir)

        try:
            clone = ["git", "clone", self.settings.repo_url, str(source_dir)]
            exit_code = self._run(clone)
            if exit_code != 0:
                raise SourceBuildError("clone", clone, exit_code)

            make = ["go", "run", str(Path("build") / "make.go")]
            exit_code = self._run(make, cwd=source_dir)
            if exit_code != 0:
                raise SourceBuildError("build", make, exit_code)

            output_dir = source_dir / "bin" / self.platform_info.binary_dir_name()
            logger.debug(f"{tool} built at {output_dir}")
            return self.tool_cache.cache_dir(output_dir, tool, build.ref)
        finally:
            self._cleanup(scratch_dir)

    def _cleanup(self, scratch_dir: Path, archive_path: Optional[Path] = None):
        """Remove a scratch directory and, if given, the downloaded archive."""
        try:
            if archive_path is not None and archive_path.is_file():
                archive_path.unlink()
            safe_rmtree(scratch_dir)
        except (FilesystemError, OSError) as e:
            logger.warning(f"Failed to remove temporary files: {e}")


def setup_gauge(
    request: InstallRequest,
    settings: Settings,
    runner: ActionsRunner,
    tool_cache: Optional[ToolCache] = None,
    resolver: Optional[VersionResolver] = None,
    installer: Optional[GaugeInstaller] = None,
    plugin_installer: Optional[PluginInstaller] = None,
) -> Tuple[InstallationResult, PluginReport]:
    """
    Install Gauge and the requested plugins.

    Args:
        request: Version and plugins to install
        settings: Installer settings
        runner: CI host access (temp dir, PATH registration, outputs)
        tool_cache: Tool cache (default: settings.tool_cache or runner cache)
        resolver: Version resolver (default: built from settings)
        installer: Acquisition engine (default: built from settings)
        plugin_installer: Plugin installer (default: runs gauge install)

    Returns:
        Tuple of (InstallationResult, PluginReport)

    Raises:
        SetupGaugeError: If Gauge cannot be installed, or PluginInstallError
            after all plugins were attempted and at least one failed
    """
    resolver = resolver or VersionResolver(settings)
    if installer is None:
        installer = GaugeInstaller(
            settings,
            tool_cache or ToolCache(settings.tool_cache),
            settings.temp_dir or runner.temp_root,
        )

    resolution = resolver.resolve(request.version_spec)
    result = installer.install(resolution, runner.search_path)

    runner.add_path(result.tool_path)
    runner.set_output("gauge-version", result.version)
    runner.set_output("gauge-path", str(result.tool_path))
    logger.info(
        f"{settings.tool_name} {result.version} is available at {result.tool_path}"
    )

    plugin_installer = plugin_installer or PluginInstaller(settings.tool_name)
    report = plugin_installer.install_all(
        request.plugin_names,
        tool_path=result.tool_path,
        env=runner.child_env(result.search_path),
    )

    if not report.ok:
        raise PluginInstallError(report.failed)

    return result, report


__all__ = [
    "InstallationResult",
    "GaugeInstaller",
    "new_scratch_id",
    "setup_gauge",
    "ROUTE_SOURCE",
    "ROUTE_CACHE",
    "ROUTE_DOWNLOAD",
]
