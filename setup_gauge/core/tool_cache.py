"""
Runner tool cache for setup-gauge.

Stores installed tool directories using the same on-disk layout as the
GitHub Actions hosted tool cache, so entries written here are found by other
actions and vice versa:

    <root>/<tool>/<version>/<arch>/            : cached tool files
    <root>/<tool>/<version>/<arch>.complete    : marker written last

An entry without its marker is treated as absent.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from setup_gauge.core.exceptions import ToolCacheError
from setup_gauge.core.filesystem import (
    FilesystemError,
    copy_tree,
    ensure_directory,
    safe_rmtree,
)
from setup_gauge.core.platform import detect_platform

logger = logging.getLogger(__name__)


def get_default_cache_root() -> Path:
    """
    Get the tool cache root.

    Returns:
        $RUNNER_TOOL_CACHE when running on a CI runner, otherwise
        ~/.setup-gauge/toolcache
    """
    runner_cache = os.environ.get("RUNNER_TOOL_CACHE")
    if runner_cache:
        return Path(runner_cache)
    return Path.home() / ".setup-gauge" / "toolcache"


class ToolCache:
    """
    Find and store tool directories keyed by (tool, version, arch).

    Example:
        >>> cache = ToolCache(Path("/opt/hostedtoolcache"))
        >>> cache.find("gauge", "1.5.6")
        >>> cache.cache_dir(Path("/tmp/temp_ab12"), "gauge", "1.5.6")
        PosixPath('/opt/hostedtoolcache/gauge/1.5.6/x64')
    """

    def __init__(self, root: Optional[Path] = None, arch: Optional[str] = None):
        """
        Initialize tool cache.

        Args:
            root: Cache root directory (default: get_default_cache_root())
            arch: Architecture key (default: detected platform architecture)
        """
        self.root = Path(root) if root else get_default_cache_root()
        self.arch = arch or detect_platform().arch

        logger.debug(f"Initialized tool cache at {self.root}")

    def _entry_dir(self, tool: str, version: str) -> Path:
        if not tool:
            raise ValueError("tool is a required parameter")
        if not version:
            raise ValueError("version is a required parameter")
        return self.root / tool / version / self.arch

    def _marker(self, tool: str, version: str) -> Path:
        return self.root / tool / version / f"{self.arch}.complete"

    def find(self, tool: str, version: str) -> Optional[Path]:
        """
        Look up a cached tool directory.

        Args:
            tool: Tool name
            version: Exact version string

        Returns:
            Path to the cached directory, or None if not cached
        """
        entry = self._entry_dir(tool, version)

        if entry.is_dir() and self._marker(tool, version).exists():
            logger.debug(f"Found tool in cache {tool} {version} {self.arch}")
            return entry

        logger.debug(f"Tool not found in cache {tool} {version} {self.arch}")
        return None

    def cache_dir(self, source_dir: Path, tool: str, version: str) -> Path:
        """
        Copy a directory into the cache.

        Any previous entry for the same key is replaced.

        Args:
            source_dir: Directory holding the tool files
            tool: Tool name
            version: Version to store the directory under

        Returns:
            Path to the cached directory

        Raises:
            ToolCacheError: If source_dir is missing or copying fails
        """
        source_dir = Path(source_dir)
        if not source_dir.is_dir():
            raise ToolCacheError(f"Source directory not found: {source_dir}")

        entry = self._entry_dir(tool, version)
        marker = self._marker(tool, version)

        logger.debug(f"Caching tool {tool} {version} {self.arch}")
        logger.debug(f"source dir: {source_dir}")
        logger.debug(f"destination dir: {entry}")

        try:
            if marker.exists():
                marker.unlink()
            safe_rmtree(entry)
            ensure_directory(entry)
            copy_tree(source_dir, entry)
            marker.write_text("", encoding="utf-8")
        except (FilesystemError, OSError) as e:
            raise ToolCacheError(
                f"Failed to cache {tool} {version} from {source_dir}: {e}"
            ) from e

        return entry


__all__ = ["ToolCache", "get_default_cache_root"]
