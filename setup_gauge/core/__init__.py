"""
Core functionality for setup-gauge.

This package contains the foundational modules that the installer depends on.
"""

from .exceptions import (
    SetupGaugeError,
    ConfigError,
    InvalidVersionError,
    MalformedReleaseMetadataError,
    NetworkError,
    ArchiveExtractionError,
    ArchiveNotAFileError,
    ArchiveIsADirectoryError,
    UnknownFileTypeError,
    InsecureArchiveError,
    ToolCacheError,
    SourceBuildError,
    PluginInstallError,
    RunnerFileError,
)

from .platform import (
    PlatformInfo,
    detect_platform,
    clear_platform_cache,
)

from .tool_cache import ToolCache, get_default_cache_root

from .runner import ActionsRunner, ActionsLogHandler

__all__ = [
    # Exceptions
    "SetupGaugeError",
    "ConfigError",
    "InvalidVersionError",
    "MalformedReleaseMetadataError",
    "NetworkError",
    "ArchiveExtractionError",
    "ArchiveNotAFileError",
    "ArchiveIsADirectoryError",
    "UnknownFileTypeError",
    "InsecureArchiveError",
    "ToolCacheError",
    "SourceBuildError",
    "PluginInstallError",
    "RunnerFileError",
    # Platform
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
    # Tool cache
    "ToolCache",
    "get_default_cache_root",
    # Runner
    "ActionsRunner",
    "ActionsLogHandler",
]
