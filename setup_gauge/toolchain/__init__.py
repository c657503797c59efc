"""
Gauge installation module for setup-gauge.

This module provides functionality for:
- Version resolution (explicit, latest, build from source)
- Acquisition through the tool cache, release downloads or source builds
- Plugin installation
"""

from setup_gauge.toolchain.resolver import (
    DownloadTarget,
    SourceBuild,
    VersionResolver,
    clean_version,
)
from setup_gauge.toolchain.plugins import (
    PluginFailure,
    PluginInstaller,
    PluginReport,
)
from setup_gauge.toolchain.installer import (
    GaugeInstaller,
    InstallationResult,
    setup_gauge,
)

__all__ = [
    "DownloadTarget",
    "SourceBuild",
    "VersionResolver",
    "clean_version",
    "PluginFailure",
    "PluginInstaller",
    "PluginReport",
    "GaugeInstaller",
    "InstallationResult",
    "setup_gauge",
]
