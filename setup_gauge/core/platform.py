"""
Platform detection for setup-gauge.

Maps the running operating system and CPU architecture onto the naming
conventions used by Gauge release artifacts and by Gauge's own build output.

Gauge uses two different architecture spellings:
- release archives: gauge-1.5.6-linux.x86_64.zip
- locally built binaries: bin/linux_amd64/

They are kept in two independent lookup tables so that a change in one
convention never leaks into the other.

Usage:
    from setup_gauge.core.platform import detect_platform

    info = detect_platform()
    print(info.artifact_suffix())   # linux.x86_64
    print(info.binary_dir_name())   # linux_amd64
"""

import functools
import platform
from dataclasses import dataclass

# Normalized architecture -> release archive tag
DOWNLOAD_ARCH_MAP = {
    "x64": "x86_64",
}

# Normalized architecture -> build output directory tag
BINARY_ARCH_MAP = {
    "x64": "amd64",
}


@dataclass(frozen=True)
class PlatformInfo:
    """
    Platform information relevant to Gauge artifacts.

    Attributes:
        os: Operating system ('windows', 'darwin', 'linux')
        arch: Normalized CPU architecture ('x64', 'arm64', 'x86', 'arm', ...)
    """

    os: str
    arch: str

    @property
    def download_arch(self) -> str:
        """Architecture tag used in release archive names."""
        return DOWNLOAD_ARCH_MAP.get(self.arch, self.arch)

    @property
    def binary_arch(self) -> str:
        """Architecture tag used in Gauge's build output directories."""
        return BINARY_ARCH_MAP.get(self.arch, self.arch)

    def artifact_suffix(self) -> str:
        """
        Get the platform suffix of a release archive.

        Example:
            >>> PlatformInfo('linux', 'x64').artifact_suffix()
            'linux.x86_64'
        """
        return f"{self.os}.{self.download_arch}"

    def binary_dir_name(self) -> str:
        """
        Get the name of the build output directory under bin/.

        Example:
            >>> PlatformInfo('darwin', 'x64').binary_dir_name()
            'darwin_amd64'
        """
        return f"{self.os}_{self.binary_arch}"

    def __str__(self) -> str:
        return f"{self.os}-{self.arch}"


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.
    """
    return PlatformInfo(os=_detect_os(), arch=_detect_architecture())


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        'windows', 'darwin' or 'linux'. Unknown systems are treated as linux.
    """
    system = platform.system().lower()

    if system == "windows":
        return "windows"
    elif system == "darwin":
        return "darwin"
    return "linux"


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm', or the raw
        machine name for anything else
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    else:
        return machine


def clear_platform_cache():
    """
    Clear the platform detection cache.

    Forces the next call to detect_platform() to re-detect.
    """
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "DOWNLOAD_ARCH_MAP",
    "BINARY_ARCH_MAP",
    "detect_platform",
    "clear_platform_cache",
]
