"""
Centralized exception hierarchy for setup-gauge.

Every failure that should stop an invocation derives from SetupGaugeError so
the CLI can report it as a single human-readable message.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class SetupGaugeError(Exception):
    """Base exception for all setup-gauge errors."""

    pass


class ConfigError(SetupGaugeError):
    """Configuration file or environment could not be parsed."""

    pass


# ============================================================================
# Version Resolution Exceptions
# ============================================================================


class InvalidVersionError(SetupGaugeError):
    """Raised when a requested version is not a valid semantic version."""

    def __init__(self, version: str, releases_url: str):
        self.version = version
        self.releases_url = releases_url
        super().__init__(
            f"No valid download found for version {version}. "
            f"Check {releases_url} for a list of valid releases"
        )


class MalformedReleaseMetadataError(SetupGaugeError):
    """Raised when the latest-release document lacks a usable tag_name."""

    pass


class NetworkError(SetupGaugeError):
    """Raised when a download or metadata request fails."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Request to {url} failed: {reason}")


# ============================================================================
# Archive Extraction Exceptions
# ============================================================================


class ArchiveExtractionError(SetupGaugeError):
    """Failed to extract an archive."""

    pass


class ArchiveNotAFileError(ArchiveExtractionError):
    """The archive path does not exist."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Failed to extract {path} - it doesn't exist")


class ArchiveIsADirectoryError(ArchiveExtractionError):
    """The archive path points at a directory."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Failed to extract {path} - it is a directory")


class UnknownFileTypeError(ArchiveExtractionError):
    """The archive path exists but is not a regular file."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"file argument {path} is not a file")


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Acquisition Exceptions
# ============================================================================


class ToolCacheError(SetupGaugeError):
    """Raised when a directory cannot be stored in the tool cache."""

    pass


class SourceBuildError(SetupGaugeError):
    """Raised when cloning or building from source exits non-zero."""

    def __init__(self, step: str, command: list, exit_code: int):
        self.step = step
        self.command = command
        self.exit_code = exit_code
        super().__init__(
            f"Source build failed during {step}: "
            f"'{' '.join(str(c) for c in command)}' exited with code {exit_code}"
        )


class RunnerFileError(SetupGaugeError):
    """Raised when GITHUB_PATH or GITHUB_OUTPUT cannot be written."""

    def __init__(self, variable: str, path: str, reason: str):
        self.variable = variable
        self.path = path
        super().__init__(f"Unable to write {variable} file {path}: {reason}")


class PluginInstallError(SetupGaugeError):
    """Raised after all plugins were attempted and at least one failed."""

    def __init__(self, failures: list):
        self.failures = failures
        names = ", ".join(f"{f.name} (exit code {f.exit_code})" for f in failures)
        super().__init__(f"Failed to install {len(failures)} plugin(s): {names}")
