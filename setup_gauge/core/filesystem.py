"""
File system utilities for setup-gauge.

This module provides the file operations used while materializing a Gauge
installation:
- Zip archive extraction with path validation and permission restore
- Idempotent directory creation
- Safe directory removal and tree copies
"""

import os
import shutil
import stat
import sys
import zipfile
from pathlib import Path
from typing import Union

from setup_gauge.core.exceptions import (
    ArchiveExtractionError,
    ArchiveIsADirectoryError,
    ArchiveNotAFileError,
    InsecureArchiveError,
    SetupGaugeError,
    UnknownFileTypeError,
)

IS_WINDOWS = os.name == "nt"


class FilesystemError(SetupGaugeError):
    """Base exception for filesystem operations."""

    pass


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to (under) parent directory.

    Example:
        >>> is_relative_to(Path("/home/user/project/file.txt"), Path("/home/user"))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists (idempotent).

    Args:
        path: Directory path

    Returns:
        Path object (resolved)
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path.resolve()


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(member: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / member).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{member}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def check_archive_file(archive_path: Union[str, Path]) -> Path:
    """
    Verify that archive_path names an existing regular file.

    Returns:
        Normalized archive path

    Raises:
        ArchiveNotAFileError: If the path does not exist
        ArchiveIsADirectoryError: If the path is a directory
        UnknownFileTypeError: If the path is neither file nor directory
    """
    archive_path = Path(os.path.normpath(archive_path))

    if not archive_path.exists():
        raise ArchiveNotAFileError(archive_path)
    if archive_path.is_dir():
        raise ArchiveIsADirectoryError(archive_path)
    if not archive_path.is_file():
        raise UnknownFileTypeError(archive_path)

    return archive_path


def extract_zip(archive_path: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Extract a zip archive to a destination directory.

    The archive path is checked before anything is written. Unix permission
    bits stored in the archive are restored, so extracted executables stay
    executable.

    Args:
        archive_path: Path to the zip file
        destination: Directory to extract to (created if missing)

    Returns:
        The destination directory

    Raises:
        ArchiveNotAFileError, ArchiveIsADirectoryError, UnknownFileTypeError:
            If archive_path is not a regular file
        InsecureArchiveError: If a member would be written outside destination
        ArchiveExtractionError: If the archive is malformed

    Example:
        >>> extract_zip('gauge-1.5.6-linux.x86_64.zip', '/tmp/temp_ab12')
    """
    archive_path = check_archive_file(archive_path)
    destination = ensure_directory(destination)

    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            members = zf.infolist()

            for member in members:
                _validate_archive_path(member.filename, destination)

            for member in members:
                extracted = zf.extract(member, destination)
                mode = (member.external_attr >> 16) & 0o777
                if mode and not IS_WINDOWS:
                    os.chmod(extracted, mode)
    except InsecureArchiveError:
        raise
    except (zipfile.BadZipFile, OSError) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e

    return destination


# ============================================================================
# Safe File Operations
# ============================================================================


def safe_rmtree(path: Union[str, Path]) -> None:
    """
    Remove a directory tree if it exists.

    Read-only entries (common in checked-out trees on Windows) are made
    writable before removal.

    Raises:
        FilesystemError: If path is not a directory or deletion fails
    """
    path = Path(path)

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    def handle_remove_readonly(func, target, exc):
        os.chmod(target, stat.S_IWRITE)
        func(target)

    try:
        if sys.version_info >= (3, 12):
            shutil.rmtree(path, onexc=handle_remove_readonly)
        else:
            shutil.rmtree(path, onerror=handle_remove_readonly)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


def copy_tree(source: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Recursively copy a directory tree, preserving metadata and symlinks.

    Raises:
        FilesystemError: If source is not a directory or copying fails
    """
    source = Path(source)
    destination = Path(destination)

    if not source.is_dir():
        raise FilesystemError(f"Source is not a directory: {source}")

    try:
        shutil.copytree(source, destination, symlinks=True, dirs_exist_ok=True)
    except (shutil.Error, OSError) as e:
        raise FilesystemError(f"Failed to copy '{source}' to '{destination}': {e}") from e

    return destination


__all__ = [
    "FilesystemError",
    "IS_WINDOWS",
    "is_relative_to",
    "ensure_directory",
    "check_archive_file",
    "extract_zip",
    "safe_rmtree",
    "copy_tree",
]
