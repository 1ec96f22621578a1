"""
Cross-platform file system utilities for jdkkit.

This module provides the file operations the install pipeline relies on:
- Archive extraction (tar, tar.gz, zip, 7z) through a closed dispatch table
- Safe file operations (atomic writes, guarded deletion, tree copies)
- Small directory helpers

Archive extraction never sniffs content: the caller declares the compression
type and anything outside the table is rejected.
"""

import os
import shutil
import sys
import tarfile
import tempfile
import zipfile
from pathlib import Path
from typing import Callable, Dict, Optional, Union

import py7zr

from jdkkit.core.exceptions import (
    JdkKitError,
    ExtractionError,
    ArchiveNotFoundError,
    ArchiveIsDirectoryError,
    UnsupportedArchiveFormat,
    InsecureArchiveError,
)


class FilesystemError(JdkKitError):
    """Base exception for filesystem operations."""

    pass


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Prevents directory traversal attacks (e.g., paths containing '../').

    Args:
        path: Member path from archive
        destination: Extraction destination

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not member_path.is_relative_to(destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def _extract_zip(archive_path: Path, destination: Path) -> None:
    """Extract a ZIP archive."""
    with zipfile.ZipFile(archive_path, "r") as zf:
        for member in zf.namelist():
            _validate_archive_path(member, destination)
        zf.extractall(destination)

        # zipfile drops unix permission bits; restore them from external_attr
        for info in zf.infolist():
            mode = (info.external_attr >> 16) & 0o777
            if mode:
                target = destination / info.filename
                if target.exists() and not target.is_symlink():
                    os.chmod(target, mode)


def _extract_tar(archive_path: Path, destination: Path, mode: str = "r:*") -> None:
    """Extract a tar archive with specified compression."""
    with tarfile.open(archive_path, mode) as tar:
        for member in tar.getmembers():
            _validate_archive_path(member.name, destination)

        # Extract with filter for security (Python 3.12+)
        # For older Python, we've already validated paths above
        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


def _extract_tar_gz(archive_path: Path, destination: Path) -> None:
    """Extract a .tar.gz archive."""
    _extract_tar(archive_path, destination, "r:gz")


def _extract_7z(archive_path: Path, destination: Path) -> None:
    """Extract a .7z archive."""
    with py7zr.SevenZipFile(archive_path, "r") as archive:
        for member in archive.getnames():
            _validate_archive_path(member, destination)
        archive.extractall(destination)


ARCHIVE_HANDLERS: Dict[str, Callable[[Path, Path], None]] = {
    ".tar": _extract_tar,
    ".tar.gz": _extract_tar_gz,
    ".zip": _extract_zip,
    ".7z": _extract_7z,
}


def extract_archive(
    archive_path: Union[str, Path],
    compression: str,
    destination: Union[str, Path],
) -> Path:
    """
    Extract an archive of a declared compression type.

    The source is checked before any decoding: a missing path, a directory
    or an unknown compression type fail without touching the destination
    contents.

    Supported compression types: .tar, .tar.gz, .zip, .7z

    Args:
        archive_path: Path to the archive file
        compression: Declared extension, e.g. '.tar.gz'
        destination: Directory to extract to (created if missing)

    Returns:
        The destination directory

    Raises:
        ArchiveNotFoundError: If the archive does not exist
        ArchiveIsDirectoryError: If the archive path is a directory
        UnsupportedArchiveFormat: If the compression type is not supported
        InsecureArchiveError: If archive contains malicious paths
        ExtractionError: If the codec fails

    Example:
        >>> extract_archive('jdk.tar.gz', '.tar.gz', '/tmp/jdk')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveNotFoundError(archive_path)
    if archive_path.is_dir():
        raise ArchiveIsDirectoryError(archive_path)

    handler = ARCHIVE_HANDLERS.get(compression)
    if handler is None:
        raise UnsupportedArchiveFormat(archive_path, compression)

    destination.mkdir(parents=True, exist_ok=True)

    try:
        handler(archive_path, destination)
    except ExtractionError:
        raise
    except Exception as e:
        raise ExtractionError(f"Failed to extract {archive_path}: {e}") from e

    return destination


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    This ensures the file is never in a partially-written state.
    If the write fails, the original file (if any) remains unchanged.

    Args:
        file_path: Path to write to
        content: Content to write (string or bytes)
        encoding: Text encoding (used only for string content)
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Create temp file in same directory (ensures same filesystem)
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails

    Example:
        >>> safe_rmtree('/tmp/build', require_prefix='/tmp')
        >>> safe_rmtree('/usr/bin', require_prefix='/home')  # ValueError
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not path.is_relative_to(require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    def handle_remove_readonly(func, failed_path, exc):
        """Error handler for read-only files (JDK trees ship some)."""
        if not os.access(failed_path, os.W_OK):
            os.chmod(failed_path, 0o777)
            func(failed_path)
        else:
            raise exc

    try:
        if sys.version_info >= (3, 12):
            shutil.rmtree(path, onexc=handle_remove_readonly)
        else:
            shutil.rmtree(
                path,
                onerror=lambda func, p, info: handle_remove_readonly(func, p, info[1]),
            )
    except Exception as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


def recursive_copy(
    source: Union[str, Path],
    destination: Union[str, Path],
    symlinks: bool = True,
) -> None:
    """
    Recursively copy the contents of a directory into another directory.

    Args:
        source: Source directory
        destination: Destination directory (created if missing)
        symlinks: If True, copy symlinks as symlinks

    Raises:
        FilesystemError: If source is missing or not a directory

    Example:
        >>> recursive_copy('/tmp/jdk-11', '/opt/cache/jdk/11/x64')
    """
    source = Path(source)
    destination = Path(destination)

    if not source.exists():
        raise FilesystemError(f"Source does not exist: {source}")

    if not source.is_dir():
        raise FilesystemError(f"Source is not a directory: {source}")

    shutil.copytree(source, destination, symlinks=symlinks, dirs_exist_ok=True)


def directory_size(path: Union[str, Path]) -> int:
    """
    Calculate total size of a directory in bytes.

    Args:
        path: Directory path

    Returns:
        Total size in bytes
    """
    path = Path(path)
    total_size = 0

    for item in path.rglob("*"):
        if item.is_file() and not item.is_symlink():
            total_size += item.stat().st_size

    return total_size


__all__ = [
    "FilesystemError",
    "ARCHIVE_HANDLERS",
    "extract_archive",
    "atomic_write",
    "safe_rmtree",
    "recursive_copy",
    "directory_size",
]
