"""
Cross-platform file system utilities for duckup.

This module provides the file operations the toolchain lifecycle relies on:
- Archive extraction (tar.gz, zip) with directory traversal checks
- Safe deletion and recursive copies
- Directory replacement via temporary sibling and rename
- Executable permission handling
- File identity comparison for active-version detection
"""

import logging
import os
import shutil
import stat
import sys
import tarfile
import tempfile
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from duckup.core.exceptions import DuckupError

logger = logging.getLogger(__name__)

# Platform detection
IS_WINDOWS = os.name == "nt"
IS_POSIX = os.name == "posix"

# Inode identity is exact on POSIX; elsewhere same_file() only compares sizes
IDENTITY_IS_PRECISE = IS_POSIX


# ============================================================================
# Errors
# ============================================================================


class FilesystemError(DuckupError):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check whether path is located under parent.

    Example:
        >>> is_relative_to(Path('/a/b/c'), Path('/a'))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def same_file(path_a: Union[str, Path], path_b: Union[str, Path]) -> bool:
    """
    Check whether two paths refer to the same file.

    On POSIX this compares device and inode numbers and is exact. On other
    platforms it falls back to comparing byte lengths, which is a weak
    heuristic: two distinct builds of identical size compare equal. Callers
    can consult IDENTITY_IS_PRECISE to tell the two apart.

    Returns:
        False if either path cannot be stat'ed
    """
    try:
        stat_a = os.stat(path_a)
        stat_b = os.stat(path_b)
    except OSError:
        return False

    if IDENTITY_IS_PRECISE:
        return (stat_a.st_dev, stat_a.st_ino) == (stat_b.st_dev, stat_b.st_ino)
    return stat_a.st_size == stat_b.st_size


def find_single_directory(path: Path) -> Optional[Path]:
    """
    Return the top-level directory of an extracted archive.

    Returns:
        The first directory entry (by name) under path, or None
    """
    directories = sorted(p for p in path.iterdir() if p.is_dir())
    if len(directories) > 1:
        logger.debug(
            f"Multiple top-level directories in {path}, using {directories[0].name}"
        )
    return directories[0] if directories else None


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "Extraction has been blocked."
        )


def extract_archive(
    archive_path: Union[str, Path], destination: Union[str, Path]
) -> None:
    """
    Extract an archive to a destination directory.

    Supported formats: .zip, .tar.gz, .tgz

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to

    Raises:
        UnsupportedArchiveFormat: If archive format is not recognized
        ArchiveExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths

    Example:
        >>> extract_archive('go1.25.0.linux-amd64.tar.gz', '/tmp/go')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)
    archive_name = archive_path.name.lower()

    try:
        if archive_name.endswith(".zip"):
            _extract_zip(archive_path, destination)
        elif archive_name.endswith((".tar.gz", ".tgz")):
            _extract_tar(archive_path, destination, "r:gz")
        else:
            raise UnsupportedArchiveFormat(
                f"Unsupported archive format: {archive_path.name}. "
                "Supported: .zip, .tar.gz"
            )
    except (InsecureArchiveError, UnsupportedArchiveFormat):
        raise
    except Exception as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


def _extract_zip(archive_path: Path, destination: Path) -> None:
    """Extract a ZIP archive."""
    with zipfile.ZipFile(archive_path, "r") as zf:
        members = zf.namelist()

        # Validate all paths first
        for member in members:
            _validate_archive_path(member, destination)

        zf.extractall(destination)


def _extract_tar(archive_path: Path, destination: Path, mode: str) -> None:
    """Extract a tar archive with specified compression."""
    with tarfile.open(archive_path, mode) as tar:
        for member in tar.getmembers():
            _validate_archive_path(member.name, destination)

        # Extract with filter for security (Python 3.12+)
        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


# ============================================================================
# Safe File Operations
# ============================================================================


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
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    def handle_remove_readonly(func, failed_path, exc):
        """Clear the read-only bit (Windows, Go module caches) and retry."""
        os.chmod(failed_path, stat.S_IWRITE | stat.S_IREAD | stat.S_IEXEC)
        func(failed_path)

    try:
        if sys.version_info >= (3, 12):
            shutil.rmtree(path, onexc=handle_remove_readonly)
        else:
            shutil.rmtree(path, onerror=handle_remove_readonly)
    except Exception as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


def recursive_copy(source: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Recursively copy a directory tree, preserving symlinks.

    Example:
        >>> recursive_copy('/source', '/dest')
    """
    source = Path(source)
    destination = Path(destination)

    if not source.is_dir():
        raise FilesystemError(f"Source is not a directory: {source}")

    try:
        shutil.copytree(source, destination, symlinks=True, dirs_exist_ok=True)
    except (OSError, shutil.Error) as e:
        raise FilesystemError(f"Failed to copy '{source}' to '{destination}': {e}") from e


def move_directory(source: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Move a directory into a destination that must not exist yet.

    Uses rename when possible. Across filesystems the tree is copied into a
    hidden sibling of destination first and renamed from there, so the
    destination never appears half populated.

    Raises:
        FileExistsError: If destination already exists
    """
    source = Path(source)
    destination = Path(destination)

    if destination.exists():
        raise FileExistsError(f"Destination already exists: {destination}")
    destination.parent.mkdir(parents=True, exist_ok=True)

    try:
        os.rename(source, destination)
        return
    except OSError as e:
        logger.debug(f"Rename {source} -> {destination} failed ({e}), copying")

    staging = Path(
        tempfile.mkdtemp(dir=destination.parent, prefix=f".{destination.name}.")
    )
    try:
        recursive_copy(source, staging)
        os.rename(staging, destination)
    except BaseException:
        safe_rmtree(staging)
        raise

    safe_rmtree(source)


def replace_directory(
    source: Union[str, Path], destination: Union[str, Path]
) -> None:
    """
    Replace destination with a fresh copy of source.

    The copy is built in a hidden sibling of destination and swapped in by
    rename; the previous tree is moved aside first and deleted afterwards.
    Readers only ever see the old tree or the new one.

    Example:
        >>> replace_directory(cache / 'go' / '1.25.0', Path.home() / '.duck' / 'go-compiler')
    """
    source = Path(source)
    destination = Path(destination)
    parent = destination.parent
    parent.mkdir(parents=True, exist_ok=True)

    staging = Path(tempfile.mkdtemp(dir=parent, prefix=f".{destination.name}.new."))
    try:
        recursive_copy(source, staging)
    except BaseException:
        safe_rmtree(staging)
        raise

    retired = None
    try:
        if destination.exists() or destination.is_symlink():
            retired = Path(
                tempfile.mkdtemp(dir=parent, prefix=f".{destination.name}.old.")
            )
            # mkdtemp reserves the name; rename needs it free on Windows
            retired.rmdir()
            os.rename(destination, retired)
    except BaseException:
        safe_rmtree(staging)
        raise

    try:
        os.rename(staging, destination)
    except BaseException:
        if retired is not None:
            os.rename(retired, destination)
        safe_rmtree(staging)
        raise

    if retired is not None:
        safe_rmtree(retired)


def make_executable(path: Union[str, Path]) -> None:
    """
    Set owner/group/other read and execute bits (0o755) on POSIX.

    No-op on Windows, where executability follows the file extension.
    """
    if IS_WINDOWS:
        return
    os.chmod(path, 0o755)


@contextmanager
def temporary_directory(
    prefix: str = "duckup_", dir: Optional[Union[str, Path]] = None
) -> Iterator[Path]:
    """
    Context manager for temporary directory with automatic cleanup.

    Example:
        >>> with temporary_directory() as tmp:
        ...     (tmp / 'file.txt').write_text('test')
    """
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix, dir=dir))

    try:
        yield temp_dir
    finally:
        if temp_dir.exists():
            safe_rmtree(temp_dir)


__all__ = [
    "IS_WINDOWS",
    "IS_POSIX",
    "IDENTITY_IS_PRECISE",
    "FilesystemError",
    "ArchiveExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "is_relative_to",
    "same_file",
    "find_single_directory",
    "extract_archive",
    "safe_rmtree",
    "recursive_copy",
    "move_directory",
    "replace_directory",
    "make_executable",
    "temporary_directory",
]
