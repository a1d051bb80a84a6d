"""
StorageGate file operations.

Provides list, change-dir, mkdir, delete and rename operations.
Every path is resolved inside the root first, and every mutation checks
the type of its target before touching it.
"""

import errno
import os
import stat as stat_module
from typing import List, Tuple

from filestore.shared.gate import GateLogger

from .errors import (
    FilesystemError,
    NotFoundError,
    PreconditionError,
    WrongTypeError,
    translate_os_error,
)
from .metadata import build_metadata
from .models import FileMetadata
from .security import resolve_path

_log = GateLogger.get("StorageGate")


def _lstat_target(root: str, relative_path: str, operation: str) -> Tuple[str, os.stat_result]:
    """Resolve a path and lstat it, raising NotFoundError if it is missing."""
    resolved = resolve_path(root, relative_path, operation)
    try:
        return resolved, os.lstat(resolved)
    except (FileNotFoundError, NotADirectoryError) as e:
        raise NotFoundError(operation, relative_path, "No such file or directory") from e
    except OSError as e:
        raise translate_os_error(operation, relative_path, e) from e


def list_directory(
    root: str,
    relative_path: str,
    owner: str,
    group: str,
) -> List[FileMetadata]:
    """
    List the immediate children of a directory.

    Args:
        root: Normalized root directory
        relative_path: Directory to list, relative to root
        owner: Owner identity reported for each entry
        group: Group identity reported for each entry

    Returns:
        FileMetadata for each child, directories first

    Raises:
        NotFoundError: If the directory does not exist
        WrongTypeError: If the path is not a directory
    """
    resolved, target = _lstat_target(root, relative_path, "list")
    if not stat_module.S_ISDIR(target.st_mode):
        raise WrongTypeError("list", relative_path, "Not a directory")

    files: List[FileMetadata] = []
    try:
        with os.scandir(resolved) as entries:
            for entry in entries:
                try:
                    entry_stat = entry.stat(follow_symlinks=False)
                except FileNotFoundError:
                    # Removed between enumeration and stat
                    _log.debug(f"Entry vanished while listing: {entry.path}")
                    continue
                files.append(build_metadata(root, entry.path, entry_stat, owner, group))
    except OSError as e:
        raise translate_os_error("list", relative_path, e) from e

    files.sort(key=lambda f: (not f.is_directory, f.name.lower()))
    return files


def change_dir(root: str, relative_path: str) -> None:
    """
    Check that a path can be entered.

    Raises:
        NotFoundError: If the path does not exist
        WrongTypeError: If the path is not a directory
    """
    _, target = _lstat_target(root, relative_path, "cwd")
    if not stat_module.S_ISDIR(target.st_mode):
        raise WrongTypeError("cwd", relative_path, "Not a directory")


def make_directory(root: str, relative_path: str) -> None:
    """
    Create a single directory level.

    The parent must already exist and the target must not.

    Raises:
        FilesystemError: If the directory cannot be created
    """
    resolved = resolve_path(root, relative_path, "mkdir")
    try:
        os.mkdir(resolved)
    except FileExistsError as e:
        raise FilesystemError("mkdir", relative_path, "File exists") from e
    except OSError as e:
        raise FilesystemError("mkdir", relative_path, e.strerror or str(e)) from e
    _log.debug(f"Created directory {resolved}")


def delete_directory(root: str, relative_path: str) -> None:
    """
    Remove an empty directory.

    Raises:
        PreconditionError: If the path is the root itself
        NotFoundError: If the path does not exist
        WrongTypeError: If the path is not a directory
        FilesystemError: If removal fails (e.g. directory not empty)
    """
    resolved, target = _lstat_target(root, relative_path, "rmdir")
    if resolved == root:
        raise PreconditionError("rmdir", relative_path, "Cannot delete the root directory")
    if not stat_module.S_ISDIR(target.st_mode):
        raise WrongTypeError("rmdir", relative_path, "Not a directory")

    try:
        os.rmdir(resolved)
    except OSError as e:
        if e.errno in (errno.ENOTEMPTY, errno.EEXIST):
            raise FilesystemError("rmdir", relative_path, "Directory is not empty") from e
        raise translate_os_error("rmdir", relative_path, e) from e
    _log.debug(f"Deleted directory {resolved}")


def delete_file(root: str, relative_path: str) -> None:
    """
    Remove a file (any non-directory entry).

    Raises:
        NotFoundError: If the path does not exist
        WrongTypeError: If the path is a directory
        FilesystemError: If removal fails
    """
    resolved, target = _lstat_target(root, relative_path, "delete")
    if stat_module.S_ISDIR(target.st_mode):
        raise WrongTypeError("delete", relative_path, "Not a file")

    try:
        os.remove(resolved)
    except OSError as e:
        raise translate_os_error("delete", relative_path, e) from e
    _log.debug(f"Deleted file {resolved}")


def rename_path(root: str, from_path: str, to_path: str) -> None:
    """
    Rename a file or directory within the root.

    Raises:
        PreconditionError: If either side is the root itself
        NotFoundError: If the source does not exist
        FilesystemError: If the rename fails
    """
    source = resolve_path(root, from_path, "rename")
    dest = resolve_path(root, to_path, "rename")

    if source == root or dest == root:
        raise PreconditionError("rename", from_path, "Cannot rename the root directory")
    if not os.path.lexists(source):
        raise NotFoundError("rename", from_path, "No such file or directory")

    try:
        os.rename(source, dest)
    except OSError as e:
        raise FilesystemError("rename", from_path, f"Cannot rename to {to_path!r}: {e.strerror or e}") from e
    _log.debug(f"Renamed {source} -> {dest}")
