"""
StorageGate metadata adapter.

Turns os.stat results into FileMetadata.
"""

import os
import stat as stat_module
from datetime import datetime

from .errors import NotFoundError, translate_os_error
from .models import FileMetadata
from .security import relative_to_root


def build_metadata(
    root: str,
    absolute_path: str,
    stat_result: os.stat_result,
    owner: str,
    group: str,
) -> FileMetadata:
    """
    Build metadata for an entry from its stat result.

    Args:
        root: Normalized root directory
        absolute_path: Resolved path of the entry
        stat_result: Result of os.lstat / DirEntry.stat
        owner: Owner identity to report
        group: Group identity to report

    Returns:
        FileMetadata snapshot
    """
    is_dir = stat_module.S_ISDIR(stat_result.st_mode)
    return FileMetadata(
        name=os.path.basename(absolute_path),
        path=relative_to_root(root, absolute_path),
        size=stat_result.st_size,
        is_directory=is_dir,
        modified_at=datetime.fromtimestamp(stat_result.st_mtime),
        mode=stat_module.S_IMODE(stat_result.st_mode),
        owner=owner,
        group=group,
    )


def stat_entry(
    root: str,
    absolute_path: str,
    owner: str,
    group: str,
    operation: str = "stat",
    display_path: str = "",
) -> FileMetadata:
    """
    Stat an entry without following symlinks.

    Raises:
        NotFoundError: If the entry does not exist
        FilesystemError: For any other OS failure
    """
    try:
        result = os.lstat(absolute_path)
    except NotADirectoryError as e:
        # A parent component is a file, so the entry cannot exist
        raise NotFoundError(operation, display_path or absolute_path, "No such file or directory") from e
    except OSError as e:
        raise translate_os_error(operation, display_path or absolute_path, e) from e
    return build_metadata(root, absolute_path, result, owner, group)
