"""
StorageGate driver and driver factory.

A StorageDriver is bound to one root directory for its whole lifetime.
The transfer service asks a DriverFactory for a fresh driver per session.
"""

import os
import stat as stat_module
from typing import BinaryIO, List, Optional, Tuple

from filestore.shared.gate import GateLogger

from .errors import FilesystemError, NotFoundError, WrongTypeError
from .metadata import stat_entry
from .models import (
    DEFAULT_COPY_CHUNK_SIZE,
    DEFAULT_GROUP,
    DEFAULT_OWNER,
    FileMetadata,
    StorageConfig,
)
from .operations import (
    change_dir as op_change_dir,
    delete_directory as op_delete_directory,
    delete_file as op_delete_file,
    list_directory as op_list_directory,
    make_directory as op_make_directory,
    rename_path as op_rename_path,
)
from .security import normalize_path, resolve_path
from .transfer import DataSource, get_file as op_get_file, put_file as op_put_file

_log = GateLogger.get("StorageGate")


class StorageDriver:
    """
    Filesystem operations confined to a root directory.

    Paths passed to every method are relative to the root; a leading "/"
    is allowed. Failures raise StorageError subclasses.
    """

    def __init__(
        self,
        root: str,
        owner: str = DEFAULT_OWNER,
        group: str = DEFAULT_GROUP,
        copy_chunk_size: int = DEFAULT_COPY_CHUNK_SIZE,
    ):
        self._root = normalize_path(root)
        self._owner = owner
        self._group = group
        self._copy_chunk_size = copy_chunk_size

    @property
    def root(self) -> str:
        """The root directory, fixed at construction."""
        return self._root

    def __repr__(self) -> str:
        return f"StorageDriver(root={self._root!r})"

    def change_dir(self, path: str) -> None:
        """Succeed only if path is an existing directory."""
        op_change_dir(self._root, path)

    def stat(self, path: str) -> FileMetadata:
        """Metadata for a single entry (symlinks are not followed)."""
        resolved = resolve_path(self._root, path, "stat")
        return stat_entry(self._root, resolved, self._owner, self._group, "stat", path)

    def list_directory(self, path: str = "") -> List[FileMetadata]:
        """Metadata for the immediate children of a directory."""
        return op_list_directory(self._root, path, self._owner, self._group)

    def make_dir(self, path: str) -> None:
        """Create one directory level."""
        op_make_directory(self._root, path)

    def delete_dir(self, path: str) -> None:
        """Remove an empty directory."""
        op_delete_directory(self._root, path)

    def delete_file(self, path: str) -> None:
        """Remove a file."""
        op_delete_file(self._root, path)

    def rename(self, from_path: str, to_path: str) -> None:
        """Rename a file or directory."""
        op_rename_path(self._root, from_path, to_path)

    def get_file(self, path: str, offset: int = 0) -> Tuple[int, BinaryIO]:
        """Return (total size, caller-owned read handle positioned at offset)."""
        return op_get_file(self._root, path, offset)

    def put_file(self, path: str, data: DataSource, append: bool = False) -> int:
        """Write data to path, replacing or appending; returns bytes written."""
        return op_put_file(self._root, path, data, append, self._copy_chunk_size)


class DriverFactory:
    """
    Builds StorageDrivers bound to one root directory.

    The factory holds only immutable settings, so it is safe to call
    new_driver() once per session from any thread.
    """

    def __init__(
        self,
        root_path: str,
        owner: str = DEFAULT_OWNER,
        group: str = DEFAULT_GROUP,
        copy_chunk_size: int = DEFAULT_COPY_CHUNK_SIZE,
        create_root: bool = False,
    ):
        root = normalize_path(root_path)

        if not os.path.exists(root):
            if not create_root:
                raise NotFoundError("init", root, "Root directory does not exist")
            try:
                os.makedirs(root, exist_ok=True)
            except OSError as e:
                raise FilesystemError("init", root, f"Cannot create root directory: {e}") from e
            _log.info(f"Created root directory {root}")

        if not stat_module.S_ISDIR(os.stat(root).st_mode):
            raise WrongTypeError("init", root, "Root is not a directory")

        self._root = root
        self._owner = owner
        self._group = group
        self._copy_chunk_size = copy_chunk_size

    @classmethod
    def from_config(cls, config: StorageConfig) -> "DriverFactory":
        """Create a factory from a StorageConfig."""
        return cls(
            root_path=config.root_path,
            owner=config.owner,
            group=config.group,
            copy_chunk_size=config.copy_chunk_size,
            create_root=config.create_root,
        )

    @property
    def root(self) -> str:
        return self._root

    def new_driver(self) -> StorageDriver:
        """Create an independent driver bound to the factory's root."""
        return StorageDriver(
            self._root,
            owner=self._owner,
            group=self._group,
            copy_chunk_size=self._copy_chunk_size,
        )


def new_basic_driver_factory(root_path: str, config: Optional[StorageConfig] = None) -> DriverFactory:
    """Factory for root_path using defaults from config (if given) for everything else."""
    if config is None:
        return DriverFactory(root_path)
    return DriverFactory.from_config(config.model_copy(update={"root_path": root_path}))
