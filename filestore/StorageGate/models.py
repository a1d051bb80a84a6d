"""
StorageGate Pydantic models.

Defines the driver configuration and the normalized file metadata view.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_OWNER = "root"
DEFAULT_GROUP = "root"
DEFAULT_COPY_CHUNK_SIZE = 32 * 1024


class StorageConfig(BaseModel):
    """Configuration for the storage drivers of one service."""
    root_path: str = Field(default="./data/storage", description="Directory all drivers are confined to")
    owner: str = Field(default=DEFAULT_OWNER, description="Owner reported in metadata")
    group: str = Field(default=DEFAULT_GROUP, description="Group reported in metadata")
    copy_chunk_size: int = Field(default=DEFAULT_COPY_CHUNK_SIZE, ge=1024, le=16 * 1024 * 1024)
    create_root: bool = Field(default=False, description="Create root_path if missing")
    log_level: str = Field(default="info")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StorageConfig":
        """Create from dict."""
        return cls.model_validate(data)

    @classmethod
    def from_env(cls, manager: Optional[Any] = None) -> "StorageConfig":
        """
        Build a config from environment-driven settings.

        Args:
            manager: ConfigManager to read from (default: the global one)
        """
        if manager is None:
            from filestore import Config
            manager = Config.get_manager()

        return cls(
            root_path=manager.get("STORAGE_ROOT", "./data/storage"),
            owner=manager.get("STORAGE_OWNER", DEFAULT_OWNER),
            group=manager.get("STORAGE_GROUP", DEFAULT_GROUP),
            copy_chunk_size=manager.get("STORAGE_COPY_CHUNK_SIZE", DEFAULT_COPY_CHUNK_SIZE),
            create_root=manager.get("STORAGE_CREATE_ROOT", False),
            log_level=manager.get("STORAGE_LOG_LEVEL", "info"),
        )


class FileMetadata(BaseModel):
    """
    Snapshot of a file or directory.

    Owner and group are not read from the filesystem; they are the
    constant identity configured on the driver.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    path: str = Field(description="Path relative to the root, '/' separated")
    size: int = 0
    is_directory: bool
    modified_at: datetime
    mode: int = Field(default=0, description="Permission bits")
    owner: str = DEFAULT_OWNER
    group: str = DEFAULT_GROUP

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return self.model_dump(mode="json")
