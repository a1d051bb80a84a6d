"""
Configuration schema for filestore.

Defines all configurable options with metadata for validation
and documentation.
"""

from enum import Enum
from typing import Optional, List, Any
from dataclasses import dataclass


class ConfigType(Enum):
    """Configuration value types."""
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    PATH = "path"          # File system path


class ConfigCategory(Enum):
    """Configuration categories for grouping."""
    PATHS = "paths"
    IDENTITY = "identity"
    TRANSFER = "transfer"
    LOGGING = "logging"


@dataclass
class ConfigField:
    """Definition of a configuration field."""
    key: str
    description: str
    config_type: ConfigType
    category: ConfigCategory
    required: bool = False
    default: Any = None
    env_var: str = None          # Override env var name (defaults to key)
    options: List[str] = None    # For enumerated types

    def __post_init__(self):
        if self.env_var is None:
            self.env_var = self.key


# ==================== Schema Definition ====================

CONFIG_SCHEMA: List[ConfigField] = [
    # === Paths ===
    ConfigField(
        key="STORAGE_ROOT",
        description="Root directory every driver is confined to",
        config_type=ConfigType.PATH,
        category=ConfigCategory.PATHS,
        required=True,
        default="./data/storage",
    ),
    ConfigField(
        key="STORAGE_CREATE_ROOT",
        description="Create the root directory if it does not exist",
        config_type=ConfigType.BOOLEAN,
        category=ConfigCategory.PATHS,
        default=False,
    ),

    # === Identity ===
    ConfigField(
        key="STORAGE_OWNER",
        description="Owner name reported in file metadata",
        config_type=ConfigType.STRING,
        category=ConfigCategory.IDENTITY,
        default="root",
    ),
    ConfigField(
        key="STORAGE_GROUP",
        description="Group name reported in file metadata",
        config_type=ConfigType.STRING,
        category=ConfigCategory.IDENTITY,
        default="root",
    ),

    # === Transfer ===
    ConfigField(
        key="STORAGE_COPY_CHUNK_SIZE",
        description="Bytes copied per read/write cycle during uploads",
        config_type=ConfigType.INTEGER,
        category=ConfigCategory.TRANSFER,
        default=32 * 1024,
    ),

    # === Logging ===
    ConfigField(
        key="STORAGE_LOG_LEVEL",
        description="Log level for the filestore loggers",
        config_type=ConfigType.STRING,
        category=ConfigCategory.LOGGING,
        default="info",
        options=["debug", "info", "warning", "error"],
    ),
]


def get_schema_by_key(key: str) -> Optional[ConfigField]:
    """Get schema field by key."""
    for field in CONFIG_SCHEMA:
        if field.key == key:
            return field
    return None


def get_schema_by_category(category: ConfigCategory) -> List[ConfigField]:
    """Get all fields in a category."""
    return [f for f in CONFIG_SCHEMA if f.category == category]


def get_required_fields() -> List[ConfigField]:
    """Get all required fields."""
    return [f for f in CONFIG_SCHEMA if f.required]
