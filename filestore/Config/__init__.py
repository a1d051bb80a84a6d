"""
filestore Configuration Manager.

Centralized configuration with:
- Schema-driven type conversion
- Environment variable fallback (.env loaded via python-dotenv)
- Optional JSON config file
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from dotenv import load_dotenv

from filestore.shared.gate import GateLogger

_log = GateLogger.get("Config")

from filestore.Config.schema import (
    CONFIG_SCHEMA,
    ConfigField,
    ConfigType,
    ConfigCategory,
    get_schema_by_key,
    get_required_fields,
)


# Config file paths
PROJECT_ROOT = Path(__file__).resolve().parents[2]
ENV_FILE = PROJECT_ROOT / ".env"
CONFIG_JSON = PROJECT_ROOT / "data" / "config.json"


class ConfigManager:
    """
    Manages filestore configuration.

    Priority order:
    1. Environment variables
    2. config.json
    3. Schema defaults
    """

    def __init__(
        self,
        env_file: Optional[Union[str, Path]] = None,
        json_path: Optional[Union[str, Path]] = None,
    ):
        self._env_file = Path(env_file) if env_file else ENV_FILE
        self._json_path = Path(json_path) if json_path else CONFIG_JSON
        self._cache: Dict[str, Any] = {}
        self._loaded = False
        self._load()

    def _load(self):
        """Load configuration from all sources."""
        load_dotenv(self._env_file)

        json_config = {}
        if self._json_path.exists():
            try:
                with open(self._json_path, encoding="utf-8") as f:
                    json_config = json.load(f)
            except (json.JSONDecodeError, IOError) as e:
                _log.warning(f"Ignoring unreadable config file {self._json_path}: {e}")

        for field in CONFIG_SCHEMA:
            # Priority: env var > json config > default
            value = os.environ.get(field.env_var)

            if value is None and field.key in json_config:
                value = json_config[field.key]

            if value is None:
                value = field.default

            self._cache[field.key] = self._convert_type(value, field.config_type)

        self._loaded = True

    def _convert_type(self, value: Any, config_type: ConfigType) -> Any:
        """Convert value to appropriate type."""
        if value is None:
            return None

        try:
            if config_type == ConfigType.INTEGER:
                return int(value)
            elif config_type == ConfigType.BOOLEAN:
                if isinstance(value, bool):
                    return value
                return str(value).lower() in ("true", "1", "yes", "on")
            else:
                return str(value) if value else None
        except (ValueError, TypeError):
            return value

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        if not self._loaded:
            self._load()
        value = self._cache.get(key)
        return default if value is None else value

    def get_all(self) -> Dict[str, Any]:
        """Get all configuration values."""
        return {field.key: self._cache.get(field.key) for field in CONFIG_SCHEMA}

    def get_missing_required(self) -> List[str]:
        """Keys of required fields that have no value."""
        return [
            field.key
            for field in get_required_fields()
            if self._cache.get(field.key) in (None, "")
        ]

    def validate(self) -> Tuple[bool, List[str]]:
        """
        Validate configuration.

        Returns:
            (is_valid, list of error messages)
        """
        errors = [f"Required config missing: {key}" for key in self.get_missing_required()]

        for field in CONFIG_SCHEMA:
            value = self._cache.get(field.key)
            if value is None:
                continue
            if field.config_type == ConfigType.INTEGER and not isinstance(value, int):
                errors.append(f"Invalid integer for {field.key}: {value}")
            if field.options and str(value).lower() not in field.options:
                errors.append(f"Invalid option for {field.key}: {value}")

        return len(errors) == 0, errors


# Global instance
_manager: Optional[ConfigManager] = None


def get_manager() -> ConfigManager:
    """Get or create the global ConfigManager."""
    global _manager
    if _manager is None:
        _manager = ConfigManager()
    return _manager


def reload():
    """Reload configuration from files."""
    global _manager
    _manager = ConfigManager()


def get(key: str, default: Any = None) -> Any:
    """Get a config value."""
    return get_manager().get(key, default)


__all__ = [
    "ConfigManager",
    "ConfigField",
    "ConfigType",
    "ConfigCategory",
    "CONFIG_SCHEMA",
    "get_schema_by_key",
    "get_manager",
    "reload",
    "get",
]
