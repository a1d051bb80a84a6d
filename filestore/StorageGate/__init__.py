"""
StorageGate - Sandboxed storage driver for file-transfer services.

Provides:
- A StorageDriver confined to one root directory
- Normalized metadata (name, size, mtime, directory flag, owner, group)
- Listing, mkdir, rmdir, delete, rename
- Downloads from an offset and uploads in replace or append mode
- A DriverFactory handing out one independent driver per session

Usage:
    from filestore import StorageGate

    # Initialize (call on startup)
    StorageGate.initialize(StorageConfig(root_path="/srv/data"))

    # One driver per client session
    driver = StorageGate.new_driver()
    driver.make_dir("reports")
    driver.put_file("reports/q1.txt", b"alpha")
    size, handle = driver.get_file("reports/q1.txt", offset=0)
"""

import os
from typing import Optional, List, Dict, Any

from filestore.shared.gate import (
    GateLogger,
    ConfigLoader,
    build_health_status,
)

from .errors import (
    StorageError,
    NotFoundError,
    WrongTypeError,
    PreconditionError,
    FilesystemError,
    PathSecurityError,
)
from .models import StorageConfig, FileMetadata
from .driver import StorageDriver, DriverFactory, new_basic_driver_factory

# Logger for this gate
_log = GateLogger.get("StorageGate")

# Module-level state
_config: Optional[StorageConfig] = None
_factory: Optional[DriverFactory] = None
_initialized: bool = False
_config_path: Optional[str] = None


class StorageGate:
    """
    Main interface for filestore's storage drivers.

    All methods are class methods for easy access throughout the application.
    """

    @classmethod
    def initialize(
        cls,
        config: Optional[StorageConfig] = None,
        config_path: Optional[str] = None,
    ) -> bool:
        """
        Initialize the storage gate.

        An explicit config wins. Otherwise the JSON file at config_path is
        loaded (and written with environment-derived defaults if missing).
        Without either, settings come from the environment.

        Args:
            config: Ready-made configuration
            config_path: Path to a JSON config file

        Returns:
            True if initialization successful
        """
        global _config, _factory, _initialized, _config_path

        try:
            if config is None and config_path:
                _config_path = config_path
                if os.path.exists(config_path):
                    config = ConfigLoader.load(config_path, StorageConfig)
                    if config is None:
                        raise ValueError(f"Unreadable config file: {config_path}")
                else:
                    config = StorageConfig.from_env()
                    if not ConfigLoader.save(config_path, config):
                        _log.warning(f"Could not write config file {config_path}")
            elif config is None:
                config = StorageConfig.from_env()

            GateLogger.set_level(config.log_level)
            _factory = DriverFactory.from_config(config)
            _config = config
            _initialized = True
            _log.info(f"Initialized with root {_factory.root}")
            return True

        except Exception as e:
            _log.error(f"Initialization failed: {e}")
            return False

    @classmethod
    def is_initialized(cls) -> bool:
        """Check if the gate is initialized."""
        return _initialized

    @classmethod
    def _get_factory(cls) -> DriverFactory:
        """Get the driver factory, initializing from the environment if needed."""
        if _factory is None:
            if not cls.initialize():
                raise RuntimeError("StorageGate initialization failed. Check STORAGE_ROOT.")
        return _factory

    @classmethod
    def new_driver(cls) -> StorageDriver:
        """Create a driver for a new session."""
        return cls._get_factory().new_driver()

    @classmethod
    def get_config(cls) -> Dict[str, Any]:
        """Current configuration as a dict."""
        if _config is None:
            return {}
        return _config.to_dict()

    # ==================== Health Checks ====================

    @classmethod
    def is_healthy(cls) -> bool:
        """Check if the gate is operational."""
        if not _initialized or _factory is None:
            return False
        root = _factory.root
        return os.path.isdir(root) and os.access(root, os.R_OK | os.W_OK)

    @classmethod
    def get_health_status(cls) -> Dict[str, Any]:
        """Get detailed health information."""
        checks = {}
        details = {}

        if _initialized and _factory is not None:
            root = _factory.root
            checks["root_exists"] = os.path.isdir(root)
            checks["root_readable"] = os.access(root, os.R_OK)
            checks["root_writable"] = os.access(root, os.W_OK)
            details["root"] = root
            details["config_path"] = _config_path

        return build_health_status(
            gate_name="StorageGate",
            initialized=_initialized,
            dependencies=["filesystem"],
            checks=checks,
            details=details,
        )

    @classmethod
    def get_dependencies(cls) -> List[str]:
        """List external dependencies."""
        return ["filesystem"]


# ==================== Convenience Functions ====================

def initialize(config: Optional[StorageConfig] = None, config_path: Optional[str] = None) -> bool:
    """Initialize StorageGate."""
    return StorageGate.initialize(config, config_path)


def is_initialized() -> bool:
    """Check if initialized."""
    return StorageGate.is_initialized()


def new_driver() -> StorageDriver:
    """Create a driver for a new session."""
    return StorageGate.new_driver()


def get_health_status() -> Dict[str, Any]:
    """Get detailed health information."""
    return StorageGate.get_health_status()


__all__ = [
    # Class
    "StorageGate",
    # Lifecycle
    "initialize",
    "is_initialized",
    "new_driver",
    "get_health_status",
    # Driver
    "StorageDriver",
    "DriverFactory",
    "new_basic_driver_factory",
    # Models
    "StorageConfig",
    "FileMetadata",
    # Errors
    "StorageError",
    "NotFoundError",
    "WrongTypeError",
    "PreconditionError",
    "FilesystemError",
    "PathSecurityError",
]
