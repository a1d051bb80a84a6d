"""
Shared helpers for filestore gates.

GateLogger hands out loggers under the ``filestore`` namespace and applies
the STORAGE_LOG_LEVEL setting. ConfigLoader moves pydantic settings models
to and from JSON files. build_health_status shapes the dict a gate reports
from its health checks.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel


LOG_NAMESPACE = "filestore"
LOG_FORMAT = "[%(name)s] %(levelname)s: %(message)s"

# Names accepted by STORAGE_LOG_LEVEL
LOG_LEVELS: Dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class GateLogger:
    """
    Loggers for the filestore gates.

    The namespace logger gets a stream handler on first use unless the host
    application already attached one.
    """

    _configured = False

    @classmethod
    def _namespace_logger(cls) -> logging.Logger:
        base = logging.getLogger(LOG_NAMESPACE)
        if not cls._configured:
            if not base.handlers:
                handler = logging.StreamHandler()
                handler.setFormatter(logging.Formatter(LOG_FORMAT))
                base.addHandler(handler)
                base.setLevel(logging.INFO)
            cls._configured = True
        return base

    @classmethod
    def get(cls, gate_name: str) -> logging.Logger:
        """Logger for one gate, e.g. ``filestore.StorageGate``."""
        cls._namespace_logger()
        return logging.getLogger(f"{LOG_NAMESPACE}.{gate_name}")

    @classmethod
    def set_level(cls, level: Union[int, str], gate_name: Optional[str] = None) -> int:
        """
        Apply a log level to one gate, or to every gate when gate_name is None.

        Args:
            level: A logging constant or one of the LOG_LEVELS names (any case)
            gate_name: Gate to adjust

        Returns:
            The numeric level applied

        Raises:
            ValueError: If a level name is not one of LOG_LEVELS
        """
        if isinstance(level, str):
            try:
                level = LOG_LEVELS[level.lower()]
            except KeyError:
                raise ValueError(
                    f"Unknown log level {level!r} (expected one of {', '.join(LOG_LEVELS)})"
                ) from None

        target = cls.get(gate_name) if gate_name else cls._namespace_logger()
        target.setLevel(level)
        return level


def build_health_status(
    gate_name: str,
    initialized: bool,
    dependencies: List[str],
    checks: Dict[str, bool],
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Health dict for a gate: healthy only when initialized and every check passed."""
    return {
        "gate": gate_name,
        "healthy": initialized and all(checks.values()),
        "initialized": initialized,
        "dependencies": dependencies,
        "checks": checks,
        "details": details or {},
    }


ModelT = TypeVar("ModelT", bound=BaseModel)


class ConfigLoader:
    """JSON config files in and out of pydantic models."""

    @staticmethod
    def load(path: Union[str, Path], model_class: Type[ModelT]) -> Optional[ModelT]:
        """
        Read a JSON config file and validate it into model_class.

        Returns None when the file does not exist. A file that cannot be
        read, is not JSON, or fails validation is logged and also gives None.
        """
        path = Path(path)
        if not path.exists():
            return None

        try:
            return model_class.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            GateLogger.get("ConfigLoader").error(f"Failed to load config from {path}: {e}")
            return None

    @staticmethod
    def save(path: Union[str, Path], config: BaseModel) -> bool:
        """
        Write config to path as indented JSON, creating parent directories.

        Returns:
            True if the file was written
        """
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(config.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            GateLogger.get("ConfigLoader").error(f"Failed to save config to {path}: {e}")
            return False
        return True
