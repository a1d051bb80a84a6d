"""
Shared utilities for filestore.

Provides access to common functionality used across Gate implementations.
"""

from filestore.shared.gate import (
    LOG_LEVELS,
    GateLogger,
    ConfigLoader,
    build_health_status,
)

__all__ = [
    "LOG_LEVELS",
    "GateLogger",
    "ConfigLoader",
    "build_health_status",
]
