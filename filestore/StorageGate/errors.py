"""
StorageGate error types.

Every driver operation either returns its result or raises one of these.
Transport layers map the class onto a protocol reply without inspecting
OS-specific error details.
"""

from typing import Any, Dict


class StorageError(Exception):
    """Base class for storage driver failures."""

    def __init__(self, operation: str, path: str, message: str):
        super().__init__(f"{operation} {path!r}: {message}")
        self.operation = operation
        self.path = path
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {
            "error": type(self).__name__,
            "operation": self.operation,
            "path": self.path,
            "message": self.message,
        }


class NotFoundError(StorageError):
    """Target path does not exist."""
    pass


class WrongTypeError(StorageError):
    """Target exists but is a directory where a file was expected, or vice versa."""
    pass


class PreconditionError(StorageError):
    """Operation-specific state violation (e.g. append to a missing file)."""
    pass


class FilesystemError(StorageError):
    """Underlying I/O failure; the OSError is kept as __cause__."""
    pass


class PathSecurityError(StorageError):
    """Raised when a path resolves outside the root directory."""
    pass


def translate_os_error(operation: str, path: str, exc: OSError) -> StorageError:
    """
    Map an OSError onto the storage error taxonomy.

    The caller is expected to ``raise translate_os_error(...) from exc``.
    """
    reason = exc.strerror or str(exc)
    if isinstance(exc, FileNotFoundError):
        return NotFoundError(operation, path, "No such file or directory")
    if isinstance(exc, IsADirectoryError):
        return WrongTypeError(operation, path, "Is a directory")
    if isinstance(exc, NotADirectoryError):
        return WrongTypeError(operation, path, "Not a directory")
    return FilesystemError(operation, path, reason)
