"""
StorageGate security module.

Resolves caller-supplied paths against the root directory and rejects
anything that lands outside it.
"""

import os

from .errors import PathSecurityError


def normalize_path(path: str) -> str:
    """
    Normalize a path to prevent traversal attacks.

    Args:
        path: Raw path string

    Returns:
        Normalized absolute path
    """
    path = os.path.expanduser(path)
    # Resolve . and ..
    path = os.path.normpath(path)
    return os.path.abspath(path)


def is_within_root(root: str, target: str) -> bool:
    """Check whether a normalized target lies inside a normalized root."""
    try:
        return os.path.commonpath([root, target]) == root
    except ValueError:
        # Different drives on Windows
        return False


def resolve_path(root: str, relative_path: str, operation: str = "resolve") -> str:
    """
    Resolve a path relative to the root directory.

    Leading separators are stripped, so "/reports" and "reports" name the
    same entry. Empty, ".", "/" resolve to the root itself.

    Args:
        root: Normalized root directory
        relative_path: Caller-supplied path
        operation: Operation name used in the error if resolution fails

    Returns:
        Absolute path inside root

    Raises:
        PathSecurityError: If the path escapes root or contains a null byte
    """
    if "\x00" in relative_path:
        raise PathSecurityError(operation, relative_path, "Path contains a null byte")

    if not relative_path or relative_path in (".", "/", "\\"):
        return root

    stripped = relative_path.lstrip("/\\")
    target = os.path.normpath(os.path.join(root, stripped))

    if not is_within_root(root, target):
        raise PathSecurityError(operation, relative_path, "Path escapes root directory")

    return target


def relative_to_root(root: str, absolute_path: str) -> str:
    """Path of an entry relative to root, '/' separated; "" for root itself."""
    rel_path = os.path.relpath(absolute_path, root)
    if rel_path == ".":
        return ""
    return rel_path.replace(os.sep, "/")
