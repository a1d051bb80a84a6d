"""
StorageGate transfer engine.

Streams file contents out from a byte offset and streams uploads in,
either replacing the target or appending to it.
"""

import io
import os
import stat as stat_module
from typing import BinaryIO, Optional, Tuple, Union

from filestore.shared.gate import GateLogger

from .errors import (
    FilesystemError,
    PreconditionError,
    WrongTypeError,
    translate_os_error,
)
from .models import DEFAULT_COPY_CHUNK_SIZE
from .security import resolve_path

_log = GateLogger.get("StorageGate")

DataSource = Union[bytes, bytearray, memoryview, BinaryIO]


def get_file(root: str, relative_path: str, offset: int = 0) -> Tuple[int, BinaryIO]:
    """
    Open a file for download.

    Args:
        root: Normalized root directory
        relative_path: File to read, relative to root
        offset: Byte position the stream starts at

    Returns:
        Tuple of (total file size, open binary handle positioned at offset).
        The caller owns the handle and must close it.

    Raises:
        PreconditionError: If offset is negative
        NotFoundError: If the file does not exist
        WrongTypeError: If the path is a directory
    """
    if offset < 0:
        raise PreconditionError("retr", relative_path, f"Invalid offset: {offset}")

    resolved = resolve_path(root, relative_path, "retr")
    try:
        handle = open(resolved, "rb")
    except OSError as e:
        raise translate_os_error("retr", relative_path, e) from e

    try:
        info = os.fstat(handle.fileno())
        if not stat_module.S_ISDIR(info.st_mode):
            handle.seek(offset, os.SEEK_SET)
    except OSError as e:
        handle.close()
        raise translate_os_error("retr", relative_path, e) from e

    if stat_module.S_ISDIR(info.st_mode):
        handle.close()
        raise WrongTypeError("retr", relative_path, "Is a directory")

    return info.st_size, handle


def _as_stream(data: DataSource, operation: str, relative_path: str) -> BinaryIO:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return io.BytesIO(data)
    if hasattr(data, "read"):
        return data
    raise PreconditionError(operation, relative_path, f"Unsupported data source: {type(data).__name__}")


def _read_first_chunk(source: BinaryIO, chunk_size: int, operation: str, relative_path: str) -> bytes:
    # Read before the target is touched
    try:
        chunk = source.read(chunk_size)
    except OSError as e:
        raise FilesystemError(operation, relative_path, f"Cannot read upload: {e}") from e
    if not isinstance(chunk, (bytes, bytearray, memoryview)):
        raise PreconditionError(
            operation, relative_path, f"Upload source yields {type(chunk).__name__}, not bytes"
        )
    return chunk


def copy_stream(source: BinaryIO, sink: BinaryIO, chunk_size: int = DEFAULT_COPY_CHUNK_SIZE) -> int:
    """Copy source into sink chunk by chunk; returns the number of bytes copied."""
    copied = 0
    while True:
        chunk = source.read(chunk_size)
        if not chunk:
            break
        sink.write(chunk)
        copied += len(chunk)
    return copied


def put_file(
    root: str,
    relative_path: str,
    data: DataSource,
    append: bool = False,
    chunk_size: Optional[int] = None,
) -> int:
    """
    Write an upload to a file.

    In replace mode any existing file is removed and a new one written.
    In append mode the file must already exist and bytes are added at its end.
    A directory at the target path is never touched, and neither is an
    existing file when the source cannot produce bytes.

    Args:
        root: Normalized root directory
        relative_path: Destination, relative to root
        data: Bytes or a readable binary stream
        append: Append to the existing file instead of replacing it
        chunk_size: Bytes per copy cycle

    Returns:
        Number of bytes written

    Raises:
        WrongTypeError: If a directory occupies the target path
        PreconditionError: If append is requested and the file does not
            exist, or the source does not yield bytes
        FilesystemError: If removing, opening or copying fails
    """
    operation = "appe" if append else "stor"
    chunk_size = chunk_size or DEFAULT_COPY_CHUNK_SIZE
    source = _as_stream(data, operation, relative_path)
    resolved = resolve_path(root, relative_path, operation)

    try:
        existing = os.lstat(resolved)
    except (FileNotFoundError, NotADirectoryError):
        existing = None
    except OSError as e:
        raise FilesystemError(operation, relative_path, f"Cannot inspect target: {e}") from e

    if existing is not None and stat_module.S_ISDIR(existing.st_mode):
        raise WrongTypeError(operation, relative_path, "A directory has the same name")
    if append and existing is None:
        raise PreconditionError(operation, relative_path, "Append requested but target does not exist")

    first = _read_first_chunk(source, chunk_size, operation, relative_path)
    _log.debug(f"Upload to {resolved} (append={append}, exists={existing is not None})")

    if not append:
        if existing is not None:
            try:
                os.remove(resolved)
            except OSError as e:
                raise FilesystemError(operation, relative_path, f"Cannot replace existing file: {e}") from e
        try:
            sink = open(resolved, "wb")
        except OSError as e:
            raise translate_os_error(operation, relative_path, e) from e
    else:
        try:
            sink = open(resolved, "r+b")
        except OSError as e:
            raise FilesystemError(operation, relative_path, e.strerror or str(e)) from e
        try:
            position = sink.seek(0, os.SEEK_END)
        except OSError as e:
            sink.close()
            raise FilesystemError(operation, relative_path, e.strerror or str(e)) from e
        _log.debug(f"Appending to {resolved} from offset {position}")

    try:
        with sink:
            if not first:
                return 0
            sink.write(first)
            return len(first) + copy_stream(source, sink, chunk_size)
    except (OSError, TypeError, ValueError) as e:
        raise FilesystemError(operation, relative_path, f"Copy failed: {e}") from e
