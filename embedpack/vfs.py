"""
Virtual File System.

Serves packed records through file handles that behave like real binary
files, or passes every call through to a local directory when the mode
switch is set. Callers use the same four operations in both modes:
open, read_file, write_file and set_local.
"""

from __future__ import annotations

import errno
import os
import stat as stat_mod
from dataclasses import dataclass
from datetime import datetime, timezone
from io import BytesIO
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from embedpack.runtime import ModeSwitch
from embedpack.storage import FileStore, InvalidArgumentError, normalize_logical_path

if TYPE_CHECKING:
    from embedpack.storage import FileRecord


# -----------------------------------------------------------------------------
# File info
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileInfo:
    """
    Metadata about an entry, embedded or local.

    Attributes:
        name: Base name of the entry
        size: Size in bytes
        mode: st_mode bits (type + permissions)
        mod_time: Modification time; synthesized for embedded entries
        is_dir: True for directories
    """

    name: str
    size: int
    mode: int
    mod_time: datetime
    is_dir: bool

    @property
    def is_file(self) -> bool:
        return not self.is_dir

    @property
    def permissions(self) -> int:
        """Permission bits only."""
        return stat_mod.S_IMODE(self.mode)

    @classmethod
    def from_os_stat(cls, name: str, st: os.stat_result) -> "FileInfo":
        return cls(
            name=name,
            size=st.st_size,
            mode=st.st_mode,
            mod_time=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
            is_dir=stat_mod.S_ISDIR(st.st_mode),
        )


def record_info(record: FileRecord) -> FileInfo:
    """FileInfo for an embedded record. The original mtime is not kept."""
    return FileInfo(
        name=record.name,
        size=record.size,
        mode=record.mode,
        mod_time=datetime.now(timezone.utc),
        is_dir=record.is_dir,
    )


# -----------------------------------------------------------------------------
# File handle protocol
# -----------------------------------------------------------------------------


@runtime_checkable
class FileHandle(Protocol):
    """
    Protocol for files returned by EmbedFS.open.

    Both variants support cursor reads, stat and context management, so
    code written against one works with the other.
    """

    def read(self, size: int = -1) -> bytes:
        """Read up to size bytes from the cursor (all if negative)."""
        ...

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """Move the cursor and return the new absolute position."""
        ...

    def tell(self) -> int:
        ...

    def close(self) -> None:
        ...

    def stat(self) -> FileInfo:
        """Return metadata for the opened entry."""
        ...

    def readdir(self, count: int = -1) -> list[FileInfo]:
        """List directory entries."""
        ...

    def __enter__(self) -> "FileHandle":
        ...

    def __exit__(self, *args: object) -> None:
        ...


# -----------------------------------------------------------------------------
# Embedded file
# -----------------------------------------------------------------------------


class EmbeddedFile:
    """
    Handle over a decoded record.

    Reads come from an in-memory cursor positioned at 0 on open. Closing
    releases nothing since no OS resource is held.
    """

    def __init__(self, record: FileRecord, data: bytes) -> None:
        self._record = record
        self._cursor = BytesIO(data)

    @property
    def name(self) -> str:
        return self._record.path

    def read(self, size: int = -1) -> bytes:
        return self._cursor.read(size)

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        return self._cursor.seek(offset, whence)

    def tell(self) -> int:
        return self._cursor.tell()

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def close(self) -> None:
        pass

    def stat(self) -> FileInfo:
        return record_info(self._record)

    def readdir(self, count: int = -1) -> list[FileInfo]:
        # Directory entries are recorded but their children are not indexed.
        raise NotImplementedError(
            f"Directory listing is not supported for embedded entries: {self._record.path}"
        )

    def __enter__(self) -> "EmbeddedFile":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<EmbeddedFile {self._record.path!r}>"


# -----------------------------------------------------------------------------
# Local file
# -----------------------------------------------------------------------------


class LocalFile:
    """
    Pass-through handle over a real file or directory.

    Files are opened in binary mode immediately, so OS errors surface from
    EmbedFS.open exactly as open() raises them. Directories hold no stream
    and can be listed with readdir.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        if os.path.isdir(path):
            self._stream = None
        else:
            self._stream = open(path, "rb")  # noqa: SIM115

    @property
    def name(self) -> str:
        return self.path

    def _require_stream(self):  # noqa: ANN202
        if self._stream is None:
            raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), self.path)
        return self._stream

    def read(self, size: int = -1) -> bytes:
        return self._require_stream().read(size)

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        return self._require_stream().seek(offset, whence)

    def tell(self) -> int:
        return self._require_stream().tell()

    def readable(self) -> bool:
        return self._stream is not None

    def seekable(self) -> bool:
        return self._stream is not None

    def close(self) -> None:
        if self._stream is not None:
            self._stream.close()

    def stat(self) -> FileInfo:
        if self._stream is not None:
            st = os.fstat(self._stream.fileno())
        else:
            st = os.stat(self.path)
        return FileInfo.from_os_stat(os.path.basename(self.path.rstrip("/\\")), st)

    def readdir(self, count: int = -1) -> list[FileInfo]:
        """
        List the directory in lexical order.

        Args:
            count: Maximum number of entries; all if not positive
        """
        if self._stream is not None:
            raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), self.path)

        with os.scandir(self.path) as it:
            entries = sorted(it, key=lambda e: e.name)
        if count > 0:
            entries = entries[:count]
        return [FileInfo.from_os_stat(e.name, e.stat()) for e in entries]

    def __enter__(self) -> "LocalFile":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<LocalFile {self.path!r}>"


# -----------------------------------------------------------------------------
# Embedded filesystem
# -----------------------------------------------------------------------------


class EmbedFS:
    """
    Filesystem over a FileStore with a local pass-through mode.

    Usage:
        fs = EmbedFS(store)
        with fs.open("/templates/index.html") as f:
            html = f.read()

        fs.set_local("/path/to/assets")  # serve from disk instead
        fs.set_local("")                 # back to embedded data
    """

    def __init__(self, store: FileStore | None = None, mode: ModeSwitch | None = None) -> None:
        self.store = store if store is not None else FileStore()
        self.mode = mode if mode is not None else ModeSwitch()

    def set_local(self, root: str) -> None:
        """
        Serve from ``root`` on disk, or from embedded data when empty.

        Takes effect immediately for every caller sharing this filesystem.
        """
        self.mode.set_local(root)

    def local_path(self, root: str, path: str) -> str:
        """Real filesystem path for a logical path under ``root``."""
        logical = normalize_logical_path(path)
        return os.path.join(root, logical.lstrip("/"))

    def open(self, path: str) -> FileHandle:
        """
        Open a file or directory for reading.

        Args:
            path: Logical path, e.g. "/static/app.js"

        Returns:
            EmbeddedFile in embedded mode, LocalFile in local mode

        Raises:
            NotExistError: If the path is not embedded
            CodecError: If the embedded payload is corrupt
            OSError: Unchanged from the OS in local mode

        A missing path raises FileNotFoundError in both modes, since
        NotExistError subclasses it; catch that to handle either mode.
        """
        mode = self.mode.snapshot()
        if mode.local:
            return LocalFile(self.local_path(mode.root, path))

        record = self.store.lookup(path)
        return EmbeddedFile(record, record.materialize())

    def read_file(self, path: str) -> bytes:
        """
        Read the whole content of a file.

        Raises:
            NotExistError: If the path is not embedded
            NotAFileError: If the path is a directory
            CodecError: If the embedded payload is corrupt
            OSError: Unchanged from the OS in local mode

        As with open(), catch FileNotFoundError for a missing path in
        either mode.
        """
        mode = self.mode.snapshot()
        if mode.local:
            with open(self.local_path(mode.root, path), "rb") as f:
                return f.read()

        return self.store.lookup(path).read()

    def write_file(self, path: str, data: bytes) -> None:
        """
        Replace the content of a file.

        In local mode the bytes are written to disk. In embedded mode the
        record is overwritten in memory only and later reads return
        ``data`` verbatim.

        Raises:
            InvalidArgumentError: If data is not bytes-like
            NotExistError: If the path is not embedded
            NotAFileError: If the path is a directory
            OSError: Unchanged from the OS in local mode
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise InvalidArgumentError(
                f"Data must be bytes-like, got {type(data).__name__}"
            )

        mode = self.mode.snapshot()
        if mode.local:
            with open(self.local_path(mode.root, path), "wb") as f:
                f.write(data)
            return

        self.store.lookup(path).overwrite(bytes(data))

    def stat(self, path: str) -> FileInfo:
        """Metadata for a path, without reading it in local mode."""
        mode = self.mode.snapshot()
        if mode.local:
            full = self.local_path(mode.root, path)
            return FileInfo.from_os_stat(os.path.basename(full.rstrip("/\\")), os.stat(full))

        return record_info(self.store.lookup(path))

    def exists(self, path: str) -> bool:
        mode = self.mode.snapshot()
        if mode.local:
            return os.path.exists(self.local_path(mode.root, path))
        return normalize_logical_path(path) in self.store
