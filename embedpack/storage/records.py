"""File record operations."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from embedpack import codec

from .schema import NotAFileError


@dataclass(eq=False)
class FileRecord:
    """
    One embedded filesystem entry.

    The payload starts out as the codec token produced at generation time
    and is replaced in place by the raw bytes on first materialization.
    Only ``data``, ``decoded`` and ``size`` change after construction, and
    only while holding the record lock.

    Attributes:
        path: Logical path, forward slashes, rooted at "/"
        name: Last path segment
        size: Byte length of the raw content
        mode: st_mode bits captured at embed time
        is_dir: True for directories (payload always empty)
        data: Encoded token or raw bytes, depending on ``decoded``
        decoded: Whether ``data`` holds raw bytes
    """

    path: str
    name: str
    size: int
    mode: int
    is_dir: bool = False
    data: bytes = b""
    decoded: bool = False
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if isinstance(self.data, str):
            self.data = self.data.encode("ascii")
        if self.is_dir:
            self.data = b""

    def materialize(self) -> bytes:
        """
        Return the raw content, decoding it on first use.

        Decoding happens at most once per record. Concurrent callers block
        on the record lock while the first one decodes, then all see the
        same bytes. If decoding fails the record is left as it was and the
        error propagates, so a later call may retry.

        Returns:
            Raw file bytes (empty for directories)

        Raises:
            CodecError: If the embedded token is corrupt
        """
        if self.is_dir:
            return b""

        # data is assigned before decoded, so seeing decoded=True here
        # guarantees data is already raw.
        if self.decoded:
            return self.data

        with self._lock:
            if not self.decoded:
                raw = codec.decode(self.data)
                self.data = raw
                self.decoded = True
            return self.data

    def read(self) -> bytes:
        """Return the raw content of a file record."""
        if self.is_dir:
            raise NotAFileError(f"Path is not a file: {self.path}")
        return self.materialize()

    def overwrite(self, raw: bytes) -> None:
        """
        Replace the content in memory.

        Later reads return ``raw`` verbatim without touching the codec.
        Nothing is persisted.
        """
        if self.is_dir:
            raise NotAFileError(f"Path is not a file: {self.path}")

        raw = bytes(raw)
        with self._lock:
            self.data = raw
            self.size = len(raw)
            self.decoded = True

    def to_literal(self) -> dict:
        """Fields of this record as written into a generated file map."""
        data = self.data
        if self.decoded:
            data = codec.encode(data).encode("ascii")
        return {
            "name": self.name,
            "size": self.size,
            "mode": self.mode,
            "is_dir": self.is_dir,
            "data": data,
        }
