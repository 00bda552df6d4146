"""
Embedpack storage layer.

Holds the in-memory records that back an embedded filesystem. The store
is built once by the packer (or rebuilt once from a generated module)
and its key set never changes afterwards; only record payloads move
from encoded to decoded, or get overwritten in memory.

Usage:
    from embedpack.storage import FileStore

    store = FileStore.from_mapping(_FILEMAP)
    data = store.lookup("/templates/index.html").read()
"""

from .schema import (
    FORMAT_VERSION,
    RECORD_FIELDS,
    AlreadyExistsError,
    CodecError,
    EmbedError,
    InvalidArgumentError,
    NotAFileError,
    NotExistError,
    PackError,
    PermissionDeniedError,
)
from .records import FileRecord
from .store import FileStore, normalize_logical_path

__all__ = [
    # Records
    "FileRecord",
    "FileStore",
    "normalize_logical_path",
    # Schema
    "FORMAT_VERSION",
    "RECORD_FIELDS",
    # Exceptions
    "EmbedError",
    "InvalidArgumentError",
    "PermissionDeniedError",
    "AlreadyExistsError",
    "NotExistError",
    "NotAFileError",
    "CodecError",
    "PackError",
]
