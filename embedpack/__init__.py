"""
embedpack: pack a directory tree into a Python module and serve it back
through a virtual filesystem.

Usage:
    $ embedpack generate webui/embedded.py

    from webui.embedded import embed_fs, read_file, set_local

    html = read_file("/index.html")
    set_local("/src/webui")  # develop against the files on disk
"""

__version__ = "0.1.0"

from embedpack.storage import (
    FORMAT_VERSION,
    AlreadyExistsError,
    CodecError,
    EmbedError,
    FileRecord,
    FileStore,
    InvalidArgumentError,
    NotAFileError,
    NotExistError,
    PackError,
    PermissionDeniedError,
)
from embedpack.runtime import ModeSwitch
from embedpack.vfs import EmbedFS, EmbeddedFile, FileHandle, FileInfo, LocalFile

__all__ = [
    "__version__",
    "FORMAT_VERSION",
    # Storage
    "FileRecord",
    "FileStore",
    # Runtime
    "ModeSwitch",
    "EmbedFS",
    "EmbeddedFile",
    "LocalFile",
    "FileHandle",
    "FileInfo",
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
