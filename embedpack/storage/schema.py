"""Record schema and exceptions for embedpack storage."""

from __future__ import annotations


# -----------------------------------------------------------------------------
# Exceptions
# -----------------------------------------------------------------------------


class EmbedError(Exception):
    """Base exception for embedpack operations."""

    pass


class InvalidArgumentError(EmbedError, ValueError):
    """Raised when an operation is called with a malformed argument."""

    pass


class PermissionDeniedError(EmbedError, PermissionError):
    """Raised when the underlying filesystem refuses access."""

    pass


class AlreadyExistsError(EmbedError, FileExistsError):
    """Raised when creating an entry that already exists."""

    pass


class NotExistError(EmbedError, FileNotFoundError):
    """Raised when a logical path is not in the store."""

    pass


class NotAFileError(EmbedError, IsADirectoryError):
    """Raised when a file operation is given a directory path."""

    pass


class CodecError(EmbedError, ValueError):
    """Raised when an embedded payload cannot be decoded."""

    pass


class PackError(EmbedError):
    """Raised when reading the source tree fails during packing."""

    pass


# -----------------------------------------------------------------------------
# Schema
# -----------------------------------------------------------------------------

# Bumped whenever the generated literal layout changes.
FORMAT_VERSION = "1"

# Keys of one entry in a generated file map, in emission order.
RECORD_FIELDS: tuple[str, ...] = ("name", "size", "mode", "is_dir", "data")
