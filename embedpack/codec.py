"""
Payload codec.

Embedded payloads are gzip-compressed and then base64 encoded with the
standard padded alphabet, which keeps them printable ASCII and safe to
place verbatim inside a string literal in generated source.
"""

from __future__ import annotations

import base64
import binascii
import gzip
import zlib

from embedpack.storage.schema import CodecError


def encode(raw: bytes) -> str:
    """
    Compress and text-encode a byte string.

    The gzip header timestamp is pinned to zero so the same input always
    produces the same token.

    Args:
        raw: Original file bytes

    Returns:
        Printable ASCII token
    """
    compressed = gzip.compress(bytes(raw), mtime=0)
    return base64.b64encode(compressed).decode("ascii")


def decode(token: str | bytes) -> bytes:
    """
    Invert :func:`encode`.

    Args:
        token: Token produced by encode, as str or ASCII bytes

    Returns:
        Original file bytes

    Raises:
        CodecError: If the token is not valid base64 or the decoded bytes
            are not a complete gzip stream
    """
    if isinstance(token, str):
        try:
            token = token.encode("ascii")
        except UnicodeEncodeError as e:
            raise CodecError(f"Token is not ASCII: {e}") from e

    try:
        compressed = base64.b64decode(token, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CodecError(f"Invalid base64 payload: {e}") from e
    if not compressed:
        raise CodecError("Empty payload, no gzip stream")

    try:
        return gzip.decompress(compressed)
    except (OSError, EOFError, zlib.error) as e:
        raise CodecError(f"Invalid gzip payload: {e}") from e
