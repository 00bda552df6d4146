"""In-memory file record store."""

from __future__ import annotations

import posixpath
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from .records import FileRecord
from .schema import InvalidArgumentError, NotExistError, RECORD_FIELDS


def normalize_logical_path(path: str) -> str:
    """
    Normalize a path into a logical store key.

    Converts backslashes, forces a leading "/" and collapses redundant
    separators and dot segments. ".." never climbs above the root.

    Raises:
        InvalidArgumentError: If path is not a non-empty string
    """
    if not isinstance(path, str):
        raise InvalidArgumentError(f"Path must be a string, got {type(path).__name__}")
    if not path:
        raise InvalidArgumentError("Path must not be empty")

    normalized = posixpath.normpath("/" + path.replace("\\", "/"))
    # normpath keeps a leading "//" as-is
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


class FileStore(Mapping[str, FileRecord]):
    """
    Read-only mapping from logical path to FileRecord.

    The key set is fixed at construction. Records themselves may change
    their payload (see FileRecord), but no entry is ever added or removed,
    so lookups need no locking.
    """

    def __init__(self, records: Iterable[FileRecord] = ()) -> None:
        table: dict[str, FileRecord] = {}
        for record in records:
            if record.path in table:
                raise InvalidArgumentError(f"Duplicate path in store: {record.path}")
            table[record.path] = record
        self._records = table

    @classmethod
    def from_mapping(cls, filemap: Mapping[str, Mapping[str, Any]]) -> "FileStore":
        """
        Rebuild a store from the literal written into a generated module.

        Args:
            filemap: Logical path -> dict with the RECORD_FIELDS keys

        Returns:
            FileStore with every record still encoded
        """
        records = []
        for path, fields in filemap.items():
            missing = [name for name in RECORD_FIELDS if name not in fields]
            if missing:
                raise InvalidArgumentError(
                    f"Entry '{path}' is missing fields: {', '.join(missing)}"
                )
            records.append(
                FileRecord(
                    path=path,
                    name=fields["name"],
                    size=fields["size"],
                    mode=fields["mode"],
                    is_dir=fields["is_dir"],
                    data=fields["data"],
                )
            )
        return cls(records)

    def __getitem__(self, path: str) -> FileRecord:
        return self._records[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def lookup(self, path: str) -> FileRecord:
        """
        Find the record for a logical path.

        Raises:
            NotExistError: If the path is not embedded
        """
        key = normalize_logical_path(path)
        record = self._records.get(key)
        if record is None:
            raise NotExistError(f"File does not exist: {key}")
        return record

    def file_count(self) -> int:
        """Number of non-directory records."""
        return sum(1 for r in self._records.values() if not r.is_dir)

    def total_size(self) -> int:
        """Sum of raw sizes over all file records."""
        return sum(r.size for r in self._records.values() if not r.is_dir)

    def to_literal(self) -> dict[str, dict]:
        """Store contents in the generated file map layout."""
        return {path: record.to_literal() for path, record in self._records.items()}
