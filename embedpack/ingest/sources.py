"""
Directory source for the packer.

Walks a local directory tree in a fixed order and yields one entry per
file or directory, with its logical path already computed. The walk is
strictly sequential so two runs over the same tree yield the same
entries in the same order.
"""

from __future__ import annotations

import os
import posixpath
import stat
from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable, Iterator

from embedpack.storage import normalize_logical_path


def is_excluded(name: str, logical_path: str, patterns: Iterable[str]) -> bool:
    """Check an entry against glob patterns, by name or by logical path."""
    return any(fnmatch(name, p) or fnmatch(logical_path, p) for p in patterns)


@dataclass(frozen=True, slots=True)
class SourceEntry:
    """
    One filesystem entry found by the walk.

    Attributes:
        path: Logical path ("/" for the root)
        name: Base name on disk
        full_path: Real path on disk
        size: st_size (symlinks followed)
        mode: st_mode (symlinks followed)
        is_dir: True for directories
    """

    path: str
    name: str
    full_path: Path
    size: int
    mode: int
    is_dir: bool

    def read_bytes(self) -> bytes:
        """Read the whole file. Symlinks resolve to their target's content."""
        return self.full_path.read_bytes()


class DirectorySource:
    """
    Deterministic pre-order walk over a local directory.

    Entries of each directory are visited in lexical order by name, and a
    directory is yielded before its children. Symlinked directories are
    not descended into. OSErrors are not swallowed.

    Usage:
        with DirectorySource("./assets", skip=["./assets/gen.py"]) as source:
            for entry in source.walk():
                print(entry.path, entry.size)
    """

    def __init__(
        self,
        root: str | Path,
        *,
        exclude: Iterable[str] = (),
        skip: Iterable[str | Path] = (),
    ) -> None:
        """
        Initialize directory source.

        Args:
            root: Path to root directory
            exclude: Glob patterns for entries (and subtrees) to leave out
            skip: Exact paths to leave out, e.g. the generated module
        """
        self.root = Path(root).resolve()
        if not self.root.is_dir():
            raise NotADirectoryError(f"Not a directory: {self.root}")
        self.exclude = tuple(exclude)
        self._skip = frozenset(Path(p).resolve() for p in skip)

    def __enter__(self) -> "DirectorySource":
        return self

    def __exit__(self, *args: object) -> None:
        pass  # No cleanup needed

    def walk(self) -> Iterator[SourceEntry]:
        """
        Walk the tree and yield entries.

        Yields:
            SourceEntry for the root, then every non-excluded descendant
        """
        st = self.root.stat()
        yield SourceEntry(
            path="/",
            name=self.root.name,
            full_path=self.root,
            size=st.st_size,
            mode=st.st_mode,
            is_dir=True,
        )
        yield from self._walk_dir(self.root, "/")

    def _walk_dir(self, directory: Path, logical_dir: str) -> Iterator[SourceEntry]:
        with os.scandir(directory) as it:
            dir_entries = sorted(it, key=lambda e: e.name)

        for dir_entry in dir_entries:
            full_path = Path(dir_entry.path)
            if full_path in self._skip:
                continue

            logical = normalize_logical_path(posixpath.join(logical_dir, dir_entry.name))
            if is_excluded(dir_entry.name, logical, self.exclude):
                continue

            st = dir_entry.stat()
            is_dir = stat.S_ISDIR(st.st_mode)

            yield SourceEntry(
                path=logical,
                name=dir_entry.name,
                full_path=full_path,
                size=st.st_size,
                mode=st.st_mode,
                is_dir=is_dir,
            )

            if is_dir and not dir_entry.is_symlink():
                yield from self._walk_dir(full_path, logical)
