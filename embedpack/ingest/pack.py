"""
Pack command implementation.

Walks a directory and turns every entry into an encoded FileRecord. This
is the build-time half of embedpack: it runs once, sequentially, and
either packs the whole tree or fails without producing anything.
"""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, computed_field

from embedpack import codec
from embedpack.storage import FileRecord, FileStore, PackError

from .sources import DirectorySource

_MB = 1024 * 1024


# -----------------------------------------------------------------------------
# Report
# -----------------------------------------------------------------------------


class PackReport(BaseModel):
    """Totals collected while packing, for operator-facing output only."""

    root: str
    entry_count: int = 0
    file_count: int = 0
    total_bytes: int = 0
    embedded_bytes: int = 0
    elapsed_seconds: float = 0.0

    @computed_field
    @property
    def saved_bytes(self) -> int:
        return self.total_bytes - self.embedded_bytes

    @computed_field
    @property
    def compression_ratio(self) -> float:
        """Percentage of the original size saved by compression."""
        if self.total_bytes == 0:
            return 0.0
        return self.saved_bytes / self.total_bytes * 100

    @computed_field
    @property
    def throughput_mb_s(self) -> float:
        if self.elapsed_seconds <= 0:
            return 0.0
        return self.total_bytes / self.elapsed_seconds / _MB


def format_report(report: PackReport) -> str:
    """Render a report as the summary printed after generation."""

    def size(n: float) -> str:
        return f"{n / _MB:.2f} MB {n / 1024:.2f} KB"

    lines = [
        f"Entries Total: {report.entry_count}",
        f"Files Total: {report.file_count}",
        f"Files Total Size: {size(report.total_bytes)}",
        f"Embedded Total Size: {size(report.embedded_bytes)}",
        f"Read/Compress Bandwidth: {report.throughput_mb_s:.2f} MB/s "
        f"{report.throughput_mb_s * 1024:.2f} KB/s",
        f"Compression Savings: {size(report.saved_bytes)}",
        f"Compression Ratio: {report.compression_ratio:.2f} %",
        f"Took: {report.elapsed_seconds:.3f}s",
    ]
    return "\n".join(lines)


# -----------------------------------------------------------------------------
# Pack
# -----------------------------------------------------------------------------


@dataclass
class PackResult:
    """Records produced by a pack run plus its totals."""

    store: FileStore
    report: PackReport


def pack(
    root: str | Path,
    *,
    target: str | Path | None = None,
    embed: bool = True,
    exclude: Iterable[str] = (),
    verbose: bool = False,
) -> PackResult:
    """
    Pack a directory tree into encoded records.

    Every directory becomes a payload-less record and every file is read
    in full and run through the codec. Nothing is retried: the first I/O
    error aborts the run.

    Args:
        root: Directory to pack
        target: Generated module path, left out of the pack
        embed: If False, skip the walk and return an empty store
        exclude: Glob patterns for entries to leave out
        verbose: Print one line per entry to stderr

    Returns:
        PackResult with the store and totals

    Raises:
        PackError: If the tree cannot be scanned or a file cannot be read
    """
    root_path = Path(root)
    report = PackReport(root=str(root_path.resolve()))
    start = time.perf_counter()

    if not embed:
        return PackResult(store=FileStore(), report=report)

    skip = [target] if target is not None else []
    records: list[FileRecord] = []
    current = str(root_path)

    try:
        with DirectorySource(root_path, exclude=exclude, skip=skip) as source:
            for entry in source.walk():
                current = str(entry.full_path)

                if entry.is_dir:
                    records.append(
                        FileRecord(
                            path=entry.path,
                            name=entry.name,
                            size=entry.size,
                            mode=entry.mode,
                            is_dir=True,
                        )
                    )
                    if verbose:
                        print(f"  [dir]  {entry.path}", file=sys.stderr)
                else:
                    content = entry.read_bytes()
                    token = codec.encode(content)
                    records.append(
                        FileRecord(
                            path=entry.path,
                            name=entry.name,
                            size=len(content),
                            mode=entry.mode,
                            data=token.encode("ascii"),
                        )
                    )
                    report.file_count += 1
                    report.total_bytes += len(content)
                    report.embedded_bytes += len(token)
                    if verbose:
                        print(
                            f"  [file] {entry.path} ({len(content)} -> {len(token)} bytes)",
                            file=sys.stderr,
                        )

                report.entry_count += 1
    except OSError as e:
        raise PackError(f"Failed to pack {current}: {e}") from e

    report.elapsed_seconds = time.perf_counter() - start
    return PackResult(store=FileStore(records), report=report)
