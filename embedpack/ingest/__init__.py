"""
Embedpack ingest layer.

Build-time side of embedpack: walks a directory, encodes every file and
writes the result as a generated Python module.

Usage:
    from embedpack.ingest import generate, pack

    # Pack the directory next to the module into the module
    generate("webui/embedded.py")

    # Or pack without writing anything
    result = pack("./webui")
    print(result.report.file_count)
"""

from .sources import DirectorySource, SourceEntry
from .pack import PackReport, PackResult, format_report, pack
from .emit import emit, generate, render_module

__all__ = [
    # Sources
    "DirectorySource",
    "SourceEntry",
    # Pack
    "PackReport",
    "PackResult",
    "format_report",
    "pack",
    # Emit
    "emit",
    "generate",
    "render_module",
]
