"""
Generated module writer.

Turns a PackResult into an importable Python module. The module holds the
file map literal and wires it to the runtime: a ModeSwitch, an EmbedFS
and the set_local/read_file/write_file shortcuts applications import.
"""

from __future__ import annotations

import os
import shlex
import stat
import sys
import tempfile
from pathlib import Path
from typing import Iterable

from embedpack import __version__
from embedpack.storage import FORMAT_VERSION

from .pack import PackReport, PackResult, format_report, pack


def regenerate_command(
    target: Path,
    *,
    root: Path | None = None,
    local: bool = False,
    embed: bool = True,
    silent: bool = False,
    exclude: Iterable[str] = (),
) -> str:
    """Command line that reproduces a generated module."""
    parts = ["embedpack", "generate", shlex.quote(target.name)]
    if root is not None and root.resolve() != target.resolve().parent:
        parts += ["--root", shlex.quote(str(root))]
    if local:
        parts.append("--local")
    if not embed:
        parts.append("--no-embed")
    if silent:
        parts.append("--silent")
    for pattern in exclude:
        parts += ["--exclude", shlex.quote(pattern)]
    return " ".join(parts)


def render_module(result: PackResult, *, local: bool, command: str) -> str:
    """
    Render the source of a generated module.

    Entries appear in pack order, and every literal is written with
    repr(), so the same PackResult always renders to the same text.
    """
    root = result.report.root
    # Line breaks would end the comment early
    command = command.replace("\r", "\\r").replace("\n", "\\n")
    lines = [
        f"# Code generated by embedpack {__version__}; DO NOT EDIT.",
        f"# Regenerate with: {command}",
        repr(f"Embedded filesystem for {Path(root).name or root}."),
        "",
        "from embedpack.runtime import ModeSwitch",
        "from embedpack.storage import FileStore",
        "from embedpack.vfs import EmbedFS",
        "",
        f"FORMAT_VERSION = {FORMAT_VERSION!r}",
        f"ROOT_DIR = {root!r}",
        f"LOCAL = {local!r}",
        "",
        "_FILEMAP = {",
    ]
    for path, fields in result.store.to_literal().items():
        lines.append(f"    {path!r}: {fields!r},")
    lines += [
        "}",
        "",
        "# EMBEDPACK_LOCAL=<dir> serves from disk, EMBEDPACK_LOCAL= forces embedded data.",
        'mode = ModeSwitch.from_env(ROOT_DIR if LOCAL else "")',
        "embed_fs = EmbedFS(FileStore.from_mapping(_FILEMAP), mode)",
        "",
        "set_local = embed_fs.set_local",
        "read_file = embed_fs.read_file",
        "write_file = embed_fs.write_file",
        "",
    ]
    return "\n".join(lines)


def _target_mode(target_path: Path) -> int:
    """Permissions for a written module: the existing file's, else 0o666 under the umask."""
    try:
        return stat.S_IMODE(target_path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def emit(result: PackResult, target: str | Path, *, local: bool = False, command: str = "") -> Path:
    """
    Write a generated module atomically.

    The source is written to a temporary file next to ``target`` and then
    renamed over it, so a failure never leaves a half-written module.

    Returns:
        Path to the written module
    """
    target_path = Path(target)
    source = render_module(
        result,
        local=local,
        command=command or regenerate_command(target_path, local=local),
    )

    fd, temp_path = tempfile.mkstemp(
        prefix=f".{target_path.name}.", suffix=".tmp", dir=target_path.parent
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(source)
        os.chmod(temp_path, _target_mode(target_path))
        os.replace(temp_path, target_path)
    except BaseException:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise

    return target_path


def generate(
    target: str | Path,
    *,
    root: str | Path | None = None,
    local: bool = False,
    embed: bool = True,
    exclude: Iterable[str] = (),
    silent: bool = False,
) -> PackReport:
    """
    Pack a directory and write it as a generated module.

    Args:
        target: Path of the module to write, e.g. "assets/embedded.py"
        root: Directory to pack (default: the directory containing target)
        local: Generated module starts in local mode, serving ``root``
        embed: If False, write only the runtime wiring with an empty map
        exclude: Glob patterns for entries to leave out
        silent: Suppress progress and summary output

    Returns:
        PackReport with the totals of the run

    Raises:
        PackError: If any source file cannot be read; nothing is written

    Example:
        # Embed everything next to the module
        generate("webui/embedded.py")

        # Scaffolding only, for fast development builds
        generate("webui/embedded.py", local=True, embed=False)
    """
    target_path = Path(target).resolve()
    root_path = Path(root).resolve() if root is not None else target_path.parent
    exclude = tuple(exclude)
    verbose = not silent

    if verbose:
        print(f"Generating embed file: {target_path}", file=sys.stderr)
        print(f"Packing root: {root_path}", file=sys.stderr)
        print(f"Flags: local={local} embed={embed} silent={silent}", file=sys.stderr)
        print("Embedding Start:", file=sys.stderr)

    result = pack(root_path, target=target_path, embed=embed, exclude=exclude, verbose=verbose)
    command = regenerate_command(
        Path(target),
        root=Path(root) if root is not None else None,
        local=local,
        embed=embed,
        silent=silent,
        exclude=exclude,
    )
    emit(result, target_path, local=local, command=command)

    if verbose:
        print("Done:", file=sys.stderr)
        print(format_report(result.report), file=sys.stderr)

    return result.report
