"""
Embedpack CLI.

Commands:
    generate   Pack a directory into a generated Python module
    info       Inspect a generated module
    serve      Serve a generated module over HTTP

Examples:
    embedpack generate webui/embedded.py
    embedpack generate webui/embedded.py --local --no-embed
    embedpack generate assets.py --root ./static --exclude "*.map" --json
    embedpack info webui/embedded.py
    embedpack serve webui/embedded.py -p 3000
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from types import ModuleType


def load_generated(path: str | Path) -> ModuleType:
    """
    Import a generated module from its file path.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a generated embedpack module
    """
    import importlib.util

    module_path = Path(path)
    if not module_path.is_file():
        raise FileNotFoundError(f"File not found: {module_path}")

    spec = importlib.util.spec_from_file_location(
        f"_embedpack_generated_{module_path.stem}", module_path
    )
    if spec is None or spec.loader is None:
        raise ValueError(f"Cannot load module: {module_path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    if not hasattr(module, "embed_fs"):
        raise ValueError(f"Not a generated embedpack module: {module_path}")
    return module


def cmd_generate(args: argparse.Namespace) -> int:
    """Handle generate command."""
    from embedpack.ingest import generate
    from embedpack.storage import PackError

    try:
        report = generate(
            args.target,
            root=args.root,
            local=args.local,
            embed=args.embed,
            exclude=args.exclude,
            silent=args.silent,
        )
    except PackError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: Cannot write {args.target}: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(report.model_dump_json(indent=2))
    elif not args.silent:
        print(f"Created: {args.target}")
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Handle info command."""
    try:
        module = load_generated(args.module)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    fs = module.embed_fs
    store = fs.store
    mode = fs.mode.snapshot()
    dir_count = len(store) - store.file_count()
    payload = sum(len(r.data) for r in store.values() if not r.is_dir and not r.decoded)

    print(f"Module: {args.module}")
    print(f"Format: {getattr(module, 'FORMAT_VERSION', 'N/A')}")
    print(f"Root: {getattr(module, 'ROOT_DIR', 'N/A')}")
    print()
    print("Mode:")
    if mode.local:
        print(f"  local ({mode.root})")
    else:
        print("  embedded")
    print()
    print("Stats:")
    print(f"  Entries: {len(store)}")
    print(f"  Files: {store.file_count()}")
    print(f"  Directories: {dir_count}")
    print(f"  Content size: {store.total_size():,} bytes")
    print(f"  Embedded size: {payload:,} bytes")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Handle serve command."""
    from embedpack.web import run_server

    try:
        module = load_generated(args.module)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    fs = module.embed_fs
    if args.local:
        fs.set_local(args.local)

    try:
        run_server(fs, host=args.host, port=args.port, index=args.index)
        return 0
    except KeyboardInterrupt:
        return 0


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the embedpack command."""
    parser = argparse.ArgumentParser(
        prog="embedpack",
        description="Pack directory trees into Python modules and serve them back.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # generate
    generate_parser = subparsers.add_parser(
        "generate",
        help="Pack a directory into a generated module",
    )
    generate_parser.add_argument(
        "target",
        help="Path of the module to generate (its directory is packed by default)",
    )
    generate_parser.add_argument(
        "-r",
        "--root",
        default=None,
        help="Directory to pack (default: directory containing target)",
    )
    generate_parser.add_argument(
        "--local",
        action="store_true",
        help="Generated module starts in local mode, serving the packed root from disk",
    )
    generate_parser.add_argument(
        "--embed",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Embed file data; --no-embed writes only the runtime wiring (default: embed)",
    )
    generate_parser.add_argument(
        "-s",
        "--silent",
        action="store_true",
        help="Suppress progress and summary output",
    )
    generate_parser.add_argument(
        "-x",
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Glob pattern of names or logical paths to leave out (repeatable)",
    )
    generate_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the pack report as JSON",
    )

    # info
    info_parser = subparsers.add_parser(
        "info",
        help="Inspect a generated module",
    )
    info_parser.add_argument(
        "module",
        help="Path to a generated module",
    )

    # serve
    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve a generated module over HTTP",
    )
    serve_parser.add_argument(
        "module",
        help="Path to a generated module",
    )
    serve_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    serve_parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)",
    )
    serve_parser.add_argument(
        "--local",
        default=None,
        metavar="DIR",
        help="Serve files from DIR on disk instead of the embedded data",
    )
    serve_parser.add_argument(
        "--index",
        default="index.html",
        help="File served for directory paths (default: index.html)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "generate":
        return cmd_generate(args)
    elif args.command == "info":
        return cmd_info(args)
    elif args.command == "serve":
        return cmd_serve(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
