"""
HTTP serving for embedded filesystems.

A FastAPI app that serves every file of an EmbedFS by its logical path,
so a packed web UI can be served straight out of a generated module.
Flipping the filesystem to local mode makes the same app serve the
files on disk.

Usage:
    from webui.embedded import embed_fs
    from embedpack.web import create_app, run_server

    app = create_app(embed_fs)      # mount or serve with any ASGI server
    run_server(embed_fs, port=3000)
"""

from __future__ import annotations

import mimetypes
import posixpath
import sys

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from embedpack.storage import CodecError, normalize_logical_path
from embedpack.vfs import EmbedFS


def resolve_content(fs: EmbedFS, path: str, index: str = "index.html") -> tuple[str, bytes]:
    """
    Find the bytes to serve for a request path.

    Directories are served through their index file.

    Returns:
        (logical path actually read, content)

    Raises:
        FileNotFoundError: If nothing can be served for the path
    """
    logical = normalize_logical_path("/" + path)
    if fs.stat(logical).is_dir:
        logical = posixpath.join(logical, index)
    return logical, fs.read_file(logical)


def create_app(fs: EmbedFS, *, index: str = "index.html") -> FastAPI:
    """
    Create an app serving ``fs``.

    Args:
        fs: Filesystem to serve
        index: File served for directory paths

    Returns:
        FastAPI application with a single catch-all GET/HEAD route
    """
    app = FastAPI(
        title="embedpack",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.api_route("/{path:path}", methods=["GET", "HEAD"])
    def serve_file(path: str) -> Response:
        try:
            logical, content = resolve_content(fs, path, index)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            raise HTTPException(status_code=404, detail=f"Not found: /{path}")
        except PermissionError:
            raise HTTPException(status_code=403, detail=f"Forbidden: /{path}")
        except CodecError as e:
            raise HTTPException(status_code=500, detail=str(e))

        media_type, _ = mimetypes.guess_type(logical)
        return Response(content=content, media_type=media_type or "application/octet-stream")

    return app


def run_server(
    fs: EmbedFS,
    host: str = "127.0.0.1",
    port: int = 8000,
    index: str = "index.html",
):
    """
    Serve a filesystem over HTTP until interrupted.

    Args:
        fs: Filesystem to serve
        host: Host to bind to
        port: Port to bind to
        index: File served for directory paths
    """
    import uvicorn

    app = create_app(fs, index=index)
    mode = fs.mode.snapshot()
    source = f"local directory {mode.root}" if mode.local else f"{len(fs.store)} embedded entries"

    print(f"Serving {source} at http://{host}:{port}", file=sys.stderr)
    print("Press Ctrl+C to stop", file=sys.stderr)

    uvicorn.run(app, host=host, port=port, log_level="warning")
