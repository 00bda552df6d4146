"""Tests for serving an EmbedFS over HTTP."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from embedpack.storage import FileRecord, FileStore
from embedpack.vfs import EmbedFS
from embedpack.web import create_app


@pytest.fixture
def site(asset_tree):
    (asset_tree / "index.html").write_bytes(b"<h1>home</h1>")
    (asset_tree / "sub" / "style.css").write_bytes(b"body {}")
    return asset_tree


@pytest.fixture
def client(site):
    from embedpack.ingest import pack

    fs = EmbedFS(pack(site).store)
    return TestClient(create_app(fs))


def test_serves_file(client):
    response = client.get("/a.txt")
    assert response.status_code == 200
    assert response.content == b"hello"
    assert response.headers["content-type"].startswith("text/plain")


def test_serves_binary(client, random_bytes):
    response = client.get("/sub/b.bin")
    assert response.status_code == 200
    assert response.content == random_bytes
    assert response.headers["content-type"] == "application/octet-stream"


def test_content_type_from_extension(client):
    assert client.get("/sub/style.css").headers["content-type"].startswith("text/css")


def test_root_serves_index(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.content == b"<h1>home</h1>"
    assert response.headers["content-type"].startswith("text/html")


def test_directory_without_index(client):
    assert client.get("/sub").status_code == 404


def test_missing(client):
    assert client.get("/does/not/exist").status_code == 404


def test_corrupt_payload():
    record = FileRecord(path="/bad.txt", name="bad.txt", size=1, mode=0o644, data=b"%%%%")
    client = TestClient(create_app(EmbedFS(FileStore([record]))))
    assert client.get("/bad.txt").status_code == 500


def test_local_mode(site):
    from embedpack.ingest import pack

    fs = EmbedFS(pack(site).store)
    client = TestClient(create_app(fs))

    (site / "a.txt").write_bytes(b"live edit")
    assert client.get("/a.txt").content == b"hello"

    fs.set_local(str(site))
    assert client.get("/a.txt").content == b"live edit"
    assert client.get("/missing.txt").status_code == 404
