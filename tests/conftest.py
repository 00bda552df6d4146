"""Shared fixtures for the embedpack test suite."""

from __future__ import annotations

import random
import threading
import time

import pytest

from embedpack import codec
from embedpack.ingest import pack
from embedpack.runtime import LOCAL_ENV_VAR
from embedpack.vfs import EmbedFS

HELLO = b"hello"


@pytest.fixture(autouse=True)
def _no_local_override(monkeypatch):
    """Keep a developer's EMBEDPACK_LOCAL from leaking into tests."""
    monkeypatch.delenv(LOCAL_ENV_VAR, raising=False)


@pytest.fixture
def random_bytes():
    """10,000 reproducible pseudo-random bytes."""
    return random.Random(1234).randbytes(10_000)


@pytest.fixture
def asset_tree(tmp_path, random_bytes):
    """
    Small tree to pack:

        assets/
            a.txt           "hello"
            sub/
                b.bin       10,000 random bytes
                empty.txt   ""
    """
    root = tmp_path / "assets"
    (root / "sub").mkdir(parents=True)
    (root / "a.txt").write_bytes(HELLO)
    (root / "sub" / "b.bin").write_bytes(random_bytes)
    (root / "sub" / "empty.txt").write_bytes(b"")
    return root


@pytest.fixture
def packed(asset_tree):
    return pack(asset_tree)


@pytest.fixture
def fs(packed):
    return EmbedFS(packed.store)


class DecodeCounter:
    """Counts codec.decode calls; optionally slows each one down."""

    def __init__(self, real, delay: float = 0.0) -> None:
        self.real = real
        self.delay = delay
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self, token):
        with self._lock:
            self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        return self.real(token)


@pytest.fixture
def decode_counter(monkeypatch):
    counter = DecodeCounter(codec.decode)
    monkeypatch.setattr(codec, "decode", counter)
    return counter
