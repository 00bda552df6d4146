"""Tests for the directory walk and the packer."""

from __future__ import annotations

import os

import pytest

from embedpack import codec
from embedpack.ingest import DirectorySource, format_report, pack
from embedpack.storage import PackError


class TestDirectorySource:
    def test_preorder_lexical(self, asset_tree):
        (asset_tree / "B.txt").write_bytes(b"upper")
        (asset_tree / "z").mkdir()
        (asset_tree / "z" / "y.txt").write_bytes(b"y")

        with DirectorySource(asset_tree) as source:
            paths = [entry.path for entry in source.walk()]

        assert paths == [
            "/",
            "/B.txt",
            "/a.txt",
            "/sub",
            "/sub/b.bin",
            "/sub/empty.txt",
            "/z",
            "/z/y.txt",
        ]

    def test_root_entry(self, asset_tree):
        root = next(iter(DirectorySource(asset_tree).walk()))
        assert root.path == "/"
        assert root.name == "assets"
        assert root.is_dir

    def test_skip_exact_path(self, asset_tree):
        source = DirectorySource(asset_tree, skip=[asset_tree / "a.txt"])
        assert "/a.txt" not in [e.path for e in source.walk()]

    def test_exclude_by_name_and_path(self, asset_tree):
        source = DirectorySource(asset_tree, exclude=["*.bin", "/a.txt"])
        assert [e.path for e in source.walk()] == ["/", "/sub", "/sub/empty.txt"]

    def test_exclude_directory_prunes_subtree(self, asset_tree):
        source = DirectorySource(asset_tree, exclude=["sub"])
        assert [e.path for e in source.walk()] == ["/", "/a.txt"]

    def test_not_a_directory(self, asset_tree):
        with pytest.raises(NotADirectoryError):
            DirectorySource(asset_tree / "a.txt")


class TestPack:
    def test_records(self, packed, random_bytes):
        store = packed.store
        assert list(store) == ["/", "/a.txt", "/sub", "/sub/b.bin", "/sub/empty.txt"]

        a = store["/a.txt"]
        assert a.name == "a.txt"
        assert a.size == len(b"hello")
        assert a.decoded is False
        assert codec.decode(a.data) == b"hello"

        b = store["/sub/b.bin"]
        assert b.size == 10_000
        assert codec.decode(b.data) == random_bytes

    def test_directories_have_no_payload(self, packed):
        for path in ("/", "/sub"):
            record = packed.store[path]
            assert record.is_dir
            assert record.data == b""

    def test_mode_bits_captured(self, asset_tree):
        os.chmod(asset_tree / "a.txt", 0o600)
        record = pack(asset_tree).store["/a.txt"]
        assert record.mode & 0o777 == 0o600

    def test_target_is_excluded(self, asset_tree):
        target = asset_tree / "embedded.py"
        target.write_text("# previous output\n")
        result = pack(asset_tree, target=target)
        assert "/embedded.py" not in result.store

    def test_deterministic(self, asset_tree):
        first = pack(asset_tree).store.to_literal()
        second = pack(asset_tree).store.to_literal()
        assert first == second
        assert list(first) == list(second)

    def test_no_embed_skips_walk(self, asset_tree):
        result = pack(asset_tree, embed=False)
        assert len(result.store) == 0
        assert result.report.file_count == 0

    def test_report_totals(self, packed):
        report = packed.report
        assert report.entry_count == 5
        assert report.file_count == 3
        assert report.total_bytes == len(b"hello") + 10_000
        assert report.embedded_bytes == sum(
            len(r.data) for r in packed.store.values() if not r.is_dir
        )
        assert report.saved_bytes == report.total_bytes - report.embedded_bytes
        assert report.elapsed_seconds >= 0

    def test_report_json(self, packed):
        data = packed.report.model_dump()
        assert data["file_count"] == 3
        assert "compression_ratio" in data
        assert "throughput_mb_s" in data

    def test_format_report(self, packed):
        text = format_report(packed.report)
        assert "Files Total: 3" in text
        assert "Compression Ratio:" in text

    def test_unreadable_entry_is_fatal(self, asset_tree):
        os.symlink(asset_tree / "missing", asset_tree / "dangling")
        with pytest.raises(PackError) as exc_info:
            pack(asset_tree)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_missing_root_is_fatal(self, tmp_path):
        with pytest.raises(PackError):
            pack(tmp_path / "nope")
