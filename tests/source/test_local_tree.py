"""Unit tests for filesystem and in-memory source trees."""

import os
from pathlib import Path

import pytest

from plugincheck.errors import FetchError
from plugincheck.source import (
    FetchResult,
    LocalSourceTree,
    MemorySourceTree,
    SourceTree,
    file_exists,
    normalize_path,
    try_fetch,
)


class TestNormalizePath:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("src/index.ts", "src/index.ts"),
            ("./src/index.ts", "src/index.ts"),
            ("src\\index.ts", "src/index.ts"),
            ("src/../lib/a.ts", "lib/a.ts"),
            ("src//a.ts", "src/a.ts"),
            ("../secret", None),
            ("/etc/passwd", None),
            (".", None),
            ("", None),
            ("src/a\u0000.ts", None),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_path(raw) == expected


class TestLocalSourceTree:
    def test_fetch_existing(self, tmp_path):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "index.ts").write_text("export {};")
        tree = LocalSourceTree(tmp_path)
        assert tree.fetch("./src/index.ts") == FetchResult(content=b"export {};", exists=True)

    def test_missing_file(self, tmp_path):
        assert LocalSourceTree(tmp_path).fetch("nope.ts").exists is False

    def test_directory_is_not_a_file(self, tmp_path):
        (tmp_path / "src").mkdir()
        assert LocalSourceTree(tmp_path).fetch("src").exists is False

    def test_refuses_paths_outside_root(self, tmp_path):
        root = tmp_path / "repo"
        root.mkdir()
        (tmp_path / "secret.txt").write_text("s3cr3t")
        assert LocalSourceTree(root).fetch("../secret.txt").exists is False

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_refuses_symlinks_outside_root(self, tmp_path):
        root = tmp_path / "repo"
        root.mkdir()
        (tmp_path / "secret.txt").write_text("s3cr3t")
        (root / "link.txt").symlink_to(tmp_path / "secret.txt")
        assert LocalSourceTree(root).fetch("link.txt").exists is False

    def test_list_files_skips_vendored_and_vcs_dirs(self, tmp_path):
        for rel in ["index.ts", "src/a.ts", "node_modules/x/index.js", ".git/HEAD"]:
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("")
        assert LocalSourceTree(tmp_path).list_files() == ["index.ts", "src/a.ts"]

    def test_satisfies_protocol(self, tmp_path):
        assert isinstance(LocalSourceTree(tmp_path), SourceTree)


class TestMemorySourceTree:
    def test_fetch_and_list(self):
        tree = MemorySourceTree({"./b.ts": "b", "a.ts": b"a"})
        assert tree.fetch("b.ts").content == b"b"
        assert tree.list_files() == ["a.ts", "b.ts"]

    def test_rejects_invalid_paths(self):
        with pytest.raises(ValueError):
            MemorySourceTree({"../x.ts": ""})

    def test_satisfies_protocol(self):
        assert isinstance(MemorySourceTree({}), SourceTree)


class TestHelpers:
    def test_try_fetch(self):
        tree = MemorySourceTree({"a.ts": "x"})
        assert try_fetch(tree, "a.ts") == b"x"
        assert try_fetch(tree, "b.ts") is None

    def test_file_exists_for_empty_file(self):
        assert file_exists(MemorySourceTree({"a.ts": ""}), "a.ts")


class TestLocalFetchErrors:
    def test_os_errors_become_fetch_errors(self, tmp_path, monkeypatch):
        (tmp_path / "index.js").write_text("")

        def _denied(self):
            raise PermissionError("denied")

        monkeypatch.setattr(Path, "is_file", _denied)
        with pytest.raises(FetchError, match="denied"):
            LocalSourceTree(tmp_path).fetch("index.js")
