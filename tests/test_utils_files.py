"""Tests for file utility functions."""

from __future__ import annotations

from pathlib import Path

from doccsearch.utils.files import content_hash, count_json_files, iter_json_paths, read_json, relative_id


class TestIterJsonPaths:
    """Test iter_json_paths function."""

    def test_sorted_and_recursive(self, tmp_path: Path) -> None:
        (tmp_path / "b").mkdir()
        (tmp_path / "a" / "nested").mkdir(parents=True)
        for rel in ("z.json", "b/one.json", "a/nested/two.json", "a/readme.txt"):
            (tmp_path / rel).write_text("{}")

        paths = [path.relative_to(tmp_path).as_posix() for path in iter_json_paths(tmp_path)]

        assert paths == ["a/nested/two.json", "b/one.json", "z.json"]

    def test_missing_root(self, tmp_path: Path) -> None:
        assert list(iter_json_paths(tmp_path / "missing")) == []
        assert count_json_files(tmp_path / "missing") == 0


class TestHelpers:
    def test_read_json(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.json"
        path.write_text('{"title": "State"}', encoding="utf-8")

        assert read_json(path) == {"title": "State"}

    def test_relative_id(self, tmp_path: Path) -> None:
        path = tmp_path / "data" / "documentation" / "swiftui" / "state.json"

        assert relative_id(path, tmp_path / "data") == "documentation/swiftui/state"

    def test_content_hash_separates_parts(self) -> None:
        assert content_hash("ab", "c") != content_hash("a", "bc")
        assert content_hash("x") == content_hash("x")
        assert len(content_hash("x")) == 64
