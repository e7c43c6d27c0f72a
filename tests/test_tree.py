"""
Tests for the staged tree and the JSON / formatting helpers.
"""

import json
from pathlib import Path

import pytest

from create_nx_plugin.core.devkit.formatting import format_files
from create_nx_plugin.core.devkit.json_utils import read_json, serialize_json, update_json, write_json
from create_nx_plugin.core.devkit.tree import GeneratorError, Tree


class TestTreePaths:
    def test_normalize(self):
        assert Tree.normalize("./a/b/../c.txt") == "a/c.txt"
        assert Tree.normalize("/a\\b") == "a/b"

    def test_escape_rejected(self):
        with pytest.raises(GeneratorError, match="escapes"):
            Tree.normalize("../outside.txt")

    def test_write_root_rejected(self, tmp_path: Path):
        with pytest.raises(GeneratorError):
            Tree(tmp_path).write(".", "x")


class TestTreeStaging:
    def test_writes_stay_in_memory(self, tmp_path: Path):
        tree = Tree(tmp_path)
        tree.write("a/b.txt", "hello")
        assert tree.read_text("a/b.txt") == "hello"
        assert not (tmp_path / "a" / "b.txt").exists()

    def test_reads_fall_through_to_disk(self, tmp_path: Path):
        (tmp_path / "on-disk.txt").write_text("disk")
        tree = Tree(tmp_path)
        assert tree.read_text("on-disk.txt") == "disk"
        assert tree.read("missing.txt") is None

    def test_children_and_files(self, tmp_path: Path):
        (tmp_path / "node_modules" / "x").mkdir(parents=True)
        (tmp_path / "node_modules" / "x" / "index.js").write_text("")
        tree = Tree(tmp_path)
        tree.write("src/index.ts", "")
        tree.write("README.md", "")
        assert tree.children() == ["README.md", "node_modules", "src"]
        assert sorted(tree.files()) == ["README.md", "src/index.ts"]
        assert tree.exists("src")

    def test_delete_disk_file(self, tmp_path: Path):
        (tmp_path / "old.txt").write_text("old")
        tree = Tree(tmp_path)
        tree.delete("old.txt")
        assert not tree.is_file("old.txt")
        assert "old.txt" not in tree.children()
        changes = tree.list_changes()
        assert [(c.type, c.path) for c in changes] == [("DELETE", "old.txt")]

    def test_delete_staged_file_is_no_change(self, tmp_path: Path):
        tree = Tree(tmp_path)
        tree.write("tmp.txt", "x")
        tree.delete("tmp.txt")
        assert tree.list_changes() == []

    def test_identical_write_is_no_change(self, tmp_path: Path):
        (tmp_path / "same.txt").write_text("same")
        tree = Tree(tmp_path)
        tree.write("same.txt", "same")
        assert tree.list_changes() == []

    def test_change_types(self, tmp_path: Path):
        (tmp_path / "existing.txt").write_text("before")
        tree = Tree(tmp_path)
        tree.write("new.txt", "new")
        tree.write("existing.txt", "after")
        assert [(c.type, c.path) for c in tree.list_changes()] == [
            ("CREATE", "new.txt"),
            ("UPDATE", "existing.txt"),
        ]

    def test_commit(self, tmp_path: Path):
        (tmp_path / "gone.txt").write_text("bye")
        tree = Tree(tmp_path)
        tree.write("deep/nested/file.txt", "content")
        tree.delete("gone.txt")
        changes = tree.commit()
        assert len(changes) == 2
        assert (tmp_path / "deep" / "nested" / "file.txt").read_text() == "content"
        assert not (tmp_path / "gone.txt").exists()
        assert tree.list_changes() == []

    def test_commit_update_and_delete(self, tmp_path: Path):
        (tmp_path / "a.txt").write_text("old")
        (tmp_path / "b.txt").write_text("old")
        tree = Tree(tmp_path)
        tree.write("a.txt", "new")
        tree.delete("b.txt")
        changes = tree.commit()
        assert [(c.type, c.content) for c in changes] == [("UPDATE", b"new"), ("DELETE", None)]
        assert (tmp_path / "a.txt").read_text() == "new"
        assert not (tmp_path / "b.txt").exists()


class TestJson:
    def test_serialize(self):
        assert serialize_json({"a": 1}) == '{\n  "a": 1\n}\n'

    def test_read_missing(self, tmp_path: Path):
        with pytest.raises(GeneratorError, match="Cannot find"):
            read_json(Tree(tmp_path), "nope.json")

    def test_read_invalid(self, tmp_path: Path):
        tree = Tree(tmp_path)
        tree.write("bad.json", "{not json")
        with pytest.raises(GeneratorError, match="Cannot parse"):
            read_json(tree, "bad.json")

    def test_update(self, tmp_path: Path):
        tree = Tree(tmp_path)
        write_json(tree, "x.json", {"a": 1})
        result = update_json(tree, "x.json", lambda j: {**j, "b": 2})
        assert result == {"a": 1, "b": 2}
        assert read_json(tree, "x.json") == {"a": 1, "b": 2}


class TestFormatFiles:
    def test_sorts_package_dependencies(self, tmp_path: Path):
        tree = Tree(tmp_path)
        tree.write("package.json", json.dumps({"dependencies": {"b": "1", "a": "1"}}))
        assert format_files(tree) == ["package.json"]
        assert list(read_json(tree, "package.json")["dependencies"]) == ["a", "b"]

    def test_other_json_keeps_key_order(self, tmp_path: Path):
        tree = Tree(tmp_path)
        tree.write("x.json", '{"z": 1, "a": 2}')
        format_files(tree)
        assert tree.read_text("x.json") == '{\n  "z": 1,\n  "a": 2\n}\n'

    def test_text_gets_single_trailing_newline(self, tmp_path: Path):
        tree = Tree(tmp_path)
        tree.write("a.ts", "export {};\n\n\n")
        tree.write("b.ts", "export {};")
        format_files(tree)
        assert tree.read_text("a.ts") == "export {};\n"
        assert tree.read_text("b.ts") == "export {};\n"

    def test_untouched_disk_files_left_alone(self, tmp_path: Path):
        (tmp_path / "ugly.json").write_text('{"a":1}')
        tree = Tree(tmp_path)
        assert format_files(tree) == []
        assert tree.list_changes() == []

    def test_invalid_json_left_alone(self, tmp_path: Path):
        tree = Tree(tmp_path)
        tree.write("broken.json", "{oops")
        format_files(tree)
        assert tree.read_text("broken.json") == "{oops"
