"""Tests for the repository tree walker."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from reporead.ingestion import tree_builder
from reporead.ingestion.tree_builder import build_file_tree, is_excluded
from reporead.resilience.errors import IoError


def _populate(root: Path) -> None:
    (root / "src").mkdir(parents=True)
    (root / "src" / "lib.rs").write_bytes(b"x" * 40)
    (root / "Docs").mkdir()
    (root / "Docs" / "guide.md").write_text("# guide\n")
    (root / "README.md").write_bytes(b"# Widgets 1\n")
    (root / "build.rs").write_text("fn main() {}\n")
    (root / ".git").mkdir()
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    (root / ".env").write_text("SECRET=1\n")
    (root / "node_modules").mkdir()
    (root / "node_modules" / "pkg.js").write_text("")
    (root / "__pycache__").mkdir()
    (root / "_meta").mkdir()
    (root / "_meta" / "info.json").write_text("{}")


class TestBuildFileTree:
    def test_root_node(self, tmp_path: Path) -> None:
        _populate(tmp_path)

        tree = build_file_tree(tmp_path, "widgets")

        assert tree.name == "widgets"
        assert tree.path == ""
        assert tree.is_dir is True
        assert tree.size is None

    def test_excluded_names_hidden(self, tmp_path: Path) -> None:
        _populate(tmp_path)

        tree = build_file_tree(tmp_path, "widgets")

        names = {node.name for node in tree.iter_nodes()}
        for hidden in (".git", ".env", "node_modules", "__pycache__", "_meta"):
            assert hidden not in names

    def test_dirs_first_then_case_insensitive(self, tmp_path: Path) -> None:
        _populate(tmp_path)

        tree = build_file_tree(tmp_path, "widgets")

        assert [c.name for c in tree.children or []] == [
            "Docs",
            "src",
            "build.rs",
            "README.md",
        ]

    def test_paths_and_sizes(self, tmp_path: Path) -> None:
        _populate(tmp_path)

        tree = build_file_tree(tmp_path, "widgets")

        by_path = {node.path: node for node in tree.iter_nodes()}
        lib = by_path["src/lib.rs"]
        assert lib.size == 40
        assert lib.children is None
        assert by_path["README.md"].size == 12
        src = by_path["src"]
        assert src.size is None
        assert [c.path for c in src.children or []] == ["src/lib.rs"]

    def test_empty_directory_has_empty_children(self, tmp_path: Path) -> None:
        (tmp_path / "empty").mkdir()

        tree = build_file_tree(tmp_path, "r")

        assert tree.children is not None
        assert tree.children[0].children == []

    def test_missing_root(self, tmp_path: Path) -> None:
        with pytest.raises(IoError):
            build_file_tree(tmp_path / "missing", "r")

    def test_serialised_form_drops_absent_fields(self, tmp_path: Path) -> None:
        (tmp_path / "a.txt").write_text("a")

        data = build_file_tree(tmp_path, "r").model_dump(exclude_none=True)

        assert "size" not in data
        assert "children" not in data["children"][0]

    def test_unlistable_subdirectory_dropped(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _populate(tmp_path)
        real_scandir = os.scandir

        def scandir(path: os.PathLike[str] | str) -> object:
            if Path(path).name == "Docs":
                raise PermissionError(13, "Permission denied", str(path))
            return real_scandir(path)

        monkeypatch.setattr(tree_builder.os, "scandir", scandir)

        tree = build_file_tree(tmp_path, "widgets")

        paths = {node.path for node in tree.iter_nodes()}
        assert "Docs" not in paths
        assert "Docs/guide.md" not in paths
        assert {"src", "src/lib.rs", "README.md", "build.rs"} <= paths

    def test_unreadable_root_raises(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def scandir(path: os.PathLike[str] | str) -> object:
            raise PermissionError(13, "Permission denied", str(path))

        monkeypatch.setattr(tree_builder.os, "scandir", scandir)

        with pytest.raises(IoError):
            build_file_tree(tmp_path, "r")

    def test_symlinked_directory_not_followed(self, tmp_path: Path) -> None:
        _populate(tmp_path)
        (tmp_path / "docs-link").symlink_to(tmp_path / "Docs")

        tree = build_file_tree(tmp_path, "widgets")

        link = next(n for n in tree.iter_nodes() if n.name == "docs-link")
        assert link.is_dir is False
        assert link.children is None
        assert link.size == os.lstat(tmp_path / "docs-link").st_size
        assert "docs-link/guide.md" not in {n.path for n in tree.iter_nodes()}


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        (".github", True),
        ("node_modules", True),
        ("__pycache__", True),
        ("_meta", True),
        ("meta", False),
        ("src", False),
    ],
)
def test_is_excluded(name: str, expected: bool) -> None:
    assert is_excluded(name) is expected
