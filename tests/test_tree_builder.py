"""Tests for rebuilding the nested file tree from flat entries."""

from repo_introspector.domain.entities import FileNode, NodeKind, TreeEntry
from repo_introspector.services.tree_builder import build_tree

F = NodeKind.FILE
D = NodeKind.DIRECTORY


def _entries(*pairs):
    return [TreeEntry(path=p, kind=k) for p, k in pairs]


def _names(nodes):
    return [n.name for n in nodes]


def _assert_sorted(nodes: list[FileNode]) -> None:
    keys = [(0 if n.kind is D else 1, n.name) for n in nodes]
    assert keys == sorted(keys)
    for n in nodes:
        if n.children:
            _assert_sorted(n.children)


class TestBuildTree:
    def test_empty_input(self):
        assert build_tree([]) == []

    def test_root_level_files(self):
        forest = build_tree(_entries(("b.txt", F), ("a.txt", F)))
        assert _names(forest) == ["a.txt", "b.txt"]
        assert all(n.children is None for n in forest)

    def test_directories_before_files(self):
        forest = build_tree(_entries(("zeta.md", F), ("alpha", D), ("beta.py", F), ("src", D)))
        assert _names(forest) == ["alpha", "src", "beta.py", "zeta.md"]

    def test_case_sensitive_ordering(self):
        forest = build_tree(_entries(("b", F), ("B", F), ("a", F), ("A", F)))
        assert _names(forest) == ["A", "B", "a", "b"]

    def test_deep_nesting_is_preserved(self):
        forest = build_tree(
            _entries(
                ("src", D),
                ("src/pkg", D),
                ("src/pkg/sub", D),
                ("src/pkg/sub/deep.py", F),
                ("src/pkg/mod.py", F),
                ("src/main.py", F),
            )
        )
        (src,) = forest
        assert src.path == "src"
        assert _names(src.children) == ["pkg", "main.py"]
        pkg = src.children[0]
        assert _names(pkg.children) == ["sub", "mod.py"]
        sub = pkg.children[0]
        assert [c.path for c in sub.children] == ["src/pkg/sub/deep.py"]

    def test_children_listed_before_parent(self):
        forest = build_tree(_entries(("src/a.py", F), ("src", D)))
        assert _names(forest) == ["src"]
        assert _names(forest[0].children) == ["a.py"]

    def test_missing_parent_attaches_to_root(self):
        forest = build_tree(_entries(("ghost/dir/file.py", F), ("top.txt", F)))
        assert [n.path for n in forest] == ["ghost/dir/file.py", "top.txt"]
        assert forest[0].name == "file.py"

    def test_empty_directory_has_empty_children(self):
        (node,) = build_tree(_entries(("docs", D)))
        assert node.children == []

    def test_duplicate_paths_last_wins(self):
        forest = build_tree(_entries(("x", F), ("x", D)))
        assert len(forest) == 1
        assert forest[0].kind is D

    def test_sorted_at_every_depth(self):
        forest = build_tree(
            _entries(
                ("b", D), ("a.txt", F), ("b/z.txt", F), ("b/c", D), ("b/a.txt", F),
                ("b/c/y", F), ("b/c/x", D), ("b/c/x/2", F), ("b/c/x/1", F), ("A", D),
            )
        )
        _assert_sorted(forest)

    def test_idempotent(self):
        entries = _entries(("src", D), ("src/b.py", F), ("src/a.py", F), ("README", F))
        assert build_tree(entries) == build_tree(entries)

    def test_child_of_file_attaches_to_root(self):
        forest = build_tree(_entries(("notes", F), ("notes/inner.txt", F)))
        assert [n.path for n in forest] == ["notes/inner.txt", "notes"]
        assert forest[1].children is None
