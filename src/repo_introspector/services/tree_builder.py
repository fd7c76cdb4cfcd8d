"""Rebuild a nested file tree from the flat recursive git tree listing."""

from __future__ import annotations

from typing import Sequence

from repo_introspector.domain.entities import FileNode, NodeKind, TreeEntry


def _parent_path(path: str) -> str:
    """Everything before the last ``/``; empty for root-level entries."""
    idx = path.rfind("/")
    return path[:idx] if idx != -1 else ""


def _sort_key(node: FileNode) -> tuple[int, str]:
    return (0 if node.kind is NodeKind.DIRECTORY else 1, node.name)


def _sort_recursive(nodes: list[FileNode]) -> None:
    nodes.sort(key=_sort_key)
    for node in nodes:
        if node.children:
            _sort_recursive(node.children)


def build_tree(entries: Sequence[TreeEntry]) -> list[FileNode]:
    """Return the forest of root-level nodes for *entries*.

    Directories own their ``children`` list, so linking a node once is
    enough for every depth.  Duplicate paths are not merged: the last entry
    for a path wins.  An entry whose parent is absent from the listing is
    attached directly under the root.
    """
    index: dict[str, FileNode] = {}
    for entry in entries:
        index[entry.path] = FileNode(
            name=entry.path.rsplit("/", maxsplit=1)[-1],
            path=entry.path,
            kind=entry.kind,
            children=[] if entry.kind is NodeKind.DIRECTORY else None,
        )

    roots: list[FileNode] = []
    for path, node in index.items():
        parent = index.get(_parent_path(path))
        # Only directories carry a children list.
        if parent is not None and parent.children is not None:
            parent.children.append(node)
        else:
            roots.append(node)

    _sort_recursive(roots)
    return roots
