"""Folder/file tree derived from corpus identifiers."""

from __future__ import annotations

from collections.abc import Iterable

from .corpus import is_path_hidden
from .models import TreeNode


def build_tree(paths: Iterable[str], hidden_prefixes: Iterable[str] = ()) -> list[TreeNode]:
    """Build a hierarchical tree by splitting identifiers on ``/``.

    Identifiers under a hidden prefix are excluded entirely, so a folder
    holding only hidden files never appears. Each level lists folders
    before files, then sorts by name case-insensitively.

    Args:
        paths: Corpus identifiers.
        hidden_prefixes: Path prefixes to exclude.

    Returns:
        Root-level nodes.
    """
    hidden = list(hidden_prefixes)
    roots: list[TreeNode] = []
    folders: dict[str, TreeNode] = {}

    for path in sorted(p.lstrip("/") for p in paths):
        if not path or is_path_hidden(path, hidden):
            continue

        parts = path.split("/")
        level = roots
        for depth, part in enumerate(parts[:-1]):
            folder_path = "/".join(parts[: depth + 1])
            folder = folders.get(folder_path)
            if folder is None:
                folder = TreeNode(name=part, path=folder_path, kind="folder", children=[])
                folders[folder_path] = folder
                level.append(folder)
            level = folder.children

        level.append(TreeNode(name=parts[-1], path=path, kind="file"))

    _sort_nodes(roots)
    return roots


def _sort_nodes(nodes: list[TreeNode]) -> None:
    nodes.sort(key=lambda n: (n.kind != "folder", n.name.casefold(), n.name))
    for node in nodes:
        if node.children:
            _sort_nodes(node.children)


def flatten_files(nodes: list[TreeNode]) -> list[TreeNode]:
    """All file nodes, depth-first in display order."""
    files: list[TreeNode] = []
    for node in nodes:
        if node.kind == "file":
            files.append(node)
        elif node.children:
            files.extend(flatten_files(node.children))
    return files
