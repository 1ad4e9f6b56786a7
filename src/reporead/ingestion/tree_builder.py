"""Walk an extracted repository into a serialisable :class:`FileNode` tree."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from reporead.constants import TREE_EXCLUDED_NAMES
from reporead.ingestion.schemas import FileNode
from reporead.resilience.errors import IoError

logger = logging.getLogger(__name__)


def is_excluded(name: str) -> bool:
    """Hidden entries, dependency caches and the metadata sidecar."""
    return name.startswith(".") or name in TREE_EXCLUDED_NAMES


def _sort_key(node: FileNode) -> tuple[bool, str]:
    # Directories first, then case-insensitive by name
    return (not node.is_dir, node.name.lower())


def build_file_tree(root_path: Path, base_name: str) -> FileNode:
    """Build the tree rooted at ``root_path``.

    The root node is renamed to ``base_name`` (the repository's logical
    name) and gets an empty path. Entries that cannot be listed or
    stat'ed are dropped rather than failing the whole walk.

    Raises:
        IoError: ``root_path`` itself is not a readable directory.
    """
    if not root_path.is_dir():
        raise IoError(f"Root not found: {root_path}")

    children = _build_children(root_path, "")
    if children is None:
        raise IoError(f"Root not readable: {root_path}")

    return FileNode(name=base_name, path="", is_dir=True, children=children)


def _build_children(dir_path: Path, rel_prefix: str) -> list[FileNode] | None:
    try:
        with os.scandir(dir_path) as it:
            entries = list(it)
    except OSError as exc:
        logger.debug("event=tree_skip_dir path=%s error=%s", rel_prefix, exc)
        return None

    nodes: list[FileNode] = []
    for entry in entries:
        if is_excluded(entry.name):
            continue
        node = _build_node(entry, rel_prefix)
        if node is not None:
            nodes.append(node)

    nodes.sort(key=_sort_key)
    return nodes


def _build_node(entry: os.DirEntry[str], rel_prefix: str) -> FileNode | None:
    rel_path = f"{rel_prefix}/{entry.name}" if rel_prefix else entry.name
    try:
        is_dir = entry.is_dir(follow_symlinks=False)
        if not is_dir:
            size = entry.stat(follow_symlinks=False).st_size
    except OSError as exc:
        logger.debug("event=tree_skip_entry path=%s error=%s", rel_path, exc)
        return None

    if is_dir:
        children = _build_children(Path(entry.path), rel_path)
        if children is None:
            return None
        return FileNode(
            name=entry.name, path=rel_path, is_dir=True, children=children
        )

    return FileNode(name=entry.name, path=rel_path, is_dir=False, size=size)
