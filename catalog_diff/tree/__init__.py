"""Generic structural diff of nested mapping/list trees."""

from catalog_diff.tree.differ import TreeDiffer, clone, count_nodes
from catalog_diff.tree.models import (
    Added,
    Changed,
    KeyPath,
    Leaf,
    MISSING,
    PathKey,
    Removed,
    TreeDiff,
    iter_leaves,
    resolve_path,
)


def diff_trees(original, updated, max_nodes: int | None = None) -> TreeDiff:
    """Convenience wrapper around TreeDiffer().diff()."""
    return TreeDiffer(max_nodes=max_nodes).diff(original, updated)


__all__ = [
    "Added",
    "Changed",
    "KeyPath",
    "Leaf",
    "MISSING",
    "PathKey",
    "Removed",
    "TreeDiff",
    "TreeDiffer",
    "clone",
    "count_nodes",
    "diff_trees",
    "iter_leaves",
    "resolve_path",
]
