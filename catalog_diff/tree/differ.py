"""Structural differ for nested mapping/list trees."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from catalog_diff.errors import SnapshotTooLargeError
from catalog_diff.tree.models import Added, Changed, PathKey, Removed, TreeDiff

logger = logging.getLogger(__name__)

_SCALARS = frozenset({str, int, float, bool, type(None)})
_SEQUENCES = (list, tuple)


def clone(value: Any) -> Any:
    """Deep copy of a JSON-like value; scalars are returned as-is."""
    if type(value) in _SCALARS:
        return value
    if isinstance(value, Mapping):
        return {k: clone(v) for k, v in value.items()}
    if isinstance(value, _SEQUENCES):
        return [clone(v) for v in value]
    return copy.deepcopy(value)


def count_nodes(tree: Any, limit: int | None = None) -> int:
    """Count every mapping entry and list item in *tree*.

    Counting stops as soon as *limit* is exceeded, so the returned value is
    at most ``limit + 1`` when a limit is given.
    """
    count = 0
    stack = [tree]
    while stack:
        node = stack.pop()
        if isinstance(node, Mapping):
            children = node.values()
        elif isinstance(node, _SEQUENCES):
            children = node
        else:
            continue
        for child in children:
            count += 1
            if limit is not None and count > limit:
                return count
            if type(child) not in _SCALARS:
                stack.append(child)
    return count


class TreeDiffer:
    """Compares two trees and partitions the changes into added/deleted/updated.

    Key membership is tested against the other side's dict, so each level
    costs time proportional to its key count. Lists are compared by index.
    """

    def __init__(self, max_nodes: int | None = None) -> None:
        self.max_nodes = max_nodes

    def diff(self, original: Any, updated: Any) -> TreeDiff:
        """Compare *original* against *updated* and return a ``TreeDiff``."""
        if self.max_nodes is not None:
            for side, tree in (("original", original), ("updated", updated)):
                if count_nodes(tree, self.max_nodes) > self.max_nodes:
                    raise SnapshotTooLargeError(side, self.max_nodes)

        result = TreeDiff()
        if isinstance(original, Mapping) and isinstance(updated, Mapping):
            _diff_mapping(original, updated, result)
        elif isinstance(original, _SEQUENCES) and isinstance(updated, _SEQUENCES):
            _diff_sequence(original, updated, result)
        else:
            raise TypeError(
                "tree roots must both be mappings or both be lists, got "
                f"{type(original).__name__} and {type(updated).__name__}"
            )
        logger.debug(
            "tree diff: %d added, %d deleted, %d updated top-level keys",
            len(result.added),
            len(result.deleted),
            len(result.updated),
        )
        return result


def _diff_mapping(original: Mapping, updated: Mapping, out: TreeDiff) -> None:
    for key, old in original.items():
        if key in updated:
            _diff_value(key, old, updated[key], out)
        else:
            out.deleted[key] = Removed(clone(old))
    for key, new in updated.items():
        if key not in original:
            out.added[key] = Added(clone(new))


def _diff_sequence(original: Any, updated: Any, out: TreeDiff) -> None:
    common = min(len(original), len(updated))
    for i in range(common):
        _diff_value(i, original[i], updated[i], out)
    for i in range(common, len(updated)):
        out.added[i] = Added(clone(updated[i]))
    for i in range(common, len(original)):
        out.deleted[i] = Removed(clone(original[i]))


def _diff_value(key: PathKey, old: Any, new: Any, out: TreeDiff) -> None:
    if old is new:
        return
    old_type, new_type = type(old), type(new)
    if old_type in _SCALARS and new_type in _SCALARS:
        # type-strict: 1, 1.0 and True are all different values
        if old_type is not new_type or old != new:
            out.updated[key] = Changed(old, new)
        return

    sub = TreeDiff()
    if isinstance(old, Mapping) and isinstance(new, Mapping):
        _diff_mapping(old, new, sub)
    elif isinstance(old, _SEQUENCES) and isinstance(new, _SEQUENCES):
        _diff_sequence(old, new, sub)
    else:
        if old_type is not new_type or old != new:
            out.updated[key] = Changed(clone(old), clone(new))
        return

    if sub.added:
        out.added[key] = sub.added
    if sub.deleted:
        out.deleted[key] = sub.deleted
    if sub.updated:
        out.updated[key] = sub.updated
