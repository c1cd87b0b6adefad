"""Data models for structural tree diffs."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

# Path segment: a mapping key or a list index
PathKey = str | int
KeyPath = tuple[PathKey, ...]


@dataclass(frozen=True)
class Added:
    """A sub-tree present only in the updated snapshot."""

    value: Any


@dataclass(frozen=True)
class Removed:
    """A sub-tree present only in the original snapshot."""

    value: Any


@dataclass(frozen=True)
class Changed:
    """A leaf whose value differs between the two snapshots."""

    original: Any
    updated: Any


Leaf = Added | Removed | Changed


@dataclass
class TreeDiff:
    """Result of comparing two trees.

    Each partition mirrors only the changed paths. Interior nodes are plain
    dicts; every leaf is an ``Added``, ``Removed`` or ``Changed`` wrapper, so
    entity properties can never be mistaken for diff annotations.
    """

    added: dict[PathKey, Any] = field(default_factory=dict)
    deleted: dict[PathKey, Any] = field(default_factory=dict)
    updated: dict[PathKey, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.deleted or self.updated)

    def leaves(self) -> Iterator[tuple[KeyPath, Leaf]]:
        """Yield ``(path, leaf)`` for every leaf across all three partitions."""
        for partition in (self.added, self.deleted, self.updated):
            yield from iter_leaves(partition)

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-compatible form of the three partitions."""
        return {
            "added": _plain(self.added),
            "deleted": _plain(self.deleted),
            "updated": _plain(self.updated),
        }


def iter_leaves(tree: dict[PathKey, Any], prefix: KeyPath = ()) -> Iterator[tuple[KeyPath, Leaf]]:
    """Depth-first walk of a diff partition, yielding wrapped leaves."""
    for key, node in tree.items():
        path = prefix + (key,)
        if isinstance(node, (Added, Removed, Changed)):
            yield path, node
        else:
            yield from iter_leaves(node, path)


def _plain(node: Any) -> Any:
    if isinstance(node, (Added, Removed)):
        return node.value
    if isinstance(node, Changed):
        return {"$change": {"from": node.original, "to": node.updated}}
    # JSON object keys must be strings; list indices become "0", "1", ...
    return {str(k): _plain(v) for k, v in node.items()}


MISSING = object()


def resolve_path(tree: Any, path: KeyPath) -> Any:
    """Follow *path* through nested mappings/lists; ``MISSING`` if it breaks off."""
    node = tree
    for key in path:
        if isinstance(node, Mapping) and key in node:
            node = node[key]
        elif isinstance(node, (list, tuple)) and isinstance(key, int) and 0 <= key < len(node):
            node = node[key]
        else:
            return MISSING
    return node
