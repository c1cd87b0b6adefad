"""Backward-compatibility rules for updated entities."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from catalog_diff.config.models import CompatibilityConfig
from catalog_diff.tree.models import (
    Added,
    Changed,
    KeyPath,
    Removed,
    TreeDiff,
    iter_leaves,
    resolve_path,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Verdict:
    """Outcome of the compatibility rules for one entity."""

    breaking: bool
    reason: str


def _dotted(path: KeyPath) -> str:
    return ".".join(str(p) for p in path)


class BreakingChangeClassifier:
    """Decides whether an entity's changes can break an existing consumer.

    Rules are checked in priority order and the first match wins:

    1. any deletion is breaking, except dropping a ``default: null`` from a
       property that still exists. Removing an enum member counts as a
       deletion unless ``enum_removal_breaking`` is turned off.
    2. a new entry in the entity's top-level ``required`` list is breaking.
    3. a direct change to the entity's ``title`` or ``$schema`` is breaking.
    4. additions and relaxations are non-breaking.
    5. anything else is non-breaking.
    """

    def __init__(self, config: CompatibilityConfig | None = None) -> None:
        self.config = config or CompatibilityConfig()

    def is_breaking(
        self,
        entity_diff: TreeDiff,
        original_schema: Mapping[str, Any] | None = None,
        updated_schema: Mapping[str, Any] | None = None,
    ) -> bool:
        return self.assess(entity_diff, original_schema, updated_schema).breaking

    def assess(
        self,
        entity_diff: TreeDiff,
        original_schema: Mapping[str, Any] | None = None,
        updated_schema: Mapping[str, Any] | None = None,
    ) -> Verdict:
        cfg = self.config

        # Rule 1: deletions
        for path, leaf in iter_leaves(entity_diff.deleted):
            if self._is_default_null_removal(path, leaf, updated_schema):
                continue
            if not cfg.enum_removal_breaking and self.enum_path(path, original_schema) is not None:
                continue
            return Verdict(True, f"deleted {_dotted(path)}")
        if cfg.enum_removal_breaking:
            for enum_path, _added, removed in self.enum_changes(entity_diff, original_schema, updated_schema):
                if removed:
                    return Verdict(True, f"removed enum values from {_dotted(enum_path)}")

        # Rule 2: newly required properties
        newly_required = self.added_required(entity_diff, original_schema, updated_schema)
        if newly_required:
            return Verdict(True, "added required " + ", ".join(str(r) for r in newly_required))

        # Rule 3: identity fields of the schema itself
        for field in (cfg.title_field, cfg.schema_ref_field):
            if isinstance(entity_diff.updated.get(field), Changed):
                return Verdict(True, f"changed {field}")

        # Rules 4 and 5
        if entity_diff.added and not entity_diff.updated:
            return Verdict(False, "additions only")
        return Verdict(False, "no breaking rule matched")

    # ------------------------------------------------------------------
    # Rule helpers
    # ------------------------------------------------------------------

    def _is_default_null_removal(
        self, path: KeyPath, leaf: Any, updated_schema: Mapping[str, Any] | None
    ) -> bool:
        if not isinstance(leaf, Removed) or leaf.value is not None:
            return False
        if path[-1] != self.config.default_field:
            return False
        if len(path) > 1 and path[-2] == self.config.properties_field:
            # a property that happens to be called "default"
            return False
        if updated_schema is None:
            # a nested Removed leaf implies its parent survived
            return True
        return isinstance(resolve_path(updated_schema, path[:-1]), Mapping)

    def enum_path(self, path: KeyPath, schema: Mapping[str, Any] | None) -> KeyPath | None:
        """Return the prefix of *path* that addresses an enum list, if any.

        A segment only counts as an enum when the schema holds a list there,
        so a property that happens to be named ``enum`` is not mistaken for one.
        """
        for i, key in enumerate(path):
            if key != self.config.enum_field:
                continue
            prefix = path[: i + 1]
            if schema is None or isinstance(resolve_path(schema, prefix), (list, tuple)):
                return prefix
        return None

    def enum_changes(
        self,
        entity_diff: TreeDiff,
        original_schema: Mapping[str, Any] | None,
        updated_schema: Mapping[str, Any] | None,
    ) -> list[tuple[KeyPath, list[Any], list[Any]]]:
        """Set-based ``(enum_path, added_values, removed_values)`` per touched enum.

        Needs both schemas; returns an empty list otherwise.
        """
        if original_schema is None or updated_schema is None:
            return []
        seen: dict[KeyPath, None] = {}
        for path, _leaf in entity_diff.leaves():
            enum_path = self.enum_path(path, original_schema)
            if enum_path is not None and enum_path not in seen:
                seen[enum_path] = None

        results = []
        for enum_path in seen:
            before = resolve_path(original_schema, enum_path)
            after = resolve_path(updated_schema, enum_path)
            if not isinstance(before, (list, tuple)) or not isinstance(after, (list, tuple)):
                continue
            added = [v for v in after if v not in before]
            removed = [v for v in before if v not in after]
            if added or removed:
                results.append((enum_path, added, removed))
        return results

    def added_required(
        self,
        entity_diff: TreeDiff,
        original_schema: Mapping[str, Any] | None,
        updated_schema: Mapping[str, Any] | None,
    ) -> list[Any]:
        """Entries of the entity's top-level required list that are new."""
        field = self.config.required_field
        if original_schema is not None and updated_schema is not None:
            before = original_schema.get(field) or []
            after = updated_schema.get(field) or []
            if isinstance(before, (list, tuple)) and isinstance(after, (list, tuple)):
                return [r for r in after if r not in before]

        # Without both schemas, read the additions straight off the diff
        found: list[Any] = []
        for partition in (entity_diff.added, entity_diff.updated):
            node = partition.get(field)
            if node is None:
                continue
            if isinstance(node, Added):
                found.extend(node.value if isinstance(node.value, (list, tuple)) else [node.value])
                continue
            if isinstance(node, Changed):
                found.extend(node.updated if isinstance(node.updated, (list, tuple)) else [node.updated])
                continue
            for _path, leaf in iter_leaves(node):
                if isinstance(leaf, Added):
                    found.append(leaf.value)
                elif isinstance(leaf, Changed):
                    found.append(leaf.updated)
        return found


def is_breaking(
    entity_diff: TreeDiff,
    original_schema: Mapping[str, Any] | None = None,
    updated_schema: Mapping[str, Any] | None = None,
    config: CompatibilityConfig | None = None,
) -> bool:
    """Convenience wrapper around BreakingChangeClassifier().is_breaking()."""
    return BreakingChangeClassifier(config).is_breaking(entity_diff, original_schema, updated_schema)
