"""The diff pipeline: tree diff, renames, lifecycle, compatibility, summary."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from catalog_diff.compat.classifier import BreakingChangeClassifier
from catalog_diff.compat.describe import describe_changes
from catalog_diff.config.models import CatalogDiffConfig
from catalog_diff.errors import InvalidSnapshotError
from catalog_diff.identity.index import IdentityIndex
from catalog_diff.identity.renames import RenameDetector
from catalog_diff.lifecycle.classifier import LifecycleClassifier
from catalog_diff.models import ClassifiedResult, EntityCounts, Summary, UpdatedEntity
from catalog_diff.tree.differ import TreeDiffer
from catalog_diff.tree.models import Added, Removed, TreeDiff

logger = logging.getLogger(__name__)


class CatalogDiffer:
    """Compares two catalog snapshots and classifies every changed entity.

    Instances hold configuration only, so one differ can serve many
    concurrent ``diff`` calls.
    """

    def __init__(self, config: CatalogDiffConfig | None = None) -> None:
        self.config = config or CatalogDiffConfig()
        self._tree_differ = TreeDiffer(max_nodes=self.config.limits.max_nodes)
        self._lifecycle = LifecycleClassifier(self.config.lifecycle)
        self._compat = BreakingChangeClassifier(self.config.compatibility)

    def diff(self, original: Mapping[str, Any], updated: Mapping[str, Any]) -> ClassifiedResult:
        """Compare *original* against *updated*.

        Raises:
            InvalidSnapshotError: a snapshot or one of its entities is not a mapping.
            SnapshotTooLargeError: a snapshot exceeds ``limits.max_nodes``.
            UnhandledPropertyTypeError: a changed value has an unrecognised shape.
        """
        validate_snapshot(original, "original")
        validate_snapshot(updated, "updated")

        tree = self._tree_differ.diff(original, updated)
        added, deleted, entity_changes = split_entities(tree, updated)

        index = IdentityIndex.build(original, self.config.identity)
        renames = RenameDetector(index).detect(added, deleted)
        lifecycle = self._lifecycle.classify(entity_changes, original, updated, renames)

        updated_entities = {
            name: UpdatedEntity(diff=changes, **self._assess(name, changes, original[name], updated[name]))
            for name, changes in lifecycle.updated.items()
        }
        renamed = {
            name: entry.model_copy(
                update=self._assess(name, entry.diff, original[entry.old_name], updated[name])
            )
            for name, entry in renames.renamed.items()
        }
        deprecated = {
            name: entry.model_copy(
                update=self._assess(
                    name,
                    entry.diff,
                    self._lifecycle.strip_markers(original[name]),
                    self._lifecycle.strip_markers(updated[name]),
                )
            )
            for name, entry in lifecycle.deprecated.items()
        }

        result = ClassifiedResult(
            added=lifecycle.new,
            deleted=lifecycle.removed,
            renamed=renamed,
            deprecated=deprecated,
            reverted=lifecycle.reverted,
            updated=updated_entities,
            ambiguities=renames.ambiguities,
        )
        result.summary = summarize(result)
        logger.debug(
            "diff complete: %d breaking, %d non-breaking changes",
            result.summary.breaking_changes,
            result.summary.non_breaking_changes,
        )
        return result

    def _assess(
        self,
        name: str,
        changes: TreeDiff | None,
        before: Mapping[str, Any],
        after: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Verdict and descriptions for one entity body, as model field values."""
        if changes is None:
            return {}
        verdict = self._compat.assess(changes, before, after)
        return {
            "is_breaking": verdict.breaking,
            "reason": verdict.reason,
            "changes": describe_changes(
                changes, before, after, entity=name, config=self.config.compatibility
            ),
        }


def validate_snapshot(snapshot: Any, side: str) -> None:
    if not isinstance(snapshot, Mapping):
        raise InvalidSnapshotError(side, f"expected a mapping, got {type(snapshot).__name__}")
    for name, entity in snapshot.items():
        if not isinstance(name, str):
            raise InvalidSnapshotError(side, f"entity names must be strings, got {name!r}")
        if not isinstance(entity, Mapping):
            raise InvalidSnapshotError(
                side, f"expected a mapping, got {type(entity).__name__}", name=name
            )


def split_entities(
    tree: TreeDiff, updated: Mapping[str, Any]
) -> tuple[dict[str, Any], dict[str, Any], dict[str, TreeDiff]]:
    """Split a whole-snapshot diff into added, deleted and per-entity changes.

    Entities present on both sides come back in updated-snapshot order.
    """
    added = {name: leaf.value for name, leaf in tree.added.items() if isinstance(leaf, Added)}
    deleted = {name: leaf.value for name, leaf in tree.deleted.items() if isinstance(leaf, Removed)}

    entity_changes: dict[str, TreeDiff] = {}
    for name in updated:
        if name in added:
            continue
        changes = TreeDiff(
            added=tree.added.get(name, {}),
            deleted=tree.deleted.get(name, {}),
            updated=tree.updated.get(name, {}),
        )
        if not changes.is_empty:
            entity_changes[name] = changes
    return added, deleted, entity_changes


def summarize(result: ClassifiedResult) -> Summary:
    """Count entities per partition and tally breaking against non-breaking changes.

    Breaking renames and deprecations count alongside breaking updates;
    the other renames, deprecations and reverts appear only in the totals.
    """
    breaking = len(result.breaking_bodies())
    non_breaking = len(result.non_breaking_updates())
    return Summary(
        total_entities=EntityCounts(
            added=len(result.added),
            deleted=len(result.deleted),
            updated=len(result.updated),
            renamed=len(result.renamed),
            deprecated=len(result.deprecated),
            reverted=len(result.reverted),
        ),
        breaking_changes=len(result.deleted) + breaking,
        non_breaking_changes=len(result.added) + non_breaking,
        has_breaking_changes=bool(result.deleted) or breaking > 0,
    )


def diff(
    original: Mapping[str, Any],
    updated: Mapping[str, Any],
    config: CatalogDiffConfig | None = None,
) -> ClassifiedResult:
    """Convenience wrapper around CatalogDiffer(config).diff()."""
    return CatalogDiffer(config).diff(original, updated)
