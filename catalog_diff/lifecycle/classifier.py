"""Lifecycle classification: new, removed, deprecated, reverted and updated entities."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from catalog_diff.config.models import LifecycleConfig
from catalog_diff.errors import UnhandledPropertyTypeError
from catalog_diff.identity.renames import RenameResult
from catalog_diff.models import DeprecationEntry
from catalog_diff.tree.differ import TreeDiffer, clone
from catalog_diff.tree.models import MISSING, TreeDiff

logger = logging.getLogger(__name__)


@dataclass
class Lifecycle:
    """Mutually exclusive entity partitions produced by LifecycleClassifier."""

    new: dict[str, Any] = field(default_factory=dict)
    removed: dict[str, Any] = field(default_factory=dict)
    deprecated: dict[str, DeprecationEntry] = field(default_factory=dict)
    reverted: dict[str, Any] = field(default_factory=dict)
    updated: dict[str, TreeDiff] = field(default_factory=dict)


class LifecycleClassifier:
    """Splits changed entities by their deprecation markers.

    - deprecated: the marker appears in the updated value only
    - reverted: the marker disappears and the entity is back to exactly its
      pre-deprecation value. Only two snapshots are available, so the
      original minus its markers is the one earlier value we can know.
    - updated: everything else that changed
    """

    def __init__(self, config: LifecycleConfig | None = None) -> None:
        self.config = config or LifecycleConfig()

    def classify(
        self,
        entity_changes: Mapping[str, TreeDiff],
        original: Mapping[str, Any],
        updated: Mapping[str, Any],
        renames: RenameResult,
    ) -> Lifecycle:
        lifecycle = Lifecycle(new=dict(renames.added), removed=dict(renames.deleted))

        for name, changes in entity_changes.items():
            before, after = original[name], updated[name]
            was_deprecated = self.is_deprecated(name, before)
            now_deprecated = self.is_deprecated(name, after)

            if now_deprecated and not was_deprecated:
                body = TreeDiffer().diff(self.strip_markers(before), self.strip_markers(after))
                lifecycle.deprecated[name] = DeprecationEntry(
                    comment=self._comment(after),
                    diff=None if body.is_empty else body,
                )
            elif was_deprecated and not now_deprecated and self._matches_undeprecated(before, after):
                lifecycle.reverted[name] = clone(after)
            else:
                lifecycle.updated[name] = changes

        logger.debug(
            "lifecycle: %d new, %d removed, %d deprecated, %d reverted, %d updated",
            len(lifecycle.new),
            len(lifecycle.removed),
            len(lifecycle.deprecated),
            len(lifecycle.reverted),
            len(lifecycle.updated),
        )
        return lifecycle

    def is_deprecated(self, name: str, entity: Mapping[str, Any]) -> bool:
        """True if *entity* carries a deprecation marker.

        Raises UnhandledPropertyTypeError for markers of an unexpected type.
        """
        flag = entity.get(self.config.deprecated_field, MISSING)
        comment = entity.get(self.config.comment_field, MISSING)
        if flag is not MISSING and not isinstance(flag, bool):
            raise UnhandledPropertyTypeError(name, (self.config.deprecated_field,), flag)
        if comment is not MISSING and not isinstance(comment, str):
            raise UnhandledPropertyTypeError(name, (self.config.comment_field,), comment)
        if flag is MISSING:
            return comment is not MISSING
        return flag

    def _comment(self, entity: Mapping[str, Any]) -> str | None:
        return entity.get(self.config.comment_field)

    def strip_markers(self, entity: Mapping[str, Any]) -> dict[str, Any]:
        """Return *entity* without its deprecation marker fields."""
        markers = (self.config.deprecated_field, self.config.comment_field)
        return {k: v for k, v in entity.items() if k not in markers}

    def _matches_undeprecated(self, before: Mapping[str, Any], after: Mapping[str, Any]) -> bool:
        # an explicit `deprecated: false` left behind still counts as a revert
        return TreeDiffer().diff(self.strip_markers(before), self.strip_markers(after)).is_empty
