"""Rename detection: pairs deleted and added entities sharing an identifier."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from catalog_diff.identity.index import IdentityIndex
from catalog_diff.models import Identifier, RenameAmbiguity, RenameEntry
from catalog_diff.tree.differ import TreeDiffer

logger = logging.getLogger(__name__)


@dataclass
class RenameResult:
    """Renames plus the added/deleted entities left after removing them."""

    renamed: dict[str, RenameEntry] = field(default_factory=dict)
    added: dict[str, Any] = field(default_factory=dict)
    deleted: dict[str, Any] = field(default_factory=dict)
    ambiguities: list[RenameAmbiguity] = field(default_factory=list)


class RenameDetector:
    """Reclassifies (deleted X, added Y) pairs with the same identifier as renames.

    The index must be built from the original snapshot. When an identifier
    is shared by several deleted or several added entities, holders are
    paired up in snapshot order and the ambiguity is reported rather than
    hidden.
    """

    def __init__(self, index: IdentityIndex) -> None:
        self.index = index

    def detect(self, added: Mapping[str, Any], deleted: Mapping[str, Any]) -> RenameResult:
        added_by_id: dict[Identifier, list[str]] = defaultdict(list)
        for name, entity in added.items():
            identifier = self.index.identifier_of(entity)
            if identifier is not None and identifier in self.index:
                added_by_id[identifier].append(name)

        pairs: dict[str, tuple[str, Identifier]] = {}
        ambiguities: list[RenameAmbiguity] = []
        for identifier, new_names in added_by_id.items():
            old_names = [n for n in self.index.holders(identifier) if n in deleted]
            if not old_names:
                continue
            for side, candidates in (("original", old_names), ("updated", new_names)):
                if len(candidates) > 1:
                    ambiguity = RenameAmbiguity(
                        identifier=identifier,
                        side=side,
                        candidates=candidates,
                        chosen=candidates[0],
                    )
                    logger.warning(
                        "identifier %r is shared by %d %s entities (%s); pairing by snapshot order",
                        identifier,
                        len(candidates),
                        side,
                        ", ".join(candidates),
                    )
                    ambiguities.append(ambiguity)
            for old_name, new_name in zip(old_names, new_names):
                pairs[new_name] = (old_name, identifier)

        result = RenameResult(ambiguities=ambiguities)
        claimed_old = {old for old, _ in pairs.values()}
        for name, entity in added.items():
            if name in pairs:
                old_name, identifier = pairs[name]
                result.renamed[name] = RenameEntry(
                    old_name=old_name,
                    identifier=identifier,
                    diff=_body_changes(deleted[old_name], entity),
                )
            else:
                result.added[name] = entity
        result.deleted = {n: e for n, e in deleted.items() if n not in claimed_old}

        if result.renamed:
            logger.debug("detected %d renamed entities", len(result.renamed))
        return result


def _body_changes(old: Any, new: Any):
    if not (isinstance(old, Mapping) and isinstance(new, Mapping)):
        return None
    changes = TreeDiffer().diff(old, new)
    return None if changes.is_empty else changes


def detect_renames(
    index: IdentityIndex, added: Mapping[str, Any], deleted: Mapping[str, Any]
) -> RenameResult:
    """Convenience wrapper around RenameDetector(index).detect()."""
    return RenameDetector(index).detect(added, deleted)
