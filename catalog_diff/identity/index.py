"""Identifier → name lookup used to correlate entities across snapshots."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping
from typing import Any

from catalog_diff.config.models import IdentityConfig
from catalog_diff.models import Identifier


def resolve_identifier(entity: Any, config: IdentityConfig) -> Identifier | None:
    """Return the stable identifier carried by *entity*, or None.

    The first configured identifier field present on the entity wins. Set
    tokens with no identifier of their own are identified by the sorted
    identifiers of their set members, provided every member has one.
    """
    if not isinstance(entity, Mapping):
        return None
    for field in config.identifier_fields:
        value = entity.get(field)
        if _is_identifier(value):
            return value
    if config.set_field:
        members = entity.get(config.set_field)
        if isinstance(members, Mapping) and members:
            member_ids = [resolve_identifier(m, config) for m in members.values()]
            if all(_is_identifier(m) for m in member_ids):
                return tuple(sorted(member_ids, key=str))
    return None


def _is_identifier(value: Any) -> bool:
    # bool is an int subclass but never a meaningful identifier
    return isinstance(value, (str, int)) and not isinstance(value, bool)


class IdentityIndex:
    """Maps each identifier found in a snapshot to the entity names holding it."""

    def __init__(self, holders: dict[Identifier, list[str]], config: IdentityConfig) -> None:
        self._holders = holders
        self.config = config

    @classmethod
    def build(cls, snapshot: Mapping[str, Any], config: IdentityConfig | None = None) -> IdentityIndex:
        """Index every entity of *snapshot* that carries an identifier."""
        config = config or IdentityConfig()
        holders: dict[Identifier, list[str]] = defaultdict(list)
        for name, entity in snapshot.items():
            identifier = resolve_identifier(entity, config)
            if identifier is not None:
                holders[identifier].append(name)
        return cls(dict(holders), config)

    @property
    def names(self) -> dict[Identifier, str]:
        """identifier -> first holder name in snapshot order."""
        return {ident: names[0] for ident, names in self._holders.items()}

    @property
    def duplicates(self) -> dict[Identifier, list[str]]:
        """Identifiers held by more than one entity (invalid input)."""
        return {ident: list(names) for ident, names in self._holders.items() if len(names) > 1}

    def holders(self, identifier: Identifier) -> list[str]:
        return list(self._holders.get(identifier, ()))

    def identifier_of(self, entity: Any) -> Identifier | None:
        return resolve_identifier(entity, self.config)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._holders

    def __len__(self) -> int:
        return len(self._holders)


def build_index(snapshot: Mapping[str, Any], config: IdentityConfig | None = None) -> dict[Identifier, str]:
    """Convenience wrapper returning the plain identifier -> name mapping."""
    return IdentityIndex.build(snapshot, config).names
