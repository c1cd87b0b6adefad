"""Pydantic models for classified catalog diffs."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_serializer
from pydantic.alias_generators import to_camel

from catalog_diff.tree.models import TreeDiff

# A plain identifier, or the sorted member identifiers of a set token
Identifier = str | int | tuple[str | int, ...]


class _ContractModel(BaseModel):
    """Serialises with camelCase keys, the shape report renderers consume."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )


class ChangeDescription(_ContractModel):
    """Human-readable account of one change inside an entity."""

    path: tuple[str | int, ...]
    kind: Literal["added", "deleted", "updated"]
    description: str

    @property
    def dotted_path(self) -> str:
        return ".".join(str(p) for p in self.path)


class _AssessedBody(_ContractModel):
    """Compatibility verdict and change descriptions for one entity body."""

    is_breaking: bool = False
    reason: str = ""
    changes: list[ChangeDescription] = Field(default_factory=list)


class RenameEntry(_AssessedBody):
    """An entity whose name changed while its identifier stayed the same.

    ``diff`` holds the body changes between the old and the new name, or
    None when only the name moved.
    """

    old_name: str
    identifier: Identifier
    diff: TreeDiff | None = None

    @field_serializer("diff")
    def _serialize_diff(self, diff: TreeDiff | None) -> dict[str, Any] | None:
        return diff.to_dict() if diff is not None else None


class RenameAmbiguity(_ContractModel):
    """An identifier shared by several entities on one side of the diff."""

    identifier: Identifier
    side: Literal["original", "updated"]
    candidates: list[str]
    chosen: str


class DeprecationEntry(_AssessedBody):
    """A newly deprecated entity.

    ``diff`` excludes the deprecation markers themselves.
    """

    comment: str | None = None
    diff: TreeDiff | None = None

    @field_serializer("diff")
    def _serialize_diff(self, diff: TreeDiff | None) -> dict[str, Any] | None:
        return diff.to_dict() if diff is not None else None


class UpdatedEntity(_AssessedBody):
    """An entity present in both snapshots whose body changed."""

    diff: TreeDiff

    @field_serializer("diff")
    def _serialize_diff(self, diff: TreeDiff) -> dict[str, Any]:
        return diff.to_dict()

    @model_serializer(mode="wrap")
    def _flatten_diff(self, handler):
        data = handler(self)
        data.update(data.pop("diff"))
        return data


class EntityCounts(_ContractModel):
    added: int = 0
    deleted: int = 0
    updated: int = 0
    renamed: int = 0
    deprecated: int = 0
    reverted: int = 0


class Summary(_ContractModel):
    total_entities: EntityCounts = Field(default_factory=EntityCounts)
    breaking_changes: int = 0
    non_breaking_changes: int = 0
    has_breaking_changes: bool = False


class ClassifiedResult(_ContractModel):
    """Full outcome of comparing two snapshots.

    Every entity name of either snapshot lands in at most one partition;
    names that appear in none are unchanged. The old name of a renamed
    entity is recorded only inside its ``RenameEntry``.
    """

    added: dict[str, Any] = Field(default_factory=dict)
    deleted: dict[str, Any] = Field(default_factory=dict)
    renamed: dict[str, RenameEntry] = Field(default_factory=dict)
    deprecated: dict[str, DeprecationEntry] = Field(default_factory=dict)
    reverted: dict[str, Any] = Field(default_factory=dict)
    updated: dict[str, UpdatedEntity] = Field(default_factory=dict)
    ambiguities: list[RenameAmbiguity] = Field(default_factory=list)
    summary: Summary = Field(default_factory=Summary)

    @property
    def has_changes(self) -> bool:
        return bool(
            self.added
            or self.deleted
            or self.renamed
            or self.deprecated
            or self.reverted
            or self.updated
        )

    def breaking_updates(self) -> dict[str, UpdatedEntity]:
        return {n: e for n, e in self.updated.items() if e.is_breaking}

    def non_breaking_updates(self) -> dict[str, UpdatedEntity]:
        return {n: e for n, e in self.updated.items() if not e.is_breaking}

    def breaking_bodies(self) -> list[str]:
        """Names of updated, renamed or deprecated entities with a breaking body change."""
        names = [n for n, e in self.updated.items() if e.is_breaking]
        names.extend(n for n, e in self.renamed.items() if e.is_breaking)
        names.extend(n for n, e in self.deprecated.items() if e.is_breaking)
        return names

    def to_contract(self) -> dict[str, Any]:
        """JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
