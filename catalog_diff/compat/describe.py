"""Human-readable descriptions of the changes inside one entity.

The raw diff cannot tell "a property lost its default" from "a property was
deleted", or an enum gaining a member from an index-by-index rewrite. This
pass re-walks the tagged leaves with both schemas at hand and says what
actually happened, e.g. ``removed default: null`` or ``added enum values: "xl"``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from catalog_diff.compat.classifier import BreakingChangeClassifier
from catalog_diff.config.models import CompatibilityConfig
from catalog_diff.errors import UnhandledPropertyTypeError
from catalog_diff.models import ChangeDescription
from catalog_diff.tree.models import Added, Changed, KeyPath, Leaf, Removed, TreeDiff, iter_leaves

_JSON_SCALARS = frozenset({str, int, float, bool, type(None)})


def describe_changes(
    entity_diff: TreeDiff,
    original_schema: Mapping[str, Any] | None = None,
    updated_schema: Mapping[str, Any] | None = None,
    entity: str | None = None,
    config: CompatibilityConfig | None = None,
) -> list[ChangeDescription]:
    """Describe every change in *entity_diff*, in added/deleted/updated order.

    Raises UnhandledPropertyTypeError when a value is updated to null or a
    leaf holds something that is not JSON data.
    """
    classifier = BreakingChangeClassifier(config)
    cfg = classifier.config
    with_schemas = original_schema is not None and updated_schema is not None
    enum_summary = {
        path: (added, removed)
        for path, added, removed in classifier.enum_changes(entity_diff, original_schema, updated_schema)
    }

    descriptions: list[ChangeDescription] = []
    described_enums: set[KeyPath] = set()
    partitions = (
        ("added", entity_diff.added),
        ("deleted", entity_diff.deleted),
        ("updated", entity_diff.updated),
    )
    for kind, partition in partitions:
        for path, leaf in iter_leaves(partition):
            _check_leaf(entity, path, leaf)

            enum_path = classifier.enum_path(path, original_schema) if with_schemas else None
            if enum_path is not None and enum_path != path:
                # index-level change inside an enum list; summarise it once
                if enum_path not in described_enums:
                    described_enums.add(enum_path)
                    descriptions.extend(_describe_enum(enum_path, enum_summary.get(enum_path)))
                continue

            descriptions.append(
                ChangeDescription(path=path, kind=kind, description=_describe_leaf(path, leaf, cfg))
            )
    return descriptions


def _describe_enum(
    path: KeyPath, summary: tuple[list[Any], list[Any]] | None
) -> list[ChangeDescription]:
    if summary is None:
        return [ChangeDescription(path=path, kind="updated", description="reordered enum values")]
    added, removed = summary
    out = []
    if added:
        out.append(
            ChangeDescription(path=path, kind="added", description=f"added enum values: {_join(added)}")
        )
    if removed:
        out.append(
            ChangeDescription(
                path=path, kind="deleted", description=f"removed enum values: {_join(removed)}"
            )
        )
    return out


def _describe_leaf(path: KeyPath, leaf: Leaf, cfg: CompatibilityConfig) -> str:
    name = path[-1]
    parent = path[-2] if len(path) > 1 else None
    in_required = parent == cfg.required_field and isinstance(name, int)
    is_property = parent == cfg.properties_field and isinstance(name, str)

    if isinstance(leaf, Added):
        if in_required:
            return f"added required property: {leaf.value}"
        if name == cfg.required_field and isinstance(leaf.value, list):
            return f"added required properties: {', '.join(str(v) for v in leaf.value)}"
        if is_property:
            return f"added property {name}"
        if name == cfg.default_field:
            return f"added default: {_json(leaf.value)}"
        return f"added {_dotted(path)}: {_json(leaf.value)}"

    if isinstance(leaf, Removed):
        if in_required:
            return f"removed required property: {leaf.value}"
        if is_property:
            return f"removed property {name}"
        if name == cfg.default_field:
            return f"removed default: {_json(leaf.value)}"
        return f"removed {_dotted(path)}"

    if in_required:
        return f"required property {leaf.original} replaced by {leaf.updated}"
    if name == cfg.default_field:
        return f"default changed to {_json(leaf.updated)}"
    if name == cfg.type_field:
        return f"type changed from {leaf.original} to {leaf.updated}"
    return f"{_dotted(path)} changed from {_json(leaf.original)} to {_json(leaf.updated)}"


def _check_leaf(entity: str | None, path: KeyPath, leaf: Leaf) -> None:
    if isinstance(leaf, Changed):
        if leaf.updated is None:
            raise UnhandledPropertyTypeError(entity, path, None)
        _check_json(entity, path, leaf.original)
        _check_json(entity, path, leaf.updated)
    else:
        _check_json(entity, path, leaf.value)


def _check_json(entity: str | None, path: KeyPath, value: Any) -> None:
    if type(value) in _JSON_SCALARS:
        return
    if isinstance(value, Mapping):
        for key, child in value.items():
            if not isinstance(key, str):
                raise UnhandledPropertyTypeError(entity, path + (key,), child)
            _check_json(entity, path + (key,), child)
    elif isinstance(value, (list, tuple)):
        for i, child in enumerate(value):
            _check_json(entity, path + (i,), child)
    else:
        raise UnhandledPropertyTypeError(entity, path, value)


def _dotted(path: KeyPath) -> str:
    return ".".join(str(p) for p in path)


def _json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def _join(values: list[Any]) -> str:
    return ", ".join(_json(v) for v in values)
