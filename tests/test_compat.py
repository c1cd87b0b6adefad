"""Tests for breaking-change rules and change descriptions."""

from __future__ import annotations

import copy

import pytest

from catalog_diff.compat import BreakingChangeClassifier, describe_changes, is_breaking
from catalog_diff.config.models import CompatibilityConfig
from catalog_diff.errors import UnhandledPropertyTypeError
from catalog_diff.tree import TreeDiffer


def _assess(before: dict, after: dict, config: CompatibilityConfig | None = None):
    changes = TreeDiffer().diff(before, after)
    return BreakingChangeClassifier(config).assess(changes, before, after)


def _describe(before: dict, after: dict, config: CompatibilityConfig | None = None):
    changes = TreeDiffer().diff(before, after)
    return [
        (c.path, c.kind, c.description)
        for c in describe_changes(changes, before, after, entity="btn", config=config)
    ]


# ── Rule 1: deletions ────────────────────────────────────────────────


class TestDeletions:
    def test_default_null_removal_is_not_breaking(self):
        before = {"properties": {"container": {"default": None}}}
        after = {"properties": {"container": {}}}
        verdict = _assess(before, after)
        assert verdict.breaking is False

    def test_default_null_removal_without_schemas(self):
        before = {"properties": {"container": {"default": None}}}
        changes = TreeDiffer().diff(before, {"properties": {"container": {}}})
        assert is_breaking(changes) is False

    def test_default_value_removal_is_breaking(self, button_schema):
        after = copy.deepcopy(button_schema)
        del after["properties"]["size"]["default"]
        verdict = _assess(button_schema, after)
        assert verdict.breaking is True
        assert verdict.reason == "deleted properties.size.default"

    def test_property_removal_is_breaking(self, button_schema):
        after = copy.deepcopy(button_schema)
        del after["properties"]["icon"]
        assert _assess(button_schema, after).breaking is True

    def test_property_with_null_default_removed_entirely(self):
        before = {"properties": {"container": {"default": None}}}
        assert _assess(before, {"properties": {}}).breaking is True

    def test_null_property_named_default_removed(self):
        before = {"properties": {"default": None, "size": {"type": "string"}}}
        after = {"properties": {"size": {"type": "string"}}}
        verdict = _assess(before, after)
        assert verdict.breaking is True
        assert verdict.reason == "deleted properties.default"
        assert _describe(before, after) == [
            (("properties", "default"), "deleted", "removed property default")
        ]

    def test_null_property_named_default_removed_without_schemas(self):
        changes = TreeDiffer().diff({"properties": {"default": None}}, {"properties": {}})
        assert is_breaking(changes) is True

    def test_enum_member_removal_is_breaking(self, button_schema):
        after = copy.deepcopy(button_schema)
        after["properties"]["size"]["enum"] = ["s", "m"]
        assert _assess(button_schema, after).breaking is True

    def test_enum_member_replaced_is_breaking(self, button_schema):
        after = copy.deepcopy(button_schema)
        after["properties"]["size"]["enum"] = ["s", "m", "xl"]
        verdict = _assess(button_schema, after)
        assert verdict.breaking is True
        assert verdict.reason == "removed enum values from properties.size.enum"

    def test_enum_reorder_is_not_breaking(self, button_schema):
        after = copy.deepcopy(button_schema)
        after["properties"]["size"]["enum"] = ["l", "m", "s"]
        assert _assess(button_schema, after).breaking is False

    @pytest.mark.parametrize("enum", [["s", "m"], ["s", "l"], ["s", "m", "xl"]])
    def test_enum_removal_policy_can_be_relaxed(self, button_schema, enum):
        after = copy.deepcopy(button_schema)
        after["properties"]["size"]["enum"] = enum
        config = CompatibilityConfig(enum_removal_breaking=False)
        assert _assess(button_schema, after, config).breaking is False

    def test_property_named_enum_is_not_an_enum(self):
        before = {"properties": {"enum": {"type": "string"}}}
        config = CompatibilityConfig(enum_removal_breaking=False)
        assert _assess(before, {"properties": {}}, config).breaking is True


# ── Rule 2: required additions ───────────────────────────────────────


class TestRequired:
    def test_new_required_entry_is_breaking(self):
        verdict = _assess({"required": ["variant"]}, {"required": ["variant", "size"]})
        assert verdict.breaking is True
        assert verdict.reason == "added required size"

    def test_required_list_introduced(self):
        assert _assess({"title": "Button"}, {"title": "Button", "required": ["a"]}).breaking is True

    def test_required_from_diff_alone(self):
        changes = TreeDiffer().diff({"required": ["a"]}, {"required": ["a", "b"]})
        classifier = BreakingChangeClassifier()
        assert classifier.added_required(changes, None, None) == ["b"]
        assert classifier.is_breaking(changes) is True

    def test_required_reorder_is_not_breaking(self):
        assert _assess({"required": ["a", "b"]}, {"required": ["b", "a"]}).breaking is False

    @pytest.mark.parametrize(
        "extra",
        [
            {"properties": {"variant": {"type": "string"}, "tooltip": {"type": "string"}}},
            {"properties": {"variant": {"type": "string", "default": "accent"}}},
            {"description": "A button"},
        ],
    )
    def test_required_addition_wins_over_non_breaking_changes(self, extra):
        before = {"properties": {"variant": {"type": "string"}}, "required": []}
        after = {**before, **extra, "required": ["variant"]}
        assert _assess(before, after).breaking is True


# ── Rule 3: title and schema reference ───────────────────────────────


class TestIdentityFields:
    def test_title_change_is_breaking(self, button_schema):
        after = {**button_schema, "title": "Action Button"}
        verdict = _assess(button_schema, after)
        assert verdict.breaking is True
        assert verdict.reason == "changed title"

    def test_schema_ref_change_is_breaking(self, button_schema):
        after = {**button_schema, "$schema": "https://example.com/component-v2.json"}
        assert _assess(button_schema, after).reason == "changed $schema"

    def test_nested_title_change_is_not_breaking(self):
        before = {"properties": {"label": {"title": "Label"}}}
        after = {"properties": {"label": {"title": "Text"}}}
        assert _assess(before, after).breaking is False


# ── Rules 4 and 5 ────────────────────────────────────────────────────


class TestNonBreaking:
    def test_optional_property_addition(self, button_schema):
        after = copy.deepcopy(button_schema)
        after["properties"]["tooltip"] = {"type": "string"}
        verdict = _assess(button_schema, after)
        assert verdict.breaking is False
        assert verdict.reason == "additions only"

    def test_enum_addition(self, button_schema):
        after = copy.deepcopy(button_schema)
        after["properties"]["size"]["enum"].append("xl")
        assert _assess(button_schema, after).breaking is False

    def test_default_change_falls_through(self, button_schema):
        after = copy.deepcopy(button_schema)
        after["properties"]["size"]["default"] = "l"
        verdict = _assess(button_schema, after)
        assert verdict.breaking is False
        assert verdict.reason == "no breaking rule matched"


# ── describe_changes ─────────────────────────────────────────────────


class TestDescribeChanges:
    def test_removed_default_null(self):
        described = _describe(
            {"properties": {"container": {"default": None}}},
            {"properties": {"container": {}}},
        )
        assert described == [
            (("properties", "container", "default"), "deleted", "removed default: null")
        ]

    def test_enum_values_added(self, button_schema):
        after = copy.deepcopy(button_schema)
        after["properties"]["size"]["enum"] = ["s", "m", "l", "xl"]
        assert _describe(button_schema, after) == [
            (("properties", "size", "enum"), "added", 'added enum values: "xl"')
        ]

    def test_enum_values_removed_and_added(self, button_schema):
        after = copy.deepcopy(button_schema)
        after["properties"]["size"]["enum"] = ["s", "xl"]
        assert _describe(button_schema, after) == [
            (("properties", "size", "enum"), "added", 'added enum values: "xl"'),
            (("properties", "size", "enum"), "deleted", 'removed enum values: "m", "l"'),
        ]

    def test_enum_reordered(self, button_schema):
        after = copy.deepcopy(button_schema)
        after["properties"]["size"]["enum"] = ["m", "s", "l"]
        assert _describe(button_schema, after) == [
            (("properties", "size", "enum"), "updated", "reordered enum values")
        ]

    def test_type_and_default_changes(self, button_schema):
        after = copy.deepcopy(button_schema)
        after["properties"]["isDisabled"] = {"type": "string", "default": "no"}
        assert _describe(button_schema, after) == [
            (("properties", "isDisabled", "type"), "updated", "type changed from boolean to string"),
            (("properties", "isDisabled", "default"), "updated", 'default changed to "no"'),
        ]

    def test_properties_added_and_removed(self, button_schema):
        after = copy.deepcopy(button_schema)
        del after["properties"]["icon"]
        after["properties"]["tooltip"] = {"type": "string"}
        assert _describe(button_schema, after) == [
            (("properties", "tooltip"), "added", "added property tooltip"),
            (("properties", "icon"), "deleted", "removed property icon"),
        ]

    def test_required_property_added(self):
        assert _describe({"required": ["variant"]}, {"required": ["variant", "size"]}) == [
            (("required", 1), "added", "added required property: size")
        ]

    def test_generic_update(self):
        assert _describe({"description": "old"}, {"description": "new"}) == [
            (("description",), "updated", 'description changed from "old" to "new"')
        ]

    def test_value_changed_to_null_raises(self):
        with pytest.raises(UnhandledPropertyTypeError) as exc_info:
            _describe({"title": "Button"}, {"title": None})
        assert exc_info.value.entity == "btn"
        assert exc_info.value.path == ("title",)
        assert "btn" in str(exc_info.value)

    def test_non_json_value_raises(self):
        with pytest.raises(UnhandledPropertyTypeError, match="set"):
            _describe({"tags": 1}, {"tags": {"a", "b"}})

    def test_dotted_path(self):
        changes = TreeDiffer().diff({"a": {"b": [1]}}, {"a": {"b": [2]}})
        (description,) = describe_changes(changes)
        assert description.dotted_path == "a.b.0"
