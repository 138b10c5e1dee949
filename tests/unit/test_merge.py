"""Unit tests for flatten() and merge()."""

from __future__ import annotations

from logcourier.core.merge import flatten, merge
from logcourier.models.config import MergePolicy


class TestFlatten:
    def test_nested_keys_are_dot_joined(self):
        assert flatten({"a": {"b": 1, "c": {"d": 2}}, "e": 3}) == {
            "a.b": 1,
            "a.c.d": 2,
            "e": 3,
        }

    def test_lists_and_scalars_pass_through(self):
        nested = {"tags": ["x", {"y": 1}], "n": None, "f": 1.5}
        assert flatten(nested) == nested

    def test_empty_nested_mapping_keeps_its_key(self):
        assert flatten({"empty": {}}) == {"empty": {}}

    def test_literal_dotted_key_does_not_overwrite_nested_path(self):
        result = flatten({"a.b": 1, "a": {"b": 2}})
        assert sorted(result.values()) == [1, 2]
        assert result["a.b"] == 1
        assert result["1_a.b"] == 2

    def test_input_is_not_mutated(self):
        nested = {"a": {"b": 1}}
        flatten(nested)
        assert nested == {"a": {"b": 1}}


class TestOverride:
    def test_key_set_is_union_and_incoming_wins(self):
        base = {"a": 1, "b": 2}
        incoming = {"b": 20, "c": 30}
        result = merge(base, incoming, MergePolicy.OVERRIDE)
        assert set(result) == set(base) | set(incoming)
        assert result == {"a": 1, "b": 20, "c": 30}

    def test_nested_values_are_not_flattened(self):
        result = merge({}, {"a": {"b": 1}}, MergePolicy.OVERRIDE)
        assert result == {"a": {"b": 1}}

    def test_inputs_untouched(self):
        base = {"a": 1}
        merge(base, {"a": 2}, MergePolicy.OVERRIDE)
        assert base == {"a": 1}


class TestEncapsulateFlatten:
    def test_no_collision_is_plain_union(self):
        result = merge({"a": 1}, {"b": 2}, MergePolicy.ENCAPSULATE_FLATTEN)
        assert result == {"a": 1, "b": 2}
        assert len(result) == len({"a", "b"})

    def test_collision_is_disambiguated(self):
        result = merge({"a": 1}, {"a": 2}, MergePolicy.ENCAPSULATE_FLATTEN)
        assert result == {"a": 1, "1_a": 2}

    def test_repeated_merges_keep_every_value(self):
        result: dict = {}
        for value in range(4):
            result = merge(result, {"code": value}, MergePolicy.ENCAPSULATE_FLATTEN)
        assert result == {"code": 0, "1_code": 1, "2_code": 2, "3_code": 3}

    def test_incoming_is_flattened(self):
        result = merge({"user.id": 1}, {"user": {"id": 2, "name": "x"}})
        assert result == {"user.id": 1, "1_user.id": 2, "user.name": "x"}

    def test_default_policy_is_encapsulate_flatten(self):
        assert merge({"a": 1}, {"a": 2}) == {"a": 1, "1_a": 2}

    def test_never_drops_values(self):
        base = {"a": 1, "b": 2, "1_a": 3}
        incoming = {"a": 4, "b": {"c": 5}, "d": 6}
        result = merge(base, incoming, MergePolicy.ENCAPSULATE_FLATTEN)
        assert len(result) >= len(set(base) | set(incoming))
        assert sorted(result.values()) == [1, 2, 3, 4, 5, 6]
