"""Tests for JsonHash: hashing documents end to end."""

from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from json_hash.config_loader.models import HashConfig, max_depth_limit
from json_hash.errors import (
    InvalidNumberError,
    MaxDepthExceededError,
    UnsupportedTypeError,
)
from json_hash.hasher import JsonHash
from json_hash.walker import copy_json, copy_list

DATA_DIR = Path(__file__).parent / "data"


class TestSimpleValues:
    def test_string_value(self, jh, calc_hash):
        json_obj = jh.apply_to({"key": "value"})
        assert json_obj["key"] == "value"
        assert json_obj["_hash"] == calc_hash('{"key":"value"}')
        assert json_obj["_hash"] == "5Dq88zdSRIOcAS-WM_lYYt"

    def test_int_value(self, jh, calc_hash):
        json_obj = jh.apply_to({"key": 1})
        assert json_obj["key"] == 1
        assert json_obj["_hash"] == calc_hash('{"key":1}')
        assert json_obj["_hash"] == "t4HVsGBJblqznOBwy6IeLt"

    def test_whole_double_hashes_like_int(self, jh, calc_hash):
        json_obj = jh.apply_to({"key": 1.000})
        assert json_obj["key"] == 1.0
        assert isinstance(json_obj["key"], float)
        assert json_obj["_hash"] == calc_hash('{"key":1}')
        assert json_obj["_hash"] == "t4HVsGBJblqznOBwy6IeLt"

    def test_bool_value(self, jh, calc_hash):
        json_obj = jh.apply_to({"key": True})
        assert json_obj["key"] is True
        assert json_obj["_hash"] == calc_hash('{"key":true}')
        assert json_obj["_hash"] == "dNkCrIe79x2dPyf5fywwYO"

    def test_long_double_value(self, jh, calc_hash):
        json_obj = jh.apply_to({"key": 1.0123456789012345})
        assert json_obj["_hash"] == calc_hash('{"key":1.0123456789}')
        assert json_obj["_hash"] == "Cj6IqsbT9fSKfeVVkytoqA"

    def test_short_double_value(self, jh, calc_hash):
        json_obj = jh.apply_to({"key": 1.012000})
        assert json_obj["_hash"] == calc_hash('{"key":1.012}')
        assert json_obj["_hash"] == "ppGtYoP5iHFqst5bPeAGMf"

    def test_null_value(self, jh, calc_hash):
        json_obj = jh.apply_to({"key": None})
        assert json_obj["_hash"] == calc_hash('{"key":null}')

    def test_existing_hash_is_overwritten(self, jh, calc_hash):
        json_obj = jh.apply_to({"key": "value", "_hash": "oldHash"})
        assert json_obj["key"] == "value"
        assert json_obj["_hash"] == calc_hash('{"key":"value"}')
        assert json_obj["_hash"] == "5Dq88zdSRIOcAS-WM_lYYt"


def test_truncates_floating_point_numbers(calc_hash):
    jh = JsonHash(HashConfig(hash_length=22, floating_point_precision=9))

    hash0 = jh.apply_to({"key": 1.01234567890123456789})["_hash"]
    hash1 = jh.apply_to({"key": 1.01234567890123456389})["_hash"]

    assert hash0 == hash1
    assert hash0 == calc_hash('{"key":1.012345678}')
    assert hash0 == "KTqI1AvWb3gI6dYA5HPPMx"


def test_key_order_does_not_matter(jh, calc_hash):
    j0 = jh.apply_to({"a": "value", "b": 1.0, "c": True})
    j1 = jh.apply_to({"b": 1.0, "a": "value", "c": True})

    expected = calc_hash('{"a":"value","b":1,"c":true}')
    assert j0["_hash"] == expected
    assert j1["_hash"] == expected
    assert j0 == j1


class TestNesting:
    def test_level_1(self, jh, calc_hash):
        parent = jh.apply_to({"key": "value", "child": {"key": "value"}})

        child_hash = calc_hash('{"key":"value"}')
        assert parent["child"]["_hash"] == child_hash
        assert parent["_hash"] == calc_hash(
            '{"child":"' + child_hash + '","key":"value"}'
        )

    def test_level_2(self, jh, calc_hash):
        parent = jh.apply_to(
            {
                "key": "value",
                "child": {"key": "value", "grandChild": {"key": "value"}},
            }
        )

        grand_child_hash = calc_hash('{"key":"value"}')
        assert parent["child"]["grandChild"]["_hash"] == grand_child_hash

        child_hash = calc_hash(
            '{"grandChild":"' + grand_child_hash + '","key":"value"}'
        )
        assert parent["child"]["_hash"] == child_hash

        assert parent["_hash"] == calc_hash(
            '{"child":"' + child_hash + '","key":"value"}'
        )

    def test_sibling_hash_unaffected_by_change(self, jh):
        before = jh.apply_to({"left": {"x": 1}, "right": {"y": {"z": 1}}})
        after = jh.apply_to({"left": {"x": 1}, "right": {"y": {"z": 2}}})

        assert before["left"]["_hash"] == after["left"]["_hash"]
        assert before["right"]["y"]["_hash"] != after["right"]["y"]["_hash"]
        assert before["right"]["_hash"] != after["right"]["_hash"]
        assert before["_hash"] != after["_hash"]


class TestArrays:
    def test_simple_types(self, jh, calc_hash):
        json_obj = jh.apply_to({"key": ["value", 1.0, True]})
        assert json_obj["_hash"] == calc_hash('{"key":["value",1,true]}')
        assert json_obj["_hash"] == "nbNb1YfpgqnPfyFTyCQ5YF"

    def test_nested_objects(self, jh, calc_hash):
        json_obj = jh.apply_to(
            {"array": ["key", 1.0, True, {"key1": "value1"}, {"key0": "value0"}]}
        )

        h0 = calc_hash('{"key0":"value0"}')
        h1 = calc_hash('{"key1":"value1"}')
        expected = calc_hash(
            '{"array":["key",1,true,"' + h1 + '","' + h0 + '"]}'
        )
        assert json_obj["_hash"] == expected
        assert json_obj["_hash"] == "13h_Z0wZCF4SQsTyMyq5dV"

    def test_single_object(self, jh, calc_hash):
        json_obj = jh.apply_to({"array": [{"key": "value"}]})

        item_hash = calc_hash('{"key":"value"}')
        assert json_obj["array"][0]["_hash"] == item_hash
        assert item_hash == "5Dq88zdSRIOcAS-WM_lYYt"
        assert json_obj["_hash"] == calc_hash('{"array":["' + item_hash + '"]}')
        assert json_obj["_hash"] == "zYcZBAUGLgR0ygMxi0V5ZT"

    def test_nested_arrays(self, jh, calc_hash):
        json_obj = jh.apply_to({"array": [["key", 1.0, True], "hello"]})
        assert json_obj["_hash"] == calc_hash('{"array":[["key",1,true],"hello"]}')
        assert json_obj["_hash"] == "1X_6COC1sP5ECuHvKtVoDT"

    def test_objects_inside_nested_arrays_are_hashed(self, jh, calc_hash):
        json_obj = jh.apply_to({"array": [[{"key": "value"}]]})
        item_hash = calc_hash('{"key":"value"}')
        assert json_obj["array"][0][0]["_hash"] == item_hash
        assert json_obj["_hash"] == calc_hash('{"array":[["' + item_hash + '"]]}')


def test_complete_document(jh, load_data):
    hashed = jh.apply_to(load_data("layers.json"))

    expected_text = (DATA_DIR / "layers_hashed.json").read_text(encoding="utf-8")
    assert json.dumps(hashed, indent=2) == expected_text.strip()
    assert hashed["_hash"] == "OmmdaqCAhcIKnDm7lT-_gI"


def test_apply_to_string(jh):
    result = jh.apply_to_string('{"key": "value"}')
    assert result == '{"key":"value","_hash":"5Dq88zdSRIOcAS-WM_lYYt"}'


def test_apply_to_string_rejects_top_level_array(jh):
    with pytest.raises(UnsupportedTypeError, match="list"):
        jh.apply_to_string("[1, 2]")


def test_apply_to_string_accepts_escaped_lone_surrogate(jh, calc_hash):
    result = json.loads(jh.apply_to_string('{"k": "\\ud800"}'))
    assert result["k"] == "\ud800"
    assert result["_hash"] == calc_hash('{"k":"\ud800"}')


class TestUnsupportedTypes:
    def test_copy_path(self, jh):
        with pytest.raises(UnsupportedTypeError) as excinfo:
            jh.apply_to({"key": Exception()})
        assert str(excinfo.value) == "Unsupported type: Exception"
        assert excinfo.value.type_name == "Exception"

    def test_hash_path(self, jh):
        with pytest.raises(UnsupportedTypeError, match="Unsupported type: set"):
            jh.apply_to({"key": {1, 2}}, in_place=True)

    def test_inside_arrays(self, jh):
        with pytest.raises(UnsupportedTypeError, match="Unsupported type: tuple"):
            jh.apply_to({"key": [1, (2, 3)]}, in_place=True)

    def test_is_also_a_type_error(self, jh):
        with pytest.raises(TypeError):
            jh.apply_to({"key": object()})

    def test_root_must_be_an_object(self, jh):
        with pytest.raises(UnsupportedTypeError):
            jh.apply_to([{"key": "value"}])  # type: ignore[arg-type]


class TestCopyJson:
    def test_empty(self):
        assert copy_json({}) == {}

    def test_simple_value(self):
        assert copy_json({"a": 1}) == {"a": 1}

    def test_nested_value(self):
        source = {"a": {"b": 1}}
        result = copy_json(source)
        assert result == source
        assert result["a"] is not source["a"]

    def test_list_value(self):
        assert copy_json({"a": [1, 2]}) == {"a": [1, 2]}

    def test_list_with_list(self):
        source = {"a": [[1, 2]]}
        result = copy_json(source)
        assert result == source
        assert result["a"][0] is not source["a"][0]

    def test_list_with_map(self):
        assert copy_json({"a": [{"b": 1}]}) == {"a": [{"b": 1}]}

    def test_copy_list(self):
        source = [{"a": 1}, [2]]
        result = copy_list(source)
        assert result == source
        assert result[0] is not source[0]

    def test_throws_on_unsupported_type_in_map(self):
        with pytest.raises(UnsupportedTypeError, match="Unsupported type: Exception"):
            copy_json({"a": Exception()})

    def test_throws_on_unsupported_type_in_list(self):
        with pytest.raises(UnsupportedTypeError, match="Unsupported type: Exception"):
            copy_json({"a": [Exception()]})

    def test_facade_uses_configured_depth(self):
        jh = JsonHash(max_depth=2)
        with pytest.raises(MaxDepthExceededError):
            jh.copy_json({"a": {"b": {"c": 1}}})


def _abc_tree(hashed: tuple[str, ...] = ("a", "b", "c")) -> dict:
    c = {"d": "value"}
    b = {"c": c}
    a = {"b": b}
    for name, node in (("a", a), ("b", b), ("c", c)):
        if name in hashed:
            node["_hash"] = f"hash_{name}"
    return {"a": a}


def _changed_hashes(json_obj: dict) -> list[str]:
    a = json_obj["a"]
    b = a["b"]
    c = b["c"]
    return [
        name
        for name, node in (("a", a), ("b", b), ("c", c))
        if node.get("_hash") != f"hash_{name}"
    ]


class TestUpdateExistingHashes:
    def test_true_replaces_all_hashes(self):
        jh = JsonHash(update_existing_hashes=True, recursive=True)
        assert _changed_hashes(jh.apply_to(_abc_tree())) == ["a", "b", "c"]

    def test_false_with_all_objects_having_hashes(self):
        jh = JsonHash(update_existing_hashes=False, recursive=True)
        assert _changed_hashes(jh.apply_to(_abc_tree())) == []

    def test_false_with_parents_having_no_hashes(self):
        jh = JsonHash(update_existing_hashes=False, recursive=True)
        result = jh.apply_to(_abc_tree(("b", "c")))
        assert _changed_hashes(result) == ["a"]
        assert result["a"]["_hash"] == jh.calc_hash('{"b":"hash_b"}')

    def test_false_keeps_hash_and_skips_unhashed_descendants(self):
        jh = JsonHash(update_existing_hashes=False)
        result = jh.apply_to({"_hash": "old", "child": {"key": "value"}})
        assert result["_hash"] == "old"
        assert "_hash" not in result["child"]


class TestRecursive:
    def test_false_treats_hashed_children_as_opaque(self):
        jh = JsonHash(recursive=False)
        result = jh.apply_to(_abc_tree())
        assert _changed_hashes(result) == []
        assert result["_hash"] == jh.calc_hash('{"a":"hash_a"}')

    def test_false_still_hashes_unhashed_children(self):
        jh = JsonHash(recursive=False)
        result = jh.apply_to(_abc_tree(("b", "c")))
        assert _changed_hashes(result) == ["a"]
        assert result["a"]["_hash"] == jh.calc_hash('{"b":"hash_b"}')

    def test_false_applies_to_array_elements(self):
        jh = JsonHash(recursive=False)
        result = jh.apply_to({"items": [{"_hash": "kept", "x": 1}, {"x": 2}]})
        assert result["items"][0]["_hash"] == "kept"
        assert result["items"][1]["_hash"] == jh.calc_hash('{"x":2}')
        assert result["_hash"] == jh.calc_hash(
            '{"items":["kept","' + result["items"][1]["_hash"] + '"]}'
        )


class TestInPlace:
    def test_in_place_false(self, jh):
        json_obj = {"key": "value"}
        hashed = jh.apply_to(json_obj, in_place=False)
        assert hashed == {"key": "value", "_hash": "5Dq88zdSRIOcAS-WM_lYYt"}
        assert json_obj == {"key": "value"}

    def test_in_place_false_leaves_nested_input_untouched(self, jh, load_data):
        json_obj = load_data("layers.json")
        snapshot = copy.deepcopy(json_obj)
        jh.apply_to(json_obj)
        assert json_obj == snapshot

    def test_in_place_true(self, jh):
        json_obj = {"key": "value"}
        hashed = jh.apply_to(json_obj, in_place=True)
        assert hashed == {"key": "value", "_hash": "5Dq88zdSRIOcAS-WM_lYYt"}
        assert hashed is json_obj

    @pytest.mark.parametrize(
        ("bad_value", "error"),
        [
            (object(), UnsupportedTypeError),
            (float("nan"), InvalidNumberError),
            ({"deeper": {"still": {}}}, MaxDepthExceededError),
        ],
    )
    def test_failed_in_place_call_leaves_input_unchanged(self, bad_value, error):
        jh = JsonHash(max_depth=3)
        json_obj = {"a": {"x": 1}, "b": {"y": bad_value}}

        with pytest.raises(error):
            jh.apply_to(json_obj, in_place=True)

        assert json_obj == {"a": {"x": 1}, "b": {"y": bad_value}}

    def test_stored_hash_object_is_replaced_not_walked(self, jh):
        json_obj = {"key": "value", "_hash": {"stale": {"key": 1}}}
        hashed = jh.apply_to(json_obj, in_place=True)
        assert hashed["_hash"] == "5Dq88zdSRIOcAS-WM_lYYt"


class TestDepthLimit:
    @staticmethod
    def _nested(depth: int) -> dict:
        tree: dict = {"leaf": 1}
        for _ in range(depth - 1):
            tree = {"a": tree}
        return tree

    @pytest.mark.parametrize("in_place", [False, True])
    def test_exceeding_max_depth_raises(self, in_place):
        jh = JsonHash(max_depth=5)
        with pytest.raises(MaxDepthExceededError) as excinfo:
            jh.apply_to(self._nested(10), in_place=in_place)
        assert excinfo.value.path == "/a/a/a/a/a"
        assert excinfo.value.max_depth == 5

    def test_within_max_depth_succeeds(self):
        jh = JsonHash(max_depth=5)
        assert "_hash" in jh.apply_to(self._nested(5))

    def test_default_limit_prevents_stack_overflow(self, jh):
        with pytest.raises(MaxDepthExceededError):
            jh.apply_to(self._nested(400))

    def test_is_also_a_recursion_error(self):
        with pytest.raises(RecursionError):
            JsonHash(max_depth=1).apply_to({"a": {}})

    def test_max_depth_beyond_the_stack_is_rejected(self):
        with pytest.raises(ValidationError, match="max_depth"):
            JsonHash(max_depth=100_000)

    def test_max_depth_cap_follows_recursion_limit(self, monkeypatch):
        monkeypatch.setattr("sys.getrecursionlimit", lambda: 300)

        assert max_depth_limit() == 100
        assert JsonHash(max_depth=100).config.max_depth == 100
        with pytest.raises(ValidationError):
            JsonHash(max_depth=101)

    @pytest.mark.parametrize("in_place", [False, True])
    def test_deepest_allowed_limit_still_raises_cleanly(self, in_place):
        limit = max_depth_limit()
        jh = JsonHash(max_depth=limit)

        with pytest.raises(MaxDepthExceededError) as excinfo:
            jh.apply_to(self._nested(limit + 50), in_place=in_place)
        assert excinfo.value.max_depth == limit


class TestConfiguration:
    def test_defaults(self, jh):
        assert jh.hash_length == 22
        assert jh.floating_point_precision == 10
        assert jh.config.update_existing_hashes is True
        assert jh.config.recursive is True

    def test_overrides_replace_config_values(self):
        jh = JsonHash(HashConfig(hash_length=10), floating_point_precision=3)
        assert jh.hash_length == 10
        assert jh.floating_point_precision == 3

    def test_hash_length_is_applied(self):
        jh = JsonHash(hash_length=43)
        assert len(jh.apply_to({"key": "value"})["_hash"]) == 43

    @pytest.mark.parametrize(
        "overrides",
        [
            {"hash_length": 0},
            {"hash_length": 44},
            {"floating_point_precision": -1},
            {"max_depth": 0},
            {"unknown": 1},
        ],
    )
    def test_invalid_values_are_rejected(self, overrides):
        with pytest.raises(ValidationError):
            JsonHash(**overrides)

    def test_config_is_frozen(self, jh):
        with pytest.raises(ValidationError):
            jh.config.hash_length = 5  # type: ignore[misc]
