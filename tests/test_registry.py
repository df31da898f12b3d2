# tests/test_registry.py
"""
Tests for the block model, the registry and the error hierarchy.
"""

import pytest

from blockscript.errors import (
    BlockScriptError,
    DuplicateBlockTypeError,
    ErrorCodes,
    InvalidInstanceError,
    InvalidParameterSchemaError,
    UnknownBlockTypeError,
)
from blockscript.model import (
    Binding,
    BlockInstance,
    BlockType,
    ParameterDefinition,
    ValueKind,
    VisibilityCondition,
)
from blockscript.registry import BlockRegistry, as_registry
from blockscript.scope import Scope


def _echo(params):
    return "pass"


def _type(block_type_id, category="Test", **kwargs):
    return BlockType(block_type_id, block_type_id.title(), category, _echo, **kwargs)


class TestBlockType:

    def test_duplicate_parameter(self):
        with pytest.raises(InvalidParameterSchemaError) as exc:
            _type("a", parameters=(ParameterDefinition("p", "P"), ParameterDefinition("p", "P again")))
        assert exc.value.code == "BSC-2003"

    def test_condition_on_unknown_parameter(self):
        param = ParameterDefinition("p", "P", condition=VisibilityCondition.of("missing", "x"))
        with pytest.raises(InvalidParameterSchemaError) as exc:
            _type("a", parameters=(param,))
        assert exc.value.code == ErrorCodes.INVALID_CONDITION

    def test_defaults_and_lookup(self):
        block_type = _type("a", parameters=(
            ParameterDefinition("n", "N", ValueKind.NUMBER, default="1"),
            ParameterDefinition("out", "Out", default="result", binding=Binding.OUTPUT),
        ))
        assert block_type.default_params() == {"n": "1", "out": "result"}
        assert block_type.parameter("out").defines_symbol
        assert block_type.parameter("nope") is None
        assert [p.id for p in block_type.bindings(Binding.OUTPUT)] == ["out"]


class TestVisibility:

    def test_condition_with_several_values(self):
        cond = VisibilityCondition.of("method", ("POST", "PUT"))
        assert cond.matches({"method": "PUT"})
        assert not cond.matches({"method": "GET"})
        assert not cond.matches({})

    def test_unconditional_parameter_is_visible(self):
        assert ParameterDefinition("p", "P").is_visible({})


class TestBlockInstanceFromDict:

    def test_canvas_shape(self):
        instance = BlockInstance.from_dict({
            "instanceId": "block_1",
            "blockTypeId": "loop_range",
            "params": {"count": 3, "loopVariable": None},
            "isCollapsed": True,
            "children": [{"instanceId": "block_2", "blockTypeId": "print_message"}],
        })
        assert instance.params == {"count": "3", "loopVariable": ""}
        assert instance.collapsed
        assert instance.children[0].instance_id == "block_2"
        assert instance.children[0].params == {}

    def test_snake_case_keys(self):
        instance = BlockInstance.from_dict({"instance_id": "a", "block_type_id": "print_message"})
        assert (instance.instance_id, instance.block_type_id) == ("a", "print_message")

    @pytest.mark.parametrize("data", [
        [],
        {"blockTypeId": "print_message"},
        {"instanceId": "a"},
        {"instanceId": "a", "blockTypeId": "x", "params": []},
        {"instanceId": "a", "blockTypeId": "x", "children": {}},
    ], ids=["not_object", "no_id", "no_type", "bad_params", "bad_children"])
    def test_invalid(self, data):
        with pytest.raises(InvalidInstanceError) as exc:
            BlockInstance.from_dict(data)
        assert exc.value.code == "BSC-3001"


class TestRegistry:

    def test_lookup(self):
        registry = BlockRegistry([_type("a"), _type("b", category="Other")])
        assert registry.get("a").id == "a"
        assert registry.get("zzz") is None
        assert "b" in registry
        assert [bt.id for bt in registry] == ["a", "b"]
        assert registry.categories() == ["Test", "Other"]
        assert [bt.id for bt in registry.in_category("Other")] == ["b"]

    def test_duplicate_rejected(self):
        with pytest.raises(DuplicateBlockTypeError) as exc:
            BlockRegistry([_type("a"), _type("a")])
        assert exc.value.code == ErrorCodes.DUPLICATE_BLOCK_TYPE

    def test_duplicate_tolerated_when_not_strict(self, caplog):
        first, second = _type("a", description="first"), _type("a", description="second")
        registry = BlockRegistry([first, second], strict=False)
        assert registry.get("a") is first
        assert "duplicate" in caplog.text

    def test_require_unknown(self, registry):
        with pytest.raises(UnknownBlockTypeError) as exc:
            registry.require("print_mesage")
        assert isinstance(exc.value, KeyError)
        assert "did you mean 'print_message'?" in str(exc.value)
        assert str(exc.value).startswith("BSC-2002: ")

    def test_as_registry(self):
        registry = BlockRegistry([_type("a")])
        assert as_registry(registry) is registry
        wrapped = as_registry([_type("a"), "junk", _type("a")])
        assert len(wrapped) == 1
        assert len(as_registry(None)) == 0


class TestScope:

    def test_extend_returns_new_value(self):
        base = Scope(["a"])
        extended = base.extend(["b"])
        assert "b" in extended and "b" not in base
        assert list(extended) == ["a", "b"]

    def test_extend_without_new_names(self):
        base = Scope(["a"])
        assert base.extend(["a", ""]) is base

    def test_empty_names_ignored(self):
        assert len(Scope(["", "x"])) == 1

    def test_of(self):
        scope = Scope(["x"])
        assert Scope.of(scope) is scope
        assert Scope.of({"x"}) == scope
        assert Scope.of(None) == Scope()


class TestErrors:

    def test_hint_in_message(self):
        err = BlockScriptError("bad thing").with_hint("try again")
        assert str(err) == "BSC-9001: bad thing (hint: try again)"

    def test_codes_compare_with_strings(self):
        assert ErrorCodes.MALFORMED_DOCUMENT == "BSC-1001"
        assert ErrorCodes.MALFORMED_DOCUMENT != ErrorCodes.INVALID_ATOM
