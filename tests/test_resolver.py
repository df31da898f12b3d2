# tests/test_resolver.py
"""
Tests for parameter resolution: raw strings → literals or symbol references.
"""

import logging

import pytest

from blockscript.resolver import ParameterResolver, resolve_parameters, resolve_value
from blockscript.model import ValueKind
from blockscript.scope import EMPTY_SCOPE, Scope


def _resolve(registry, block_type_id, params, scope=EMPTY_SCOPE):
    return resolve_parameters(params, registry.require(block_type_id), scope)


class TestKindResolution:

    def test_number_literal(self, registry):
        assert _resolve(registry, "define_variable", {"variableName": "x", "value": "5"}) == {
            "variableName": "x",
            "value": "5",
        }

    def test_non_numeric_number_is_quoted(self, registry, caplog):
        with caplog.at_level(logging.DEBUG, logger="blockscript.resolver"):
            resolved = _resolve(registry, "define_variable", {"variableName": "x", "value": "hello"})
        assert resolved["value"] == '"hello"'
        assert "Non-numeric" in caplog.text

    def test_number_with_leading_zeros(self, registry):
        assert _resolve(registry, "loop_range", {"count": "010"})["count"] == "10"

    def test_string_is_quoted(self, registry):
        assert _resolve(registry, "print_message", {"message": 'He said "hi"'})["message"] == '"He said \\"hi\\""'

    def test_string_is_trimmed(self, registry):
        assert _resolve(registry, "print_message", {"message": "  hi  "})["message"] == '"hi"'

    def test_boolean(self, registry):
        resolved = _resolve(registry, "dataframe_write_csv", {"includeIndex": "yes"})
        assert resolved["includeIndex"] == "True"

    def test_unrecognised_boolean_is_quoted(self, registry):
        resolved = _resolve(registry, "dataframe_write_csv", {"includeIndex": "maybe"})
        assert resolved["includeIndex"] == '"maybe"'

    def test_select_is_quoted(self, registry):
        assert _resolve(registry, "write_file", {"mode": "a"})["mode"] == '"a"'

    def test_textarea_keeps_whitespace(self, registry):
        resolved = _resolve(registry, "write_file", {"content": "  a\n"})
        assert resolved["content"] == '"""  a\n"""'

    def test_password_is_quoted(self, registry):
        resolved = _resolve(registry, "http_request", {"authType": "Bearer Token", "authToken": "s3cr3t"})
        assert resolved["authToken"] == '"s3cr3t"'

    def test_every_kind_has_a_handler(self):
        for kind in ValueKind:
            assert resolve_value("x", kind, EMPTY_SCOPE)


class TestSymbolReferences:

    def test_in_scope_name_is_a_reference(self, registry):
        resolved = _resolve(registry, "print_message", {"message": "x"}, Scope(["x"]))
        assert resolved["message"] == "x"

    def test_reference_match_ignores_surrounding_space(self, registry):
        resolved = _resolve(registry, "print_message", {"message": " x "}, Scope(["x"]))
        assert resolved["message"] == "x"

    def test_out_of_scope_name_is_a_literal(self, registry):
        resolved = _resolve(registry, "print_message", {"message": "x"}, Scope(["y"]))
        assert resolved["message"] == '"x"'

    def test_reference_wins_over_number_kind(self, registry):
        resolved = _resolve(registry, "loop_range", {"count": "n"}, Scope(["n"]))
        assert resolved["count"] == "n"

    def test_symbol_defining_parameters_are_verbatim(self, registry):
        resolved = _resolve(registry, "define_variable", {"variableName": " total ", "value": "1"})
        assert resolved["variableName"] == "total"

    def test_symbol_defining_parameter_ignores_scope(self, registry):
        resolved = _resolve(registry, "loop_range", {"loopVariable": "i"}, Scope(["i"]))
        assert resolved["loopVariable"] == "i"


class TestDefaultsAndSentinels:

    def test_missing_params_use_defaults(self, registry):
        resolved = _resolve(registry, "loop_range", {})
        assert resolved == {"count": "5", "loopVariable": "i"}

    def test_non_mapping_params(self, registry):
        assert _resolve(registry, "print_message", None) == {"message": '"Hello World"'}

    def test_non_string_values(self, registry):
        assert _resolve(registry, "loop_range", {"count": 3})["count"] == "3"

    def test_optional_empty_is_empty_string_literal(self, registry):
        resolved = _resolve(registry, "gui_click", {"x": "", "y": "  "})
        assert resolved["x"] == '""'
        assert resolved["y"] == '""'

    def test_optional_placeholder_is_empty_string_literal(self, registry):
        resolved = _resolve(registry, "gui_click", {"x": "current position"})
        assert resolved["x"] == '""'

    def test_optional_with_value(self, registry):
        assert _resolve(registry, "gui_click", {"x": "15"})["x"] == "15"

    def test_optional_output_left_empty(self, registry):
        assert _resolve(registry, "custom_function", {})["outputVar"] == ""

    def test_all_schema_parameters_resolved(self, registry):
        block_type = registry.require("http_request")
        resolved = resolve_parameters({}, block_type, EMPTY_SCOPE)
        assert list(resolved) == [p.id for p in block_type.parameters]


class TestOverrides:

    def test_custom_function_passthrough(self, registry):
        resolved = _resolve(registry, "custom_function", {"functionName": "compute", "args": 'x, "label"'})
        assert resolved["functionName"] == "compute"
        assert resolved["args"] == 'x, "label"'

    def test_headers_empty_is_none(self, registry):
        assert _resolve(registry, "http_request", {"headers": "  \n"})["headers"] == "None"

    @pytest.mark.parametrize("block_type_id,param_id,value", [
        ("gui_click", "button", "right"),
        ("http_request", "method", "POST"),
        ("http_request", "authType", "None"),
        ("dataframe_filter", "operator", "=="),
        ("browser_session", "browser", "webkit"),
    ])
    def test_fixed_choice_ignores_same_named_variable(self, registry, block_type_id, param_id, value):
        resolved = _resolve(registry, block_type_id, {param_id: value}, Scope([value]))
        assert resolved[param_id] == f'"{value}"'

    def test_write_mode_may_reference_variable(self, registry):
        assert _resolve(registry, "write_file", {"mode": "mode"}, Scope(["mode"]))["mode"] == "mode"

    def test_headers_multiline(self, registry):
        resolved = _resolve(registry, "http_request", {"headers": "A: 1\nB: 2"})
        assert resolved["headers"] == '"""A: 1\nB: 2"""'

    @pytest.mark.parametrize("method", ["POST", "PUT", "PATCH", "post"])
    def test_body_for_body_methods(self, registry, method):
        resolved = _resolve(registry, "http_request", {"method": method, "body": '{"a": 1}'})
        assert resolved["body"] == '"""{"a": 1}"""'

    @pytest.mark.parametrize("method", ["GET", "DELETE"])
    def test_body_ignored_for_other_methods(self, registry, method):
        resolved = _resolve(registry, "http_request", {"method": method, "body": '{"a": 1}'})
        assert resolved["body"] == "None"

    def test_blank_body_is_none(self, registry):
        resolved = _resolve(registry, "http_request", {"method": "POST", "body": "   "})
        assert resolved["body"] == "None"

    def test_extra_override(self, registry):
        resolver = ParameterResolver().with_overrides({
            ("print_message", "message"): lambda raw, ctx: raw.upper(),
        })
        resolved = resolver.resolve({"message": "shout"}, registry.require("print_message"), EMPTY_SCOPE)
        assert resolved["message"] == "SHOUT"

    def test_override_context_fallback(self, registry):
        resolver = ParameterResolver({
            ("print_message", "message"): lambda raw, ctx: ctx.fallback(raw + "!"),
        })
        resolved = resolver.resolve({"message": "hi"}, registry.require("print_message"), EMPTY_SCOPE)
        assert resolved["message"] == '"hi!"'

    def test_failing_override_falls_back(self, registry, caplog):
        def boom(raw, ctx):
            raise RuntimeError("broken override")

        resolver = ParameterResolver().with_overrides({("print_message", "message"): boom})
        with caplog.at_level(logging.WARNING, logger="blockscript.resolver"):
            resolved = resolver.resolve({"message": "hi"}, registry.require("print_message"), EMPTY_SCOPE)
        assert resolved["message"] == '"hi"'
        assert "print_message.message" in caplog.text

    def test_with_overrides_leaves_base_untouched(self, registry):
        base = ParameterResolver()
        base.with_overrides({("print_message", "message"): lambda raw, ctx: "X"})
        assert base.resolve({"message": "a"}, registry.require("print_message"), EMPTY_SCOPE)["message"] == '"a"'


class TestPurity:

    def test_same_inputs_same_output(self, registry):
        params = {"method": "POST", "body": "x", "headers": "A: b"}
        scope = Scope(["x"])
        block_type = registry.require("http_request")
        assert resolve_parameters(params, block_type, scope) == resolve_parameters(params, block_type, scope)

    def test_inputs_not_mutated(self, registry):
        params = {"message": " hi "}
        _resolve(registry, "print_message", params)
        assert params == {"message": " hi "}
