# tests/test_literals.py
"""
Tests for Python literal formatting.
Every produced literal must be valid Python that evaluates back to the input.
"""

import ast

import pytest

from blockscript.literals import (
    boolean_literal,
    is_blank_literal,
    number_literal,
    quote_multiline,
    quote_string,
    string_value,
)


class TestQuoteString:

    def test_plain(self):
        assert quote_string("Hello World") == '"Hello World"'

    def test_escapes_quotes_and_backslashes(self):
        assert quote_string('say "hi" \\o/') == '"say \\"hi\\" \\\\o/"'

    def test_escapes_line_breaks(self):
        assert quote_string("a\nb\r\tc") == '"a\\nb\\r\\tc"'

    def test_escapes_control_characters(self):
        assert quote_string("\x01\x7f") == '"\\x01\\x7f"'

    def test_empty(self):
        assert quote_string("") == '""'

    @pytest.mark.parametrize("value", ['"', "\\", "é ☃", "x\x00y"])
    def test_evaluates_back(self, value):
        assert ast.literal_eval(quote_string(value)) == value


class TestQuoteMultiline:

    def test_keeps_line_breaks(self):
        assert quote_multiline("line1\nline2") == '"""line1\nline2"""'

    def test_empty(self):
        assert ast.literal_eval(quote_multiline("")) == ""

    @pytest.mark.parametrize("value", [
        'a"""b',
        'ends with "',
        'ends with ""',
        '""""""',
        "back\\slash",
        "tab\there\r\n",
        '{\n  "key": "value"\n}',
    ], ids=["triple", "trailing1", "trailing2", "six", "backslash", "controls", "json"])
    def test_evaluates_back(self, value):
        literal = quote_multiline(value)
        assert literal.startswith('"""') and literal.endswith('"""')
        assert ast.literal_eval(literal) == value


class TestNumberLiteral:

    @pytest.mark.parametrize("raw,expected", [
        ("42", "42"),
        ("-3", "-3"),
        ("3.14", "3.14"),
        (".5", ".5"),
        ("1e3", "1e3"),
        ("  7 ", "7"),
        ("007", "7"),
        ("-05", "-5"),
        ("00", "0"),
    ])
    def test_numeric(self, raw, expected):
        assert number_literal(raw) == expected

    def test_large_integer_is_exact(self):
        big = "1" + "0" * 400
        assert number_literal(big) == big

    @pytest.mark.parametrize("raw", ["", "abc", "1,000", "0x10", "nan", "inf", "1.2.3", "5px", "1e400", "-1e999"])
    def test_not_numeric(self, raw):
        assert number_literal(raw) is None


class TestBooleanLiteral:

    @pytest.mark.parametrize("raw", ["true", "True", " YES ", "on", "1"])
    def test_true(self, raw):
        assert boolean_literal(raw) == "True"

    @pytest.mark.parametrize("raw", ["false", "No", "off", "0"])
    def test_false(self, raw):
        assert boolean_literal(raw) == "False"

    def test_unrecognised(self):
        assert boolean_literal("maybe") is None


class TestStringValue:

    def test_inverts_quoting(self):
        assert string_value(quote_string('a "b"')) == 'a "b"'
        assert string_value(quote_multiline("x\ny")) == "x\ny"

    @pytest.mark.parametrize("text", ["name", "42", "None", "", "f(x)", "'single'"])
    def test_not_a_double_quoted_literal(self, text):
        assert string_value(text) is None

    def test_blank_literals(self):
        assert is_blank_literal("None")
        assert is_blank_literal('""')
        assert is_blank_literal('"   "')
        assert not is_blank_literal('"x"')
        assert not is_blank_literal("x")
