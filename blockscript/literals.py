# blockscript/literals.py
"""
Python literal formatting.

Every function here is total: any input string maps to a syntactically valid
Python token.  :func:`string_value` inverts the quoting so templates can branch
on the unquoted value of a select/string parameter.
"""

from __future__ import annotations

import ast
import math
import re
from typing import Optional

__all__ = [
    "NONE_LITERAL",
    "EMPTY_STRING_LITERAL",
    "quote_string",
    "quote_multiline",
    "number_literal",
    "boolean_literal",
    "string_value",
    "is_blank_literal",
]

NONE_LITERAL = "None"
EMPTY_STRING_LITERAL = '""'

_DECIMAL = re.compile(r"^[+-]?(?:(?P<int>\d+)|\d+\.\d*|\.\d+|\d+(?:\.\d*)?[eE][+-]?\d+|\.\d+[eE][+-]?\d+)$")

_SIMPLE_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

_TRUE_WORDS = frozenset(("true", "yes", "on", "1"))
_FALSE_WORDS = frozenset(("false", "no", "off", "0"))


def _escape_char(ch: str) -> str:
    if ch in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[ch]
    if ord(ch) < 0x20 or ord(ch) == 0x7F:
        return f"\\x{ord(ch):02x}"
    return ch


def quote_string(value: str) -> str:
    """Double-quoted single-line literal for *value*."""
    return '"' + "".join(_escape_char(ch) for ch in value) + '"'


def quote_multiline(value: str) -> str:
    """
    Triple-quoted literal for *value*, keeping its line breaks and tabs.

    Every third quote of a run is escaped so ``\"\"\"`` never appears in the
    body, and quotes at the very end are escaped so they cannot merge with the
    closing delimiter.
    """
    out = []
    run = 0
    for ch in value:
        if ch == '"':
            if run == 2:
                out.append('\\"')
                run = 0
            else:
                out.append('"')
                run += 1
            continue
        run = 0
        if ch == "\\":
            out.append("\\\\")
        elif ch in "\n\t":
            out.append(ch)
        else:
            out.append(_escape_char(ch))
    if run:
        del out[-run:]
        out.extend('\\"' for _ in range(run))
    return '"""' + "".join(out) + '"""'


def number_literal(value: str) -> Optional[str]:
    """
    Numeric literal for *value*, or ``None`` if it is not a finite number.

    Pure integers with redundant leading zeros are normalised since Python
    rejects ``05``.
    """
    text = value.strip()
    match = _DECIMAL.match(text)
    if match is None:
        return None
    digits = match.group("int")
    if digits is None and not math.isfinite(float(text)):
        return None
    if digits is not None and len(digits) > 1 and digits.startswith("0"):
        sign = text[0] if text[0] in "+-" else ""
        return sign + (digits.lstrip("0") or "0")
    return text


def boolean_literal(value: str) -> Optional[str]:
    """``True``/``False`` for common spellings, ``None`` otherwise."""
    word = value.strip().lower()
    if word in _TRUE_WORDS:
        return "True"
    if word in _FALSE_WORDS:
        return "False"
    return None


def string_value(text: str) -> Optional[str]:
    """
    Value of a string literal produced by this module.

    Returns ``None`` when *text* is not a plain string literal (a symbol
    reference, a number, ``None``, a passthrough expression...).
    """
    if not text or text[0] != '"':
        return None
    try:
        value = ast.literal_eval(text)
    except (ValueError, SyntaxError):
        return None
    return value if isinstance(value, str) else None


def is_blank_literal(text: str) -> bool:
    """True for ``None`` and for string literals holding only whitespace."""
    if text == NONE_LITERAL:
        return True
    value = string_value(text)
    return value is not None and not value.strip()
