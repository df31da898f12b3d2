#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
blockscript/emitter.py
======================

Line emission with indentation management.

Templates that produce more than one line build their text with a
:class:`CodeEmitter` instead of concatenating strings, so nested statements
(``for``/``if``/``try`` bodies inside a single block) are indented the same
way the compiler indents nested blocks.
"""

from __future__ import annotations

import io
import tokenize
from typing import Any, List, Set

__all__ = ["CodeEmitter", "INDENT", "indent_lines"]

INDENT = "    "


def _string_continuations(code: str) -> Set[int]:
    """Indexes of lines that continue a string literal opened on an earlier line."""
    rows: Set[int] = set()
    try:
        for tok in tokenize.generate_tokens(io.StringIO(code).readline):
            if tok.type == tokenize.STRING and tok.end[0] > tok.start[0]:
                rows.update(range(tok.start[0], tok.end[0]))
    except (tokenize.TokenError, SyntaxError):
        # Not a complete token stream; indent every line.
        return set()
    return rows


def indent_lines(code: str, prefix: str) -> List[str]:
    """
    Split *code* into lines and prefix each with *prefix*.

    Empty lines and the continuation lines of multi-line string literals are
    left alone, so indenting never changes the value of a literal.
    """
    lines = code.split("\n")
    if not prefix:
        return lines
    keep = _string_continuations(code) if len(lines) > 1 else set()
    return [line if not line or i in keep else prefix + line for i, line in enumerate(lines)]


class CodeEmitter:
    """Collects lines of Python, tracking the current indentation level.

    Provides:
    - ``emit`` / ``emit_comment``
    - ``block(header)`` context manager for indented suites
    - ``requires(package, import_line)`` for dependency notices
    """

    def __init__(self, indent_str: str = INDENT) -> None:
        self._lines: List[str] = []
        self._indent_str = indent_str
        self._indent_level = 0

    def emit(self, code: str) -> None:
        """Emit one or more lines at the current indentation."""
        prefix = self._indent_str * self._indent_level
        self._lines.extend(indent_lines(code, prefix))

    def emit_comment(self, text: str) -> None:
        """Emit a comment; multi-line text becomes several comment lines."""
        for line in text.split("\n"):
            self.emit(f"# {line}")

    def requires(self, package: str, import_line: str) -> None:
        """Dependency notice followed by the import it is for."""
        self.emit(f"# Requires '{package}': pip install {package}")
        self.emit(import_line)

    def indent(self) -> None:
        """Increase indentation level."""
        self._indent_level += 1

    def dedent(self) -> None:
        """Decrease indentation level."""
        self._indent_level = max(0, self._indent_level - 1)

    def block(self, header: str) -> "CodeEmitter._BlockContext":
        """Context manager for indented blocks."""
        return self._BlockContext(self, header)

    class _BlockContext:
        """Context manager for code blocks."""

        def __init__(self, emitter: "CodeEmitter", header: str) -> None:
            self._emitter = emitter
            self._header = header

        def __enter__(self) -> "CodeEmitter":
            self._emitter.emit(self._header)
            self._emitter.indent()
            return self._emitter

        def __exit__(self, *args: Any) -> None:
            self._emitter.dedent()

    def get_code(self) -> str:
        """Get the emitted text, without a trailing newline."""
        return "\n".join(self._lines)
