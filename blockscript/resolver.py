# blockscript/resolver.py
"""
Parameter resolution.

Turns one block instance's raw parameter strings into the texts substituted
into its template.  Per parameter, in schema order:

1. Raw value: the instance's value, else the schema default.  Trimmed unless
   the parameter is multi-line.
2. Symbol-defining parameters are returned verbatim.
3. An override registered for ``(block_type_id, param_id)`` decides.
4. Optional parameters left empty become ``""``.
5. Kind-based fallback: a value naming an in-scope symbol is returned
   verbatim, anything else becomes a literal of the parameter's kind.

Resolution is a pure function of (raw params, block type, scope) and never
raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from blockscript.literals import (
    EMPTY_STRING_LITERAL,
    NONE_LITERAL,
    boolean_literal,
    number_literal,
    quote_multiline,
    quote_string,
)
from blockscript.model import BlockType, ParameterDefinition, ValueKind
from blockscript.scope import Scope

__all__ = [
    "ResolutionContext",
    "Override",
    "ParameterResolver",
    "STANDARD_OVERRIDES",
    "BODY_METHODS",
    "resolve_value",
    "resolve_parameters",
]

_log = logging.getLogger("blockscript.resolver")

BODY_METHODS = frozenset(("POST", "PUT", "PATCH"))


# ═══════════════════════════════════════════════════════════════════════════
# KIND-BASED FALLBACK
# ═══════════════════════════════════════════════════════════════════════════

def _number(raw: str) -> str:
    literal = number_literal(raw)
    if literal is None:
        _log.debug("Non-numeric value %r in numeric parameter, quoting it", raw)
        return quote_string(raw)
    return literal


def _boolean(raw: str) -> str:
    literal = boolean_literal(raw)
    return literal if literal is not None else quote_string(raw)


_KIND_HANDLERS: Dict[ValueKind, Callable[[str], str]] = {
    ValueKind.STRING: quote_string,
    ValueKind.PASSWORD: quote_string,
    ValueKind.SELECT: quote_string,
    ValueKind.NUMBER: _number,
    ValueKind.BOOLEAN: _boolean,
    ValueKind.TEXTAREA: quote_multiline,
}


def resolve_value(raw: str, kind: ValueKind, scope: Scope) -> str:
    """Symbol reference if *raw* names an in-scope symbol, else a literal."""
    name = raw.strip()
    if name and name in scope:
        return name
    return _KIND_HANDLERS[kind](raw)


# ═══════════════════════════════════════════════════════════════════════════
# OVERRIDES
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ResolutionContext:
    """What an override may look at while resolving one parameter."""

    block_type: BlockType
    param: ParameterDefinition
    raw_params: Mapping[str, str]
    scope: Scope

    def raw(self, param_id: str) -> str:
        """Effective raw value of a sibling parameter."""
        return self.raw_params.get(param_id, "")

    def fallback(self, raw: str) -> str:
        """The kind-based resolution the parameter would get without override."""
        return resolve_value(raw, self.param.kind, self.scope)


Override = Callable[[str, ResolutionContext], str]


def passthrough(raw: str, ctx: ResolutionContext) -> str:
    """User-composed expression, inserted as typed."""
    return raw


def fixed_choice(raw: str, ctx: ResolutionContext) -> str:
    """A choice the template spells into the code; never a variable reference."""
    return quote_string(raw)


def request_body(raw: str, ctx: ResolutionContext) -> str:
    if ctx.raw("method").upper() not in BODY_METHODS or not raw.strip():
        return NONE_LITERAL
    return ctx.fallback(raw)


def multiline_or_none(raw: str, ctx: ResolutionContext) -> str:
    if not raw.strip():
        return NONE_LITERAL
    return ctx.fallback(raw)


STANDARD_OVERRIDES: Mapping[Tuple[str, str], Override] = {
    ("custom_function", "functionName"): passthrough,
    ("custom_function", "args"): passthrough,
    ("http_request", "headers"): multiline_or_none,
    ("http_request", "body"): request_body,
    ("http_request", "method"): fixed_choice,
    ("http_request", "authType"): fixed_choice,
    ("gui_click", "button"): fixed_choice,
    ("dataframe_filter", "operator"): fixed_choice,
    ("browser_session", "browser"): fixed_choice,
}


# ═══════════════════════════════════════════════════════════════════════════
# RESOLVER
# ═══════════════════════════════════════════════════════════════════════════

def _effective_raw(params: Mapping[str, Any], param: ParameterDefinition) -> str:
    value = params.get(param.id)
    if value is None:
        value = param.default
    if not isinstance(value, str):
        value = str(value)
    if not param.kind.is_multiline:
        value = value.strip()
    return value


class ParameterResolver:
    """
    Resolves block parameters, consulting an override table before the
    kind-based rules.
    """

    def __init__(self, overrides: Optional[Mapping[Tuple[str, str], Override]] = None) -> None:
        self._overrides: Dict[Tuple[str, str], Override] = dict(
            STANDARD_OVERRIDES if overrides is None else overrides
        )

    def with_overrides(self, extra: Mapping[Tuple[str, str], Override]) -> "ParameterResolver":
        """New resolver with *extra* entries layered over this one's table."""
        merged = dict(self._overrides)
        merged.update(extra)
        return ParameterResolver(merged)

    def resolve(
        self,
        params: Optional[Mapping[str, Any]],
        block_type: BlockType,
        scope: Scope,
    ) -> Dict[str, str]:
        if not isinstance(params, Mapping):
            params = {}
        raw_params = {p.id: _effective_raw(params, p) for p in block_type.parameters}

        resolved: Dict[str, str] = {}
        for param in block_type.parameters:
            resolved[param.id] = self._resolve_one(raw_params[param.id], param, block_type, raw_params, scope)
        return resolved

    def _resolve_one(
        self,
        raw: str,
        param: ParameterDefinition,
        block_type: BlockType,
        raw_params: Mapping[str, str],
        scope: Scope,
    ) -> str:
        if param.defines_symbol:
            return raw.strip()

        override = self._overrides.get((block_type.id, param.id))
        if override is not None:
            ctx = ResolutionContext(block_type, param, raw_params, scope)
            try:
                return override(raw, ctx)
            except Exception:
                _log.warning(
                    "Override for %s.%s failed, using default resolution",
                    block_type.id, param.id, exc_info=True,
                )

        if param.optional and (not raw.strip() or (param.placeholder and raw.strip() == param.placeholder)):
            return EMPTY_STRING_LITERAL

        return resolve_value(raw, param.kind, scope)


_DEFAULT_RESOLVER = ParameterResolver()


def resolve_parameters(
    params: Optional[Mapping[str, Any]],
    block_type: BlockType,
    scope: Scope,
) -> Dict[str, str]:
    """Resolve with the standard override table."""
    return _DEFAULT_RESOLVER.resolve(params, block_type, scope)
