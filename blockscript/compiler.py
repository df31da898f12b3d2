#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
blockscript/compiler.py
=======================

Tree compiler: block instances → lines of Python.

The compiler is a recursive fold over the block tree:

1. Look up each instance's block type (unknown ids are skipped).
2. Resolve its parameters against the scope built so far at this level.
3. Render the template and indent its lines by the nesting depth (the
   continuation lines of multi-line string literals are left as written).
4. Add the block's output symbols to the scope seen by later siblings.
5. For nestable blocks, compile the children one level deeper with a scope
   that also holds the block's local symbols, or emit the placeholder
   statement when there are none.

Scopes are immutable (:class:`~blockscript.scope.Scope`), so whatever a
subtree introduces never leaks to its siblings or parent.  One failing block
becomes a single comment line; nothing escapes :func:`generate`.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Union

from blockscript.config import GeneratorConfig
from blockscript.emitter import indent_lines
from blockscript.model import BlockInstance, BlockType, Binding
from blockscript.registry import BlockRegistry, as_registry
from blockscript.resolver import ParameterResolver
from blockscript.scope import Scope

__all__ = ["TreeCompiler", "compile_blocks", "generate"]

_log = logging.getLogger("blockscript.compiler")

RegistryLike = Union[BlockRegistry, Iterable[BlockType]]


class TreeCompiler:
    """Compiles block trees against one registry and configuration."""

    def __init__(
        self,
        registry: RegistryLike,
        config: Optional[GeneratorConfig] = None,
        resolver: Optional[ParameterResolver] = None,
    ) -> None:
        self.registry = as_registry(registry)
        self.config = config or GeneratorConfig()
        self.resolver = resolver or ParameterResolver()

    def compile_blocks(
        self,
        instances: Sequence[BlockInstance],
        indent_depth: int = 0,
        inherited_scope: Union[Scope, Iterable[str]] = (),
    ) -> List[str]:
        """Lines for one tree level, descendants included, in document order."""
        scope = Scope.of(inherited_scope)
        indent = self.config.indent_unit * indent_depth
        lines: List[str] = []

        for instance in instances or ():
            instance_id = getattr(instance, "instance_id", "?")
            block_type = self.registry.get(getattr(instance, "block_type_id", None))
            if block_type is None:
                _log.debug("Skipping block %s: unknown block type %r",
                           instance_id, getattr(instance, "block_type_id", None))
                continue

            if indent_depth >= self.config.max_depth:
                _log.warning("Block %s exceeds maximum nesting depth %d",
                             instance_id, self.config.max_depth)
                lines.append(
                    f"{indent}# Maximum nesting depth ({self.config.max_depth}) exceeded; "
                    f"block {block_type.name} ({instance_id}) omitted"
                )
                continue

            try:
                resolved = self.resolver.resolve(instance.params, block_type, scope)
                block_lines = indent_lines(block_type.template(resolved), indent)
                outputs = _symbols(block_type, resolved, Binding.OUTPUT)
                if block_type.can_have_children:
                    block_lines.extend(self._compile_body(instance, block_type, resolved, indent_depth + 1,
                                                          scope.extend(outputs)))
            except Exception:
                _log.warning("Error generating code for block %s (%s)",
                             block_type.name, instance_id, exc_info=True)
                lines.append(f"{indent}# Error generating code for block {block_type.name} ({instance_id})")
                continue

            lines.extend(block_lines)
            scope = scope.extend(outputs)

        return lines

    def _compile_body(
        self,
        instance: BlockInstance,
        block_type: BlockType,
        resolved: dict,
        depth: int,
        scope: Scope,
    ) -> List[str]:
        children = instance.children or []
        if not children:
            return [self.config.indent_unit * depth + self.config.placeholder]
        body_scope = scope.extend(_symbols(block_type, resolved, Binding.LOCAL))
        lines = self.compile_blocks(children, depth, body_scope)
        # Children that rendered only comments still leave the suite empty.
        if not any(_is_statement(line) for line in lines):
            lines.append(self.config.indent_unit * depth + self.config.placeholder)
        return lines

    def generate(self, root_instances: Sequence[BlockInstance]) -> str:
        if not root_instances:
            return self.config.empty_message
        lines = list(self.config.header)
        lines.extend(self.compile_blocks(root_instances))
        return "\n".join(lines)


def _is_statement(line: str) -> bool:
    text = line.strip()
    return bool(text) and not text.startswith("#")


def _symbols(block_type: BlockType, resolved: dict, binding: Binding) -> List[str]:
    return [resolved[p.id] for p in block_type.bindings(binding) if resolved.get(p.id)]


def compile_blocks(
    instances: Sequence[BlockInstance],
    registry: RegistryLike,
    indent_depth: int = 0,
    inherited_scope: Union[Scope, Iterable[str]] = (),
    config: Optional[GeneratorConfig] = None,
) -> List[str]:
    """Functional form of :meth:`TreeCompiler.compile_blocks`."""
    return TreeCompiler(registry, config).compile_blocks(instances, indent_depth, inherited_scope)


def generate(
    root_instances: Sequence[BlockInstance],
    registry: RegistryLike,
    config: Optional[GeneratorConfig] = None,
    resolver: Optional[ParameterResolver] = None,
) -> str:
    """
    Render a block tree as Python source.

    Returns the placeholder message for an empty tree, otherwise the header
    followed by the compiled blocks.  Deterministic, and never raises.
    """
    config = config or GeneratorConfig()
    try:
        return TreeCompiler(registry, config, resolver).generate(root_instances)
    except Exception as exc:
        _log.error("Code generation failed: %s", exc, exc_info=True)
        return "\n".join(list(config.header) + [f"# Error generating code: {type(exc).__name__}"])
