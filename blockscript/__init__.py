"""blockscript: Python code generation from visual block trees.

A visual script is a tree of configured blocks.  This package turns such a
tree into a runnable Python script.

Submodules
----------
model
    ``BlockType`` / ``ParameterDefinition`` schema objects and the
    ``BlockInstance`` tree node.

registry
    ``BlockRegistry``, the read-only catalog lookup.

resolver
    ``ParameterResolver``: raw parameter strings → Python literals or
    variable references, with a per-block override table.

compiler
    ``TreeCompiler`` and the ``generate`` entry point.

catalog
    The standard block catalog (output, file IO, loops, variables, HTTP,
    GUI automation, data frames, browser automation).

tree
    Pure editing operations on block trees (insert, move, remove, ...).

notation
    Tree documents: S-expression notation (via ``sexpdata``) and the
    editor's JSON canvas shape.

errors
    Exception hierarchy with structured ``BSC-NNNN`` error codes.

main
    CLI entry-point with subcommands: ``generate``, ``blocks``, ``tree``.

Usage
-----
Command-line::

    python -m blockscript generate script.blocks -o script.py
    python -m blockscript blocks --list

Programmatic::

    from blockscript import default_registry, generate, load_tree

    tree = load_tree('(loop_range :count 3 :loopVariable i (print_message :message i))')
    print(generate(tree, default_registry()))

"""

from __future__ import annotations

__version__: str = "0.1.0"

from blockscript.catalog import STANDARD_BLOCKS, default_registry
from blockscript.compiler import TreeCompiler, compile_blocks, generate
from blockscript.config import GeneratorConfig
from blockscript.errors import BlockScriptError
from blockscript.model import (
    Binding,
    BlockInstance,
    BlockType,
    Option,
    ParameterDefinition,
    ValueKind,
    VisibilityCondition,
)
from blockscript.notation import dump_tree, load_tree, load_tree_file
from blockscript.registry import BlockRegistry
from blockscript.resolver import ParameterResolver, resolve_parameters
from blockscript.scope import Scope

__all__: list[str] = [
    "__version__",
    "Binding",
    "BlockInstance",
    "BlockRegistry",
    "BlockScriptError",
    "BlockType",
    "GeneratorConfig",
    "Option",
    "ParameterDefinition",
    "ParameterResolver",
    "STANDARD_BLOCKS",
    "Scope",
    "TreeCompiler",
    "ValueKind",
    "VisibilityCondition",
    "compile_blocks",
    "default_registry",
    "dump_tree",
    "generate",
    "load_tree",
    "load_tree_file",
    "resolve_parameters",
]
