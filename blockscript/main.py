#!/usr/bin/env python3
"""blockscript/main.py: command-line interface.

Usage examples
--------------
    # Generate Python from a tree document (stdout)
    python -m blockscript generate script.blocks

    # Same, written to a file with 2-space indentation
    python -m blockscript generate script.json -o script.py --indent 2

    # List the block catalog, or describe one block type
    python -m blockscript blocks --list
    python -m blockscript blocks --describe http_request

    # Print an outline of a tree document
    python -m blockscript tree script.blocks

Exit codes
----------
    0   Success.
    1   The tree document or a block reference is invalid.
    2   Infrastructure failure (missing file, bad arguments, etc.).
"""

from __future__ import annotations

import argparse
import logging
import sys
import textwrap
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from blockscript import __version__
from blockscript.catalog import default_registry
from blockscript.compiler import generate
from blockscript.config import GeneratorConfig
from blockscript.errors import BlockScriptError
from blockscript.model import BlockInstance, BlockType, Option
from blockscript.notation import load_tree, load_tree_file
from blockscript.registry import BlockRegistry
from blockscript.tree import visible_parameters, walk

_log = logging.getLogger("blockscript")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INFRA: int = 2


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the ``blockscript`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger("blockscript")
    for old in list(root.handlers):
        root.removeHandler(old)
    root.setLevel(level)
    root.addHandler(handler)


def _open_output(dest: Optional[str]) -> TextIO:
    """Return a writable text stream.

    *dest* ``None`` or ``"-"`` → ``sys.stdout``; otherwise open the path
    for writing (creating parent directories as needed).
    """
    if dest is None or dest == "-":
        return sys.stdout
    p = Path(dest).expanduser().resolve()
    p.parent.mkdir(parents=True, exist_ok=True)
    return open(p, "w", encoding="utf-8")


def _read_tree(source: str) -> List[BlockInstance]:
    """Load a tree document; ``"-"`` reads standard input."""
    if source == "-":
        return load_tree(sys.stdin.read())
    return load_tree_file(Path(source).expanduser())


def _write(dest: Optional[str], text: str) -> None:
    out = _open_output(dest)
    try:
        out.write(text if text.endswith("\n") else text + "\n")
    finally:
        if out is not sys.stdout:
            out.close()


# ===========================================================================
# Sub-command implementations
# ===========================================================================

# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------

def cmd_generate(args: argparse.Namespace) -> int:
    """Compile a tree document to Python source."""
    overrides = {}
    if args.max_depth is not None:
        overrides["max_depth"] = args.max_depth
    config = GeneratorConfig.with_indent_width(args.indent, **overrides)

    problems = config.validate()
    if problems:
        for problem in problems:
            _log.error("Invalid option: %s", problem)
        return EXIT_INFRA

    try:
        tree = _read_tree(args.tree)
    except BlockScriptError as exc:
        _log.error("Cannot read %s: %s", args.tree, exc)
        return EXIT_ERROR
    except OSError as exc:
        _log.error("Cannot read %s: %s", args.tree, exc)
        return EXIT_INFRA

    registry = default_registry()
    unknown = sorted({inst.block_type_id for inst, _ in walk(tree) if inst.block_type_id not in registry})
    for block_type_id in unknown:
        _log.warning("Unknown block type %r will be skipped", block_type_id)

    _log.info("Generating code for %d block(s)", sum(1 for _ in walk(tree)))
    code = generate(tree, registry, config)

    try:
        _write(args.output, code)
    except OSError as exc:
        _log.error("Cannot write %s: %s", args.output, exc)
        return EXIT_INFRA
    if args.output not in (None, "-"):
        _log.info("Wrote generated code to %s", args.output)
    return EXIT_OK


# ---------------------------------------------------------------------------
# blocks (list / inspect the catalog)
# ---------------------------------------------------------------------------

def _option_text(option: Option) -> str:
    if option.display != option.value:
        return f"{option.value} ({option.display})"
    return option.value


def _describe(block_type: BlockType) -> str:
    lines = [f"{block_type.id}: {block_type.name} [{block_type.category}]"]
    if block_type.description:
        lines.append(f"  {block_type.description}")
    if block_type.can_have_children:
        lines.append("  Accepts nested blocks.")
    lines.append("  Parameters:")
    for param in block_type.parameters:
        detail = [param.kind.value]
        if param.default:
            detail.append(f"default {param.default!r}")
        if param.options:
            detail.append("one of " + ", ".join(_option_text(o) for o in param.options))
        if param.binding.defines_symbol:
            detail.append(f"defines {param.binding.value} variable")
        if param.optional:
            detail.append("optional")
        if param.condition is not None:
            detail.append(f"when {param.condition.param_id} is " + "/".join(sorted(param.condition.values)))
        lines.append(f"    {param.id} ({param.name}): " + "; ".join(detail))
    return "\n".join(lines)


def cmd_blocks(args: argparse.Namespace) -> int:
    """List or inspect the block catalog."""
    registry = default_registry()

    if args.describe:
        try:
            block_type = registry.require(args.describe)
        except BlockScriptError as exc:
            _log.error("%s", exc)
            return EXIT_ERROR
        _write(args.output, _describe(block_type))
        return EXIT_OK

    categories = [args.category] if args.category else registry.categories()
    if args.category and args.category not in registry.categories():
        _log.error("Unknown category %r (available: %s)", args.category, ", ".join(registry.categories()))
        return EXIT_ERROR

    lines = []
    for category in categories:
        lines.append(f"{category}:")
        for block_type in registry.in_category(category):
            lines.append(f"  {block_type.id:<24} {block_type.name}")
    count = sum(len(registry.in_category(c)) for c in categories)
    lines.append(f"\n{count} block type(s) available.")
    _write(args.output, "\n".join(lines))
    return EXIT_OK


# ---------------------------------------------------------------------------
# tree (outline of a document)
# ---------------------------------------------------------------------------

def _outline(tree: Sequence[BlockInstance], registry: BlockRegistry) -> str:
    lines = []
    for instance, depth in walk(tree):
        pad = "  " * depth
        block_type = registry.get(instance.block_type_id)
        if block_type is None:
            lines.append(f"{pad}{instance.block_type_id} ({instance.instance_id}) [unknown block type]")
            continue
        flag = " [collapsed]" if instance.collapsed else ""
        lines.append(f"{pad}{block_type.name} ({instance.instance_id}){flag}")
        for param in visible_parameters(instance, block_type):
            value = instance.params.get(param.id, param.default)
            lines.append(f"{pad}  {param.id} = {value!r}")
    return "\n".join(lines) if lines else "(empty tree)"


def cmd_tree(args: argparse.Namespace) -> int:
    """Print an outline of a tree document."""
    try:
        tree = _read_tree(args.tree)
    except BlockScriptError as exc:
        _log.error("Cannot read %s: %s", args.tree, exc)
        return EXIT_ERROR
    except OSError as exc:
        _log.error("Cannot read %s: %s", args.tree, exc)
        return EXIT_INFRA

    _write(args.output, _outline(tree, default_registry()))
    return EXIT_OK


# ===========================================================================
# Argument parser
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    """Construct the full CLI argument parser with subcommands."""

    parser = argparse.ArgumentParser(
        prog="blockscript",
        description="Generate Python scripts from visual block trees.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              blockscript generate script.blocks -o script.py
              blockscript blocks --category Browser
              blockscript tree script.json
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v info, -vv debug).",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    def _add_output_arg(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "-o", "--output",
            default=None,
            metavar="FILE",
            help='Output file ("-" or omit for stdout).',
        )

    # --- generate ----------------------------------------------------------
    p_generate = subparsers.add_parser(
        "generate",
        aliases=["gen"],
        help="Generate Python code from a tree document.",
        description=(
            "Read a tree document (S-expression notation or JSON canvas "
            "blocks) and write the generated Python script."
        ),
    )
    p_generate.add_argument("tree", metavar="TREE", help='Tree document ("-" for stdin).')
    _add_output_arg(p_generate)
    g = p_generate.add_argument_group("generation tuning")
    g.add_argument(
        "--indent",
        type=int,
        default=4,
        metavar="N",
        help="Spaces per indentation level (default: 4).",
    )
    g.add_argument(
        "--max-depth",
        type=int,
        default=None,
        metavar="N",
        help="Maximum block nesting depth (default: from GeneratorConfig).",
    )
    p_generate.set_defaults(func=cmd_generate)

    # --- blocks ------------------------------------------------------------
    p_blocks = subparsers.add_parser(
        "blocks",
        help="List or inspect the available block types.",
        description="Show the block catalog, optionally one category or one block type.",
    )
    p_blocks.add_argument(
        "-l", "--list",
        action="store_true",
        help="List all block types (the default).",
    )
    p_blocks.add_argument(
        "--category",
        metavar="NAME",
        default=None,
        help="Only list block types of this category.",
    )
    p_blocks.add_argument(
        "--describe",
        metavar="BLOCK",
        default=None,
        help="Show the parameters of one block type.",
    )
    _add_output_arg(p_blocks)
    p_blocks.set_defaults(func=cmd_blocks)

    # --- tree --------------------------------------------------------------
    p_tree = subparsers.add_parser(
        "tree",
        help="Print an outline of a tree document.",
        description="Show each block of a tree document with its visible parameters.",
    )
    p_tree.add_argument("tree", metavar="TREE", help='Tree document ("-" for stdin).')
    _add_output_arg(p_tree)
    p_tree.set_defaults(func=cmd_tree)

    return parser


# ===========================================================================
# Main entry point
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the blockscript CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring for semantics).
    """
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_INFRA

    _configure_logging(args.verbose)

    # No subcommand given → print help.
    if not hasattr(args, "func"):
        parser.print_help(sys.stderr)
        return EXIT_INFRA

    try:
        return args.func(args)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130  # Standard UNIX convention for SIGINT
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_INFRA
    except Exception as exc:
        _log.error("Unhandled exception: %s", exc, exc_info=True)
        return EXIT_INFRA


# ---------------------------------------------------------------------------
# Module execution support
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    raise SystemExit(main())
