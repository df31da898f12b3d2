# blockscript/notation.py
"""
Tree documents.

Block trees are stored either in the editor's JSON canvas shape or in a
compact S-expression notation read with ``sexpdata``::

    (define_variable :variableName count :value 3)
    (loop_range :count count :loopVariable i
      (print_message :message i))

Each form is ``(block_type_id :param value ... child-form ...)``.  Keyword
values are atoms (symbols, strings or numbers) and are stored as strings.
Two keywords are reserved: ``:instanceId`` sets the instance id (otherwise
``block_<n>`` is assigned in document order) and ``:collapsed`` sets the
editor's collapsed flag.
"""

from __future__ import annotations

import itertools
import json
from pathlib import Path
from typing import Any, Iterator, List, Optional, Sequence, Union

try:
    import sexpdata
    from sexpdata import Symbol
except ImportError:  # pragma: no cover
    raise ImportError(
        "The 'sexpdata' package is required for reading tree documents. "
        "Install it with:  pip install sexpdata"
    )

from blockscript.errors import ErrorCodes, NotationError
from blockscript.model import BlockInstance
from blockscript.tree import walk

__all__ = [
    "parse_tree",
    "parse_json_tree",
    "load_tree",
    "load_tree_file",
    "dump_tree",
]

Sexp = Any  # Union[list, Symbol, str, int, float]

_RESERVED_ID = "instanceId"
_RESERVED_COLLAPSED = "collapsed"
_TRUE_WORDS = frozenset(("true", "t", "yes", "1"))


# ═══════════════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════════════

def _sym_name(s: Symbol) -> str:
    value = getattr(s, "value", None)
    return value() if callable(value) else str(s)


def _is_keyword(s: Sexp) -> bool:
    return isinstance(s, Symbol) and _sym_name(s).startswith(":")


def _atom(s: Sexp, context: str) -> str:
    """Coerce a keyword value to its string form."""
    if isinstance(s, Symbol):
        return _sym_name(s)
    if isinstance(s, str):
        return s
    if isinstance(s, (int, float)) and not isinstance(s, bool):
        return str(s)
    raise NotationError(
        f"Value of {context} must be a symbol, string or number, got {type(s).__name__}",
        code=ErrorCodes.INVALID_ATOM,
    )


def _check_unique(tree: Sequence[BlockInstance]) -> None:
    seen = set()
    for instance, _ in walk(tree):
        if instance.instance_id in seen:
            raise NotationError(
                f"Instance id '{instance.instance_id}' is used more than once",
                code=ErrorCodes.DUPLICATE_INSTANCE_ID,
            )
        seen.add(instance.instance_id)


# ═══════════════════════════════════════════════════════════════════════
#  S-expression notation
# ═══════════════════════════════════════════════════════════════════════

def _parse_block(form: Sexp, ids: Iterator[int]) -> BlockInstance:
    if not isinstance(form, list) or not form or not isinstance(form[0], Symbol) or _is_keyword(form[0]):
        raise NotationError(
            f"Expected a block form (block_type_id ...), got {form!r}",
            code=ErrorCodes.EXPECTED_BLOCK_FORM,
        )
    block_type_id = _sym_name(form[0])
    generated_id = f"block_{next(ids)}"
    instance_id: Optional[str] = None
    collapsed = False
    params = {}
    children: List[BlockInstance] = []

    items = iter(form[1:])
    for item in items:
        if isinstance(item, list):
            children.append(_parse_block(item, ids))
            continue
        if not _is_keyword(item):
            raise NotationError(
                f"Unexpected {item!r} in block {block_type_id}",
                code=ErrorCodes.INVALID_ATOM,
                hint="parameters are written as :name value",
            )
        key = _sym_name(item)[1:]
        context = f":{key} of {block_type_id}"
        if not key:
            raise NotationError(f"Empty keyword in block {block_type_id}", code=ErrorCodes.INVALID_ATOM)
        try:
            value = _atom(next(items), context)
        except StopIteration:
            raise NotationError(f"Keyword {context} has no value", code=ErrorCodes.MISSING_KEYWORD_VALUE)

        if key == _RESERVED_ID:
            instance_id = value
        elif key == _RESERVED_COLLAPSED:
            collapsed = value.strip().lower() in _TRUE_WORDS
        else:
            params[key] = value

    return BlockInstance(
        instance_id=instance_id or generated_id,
        block_type_id=block_type_id,
        params=params,
        children=children,
        collapsed=collapsed,
    )


def parse_tree(text: str) -> List[BlockInstance]:
    """Parse a document in the S-expression notation.

    >>> [b.block_type_id for b in parse_tree('(print_message :message "hi")')]
    ['print_message']
    """
    # Keep nil/t/true/false as plain symbols; they are ordinary values here.
    try:
        forms = sexpdata.parse(text, nil=None, true=None, false=None)
    except Exception as e:
        raise NotationError(f"S-expression syntax error: {e}", cause=e)

    ids = itertools.count(1)
    tree = [_parse_block(form, ids) for form in forms]
    _check_unique(tree)
    return tree


def dump_tree(tree: Sequence[BlockInstance]) -> str:
    """Write *tree* in the S-expression notation, one root form per line."""
    return "\n".join(sexpdata.dumps(_to_sexp(instance)) for instance in tree)


def _to_sexp(instance: BlockInstance) -> list:
    form: list = [Symbol(instance.block_type_id), Symbol(":" + _RESERVED_ID), instance.instance_id]
    if instance.collapsed:
        form.extend((Symbol(":" + _RESERVED_COLLAPSED), Symbol("true")))
    for key, value in instance.params.items():
        form.extend((Symbol(":" + key), value))
    form.extend(_to_sexp(child) for child in instance.children)
    return form


# ═══════════════════════════════════════════════════════════════════════
#  JSON canvas shape
# ═══════════════════════════════════════════════════════════════════════

def parse_json_tree(text: str) -> List[BlockInstance]:
    """Parse a JSON list of canvas blocks (or ``{"blocks": [...]}``)."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise NotationError(f"JSON syntax error: {e}", cause=e)
    if isinstance(data, dict) and "blocks" in data:
        data = data["blocks"]
    if not isinstance(data, list):
        raise NotationError(
            f"Expected a list of blocks, got {type(data).__name__}",
            code=ErrorCodes.EXPECTED_BLOCK_FORM,
        )
    tree = [BlockInstance.from_dict(item) for item in data]
    _check_unique(tree)
    return tree


# ═══════════════════════════════════════════════════════════════════════
#  Entry points
# ═══════════════════════════════════════════════════════════════════════

def load_tree(text: str) -> List[BlockInstance]:
    """Parse a document, JSON when it starts with ``[`` or ``{``."""
    if text.lstrip()[:1] in ("[", "{"):
        return parse_json_tree(text)
    return parse_tree(text)


def load_tree_file(path: Union[str, Path]) -> List[BlockInstance]:
    """Read and parse a tree document from *path*."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return parse_json_tree(text)
    return load_tree(text)
