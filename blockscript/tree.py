# blockscript/tree.py
"""
Editing operations on block trees.

All operations are pure: they return a new list and leave their input
untouched.  Only the path from the root to the changed instance is copied;
untouched subtrees are shared.  Requests that cannot be honoured (a missing
target, a parent that does not accept children) leave the tree unchanged,
which is the behaviour of the canvas drop handlers these operations back.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from blockscript.model import BlockInstance, BlockType, ParameterDefinition
from blockscript.registry import BlockRegistry

__all__ = [
    "new_instance",
    "walk",
    "find",
    "insert_child",
    "insert_before",
    "remove",
    "move",
    "set_param",
    "toggle_collapsed",
    "visible_parameters",
]

_log = logging.getLogger("blockscript.tree")

Tree = List[BlockInstance]


def new_instance(block_type: BlockType, instance_id: Optional[str] = None) -> BlockInstance:
    """Fresh instance of *block_type* holding the schema defaults."""
    return BlockInstance(
        instance_id=instance_id or f"block_{uuid.uuid4().hex}",
        block_type_id=block_type.id,
        params=block_type.default_params(),
        children=[],
    )


def walk(tree: Sequence[BlockInstance], depth: int = 0) -> Iterator[Tuple[BlockInstance, int]]:
    """``(instance, depth)`` pairs in document order."""
    for instance in tree:
        yield instance, depth
        yield from walk(instance.children, depth + 1)


def find(tree: Sequence[BlockInstance], instance_id: str) -> Optional[BlockInstance]:
    for instance, _ in walk(tree):
        if instance.instance_id == instance_id:
            return instance
    return None


def _update(
    tree: Sequence[BlockInstance],
    instance_id: str,
    change: Callable[[BlockInstance], BlockInstance],
) -> Tuple[Tree, bool]:
    """Apply *change* to the instance with *instance_id*; report whether it was found."""
    result: Tree = []
    found = False
    for instance in tree:
        if found:
            result.append(instance)
        elif instance.instance_id == instance_id:
            result.append(change(instance))
            found = True
        else:
            children, found = _update(instance.children, instance_id, change)
            result.append(replace(instance, children=children) if found else instance)
    return result, found


def insert_child(
    tree: Sequence[BlockInstance],
    parent_id: str,
    block: BlockInstance,
    registry: BlockRegistry,
) -> Tree:
    """Append *block* to the children of *parent_id* and expand the parent."""
    parent = find(tree, parent_id)
    if parent is None:
        _log.debug("Drop target %s not found", parent_id)
        return list(tree)
    parent_type = registry.get(parent.block_type_id)
    if parent_type is None or not parent_type.can_have_children:
        _log.debug("Block %s does not accept children", parent_id)
        return list(tree)

    def add(instance: BlockInstance) -> BlockInstance:
        return replace(instance, children=list(instance.children) + [block], collapsed=False)

    result, _ = _update(tree, parent_id, add)
    return result


def insert_before(
    tree: Sequence[BlockInstance],
    target_id: str,
    block: BlockInstance,
) -> Tuple[Tree, bool]:
    """Insert *block* as the preceding sibling of *target_id*."""
    result: Tree = []
    inserted = False
    for instance in tree:
        if inserted:
            result.append(instance)
        elif instance.instance_id == target_id:
            result.extend((block, instance))
            inserted = True
        else:
            children, inserted = insert_before(instance.children, target_id, block)
            result.append(replace(instance, children=children) if inserted else instance)
    return result, inserted


def remove(tree: Sequence[BlockInstance], instance_id: str) -> Tuple[Tree, Optional[BlockInstance]]:
    """Remove *instance_id* with its subtree; return the removed instance."""
    result: Tree = []
    removed: Optional[BlockInstance] = None
    for instance in tree:
        if removed is not None:
            result.append(instance)
        elif instance.instance_id == instance_id:
            removed = instance
        else:
            children, removed = remove(instance.children, instance_id)
            result.append(replace(instance, children=children) if removed is not None else instance)
    return result, removed


def move(
    tree: Sequence[BlockInstance],
    instance_id: str,
    registry: BlockRegistry,
    parent_id: Optional[str] = None,
    before_id: Optional[str] = None,
) -> Tree:
    """
    Relocate *instance_id*: into *parent_id*, before *before_id*, or to the
    end of the root list when neither is given.

    Moving a block into its own subtree is refused.  When *before_id* cannot
    be found after detaching, the block is appended at the root.
    """
    block = find(tree, instance_id)
    if block is None:
        return list(tree)
    for target in (parent_id, before_id):
        if target is not None and find([block], target) is not None:
            _log.debug("Refusing to move %s into its own subtree", instance_id)
            return list(tree)

    if parent_id is not None:
        parent = find(tree, parent_id)
        parent_type = registry.get(parent.block_type_id) if parent is not None else None
        if parent_type is None or not parent_type.can_have_children:
            return list(tree)
        detached, _ = remove(tree, instance_id)
        return insert_child(detached, parent_id, block, registry)

    detached, _ = remove(tree, instance_id)
    if before_id is not None:
        result, inserted = insert_before(detached, before_id, block)
        if inserted:
            return result
        _log.debug("Insert target %s not found, appending %s at root", before_id, instance_id)
    return detached + [block]


def set_param(tree: Sequence[BlockInstance], instance_id: str, param_id: str, value: str) -> Tree:
    def change(instance: BlockInstance) -> BlockInstance:
        params = dict(instance.params)
        params[param_id] = value
        return replace(instance, params=params)

    result, _ = _update(tree, instance_id, change)
    return result


def toggle_collapsed(tree: Sequence[BlockInstance], instance_id: str) -> Tree:
    result, _ = _update(tree, instance_id, lambda inst: replace(inst, collapsed=not inst.collapsed))
    return result


def visible_parameters(instance: BlockInstance, block_type: BlockType) -> List[ParameterDefinition]:
    """Parameters whose visibility condition holds for the instance's values."""
    raw = block_type.default_params()
    raw.update(instance.params)
    return [p for p in block_type.parameters if p.is_visible(raw)]
