# blockscript/registry.py
"""Read-only catalog of block types."""

from __future__ import annotations

import difflib
import logging
from typing import Dict, Iterable, Iterator, List, Optional, Union

from blockscript.errors import DuplicateBlockTypeError, UnknownBlockTypeError
from blockscript.model import BlockType

__all__ = ["BlockRegistry", "as_registry"]

_log = logging.getLogger("blockscript.registry")


class BlockRegistry:
    """
    Lookup table of :class:`BlockType` by id, in registration order.

    The registry is never modified after construction, so one instance can be
    shared by any number of concurrent generation calls.
    """

    def __init__(self, block_types: Iterable[BlockType] = (), *, strict: bool = True) -> None:
        types: Dict[str, BlockType] = {}
        for block_type in block_types:
            if block_type.id in types:
                if strict:
                    raise DuplicateBlockTypeError(block_type.id)
                _log.warning("Ignoring duplicate block type %r", block_type.id)
                continue
            types[block_type.id] = block_type
        self._types = types

    def get(self, block_type_id: str) -> Optional[BlockType]:
        return self._types.get(block_type_id)

    def require(self, block_type_id: str) -> BlockType:
        """Like :meth:`get` but raise :class:`UnknownBlockTypeError`."""
        block_type = self._types.get(block_type_id)
        if block_type is None:
            suggestions = difflib.get_close_matches(block_type_id, list(self._types), n=1)
            raise UnknownBlockTypeError(block_type_id, suggestions=suggestions)
        return block_type

    def categories(self) -> List[str]:
        """Category names in first-seen order."""
        seen: Dict[str, None] = {}
        for block_type in self._types.values():
            seen.setdefault(block_type.category, None)
        return list(seen)

    def in_category(self, category: str) -> List[BlockType]:
        return [bt for bt in self._types.values() if bt.category == category]

    def __contains__(self, block_type_id: object) -> bool:
        return block_type_id in self._types

    def __iter__(self) -> Iterator[BlockType]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        return f"BlockRegistry({len(self._types)} block types)"


def as_registry(value: Union[BlockRegistry, Iterable[BlockType], None]) -> BlockRegistry:
    """
    Wrap an iterable of block types.

    Duplicates keep the first definition and entries that are not
    :class:`BlockType` are dropped.
    """
    if isinstance(value, BlockRegistry):
        return value
    block_types = []
    for entry in value or ():
        if isinstance(entry, BlockType):
            block_types.append(entry)
        else:
            _log.warning("Ignoring registry entry of type %s", type(entry).__name__)
    return BlockRegistry(block_types, strict=False)
