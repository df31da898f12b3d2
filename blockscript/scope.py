# blockscript/scope.py
"""Immutable set of symbol names defined at a point of the traversal."""

from __future__ import annotations

from typing import FrozenSet, Iterable, Iterator

__all__ = ["Scope", "EMPTY_SCOPE"]


class Scope:
    """
    Symbol names considered defined.

    Values are immutable: :meth:`extend` returns a new scope, so a scope handed
    to a subtree can never be changed by it.  Empty names are ignored.
    """

    __slots__ = ("_names",)

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: FrozenSet[str] = frozenset(n for n in names if n)

    @classmethod
    def of(cls, value: "Scope | Iterable[str] | None") -> "Scope":
        if isinstance(value, Scope):
            return value
        return cls(value or ())

    def extend(self, names: Iterable[str]) -> "Scope":
        added = frozenset(n for n in names if n) - self._names
        if not added:
            return self
        return Scope(self._names | added)

    @property
    def names(self) -> FrozenSet[str]:
        return self._names

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Scope):
            return self._names == other._names
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._names)

    def __repr__(self) -> str:
        return f"Scope({sorted(self._names)!r})"


EMPTY_SCOPE = Scope()
