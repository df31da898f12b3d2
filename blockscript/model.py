# blockscript/model.py
"""
Block data model.

Three layers, mirroring how a visual script is put together:

``BlockType``
    Immutable catalog entry: id, display data, ordered parameter schema, a
    children flag and the emission template.

``ParameterDefinition``
    One entry of a block type's schema.  ``kind`` drives literal formatting,
    ``binding`` marks parameters whose value *is* a symbol name, ``optional``
    marks parameters that use the empty string as "not provided".

``BlockInstance``
    One placed occurrence of a block type in the user's tree.  Holds raw,
    unresolved parameter strings and its children.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Tuple, Union

from blockscript.errors import ErrorCodes, InvalidInstanceError, InvalidParameterSchemaError

__all__ = [
    "ValueKind",
    "Binding",
    "Option",
    "VisibilityCondition",
    "ParameterDefinition",
    "Template",
    "BlockType",
    "BlockInstance",
]


@unique
class ValueKind(Enum):
    """Closed set of parameter value kinds."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SELECT = "select"
    TEXTAREA = "textarea"
    PASSWORD = "password"

    @property
    def is_multiline(self) -> bool:
        return self is ValueKind.TEXTAREA


@unique
class Binding(Enum):
    """How a symbol-defining parameter introduces its name."""

    NONE = "none"
    OUTPUT = "output"   # visible to later siblings and the block's own children
    LOCAL = "local"     # visible to the block's own children only

    @property
    def defines_symbol(self) -> bool:
        return self is not Binding.NONE


@dataclass(frozen=True, slots=True)
class Option:
    """One choice of a ``SELECT`` parameter."""

    value: str
    label: str = ""

    @property
    def display(self) -> str:
        return self.label or self.value


@dataclass(frozen=True, slots=True)
class VisibilityCondition:
    """Parameter is relevant only while ``param_id`` holds one of ``values``."""

    param_id: str
    values: FrozenSet[str]

    @classmethod
    def of(cls, param_id: str, value: Union[str, Tuple[str, ...], List[str], FrozenSet[str]]) -> "VisibilityCondition":
        if isinstance(value, str):
            return cls(param_id, frozenset((value,)))
        return cls(param_id, frozenset(value))

    def matches(self, raw_params: Mapping[str, Any]) -> bool:
        return str(raw_params.get(self.param_id, "")).strip() in self.values


@dataclass(frozen=True, slots=True)
class ParameterDefinition:
    """Schema entry for one parameter of a block type."""

    id: str
    name: str
    kind: ValueKind = ValueKind.STRING
    default: str = ""
    placeholder: str = ""
    options: Tuple[Option, ...] = ()
    condition: Optional[VisibilityCondition] = None
    binding: Binding = Binding.NONE
    optional: bool = False

    @property
    def defines_symbol(self) -> bool:
        return self.binding.defines_symbol

    def is_visible(self, raw_params: Mapping[str, Any]) -> bool:
        """Whether this parameter is relevant for the given raw values."""
        if self.condition is None:
            return True
        return self.condition.matches(raw_params)


Template = Callable[[Mapping[str, str]], str]


@dataclass(frozen=True)
class BlockType:
    """
    Immutable description of one kind of block.

    ``template`` receives the resolved parameter texts and returns one or
    more lines of Python.  Children of nestable blocks are emitted by the
    compiler, never by the template.
    """

    id: str
    name: str
    category: str
    template: Template
    parameters: Tuple[ParameterDefinition, ...] = ()
    description: str = ""
    can_have_children: bool = False

    def __post_init__(self) -> None:
        seen: Dict[str, ParameterDefinition] = {}
        for param in self.parameters:
            if param.id in seen:
                raise InvalidParameterSchemaError(self.id, f"parameter '{param.id}' declared twice")
            seen[param.id] = param
        for param in self.parameters:
            if param.condition is not None and param.condition.param_id not in seen:
                raise InvalidParameterSchemaError(
                    self.id,
                    f"parameter '{param.id}' depends on unknown parameter '{param.condition.param_id}'",
                    code=ErrorCodes.INVALID_CONDITION,
                )

    def parameter(self, param_id: str) -> Optional[ParameterDefinition]:
        for param in self.parameters:
            if param.id == param_id:
                return param
        return None

    def default_params(self) -> Dict[str, str]:
        return {p.id: p.default for p in self.parameters}

    def bindings(self, binding: Binding) -> Tuple[ParameterDefinition, ...]:
        """Parameters introducing symbols with the given binding."""
        return tuple(p for p in self.parameters if p.binding is binding)


@dataclass
class BlockInstance:
    """A placed block in the user's tree."""

    instance_id: str
    block_type_id: str
    params: Dict[str, str] = field(default_factory=dict)
    children: List["BlockInstance"] = field(default_factory=list)
    collapsed: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BlockInstance":
        """
        Build an instance (and its subtree) from the editor's canvas shape::

            {"instanceId": ..., "blockTypeId": ..., "params": {...},
             "children": [...], "isCollapsed": false}

        Snake-case keys (``instance_id``, ``block_type_id``, ``collapsed``)
        are accepted as well.
        """
        if not isinstance(data, Mapping):
            raise InvalidInstanceError(f"Expected an object, got {type(data).__name__}")

        instance_id = data.get("instanceId", data.get("instance_id"))
        block_type_id = data.get("blockTypeId", data.get("block_type_id"))
        if not isinstance(instance_id, str) or not instance_id:
            raise InvalidInstanceError("Block instance is missing 'instanceId'")
        if not isinstance(block_type_id, str) or not block_type_id:
            raise InvalidInstanceError(f"Block instance '{instance_id}' is missing 'blockTypeId'")

        raw_params = data.get("params") or {}
        if not isinstance(raw_params, Mapping):
            raise InvalidInstanceError(f"Block instance '{instance_id}' has non-object 'params'")
        params = {str(k): "" if v is None else str(v) for k, v in raw_params.items()}

        raw_children = data.get("children") or []
        if not isinstance(raw_children, list):
            raise InvalidInstanceError(f"Block instance '{instance_id}' has non-list 'children'")

        return cls(
            instance_id=instance_id,
            block_type_id=block_type_id,
            params=params,
            children=[cls.from_dict(child) for child in raw_children],
            collapsed=bool(data.get("isCollapsed", data.get("collapsed", False))),
        )
