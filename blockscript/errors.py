# blockscript/errors.py
"""
blockscript Error Types

Exception hierarchy used outside the code-generation core.  ``generate`` itself
never raises; these errors surface from the document readers, the registry,
instance construction, and from templates (where the compiler catches them and
turns them into a comment line).

Error Hierarchy:
────────────────
  BlockScriptError (base)
  ├── NotationError                 - Malformed tree documents
  ├── RegistryError                 - Catalog / schema problems
  │   ├── DuplicateBlockTypeError
  │   ├── UnknownBlockTypeError
  │   └── InvalidParameterSchemaError
  ├── TreeError                     - Block instance problems
  │   └── InvalidInstanceError
  └── TemplateError                 - Template rejected its parameters

Error Codes:
────────────
Each error carries a code ``BSC-NNNN``:
  - 1000-1999: Notation errors
  - 2000-2999: Registry errors
  - 3000-3999: Tree errors
  - 4000-4999: Template errors
  - 9000-9999: Internal errors
"""

from __future__ import annotations

from enum import Enum, unique
from typing import Any, Optional


@unique
class ErrorPhase(Enum):
    """Where in the pipeline an error originated."""

    NOTATION = "notation"
    REGISTRY = "registry"
    TREE = "tree"
    TEMPLATE = "template"
    INTERNAL = "internal"


class ErrorCode:
    """Structured error code of the form ``BSC-NNNN``."""

    __slots__ = ("prefix", "number", "name", "phase")

    def __init__(self, number: int, name: str, phase: ErrorPhase, prefix: str = "BSC") -> None:
        self.prefix = prefix
        self.number = number
        self.name = name
        self.phase = phase

    @property
    def code(self) -> str:
        return f"{self.prefix}-{self.number:04d}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.name})"

    def __hash__(self) -> int:
        return hash((self.prefix, self.number))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCode):
            return self.prefix == other.prefix and self.number == other.number
        if isinstance(other, str):
            return self.code == other
        return False


class ErrorCodes:
    """Predefined error codes."""

    # Notation (1000-1999)
    MALFORMED_DOCUMENT = ErrorCode(1001, "MALFORMED_DOCUMENT", ErrorPhase.NOTATION)
    EXPECTED_BLOCK_FORM = ErrorCode(1002, "EXPECTED_BLOCK_FORM", ErrorPhase.NOTATION)
    MISSING_KEYWORD_VALUE = ErrorCode(1003, "MISSING_KEYWORD_VALUE", ErrorPhase.NOTATION)
    INVALID_ATOM = ErrorCode(1004, "INVALID_ATOM", ErrorPhase.NOTATION)
    DUPLICATE_INSTANCE_ID = ErrorCode(1005, "DUPLICATE_INSTANCE_ID", ErrorPhase.NOTATION)

    # Registry (2000-2999)
    DUPLICATE_BLOCK_TYPE = ErrorCode(2001, "DUPLICATE_BLOCK_TYPE", ErrorPhase.REGISTRY)
    UNKNOWN_BLOCK_TYPE = ErrorCode(2002, "UNKNOWN_BLOCK_TYPE", ErrorPhase.REGISTRY)
    DUPLICATE_PARAMETER = ErrorCode(2003, "DUPLICATE_PARAMETER", ErrorPhase.REGISTRY)
    INVALID_CONDITION = ErrorCode(2004, "INVALID_CONDITION", ErrorPhase.REGISTRY)

    # Tree (3000-3999)
    INVALID_INSTANCE = ErrorCode(3001, "INVALID_INSTANCE", ErrorPhase.TREE)

    # Template (4000-4999)
    TEMPLATE_REJECTED = ErrorCode(4001, "TEMPLATE_REJECTED", ErrorPhase.TEMPLATE)

    # Internal (9000-9999)
    INTERNAL_ERROR = ErrorCode(9001, "INTERNAL_ERROR", ErrorPhase.INTERNAL)


class BlockScriptError(Exception):
    """
    Base exception for all blockscript errors.

    Carries an :class:`ErrorCode`, an optional hint and an optional cause.
    """

    default_code: ErrorCode = ErrorCodes.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        hint: str = "",
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.hint = hint
        self.cause = cause

    def with_hint(self, hint: str) -> "BlockScriptError":
        """Attach a hint to this error."""
        self.hint = hint
        return self

    def __str__(self) -> str:
        text = f"{self.code}: {self.message}"
        if self.hint:
            text += f" (hint: {self.hint})"
        return text


# ───────────────────────────────────────────────────────────────────────────────
# NOTATION ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class NotationError(BlockScriptError):
    """A tree document could not be read."""

    default_code = ErrorCodes.MALFORMED_DOCUMENT


# ───────────────────────────────────────────────────────────────────────────────
# REGISTRY ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class RegistryError(BlockScriptError):
    """Problem with the block-type catalog."""

    default_code = ErrorCodes.UNKNOWN_BLOCK_TYPE


class DuplicateBlockTypeError(RegistryError):
    """Two block types share an id."""

    def __init__(self, block_type_id: str, **kwargs: Any) -> None:
        super().__init__(
            f"Duplicate block type '{block_type_id}'",
            code=ErrorCodes.DUPLICATE_BLOCK_TYPE,
            **kwargs,
        )
        self.block_type_id = block_type_id


class UnknownBlockTypeError(RegistryError, KeyError):
    """Lookup of a block type id that is not registered."""

    def __init__(self, block_type_id: str, suggestions: Optional[list] = None, **kwargs: Any) -> None:
        super().__init__(
            f"Unknown block type '{block_type_id}'",
            code=ErrorCodes.UNKNOWN_BLOCK_TYPE,
            **kwargs,
        )
        self.block_type_id = block_type_id
        if suggestions:
            self.with_hint(f"did you mean '{suggestions[0]}'?")


class InvalidParameterSchemaError(RegistryError):
    """A block type's parameter schema is inconsistent."""

    def __init__(self, block_type_id: str, detail: str, code: Optional[ErrorCode] = None) -> None:
        super().__init__(
            f"Invalid parameter schema for '{block_type_id}': {detail}",
            code=code or ErrorCodes.DUPLICATE_PARAMETER,
        )
        self.block_type_id = block_type_id


# ───────────────────────────────────────────────────────────────────────────────
# TREE ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class TreeError(BlockScriptError):
    """Problem with a block instance or tree."""

    default_code = ErrorCodes.INVALID_INSTANCE


class InvalidInstanceError(TreeError):
    """Untrusted data does not describe a block instance."""


# ───────────────────────────────────────────────────────────────────────────────
# TEMPLATE ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class TemplateError(BlockScriptError):
    """A template cannot render the parameters it was given."""

    default_code = ErrorCodes.TEMPLATE_REJECTED

    def __init__(self, block_type_id: str, message: str, **kwargs: Any) -> None:
        super().__init__(f"{block_type_id}: {message}", **kwargs)
        self.block_type_id = block_type_id


__all__ = [
    "ErrorPhase",
    "ErrorCode",
    "ErrorCodes",
    "BlockScriptError",
    "NotationError",
    "RegistryError",
    "DuplicateBlockTypeError",
    "UnknownBlockTypeError",
    "InvalidParameterSchemaError",
    "TreeError",
    "InvalidInstanceError",
    "TemplateError",
]
