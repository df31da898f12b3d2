# blockscript/config.py
"""Tuning knobs for code generation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Tuple

__all__ = ["GeneratorConfig", "DEFAULT_HEADER", "EMPTY_TREE_MESSAGE"]

DEFAULT_HEADER: Tuple[str, ...] = (
    "# Visual Script Generated Code",
    "# Note: Some blocks might require specific libraries (e.g., requests for HTTP).",
    "",
)

EMPTY_TREE_MESSAGE = "# Drag and drop blocks to generate Python code."


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings for one generation pass."""

    indent_unit: str = "    "
    placeholder: str = "pass"
    max_depth: int = 64
    header: Tuple[str, ...] = DEFAULT_HEADER
    empty_message: str = EMPTY_TREE_MESSAGE

    @classmethod
    def with_indent_width(cls, width: int, **overrides: Any) -> "GeneratorConfig":
        """Config whose indent unit is *width* spaces."""
        return cls(indent_unit=" " * width, **overrides)

    def validate(self) -> List[str]:
        """Return a list of validation warnings (empty if valid)."""
        warnings: List[str] = []
        if not self.indent_unit:
            warnings.append("indent_unit must not be empty")
        elif self.indent_unit.strip(" ") and self.indent_unit.strip("\t"):
            warnings.append("indent_unit should be all spaces or all tabs")
        if not self.placeholder.strip():
            warnings.append("placeholder must not be blank")
        if self.max_depth <= 0:
            warnings.append("max_depth must be positive")
        return warnings
