"""参数值的类型化字面量。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .base import MacroArgsVisitor


@dataclass(frozen=True, slots=True)
class Str:
    value: str

    def accept(self, visitor: "MacroArgsVisitor", name: Optional[str]) -> bool:
        return visitor.visit_str(name, self.value)


@dataclass(frozen=True, slots=True)
class Int:
    value: int

    def accept(self, visitor: "MacroArgsVisitor", name: Optional[str]) -> bool:
        return visitor.visit_int(name, self.value)


@dataclass(frozen=True, slots=True)
class UInt:
    value: int

    def accept(self, visitor: "MacroArgsVisitor", name: Optional[str]) -> bool:
        return visitor.visit_uint(name, self.value)


@dataclass(frozen=True, slots=True)
class Bool:
    value: bool

    def accept(self, visitor: "MacroArgsVisitor", name: Optional[str]) -> bool:
        return visitor.visit_bool(name, self.value)


@dataclass(frozen=True, slots=True)
class Ident:
    value: str

    def accept(self, visitor: "MacroArgsVisitor", name: Optional[str]) -> bool:
        return visitor.visit_ident(name, self.value)


TypedLiteral = Str | Int | UInt | Bool | Ident


def from_ident(spelling: str) -> TypedLiteral:
    """裸标识符：``true``/``false`` 视为布尔值，其余保持标识符。"""

    if spelling == "true":
        return Bool(True)
    if spelling == "false":
        return Bool(False)
    return Ident(spelling)


__all__ = ["Bool", "Ident", "Int", "Str", "TypedLiteral", "UInt", "from_ident"]
