"""访问者、生成器等协作方的基类。"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Protocol

from ..config import BindgenOptions


class BindgenError(RuntimeError):
    """绑定生成失败。"""


class MacroArgsVisitor(ABC):
    """按值的类型分派的访问者；返回 ``False`` 表示拒绝该参数。"""

    @abstractmethod
    def visit_str(self, name: Optional[str], val: str) -> bool:
        """字符串参数。"""

    @abstractmethod
    def visit_int(self, name: Optional[str], val: int) -> bool:
        """有符号整数参数。"""

    @abstractmethod
    def visit_uint(self, name: Optional[str], val: int) -> bool:
        """无符号整数参数。"""

    @abstractmethod
    def visit_bool(self, name: Optional[str], val: bool) -> bool:
        """布尔参数。"""

    @abstractmethod
    def visit_ident(self, name: Optional[str], val: str) -> bool:
        """裸标识符参数。"""


class Logger(Protocol):
    def error(self, msg: str) -> None: ...

    def warn(self, msg: str) -> None: ...


class BindingGenerator(ABC):
    name: str

    @abstractmethod
    def generate(self, options: BindgenOptions, macro_logger: Logger) -> object:
        """根据配置生成结果，失败时抛出 :class:`BindgenError`。"""


__all__ = ["BindgenError", "BindingGenerator", "Logger", "MacroArgsVisitor"]
