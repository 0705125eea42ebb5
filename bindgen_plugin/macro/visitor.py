"""把参数绑定到 :class:`BindgenOptions`。"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from ..config import BindgenOptions, LinkKind
from .base import MacroArgsVisitor
from .shell import split_process_args

logger = logging.getLogger(__name__)


LINK_KINDS = {
    "static": LinkKind.STATIC,
    "dynamic": LinkKind.DYNAMIC,
    "framework": LinkKind.FRAMEWORK,
}


class BindgenArgsVisitor(MacroArgsVisitor):
    """按固定的选项表修改配置。

    第一个具名参数出现之前，不带名字的字符串视为 ``clang_args``；
    之后再出现的位置参数一律拒绝。
    """

    def __init__(self, options: BindgenOptions):
        self.options = options
        self.seen_named = False

    def _note_name(self, name: Optional[str]) -> None:
        if name is not None:
            self.seen_named = True

    def visit_str(self, name: Optional[str], val: str) -> bool:
        self._note_name(name)
        if name is None and not self.seen_named:
            name = "clang_args"

        if name == "link":
            link = parse_link(val)
            if link is None:
                return False
            self.options.links.append(link)
        elif name == "match":
            self.options.match_pat.append(val)
        elif name == "clang_args":
            self.options.clang_args.extend(split_process_args(val))
        elif name == "enum_type":
            self.options.override_enum_ty = val
        else:
            return False

        logger.debug("bound %s=%r", name, val)
        return True

    def visit_int(self, name: Optional[str], val: int) -> bool:
        self._note_name(name)
        return False

    def visit_uint(self, name: Optional[str], val: int) -> bool:
        self._note_name(name)
        return False

    def visit_bool(self, name: Optional[str], val: bool) -> bool:
        self._note_name(name)
        if name == "allow_unknown_types":
            self.options.fail_on_unknown_type = not val
        elif name == "builtins":
            self.options.builtins = val
        else:
            return False

        logger.debug("bound %s=%s", name, val)
        return True

    def visit_ident(self, name: Optional[str], val: str) -> bool:
        self._note_name(name)
        return False


def parse_link(spec: str) -> Optional[Tuple[str, LinkKind]]:
    """解析 ``[kind=]name`` 形式的链接说明，非法时返回 ``None``。"""

    parts = spec.split("=")
    if len(parts) == 1:
        return parts[0], LinkKind.DYNAMIC
    if len(parts) == 2:
        kind = LINK_KINDS.get(parts[0])
        if kind is None:
            return None
        return parts[1], kind
    return None


__all__ = ["BindgenArgsVisitor", "LINK_KINDS", "parse_link"]
