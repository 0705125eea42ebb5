"""绑定生成配置模块。

``bindgen!`` 调用的参数最终汇总到 :class:`BindgenOptions`，再交给外部的
绑定生成器使用。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple


class LinkKind(Enum):
    """库的链接方式。"""

    STATIC = "static"
    DYNAMIC = "dynamic"
    FRAMEWORK = "framework"


@dataclass(slots=True)
class BindgenOptions:
    """绑定生成器的运行配置。"""

    builtins: bool = True
    fail_on_unknown_type: bool = False
    override_enum_ty: str = ""
    clang_args: List[str] = field(default_factory=list)
    match_pat: List[str] = field(default_factory=list)
    links: List[Tuple[str, LinkKind]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "builtins": self.builtins,
            "fail_on_unknown_type": self.fail_on_unknown_type,
            "override_enum_ty": self.override_enum_ty,
            "clang_args": list(self.clang_args),
            "match_pat": list(self.match_pat),
            "links": [[name, kind.value] for name, kind in self.links],
        }


DEFAULT_OPTIONS = BindgenOptions()

__all__ = ["BindgenOptions", "DEFAULT_OPTIONS", "LinkKind"]
