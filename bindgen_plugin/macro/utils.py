"""clang 相关的工具函数。"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import List, Optional, Tuple


@lru_cache(maxsize=1)
def load_clang() -> "clang.cindex":  # type: ignore[name-defined]
    """加载 clang Python 绑定。"""

    try:
        import clang.cindex as cindex  # type: ignore
    except ImportError as exc:  # pragma: no cover - 依赖问题
        raise RuntimeError(
            "未找到 clang Python 绑定。请先安装 `pip install libclang` 并确保 libclang 可用。"
        ) from exc

    lib_path = os.getenv("LIBCLANG_PATH")
    if lib_path:
        cindex.Config.set_library_file(lib_path)

    # 尝试创建 Index 以验证库是否可用
    try:
        _ = cindex.Index.create()
    except Exception as exc:  # pragma: no cover - 依赖问题
        raise RuntimeError(
            "无法加载 libclang。请设置环境变量 LIBCLANG_PATH 指向 libclang 动态库。"
        ) from exc

    return cindex


def split_header(clang_args: List[str]) -> Tuple[Optional[str], List[str]]:
    """取出最后一个非选项参数作为头文件，其余参数原样返回。

    紧跟在 ``-I``、``-D`` 这类带值选项之后的参数不算头文件。
    """

    header_index: Optional[int] = None
    skip_next = False
    for index, arg in enumerate(clang_args):
        if skip_next:
            skip_next = False
            continue
        if arg in VALUE_OPTIONS:
            skip_next = True
        elif not arg.startswith("-"):
            header_index = index

    if header_index is None:
        return None, list(clang_args)
    rest = clang_args[:header_index] + clang_args[header_index + 1:]
    return clang_args[header_index], rest


VALUE_OPTIONS = {
    "-I",
    "-D",
    "-U",
    "-include",
    "-isystem",
    "-idirafter",
    "-iquote",
    "-x",
    "-target",
    "-F",
}


def format_location(diagnostic: "clang.cindex.Diagnostic") -> str:  # type: ignore[name-defined]
    location = diagnostic.location
    name = location.file.name if location.file else "<unknown>"
    return f"{name}:{location.line}:{location.column}"


__all__ = ["VALUE_OPTIONS", "format_location", "load_clang", "split_header"]
