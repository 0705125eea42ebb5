"""类 shell 的参数切分。

把 ``clang_args`` 的单个字符串值拆成多个编译参数，规则与原插件保持逐字节一致：

- 只有在引号之外的空格才会分隔参数；
- 单引号与双引号互不嵌套，另一种引号内出现的引号按字面保留；
- ``\\"``、``\\'``、``\\\\`` 与 ``\\ `` 表示第二个字符本身；
- 输入末尾未闭合的引号自动闭合，末尾孤立的反斜杠原样保留。
"""

from __future__ import annotations

from enum import Enum
from typing import List


class QuoteState(Enum):
    NONE = 0
    SINGLE = 1
    DOUBLE = 2


ESCAPABLE = ('"', "'", "\\")

UNESCAPES = (
    ('\\"', '"'),
    ("\\'", "'"),
    ("\\ ", " "),
    ("\\\\", "\\"),
)


def split_process_args(text: str) -> List[str]:
    """按类 shell 规则拆分字符串，返回不含空串的参数列表。"""

    text = text.strip()
    end = len(text)
    parts: List[str] = []
    state = QuoteState.NONE
    # 偶数位是片段起点，奇数位是片段终点；引号本身落在片段之外
    positions = [0]
    last = " "

    for index, char in enumerate(text + " "):
        if last == "\\" and (char in ESCAPABLE or (char == " " and index < end)):
            pass
        elif char == '"' and state is not QuoteState.SINGLE:
            state = QuoteState.NONE if state is QuoteState.DOUBLE else QuoteState.DOUBLE
            positions.extend((index, index + 1))
        elif char == "'" and state is not QuoteState.DOUBLE:
            state = QuoteState.NONE if state is QuoteState.SINGLE else QuoteState.SINGLE
            positions.extend((index, index + 1))
        elif char == " " and (state is QuoteState.NONE or index >= end):
            positions.append(index)
            part = "".join(text[start:stop] for start, stop in zip(positions[0::2], positions[1::2]))
            part = part.strip()
            if part:
                parts.append(_unescape(part))
            positions = [index + 1]
        last = char

    return parts


def _unescape(part: str) -> str:
    for escaped, plain in UNESCAPES:
        part = part.replace(escaped, plain)
    return part


__all__ = ["QuoteState", "split_process_args"]
