"""宏调用上下文。"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .tokens import Span


CALL_RE = re.compile(r"^\s*(?P<symbol>bindgen!)\s*\((?P<args>.*)\)\s*;?\s*$", re.DOTALL)


@dataclass(slots=True)
class MacroInvocation:
    """一次 ``bindgen!(...)`` 调用。

    ``text`` 是括号内的参数文本，``offset`` 是它在 ``call_text``（完整调用文本，
    可以为空）中的起始位置。
    """

    text: str
    source_path: Optional[Path] = None
    offset: int = 0
    call_text: Optional[str] = None

    @property
    def span(self) -> Span:
        return Span(self.offset, self.offset + len(self.text))

    @property
    def symbol_span(self) -> Span:
        # 报错只标在 `bindgen!` 这个符号上，而不是可能跨越多行的整个调用
        if self.call_text is not None:
            match = CALL_RE.match(self.call_text)
            if match is not None:
                return Span(match.start("symbol"), match.end("symbol"))
        return Span(self.offset, self.offset)

    @classmethod
    def from_text(cls, text: str, source_path: Optional[Path] = None) -> "MacroInvocation":
        """接受完整的 ``bindgen!(...)`` 调用或仅有参数的文本。"""

        match = CALL_RE.match(text)
        if match is None:
            return cls(text, source_path)
        return cls(match.group("args"), source_path, match.start("args"), text)


__all__ = ["MacroInvocation"]
