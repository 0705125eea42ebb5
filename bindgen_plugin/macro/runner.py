"""``bindgen!`` 宏展开入口。"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..config import BindgenOptions
from .base import BindgenError, BindingGenerator
from .context import MacroInvocation
from .expander import LiteralExpander
from .parser import parse_macro_opts
from .report import DiagnosticCollector, DiagnosticSink, ParseReport
from .tokens import Span, tokenize

logger = logging.getLogger(__name__)


class MacroLogger:
    """把生成器的 error/warn 转成固定位置的诊断。"""

    def __init__(self, sink: DiagnosticSink, span: Span):
        self.sink = sink
        self.span = span

    def error(self, msg: str) -> None:
        self.sink.error(self.span, msg)

    def warn(self, msg: str) -> None:
        self.sink.warn(self.span, msg)

    def __repr__(self) -> str:
        return "MacroLogger"


@dataclass(slots=True)
class MacroResult:
    report: ParseReport
    output: object = None

    @property
    def ok(self) -> bool:
        return self.report.ok


class BindgenMacro:
    def __init__(
        self,
        generator: Optional[BindingGenerator] = None,
        expander: Optional[LiteralExpander] = None,
    ):
        self.generator = generator
        self.expander = expander or LiteralExpander()

    def expand(self, invocation: MacroInvocation) -> MacroResult:
        options = BindgenOptions(builtins=True)
        if invocation.call_text is not None:
            sink = DiagnosticCollector(invocation.call_text)
        else:
            sink = DiagnosticCollector(invocation.text, invocation.offset)
        tokens = tokenize(invocation.text, invocation.offset)

        if not parse_macro_opts(tokens, options, sink, self.expander):
            return _dummy(options, sink, invocation)

        # 调用所在文件的目录加入头文件搜索路径
        if invocation.source_path is not None:
            options.clang_args.append("-I")
            options.clang_args.append(str(invocation.source_path.resolve().parent))

        if self.generator is None:
            return MacroResult(ParseReport(options, sink.diagnostics, True, invocation.source_path))

        macro_logger = MacroLogger(sink, invocation.symbol_span)
        logger.debug("handing %d clang argument(s) to %s", len(options.clang_args), self.generator.name)
        try:
            output = self.generator.generate(options, macro_logger)
        except BindgenError as exc:
            logger.debug("generator %s failed: %s", self.generator.name, exc)
            return _dummy(options, sink, invocation)

        return MacroResult(ParseReport(options, sink.diagnostics, True, invocation.source_path), output)


def _dummy(options: BindgenOptions, sink: DiagnosticCollector, invocation: MacroInvocation) -> MacroResult:
    return MacroResult(ParseReport(options, sink.diagnostics, False, invocation.source_path))


__all__ = ["BindgenMacro", "MacroLogger", "MacroResult"]
