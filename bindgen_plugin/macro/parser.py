"""``bindgen!`` 参数列表解析。

调用形式为 ``[ident=]value`` 的逗号分隔列表，value 是标识符或字面量，例如::

    bindgen!("header.h", builtins=false, clang_args="-I /usr/local/include")

格式错误（名字前缀不合法、值不是字面量、缺少逗号）只报告一次并立即终止；
访问者拒绝的参数逐个报告，解析继续进行，最终结果为失败。
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..config import BindgenOptions
from .expander import IntType, Lit, LitKind, LiteralExpander, NonLiteral
from .literals import Bool, Int, Str, TypedLiteral, UInt, from_ident
from .report import DiagnosticCollector, DiagnosticSink, ParseReport
from .tokens import Token, TokenCursor, TokenKind, tokenize
from .visitor import BindgenArgsVisitor

logger = logging.getLogger(__name__)


INVALID_FORMAT = "invalid argument format"
INVALID_ARGUMENT = "invalid argument"


def parse_macro_opts(
    tokens: Sequence[Token],
    options: BindgenOptions,
    sink: DiagnosticSink,
    expander: Optional[LiteralExpander] = None,
) -> bool:
    """解析参数并写入 ``options``，全部参数都被接受时返回 ``True``。"""

    expander = expander or LiteralExpander()
    visitor = BindgenArgsVisitor(options)
    parser = TokenCursor(tokens)
    args_good = True

    while not parser.check(TokenKind.EOF):
        name: Optional[str] = None
        span = parser.span

        if parser.look_ahead(1).kind is TokenKind.EQ:
            prefix = parser.bump()
            if prefix.kind is not TokenKind.IDENT:
                sink.error(span, INVALID_FORMAT)
                return False
            name = prefix.text
            parser.bump()

        if parser.check(TokenKind.IDENT) and parser.look_ahead(1).kind is not TokenKind.NOT:
            token = parser.bump()
            span = span.to(token.span)
            value: TypedLiteral = from_ident(token.text)
        else:
            expr = expander.expand(parser)
            span = span.to(expr.span)
            if isinstance(expr, NonLiteral):
                sink.error(span, INVALID_FORMAT, expr.reason)
                return False
            converted = lit_to_value(expr)
            if converted is None:
                sink.error(span, INVALID_FORMAT, f"unsupported {expr.kind.value} literal")
                return False
            value = converted

        if not value.accept(visitor, name):
            logger.debug("rejected argument %s=%r", name, value)
            sink.error(span, INVALID_ARGUMENT)
            args_good = False

        if parser.check(TokenKind.EOF):
            break
        if not parser.eat(TokenKind.COMMA):
            sink.error(parser.span, INVALID_FORMAT)
            return False

    return args_good


def lit_to_value(lit: Lit) -> Optional[TypedLiteral]:
    """只接受字符串、布尔与整数字面量。"""

    if lit.kind is LitKind.STR:
        return Str(lit.value)
    if lit.kind is LitKind.BOOL:
        return Bool(lit.value)
    if lit.kind is LitKind.INT:
        if lit.int_type is IntType.SIGNED:
            return Int(as_i64(lit.value))
        return UInt(lit.value)
    return None


def as_i64(value: int) -> int:
    """按 64 位补码截断。"""

    value &= (1 << 64) - 1
    return value - (1 << 64) if value >= 1 << 63 else value


def parse_options(
    text: str,
    options: Optional[BindgenOptions] = None,
    expander: Optional[LiteralExpander] = None,
) -> ParseReport:
    """解析一段参数文本，返回带诊断的报告。"""

    options = options if options is not None else BindgenOptions()
    sink = DiagnosticCollector(text)
    ok = parse_macro_opts(tokenize(text), options, sink, expander)
    return ParseReport(options, sink.diagnostics, ok)


__all__ = ["INVALID_ARGUMENT", "INVALID_FORMAT", "as_i64", "lit_to_value", "parse_macro_opts", "parse_options"]
