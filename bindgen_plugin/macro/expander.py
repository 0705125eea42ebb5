"""字面量展开器。

参数值若不是裸标识符，就交给展开器消费一个表达式：字面量，或者
``concat!(...)``、``concat![...]`` 这类嵌套调用。带负号的整数不算字面量。
嵌套调用会递归地使用同一个展开器，每一层都使用独立的游标，因此展开过程
是可重入的。
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Union

from .tokens import Span, Token, TokenCursor, TokenKind


class LitKind(Enum):
    STR = "str"
    BYTE_STR = "byte_str"
    CHAR = "char"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"


class IntType(Enum):
    SIGNED = "signed"
    UNSIGNED = "unsigned"
    UNSUFFIXED = "unsuffixed"


@dataclass(frozen=True, slots=True)
class Lit:
    kind: LitKind
    value: object
    span: Span
    int_type: Optional[IntType] = None


@dataclass(frozen=True, slots=True)
class NonLiteral:
    span: Span
    reason: str


Expansion = Union[Lit, NonLiteral]
MacroHandler = Callable[["LiteralExpander", List[Token], Span], Expansion]


U64_LIMIT = 1 << 64

INT_RE = re.compile(
    r"^(?P<digits>0x[0-9a-fA-F_]+|0o[0-7_]+|0b[01_]+|[0-9][0-9_]*)"
    r"(?P<suffix>[iu](?:8|16|32|64|128|size))?$"
)
FLOAT_RE = re.compile(r"^(?P<number>[0-9][0-9_]*(?:\.[0-9][0-9_]*)?(?:[eE][+-]?[0-9_]+)?)(?:f32|f64)?$")
ESCAPE_RE = re.compile(r"\\(?:x([0-9a-fA-F]{2})|u\{([0-9a-fA-F_]{1,6})\}|(\n\s*)|(.))", re.DOTALL)
SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "'": "'",
}
RAW_STR_RE = re.compile(r'^b?r(#*)"(.*)"\1$', re.DOTALL)

DELIMITERS = {
    TokenKind.OPEN_PAREN: TokenKind.CLOSE_PAREN,
    TokenKind.OPEN_BRACKET: TokenKind.CLOSE_BRACKET,
    TokenKind.OPEN_BRACE: TokenKind.CLOSE_BRACE,
}
CLOSERS = frozenset(DELIMITERS.values())


class LiteralExpander:
    """把一个表达式归约为单个字面量。"""

    def __init__(self, macros: Optional[Dict[str, MacroHandler]] = None):
        self.macros: Dict[str, MacroHandler] = dict(BUILTIN_MACROS)
        if macros:
            self.macros.update(macros)

    def expand(self, cursor: TokenCursor) -> Expansion:
        token = cursor.bump()

        if token.kind is TokenKind.LITERAL:
            return parse_literal(token)

        if token.kind is TokenKind.MINUS:
            # `-1` 是一元表达式而不是字面量
            span = token.span
            if cursor.check(TokenKind.LITERAL):
                span = span.to(cursor.bump().span)
            return NonLiteral(span, "negation is not a literal")

        if token.kind is TokenKind.IDENT:
            if cursor.check(TokenKind.NOT):
                return self._expand_invocation(token, cursor)
            if token.text in ("true", "false"):
                return Lit(LitKind.BOOL, token.text == "true", token.span)
            return NonLiteral(token.span, f"`{token.text}` is not a literal")

        return NonLiteral(token.span, f"unexpected `{token.text or token.kind.value}`")

    def expand_list(self, tokens: List[Token]) -> Union[List[Lit], NonLiteral]:
        """展开逗号分隔的字面量列表，允许末尾多一个逗号。"""

        cursor = TokenCursor(tokens)
        items: List[Lit] = []
        while not cursor.check(TokenKind.EOF):
            result = self.expand(cursor)
            if isinstance(result, NonLiteral):
                return result
            items.append(result)
            if cursor.check(TokenKind.EOF):
                break
            if not cursor.eat(TokenKind.COMMA):
                return NonLiteral(cursor.span, "expected `,`")
        return items

    def _expand_invocation(self, name: Token, cursor: TokenCursor) -> Expansion:
        cursor.bump()
        opening = cursor.bump()
        if opening.kind not in DELIMITERS:
            return NonLiteral(opening.span, "expected one of `(`, `[`, `{`")

        inner: List[Token] = []
        expected = [DELIMITERS[opening.kind]]
        while True:
            token = cursor.bump()
            if token.kind is TokenKind.EOF:
                return NonLiteral(name.span.to(token.span), "unclosed delimiter")
            if token.kind in DELIMITERS:
                expected.append(DELIMITERS[token.kind])
            elif token.kind in CLOSERS:
                if token.kind is not expected.pop():
                    return NonLiteral(token.span, "mismatched closing delimiter")
                if not expected:
                    closing = token
                    break
            inner.append(token)

        span = name.span.to(closing.span)
        handler = self.macros.get(name.text)
        if handler is None:
            return NonLiteral(span, f"cannot find macro `{name.text}`")
        inner.append(Token(TokenKind.EOF, "", Span(closing.span.lo, closing.span.lo)))
        return handler(self, inner, span)


def parse_literal(token: Token) -> Expansion:
    """把单个字面量记号解释为 :class:`Lit`。"""

    text = token.text
    span = token.span

    raw = RAW_STR_RE.match(text)
    if raw:
        kind = LitKind.BYTE_STR if text.startswith("b") else LitKind.STR
        return Lit(kind, raw.group(2), span)

    if text.startswith(('"', 'b"')):
        kind = LitKind.BYTE_STR if text.startswith("b") else LitKind.STR
        body = text[2:-1] if kind is LitKind.BYTE_STR else text[1:-1]
        value = _unescape(body)
        if value is None:
            return NonLiteral(span, "unknown character escape")
        return Lit(kind, value, span)

    if text.startswith(("'", "b'")):
        value = _unescape(text[text.index("'") + 1:-1])
        if value is None or len(value) != 1:
            return NonLiteral(span, "invalid character literal")
        return Lit(LitKind.CHAR, value, span)

    number = INT_RE.match(text)
    if number:
        value = _parse_int(number.group("digits"))
        if value >= U64_LIMIT:
            return NonLiteral(span, "integer literal is too large")
        suffix = number.group("suffix")
        if suffix is None:
            int_type = IntType.UNSUFFIXED
        elif suffix.startswith("i"):
            int_type = IntType.SIGNED
        else:
            int_type = IntType.UNSIGNED
        return Lit(LitKind.INT, value, span, int_type)

    number = FLOAT_RE.match(text)
    if number:
        return Lit(LitKind.FLOAT, number.group("number"), span)

    return NonLiteral(span, f"invalid literal `{text}`")


def _parse_int(digits: str) -> int:
    digits = digits.replace("_", "")
    for prefix, base in (("0x", 16), ("0o", 8), ("0b", 2)):
        if digits.startswith(prefix):
            return int(digits[2:], base)
    return int(digits, 10)


def _unescape(body: str) -> Optional[str]:
    invalid = False

    def replace(match: re.Match) -> str:
        nonlocal invalid
        hex_code, unicode_code, continuation, simple = match.groups()
        if hex_code:
            return chr(int(hex_code, 16))
        if unicode_code:
            code = int(unicode_code.replace("_", ""), 16)
            if code <= 0x10FFFF:
                return chr(code)
            invalid = True
            return ""
        if continuation is not None:
            return ""
        if simple in SIMPLE_ESCAPES:
            return SIMPLE_ESCAPES[simple]
        invalid = True
        return ""

    value = ESCAPE_RE.sub(replace, body)
    return None if invalid else value


def literal_text(lit: Lit) -> str:
    """字面量在 ``concat!`` 中的文本形式。"""

    if lit.kind is LitKind.BOOL:
        return "true" if lit.value else "false"
    return str(lit.value)


def expand_concat(expander: LiteralExpander, tokens: List[Token], span: Span) -> Expansion:
    items = expander.expand_list(tokens)
    if isinstance(items, NonLiteral):
        return items
    for item in items:
        if item.kind is LitKind.BYTE_STR:
            return NonLiteral(item.span, "cannot concatenate a byte string literal")
    return Lit(LitKind.STR, "".join(literal_text(item) for item in items), span)


def expand_stringify(expander: LiteralExpander, tokens: List[Token], span: Span) -> Expansion:
    """按常见标点习惯拼接记号文本。

    逗号、分号、句点与闭括号前不加空格，开括号与句点后不加空格；
    标识符或 ``!`` 紧跟开括号时也不加空格，因此 ``f(x, y)``、``m!(x)``
    保持原样。其余记号之间以单个空格分隔，原文中的换行与多余空白不保留。
    """

    parts: List[str] = []
    previous: Optional[Token] = None
    for token in tokens:
        if token.kind is TokenKind.EOF:
            break
        if previous is not None and _space_between(previous, token):
            parts.append(" ")
        parts.append(token.text)
        previous = token
    return Lit(LitKind.STR, "".join(parts), span)


def _space_between(previous: Token, token: Token) -> bool:
    if token.kind in CLOSERS or token.kind is TokenKind.COMMA or token.text in (";", "."):
        return False
    if previous.kind in DELIMITERS or previous.text == ".":
        return False
    if token.kind is TokenKind.NOT and previous.kind is TokenKind.IDENT:
        return False
    if token.kind in DELIMITERS and previous.kind in (TokenKind.IDENT, TokenKind.NOT):
        return False
    return True


def expand_env(expander: LiteralExpander, tokens: List[Token], span: Span) -> Expansion:
    items = expander.expand_list(tokens)
    if isinstance(items, NonLiteral):
        return items
    if not 1 <= len(items) <= 2 or any(item.kind is not LitKind.STR for item in items):
        return NonLiteral(span, "expected string literal")
    name = items[0].value
    value = os.environ.get(name)
    if value is None:
        message = items[1].value if len(items) == 2 else f"environment variable `{name}` not defined"
        return NonLiteral(span, message)
    return Lit(LitKind.STR, value, span)


BUILTIN_MACROS: Dict[str, MacroHandler] = {
    "concat": expand_concat,
    "env": expand_env,
    "stringify": expand_stringify,
}


__all__ = [
    "BUILTIN_MACROS",
    "Expansion",
    "IntType",
    "Lit",
    "LitKind",
    "LiteralExpander",
    "NonLiteral",
    "parse_literal",
]
