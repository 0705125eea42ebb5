"""宏参数的词法分析。

把 ``bindgen!(...)`` 括号内的文本切成记号流，供参数解析器逐个消费。
无法识别的字符与未闭合的字符串不会抛异常，而是产生 ``UNKNOWN`` 记号，
由解析器统一报告为格式错误。
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence


class TokenKind(Enum):
    IDENT = "ident"
    LITERAL = "literal"
    EQ = "="
    COMMA = ","
    NOT = "!"
    OPEN_PAREN = "("
    CLOSE_PAREN = ")"
    OPEN_BRACKET = "["
    CLOSE_BRACKET = "]"
    OPEN_BRACE = "{"
    CLOSE_BRACE = "}"
    MINUS = "-"
    PUNCT = "punct"
    UNKNOWN = "unknown"
    EOF = "eof"


@dataclass(frozen=True, slots=True)
class Span:
    """半开区间 ``[lo, hi)``，以字符偏移计。"""

    lo: int
    hi: int

    def to(self, other: "Span") -> "Span":
        return Span(self.lo, max(self.hi, other.hi))


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    text: str
    span: Span


TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<comment>//[^\n]*)
    |(?P<raw_str>b?r(?P<hashes>\#*)"(?:.|\n)*?"(?P=hashes))
    |(?P<str>b?"(?:\\.|[^"\\])*")
    |(?P<char>b?'(?:\\.|[^'\\])')
    |(?P<number>\d[0-9A-Za-z_]*(?:\.\d[0-9A-Za-z_]*)?)
    |(?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<punct>[=,!()\[\]{}\-])
    |(?P<other>[;:.\#+*/<>&|^%?@$~])
    """,
    re.VERBOSE | re.DOTALL,
)

PUNCT_KINDS = {
    "=": TokenKind.EQ,
    ",": TokenKind.COMMA,
    "!": TokenKind.NOT,
    "(": TokenKind.OPEN_PAREN,
    ")": TokenKind.CLOSE_PAREN,
    "[": TokenKind.OPEN_BRACKET,
    "]": TokenKind.CLOSE_BRACKET,
    "{": TokenKind.OPEN_BRACE,
    "}": TokenKind.CLOSE_BRACE,
    "-": TokenKind.MINUS,
}


def tokenize(text: str, offset: int = 0) -> List[Token]:
    """切分文本，结果总以一个 ``EOF`` 记号结尾。

    ``offset`` 用于嵌套调用时让 span 仍指向原始文本中的位置。
    """

    tokens: List[Token] = []
    pos = 0
    while pos < len(text):
        match = TOKEN_RE.match(text, pos)
        if match is None:
            # 未闭合的字符串吞掉剩余全部文本，其余情况只吞一个字符
            stop = len(text) if text[pos] in "\"'" else pos + 1
            tokens.append(Token(TokenKind.UNKNOWN, text[pos:stop], Span(offset + pos, offset + stop)))
            pos = stop
            continue

        group = match.lastgroup
        value = match.group(0)
        span = Span(offset + match.start(), offset + match.end())
        pos = match.end()

        if group in ("ws", "comment"):
            continue
        if group in ("raw_str", "str", "char", "number"):
            tokens.append(Token(TokenKind.LITERAL, value, span))
        elif group == "ident":
            tokens.append(Token(TokenKind.IDENT, value, span))
        elif group == "punct":
            tokens.append(Token(PUNCT_KINDS[value], value, span))
        else:
            tokens.append(Token(TokenKind.PUNCT, value, span))

    end = offset + len(text)
    tokens.append(Token(TokenKind.EOF, "", Span(end, end)))
    return tokens


class TokenCursor:
    """在记号序列上前进的游标，末尾的 ``EOF`` 永远不会被越过。"""

    def __init__(self, tokens: Sequence[Token]):
        if not tokens or tokens[-1].kind is not TokenKind.EOF:
            last = tokens[-1].span.hi if tokens else 0
            tokens = list(tokens) + [Token(TokenKind.EOF, "", Span(last, last))]
        self.tokens = list(tokens)
        self.pos = 0

    @property
    def token(self) -> Token:
        return self.tokens[self.pos]

    @property
    def span(self) -> Span:
        return self.token.span

    def look_ahead(self, distance: int) -> Token:
        index = min(self.pos + distance, len(self.tokens) - 1)
        return self.tokens[index]

    def bump(self) -> Token:
        current = self.token
        if current.kind is not TokenKind.EOF:
            self.pos += 1
        return current

    def check(self, kind: TokenKind) -> bool:
        return self.token.kind is kind

    def eat(self, kind: TokenKind) -> bool:
        if self.check(kind):
            self.bump()
            return True
        return False


__all__ = ["Span", "Token", "TokenCursor", "TokenKind", "tokenize"]
