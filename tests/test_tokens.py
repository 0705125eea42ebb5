"""词法分析与字面量展开测试。"""

from __future__ import annotations

import pytest

from bindgen_plugin.macro.expander import IntType, Lit, LitKind, LiteralExpander, NonLiteral, parse_literal
from bindgen_plugin.macro.tokens import Span, Token, TokenCursor, TokenKind, tokenize


def _kinds(text):
    return [token.kind for token in tokenize(text)]


def _expand(text, expander=None):
    return (expander or LiteralExpander()).expand(TokenCursor(tokenize(text)))


def test_tokenize_argument_list():
    assert _kinds('builtins=false, "a b"') == [
        TokenKind.IDENT,
        TokenKind.EQ,
        TokenKind.IDENT,
        TokenKind.COMMA,
        TokenKind.LITERAL,
        TokenKind.EOF,
    ]


def test_spans_and_offset():
    tokens = tokenize('x = "y"', offset=10)
    assert [token.span for token in tokens] == [Span(10, 11), Span(12, 13), Span(14, 17), Span(17, 17)]


def test_comments_are_skipped():
    assert _kinds("a // note\n, b") == [TokenKind.IDENT, TokenKind.COMMA, TokenKind.IDENT, TokenKind.EOF]


def test_unterminated_string_is_unknown():
    tokens = tokenize('match="abc')
    assert tokens[2].kind is TokenKind.UNKNOWN
    assert tokens[2].text == '"abc'
    assert tokens[-1].kind is TokenKind.EOF


def test_cursor_never_passes_eof():
    cursor = TokenCursor(tokenize("a"))
    cursor.bump()
    assert cursor.bump().kind is TokenKind.EOF
    assert cursor.check(TokenKind.EOF)
    assert cursor.look_ahead(5).kind is TokenKind.EOF


def test_cursor_appends_missing_eof():
    cursor = TokenCursor([Token(TokenKind.IDENT, "a", Span(0, 1))])
    assert cursor.look_ahead(1).kind is TokenKind.EOF


@pytest.mark.parametrize(
    "text, kind, value, int_type",
    [
        ('"a\\"b"', LitKind.STR, 'a"b', None),
        ('r#"a"b"#', LitKind.STR, 'a"b', None),
        ('"\\x41\\u{1F600}"', LitKind.STR, "A\U0001F600", None),
        ("'\\n'", LitKind.CHAR, "\n", None),
        ("42", LitKind.INT, 42, IntType.UNSUFFIXED),
        ("0x_ff_u16", LitKind.INT, 255, IntType.UNSIGNED),
        ("1_000i32", LitKind.INT, 1000, IntType.SIGNED),
        ("0b101", LitKind.INT, 5, IntType.UNSUFFIXED),
        ("2.5f32", LitKind.FLOAT, "2.5", None),
    ],
)
def test_parse_literal(text, kind, value, int_type):
    lit = parse_literal(tokenize(text)[0])
    assert isinstance(lit, Lit)
    assert (lit.kind, lit.value, lit.int_type) == (kind, value, int_type)


def test_integer_out_of_range():
    assert isinstance(parse_literal(tokenize("18446744073709551616")[0]), NonLiteral)
    lit = parse_literal(tokenize("18446744073709551615")[0])
    assert lit.value == (1 << 64) - 1


def test_invalid_escape():
    assert isinstance(parse_literal(tokenize('"\\q"')[0]), NonLiteral)


def test_negation_is_not_a_literal():
    for text in ("-7", "-7u8", "-7i32", "-1.5", '-"x"', "-foo", 'concat!("a", -1)'):
        result = _expand(text)
        assert isinstance(result, NonLiteral), text
    assert _expand("-7").reason == "negation is not a literal"
    assert _expand("-7").span == Span(0, 2)


def test_concat_nested():
    lit = _expand('concat!("a", concat!("b", 1), true, \'c\')')
    assert lit.kind is LitKind.STR
    assert lit.value == "ab1truec"


def test_concat_rejects_byte_strings_and_garbage():
    assert isinstance(_expand('concat!(b"a")'), NonLiteral)
    assert isinstance(_expand('concat!("a" "b")'), NonLiteral)
    assert isinstance(_expand('concat!("a"'), NonLiteral)


def test_stringify():
    assert _expand("stringify!(a, b)").value == "a, b"
    assert _expand("stringify!(f(x, y))").value == "f(x, y)"
    assert _expand("stringify!(m!(a; b.c) [1])").value == "m!(a; b.c) [1]"
    assert _expand("stringify!()").value == ""


def test_invocation_delimiters():
    assert _expand('concat!["a", "b"]').value == "ab"
    assert _expand('concat!{"a"}').value == "a"
    assert _expand('concat!("a", concat!["b"], concat!{"c"})').value == "abc"
    assert _expand("stringify![x, (y)]").value == "x, (y)"


def test_mismatched_invocation_delimiters():
    mismatched = _expand('concat!("a"]')
    assert isinstance(mismatched, NonLiteral)
    assert mismatched.reason == "mismatched closing delimiter"
    assert isinstance(_expand('concat!["a")'), NonLiteral)
    assert isinstance(_expand('concat!{"a"'), NonLiteral)
    missing = _expand('concat! "a"')
    assert missing.reason == "expected one of `(`, `[`, `{`"


def test_env(monkeypatch):
    monkeypatch.setenv("BINDGEN_TEST_INCLUDE", "-I /opt/inc")
    assert _expand('env!("BINDGEN_TEST_INCLUDE")').value == "-I /opt/inc"
    monkeypatch.delenv("BINDGEN_TEST_INCLUDE")
    missing = _expand('env!("BINDGEN_TEST_INCLUDE", "set it")')
    assert isinstance(missing, NonLiteral)
    assert missing.reason == "set it"


def test_custom_macro_registry():
    def upper(expander, tokens, span):
        items = expander.expand_list(tokens)
        return Lit(LitKind.STR, "".join(str(item.value) for item in items).upper(), span)

    expander = LiteralExpander({"upper": upper})
    assert _expand('upper!("abc")', expander).value == "ABC"
    assert _expand('upper!(concat!("x", "y"))', expander).value == "XY"


def test_identifier_is_not_a_literal():
    assert isinstance(_expand("foo"), NonLiteral)
    assert _expand("true").value is True
