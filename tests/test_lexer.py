from __future__ import annotations

import pytest

from mython import LexerError
from mython.lexer import Lexer, Token, TokenType, tokenize

T = TokenType


def types(source):
    return [token.type for token in tokenize(source)]


def test_simple_statement():
    assert tokenize("x = 42\n") == [
        Token(T.ID, "x"),
        Token(T.CHAR, "="),
        Token(T.NUMBER, 42),
        Token(T.NEWLINE),
        Token(T.EOF),
    ]


def test_keywords_and_operators():
    source = "if not a == b and c != d or e <= f or g >= h:\n"
    assert types(source) == [
        T.IF, T.NOT, T.ID, T.EQ, T.ID, T.AND, T.ID, T.NOT_EQ, T.ID,
        T.OR, T.ID, T.LESS_OR_EQ, T.ID, T.OR, T.ID, T.GREATER_OR_EQ, T.ID,
        T.CHAR, T.NEWLINE, T.EOF,
    ]


def test_literals_keywords():
    assert types("print None, True, False\n") == [
        T.PRINT, T.NONE, T.CHAR, T.TRUE, T.CHAR, T.FALSE, T.NEWLINE, T.EOF,
    ]


def test_strings_with_escapes():
    tokens = tokenize("""s = 'it\\'s' + "say \\"hi\\"\\n" + 'tab\\there'\n""")
    strings = [token.value for token in tokens if token.type is T.STRING]
    assert strings == ["it's", 'say "hi"\n', "tab\there"]


def test_hash_inside_string_is_not_a_comment():
    tokens = tokenize("print '#not a comment' # real comment\n")
    assert tokens == [
        Token(T.PRINT),
        Token(T.STRING, "#not a comment"),
        Token(T.NEWLINE),
        Token(T.EOF),
    ]


def test_indentation_blocks():
    source = """
class A:
  def f():
    return 1

# comment between blocks
x = 1
"""
    assert types(source) == [
        T.CLASS, T.ID, T.CHAR, T.NEWLINE,
        T.INDENT, T.DEF, T.ID, T.CHAR, T.CHAR, T.CHAR, T.NEWLINE,
        T.INDENT, T.RETURN, T.NUMBER, T.NEWLINE,
        T.DEDENT, T.DEDENT, T.ID, T.CHAR, T.NUMBER, T.NEWLINE, T.EOF,
    ]


def test_pending_dedents_are_closed_at_eof():
    assert types("if x:\n  if y:\n    z = 1") == [
        T.IF, T.ID, T.CHAR, T.NEWLINE,
        T.INDENT, T.IF, T.ID, T.CHAR, T.NEWLINE,
        T.INDENT, T.ID, T.CHAR, T.NUMBER, T.NEWLINE,
        T.DEDENT, T.DEDENT, T.EOF,
    ]


def test_empty_source():
    assert types("") == [T.EOF]
    assert types("\n\n   \n# only comments\n") == [T.EOF]


@pytest.mark.parametrize(
    "source, message",
    [
        ("   x = 1\n", "multiple of 2"),
        ("if True:\n\tprint 1\n", "line 2: tabs are not allowed"),
        ("if True:\n  \tprint 1\n", "tabs are not allowed"),
        ("s = 'open\n", "unterminated"),
        ("s = 'bad \\q'\n", "unknown escape"),
    ],
)
def test_lexer_errors(source, message):
    with pytest.raises(LexerError, match=message):
        tokenize(source)


def test_lexer_walks_tokens_and_repeats_eof():
    lexer = Lexer("x 1")
    assert lexer.current_token() == Token(T.ID, "x")
    assert lexer.next_token() == Token(T.NUMBER, 1)
    assert lexer.next_token() == Token(T.NEWLINE)
    assert lexer.next_token() == Token(T.EOF)
    assert lexer.next_token() == Token(T.EOF)


def test_expect():
    lexer = Lexer("x = 5")
    assert lexer.expect(T.ID) == "x"
    assert lexer.expect(T.ID, "x") == "x"
    assert lexer.expect_next(T.CHAR, "=") == "="
    assert lexer.expect_next(T.NUMBER) == 5
    with pytest.raises(LexerError):
        lexer.expect(T.STRING)
    with pytest.raises(LexerError):
        lexer.expect(T.NUMBER, 6)
    with pytest.raises(SyntaxError):
        lexer.expect_next(T.ID)


def test_tokens_carry_line_numbers():
    tokens = tokenize("a\n\nb\n")
    assert [(token.type, token.line) for token in tokens] == [
        (T.ID, 1), (T.NEWLINE, 1), (T.ID, 3), (T.NEWLINE, 3), (T.EOF, 3),
    ]
