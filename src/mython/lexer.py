"""
Mython lexer - turns source text into a token stream.

Handles:
- two-space indentation (Indent/Dedent tokens)
- numbers, identifiers and keywords
- single- and double-quoted strings with backslash escapes
- two-character comparison operators (== != <= >=)
- `#` comments and blank lines
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, List, Optional

from .common import LexerError

INDENT_WIDTH = 2


class TokenType(Enum):
    NUMBER = auto()
    ID = auto()
    CHAR = auto()
    STRING = auto()

    CLASS = auto()
    RETURN = auto()
    IF = auto()
    ELSE = auto()
    DEF = auto()
    PRINT = auto()
    AND = auto()
    OR = auto()
    NOT = auto()
    NONE = auto()
    TRUE = auto()
    FALSE = auto()

    EQ = auto()
    NOT_EQ = auto()
    LESS_OR_EQ = auto()
    GREATER_OR_EQ = auto()

    NEWLINE = auto()
    INDENT = auto()
    DEDENT = auto()
    EOF = auto()


KEYWORDS = {
    "class": TokenType.CLASS,
    "return": TokenType.RETURN,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "def": TokenType.DEF,
    "print": TokenType.PRINT,
    "and": TokenType.AND,
    "or": TokenType.OR,
    "not": TokenType.NOT,
    "None": TokenType.NONE,
    "True": TokenType.TRUE,
    "False": TokenType.FALSE,
}

OPERATORS = {
    "==": TokenType.EQ,
    "!=": TokenType.NOT_EQ,
    "<=": TokenType.LESS_OR_EQ,
    ">=": TokenType.GREATER_OR_EQ,
}

ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "'": "'", "\\": "\\"}


@dataclass
class Token:
    type: TokenType
    value: Any = None
    line: int = field(default=0, compare=False)

    def __repr__(self):
        if self.value is None:
            return f"Token({self.type.name})"
        return f"Token({self.type.name}, {self.value!r})"


class Lexer:
    """Tokenizes a whole Mython program up front and walks the result."""

    def __init__(self, source: str):
        self.tokens: List[Token] = tokenize(source)
        self.pos = 0

    def current_token(self) -> Token:
        return self.tokens[self.pos]

    def next_token(self) -> Token:
        # Eof repeats forever once reached.
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return self.tokens[self.pos]

    def peek_token(self, offset: int = 1) -> Token:
        return self.tokens[min(self.pos + offset, len(self.tokens) - 1)]

    def expect(self, type: TokenType, value: Any = None) -> Any:
        """Check the current token's type (and value, when given) and return its value."""
        token = self.current_token()
        if token.type is not type or (value is not None and token.value != value):
            wanted = type.name if value is None else f"{type.name} {value!r}"
            raise LexerError(f"line {token.line}: expected {wanted}, got {token!r}")
        return token.value

    def expect_next(self, type: TokenType, value: Any = None) -> Any:
        self.next_token()
        return self.expect(type, value)


def tokenize(source: str) -> List[Token]:
    tokens: List[Token] = []
    depth = 0

    for lineno, raw_line in enumerate(source.splitlines(), start=1):
        line = raw_line.rstrip("\r")
        body = line.lstrip(" \t")
        if not body.strip() or body.startswith("#"):
            continue

        if "\t" in line[: len(line) - len(body)]:
            raise LexerError(f"line {lineno}: tabs are not allowed in indentation")
        indent = len(line) - len(body)
        if indent % INDENT_WIDTH:
            raise LexerError(f"line {lineno}: indentation must be a multiple of {INDENT_WIDTH} spaces")
        level = indent // INDENT_WIDTH
        while depth < level:
            tokens.append(Token(TokenType.INDENT, line=lineno))
            depth += 1
        while depth > level:
            tokens.append(Token(TokenType.DEDENT, line=lineno))
            depth -= 1

        tokens.extend(_scan_line(body, lineno))
        tokens.append(Token(TokenType.NEWLINE, line=lineno))

    last_line = len(source.splitlines())
    while depth > 0:
        tokens.append(Token(TokenType.DEDENT, line=last_line))
        depth -= 1
    tokens.append(Token(TokenType.EOF, line=last_line))
    return tokens


def _scan_line(text: str, lineno: int) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    size = len(text)

    while pos < size:
        ch = text[pos]

        if ch in " \t":
            pos += 1
            continue

        if ch == "#":
            break

        if ch.isdigit():
            start = pos
            while pos < size and text[pos].isdigit():
                pos += 1
            tokens.append(Token(TokenType.NUMBER, int(text[start:pos]), lineno))
            continue

        if ch.isalpha() or ch == "_":
            start = pos
            while pos < size and (text[pos].isalnum() or text[pos] == "_"):
                pos += 1
            word = text[start:pos]
            keyword = KEYWORDS.get(word)
            if keyword is not None:
                tokens.append(Token(keyword, line=lineno))
            else:
                tokens.append(Token(TokenType.ID, word, lineno))
            continue

        if ch in "'\"":
            value, pos = _scan_string(text, pos, lineno)
            tokens.append(Token(TokenType.STRING, value, lineno))
            continue

        pair = text[pos : pos + 2]
        operator = OPERATORS.get(pair)
        if operator is not None:
            tokens.append(Token(operator, line=lineno))
            pos += 2
            continue

        tokens.append(Token(TokenType.CHAR, ch, lineno))
        pos += 1

    return tokens


def _scan_string(text: str, pos: int, lineno: int) -> tuple[str, int]:
    quote = text[pos]
    pos += 1
    chars: List[str] = []
    while pos < len(text):
        ch = text[pos]
        if ch == quote:
            return "".join(chars), pos + 1
        if ch == "\\":
            if pos + 1 >= len(text):
                break
            escaped: Optional[str] = ESCAPES.get(text[pos + 1])
            if escaped is None:
                raise LexerError(f"line {lineno}: unknown escape sequence \\{text[pos + 1]}")
            chars.append(escaped)
            pos += 2
            continue
        chars.append(ch)
        pos += 1
    raise LexerError(f"line {lineno}: unterminated string literal")
