"""
Mython parser - builds the executable node tree from a token stream.

Recursive descent, one method per grammar rule:

    program     := statement* EOF
    statement   := class_def | if_stmt | simple NEWLINE
    simple      := 'return' expr | 'print' [expr (',' expr)*]
                 | dotted '=' expr | expr
    class_def   := 'class' ID ['(' ID ')'] ':' NEWLINE INDENT method+ DEDENT
    method      := 'def' ID '(' [ID (',' ID)*] ')' ':' suite
    if_stmt     := 'if' expr ':' suite ['else' ':' suite]
    suite       := NEWLINE INDENT statement+ DEDENT
    expr        := and_test ('or' and_test)*
    and_test    := not_test ('and' not_test)*
    not_test    := 'not' not_test | comparison
    comparison  := sum [cmp_op sum]
    sum         := term (('+' | '-') term)*
    term        := unary (('*' | '/') unary)*
    unary       := '-' unary | primary
    primary     := atom | name_call ('.' ID [call_args])*
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .classes import Class, Method
from .common import ParseError, Statement
from .expressions import (
    Add,
    And,
    BoolConst,
    Comparison,
    Div,
    FieldValue,
    MethodCall,
    Mult,
    NewInstance,
    NoneConst,
    Not,
    NumericConst,
    Or,
    StringConst,
    Stringify,
    Sub,
    VariableValue,
)
from .helpers import COMPARATORS
from .lexer import Lexer, Token, TokenType
from .statements import (
    Assignment,
    ClassDefinition,
    Compound,
    FieldAssignment,
    IfElse,
    MethodBody,
    Print,
    Return,
)

logger = logging.getLogger(__name__)

_COMPARISON_TOKENS = {
    TokenType.EQ: "==",
    TokenType.NOT_EQ: "!=",
    TokenType.LESS_OR_EQ: "<=",
    TokenType.GREATER_OR_EQ: ">=",
}


class Parser:
    def __init__(self, lexer: Lexer, *, strict_method_calls: bool = False):
        self.lexer = lexer
        self.strict_method_calls = strict_method_calls
        self.classes: Dict[str, Class] = {}

    # ----- token helpers -----

    @property
    def token(self) -> Token:
        return self.lexer.current_token()

    def _advance(self) -> Token:
        return self.lexer.next_token()

    def _is_char(self, ch: str, token: Optional[Token] = None) -> bool:
        token = self.token if token is None else token
        return token.type is TokenType.CHAR and token.value == ch

    def _error(self, message: str) -> ParseError:
        return ParseError(f"line {self.token.line}: {message}, got {self.token!r}")

    def _consume(self, type: TokenType) -> Token:
        token = self.token
        if token.type is not type:
            raise self._error(f"expected {type.name}")
        self._advance()
        return token

    def _consume_char(self, ch: str) -> None:
        if not self._is_char(ch):
            raise self._error(f"expected '{ch}'")
        self._advance()

    def _consume_id(self) -> str:
        return self._consume(TokenType.ID).value

    # ----- statements -----

    def parse_program(self) -> Compound:
        program = Compound()
        while self.token.type is not TokenType.EOF:
            program.add_statement(self.parse_statement())
        return program

    def parse_statement(self) -> Statement:
        if self.token.type is TokenType.CLASS:
            return self.parse_class_definition()
        if self.token.type is TokenType.IF:
            return self.parse_if()
        statement = self.parse_simple_statement()
        if self.token.type is not TokenType.EOF:
            self._consume(TokenType.NEWLINE)
        return statement

    def parse_simple_statement(self) -> Statement:
        if self.token.type is TokenType.RETURN:
            self._advance()
            return Return(self.parse_expression())

        if self.token.type is TokenType.PRINT:
            self._advance()
            args: List[Statement] = []
            if self.token.type not in (TokenType.NEWLINE, TokenType.EOF):
                args.append(self.parse_expression())
                while self._is_char(","):
                    self._advance()
                    args.append(self.parse_expression())
            return Print(args)

        if self.token.type is TokenType.ID and self._assignment_ahead():
            names = self._parse_dotted_ids()
            self._consume_char("=")
            value = self.parse_expression()
            if len(names) == 1:
                return Assignment(names[0], value)
            return FieldAssignment(VariableValue(names[:-1]), names[-1], value)

        return self.parse_expression()

    def _assignment_ahead(self) -> bool:
        # ID ('.' ID)* '='
        offset = 1
        while True:
            token = self.lexer.peek_token(offset)
            if self._is_char("=", token):
                return True
            if not self._is_char(".", token):
                return False
            if self.lexer.peek_token(offset + 1).type is not TokenType.ID:
                return False
            offset += 2

    def _parse_dotted_ids(self) -> List[str]:
        names = [self._consume_id()]
        while self._is_char(".") and self.lexer.peek_token().type is TokenType.ID:
            self._advance()
            names.append(self._consume_id())
        return names

    def parse_suite(self) -> Compound:
        self._consume_char(":")
        self._consume(TokenType.NEWLINE)
        self._consume(TokenType.INDENT)
        body = Compound()
        while self.token.type is not TokenType.DEDENT:
            if self.token.type is TokenType.EOF:
                raise self._error("unexpected end of input inside a block")
            body.add_statement(self.parse_statement())
        self._consume(TokenType.DEDENT)
        return body

    def parse_if(self) -> IfElse:
        self._consume(TokenType.IF)
        condition = self.parse_expression()
        if_body = self.parse_suite()
        else_body = None
        if self.token.type is TokenType.ELSE:
            self._advance()
            else_body = self.parse_suite()
        return IfElse(condition, if_body, else_body)

    def parse_class_definition(self) -> ClassDefinition:
        self._consume(TokenType.CLASS)
        name = self._consume_id()
        parent = None
        if self._is_char("("):
            self._advance()
            parent_name = self._consume_id()
            parent = self.classes.get(parent_name)
            if parent is None:
                raise self._error(f"unknown base class '{parent_name}'")
            self._consume_char(")")

        # Registered before the body so methods can instantiate their own class.
        cls = Class(name, [], parent)
        self.classes[name] = cls

        self._consume_char(":")
        self._consume(TokenType.NEWLINE)
        self._consume(TokenType.INDENT)
        while self.token.type is TokenType.DEF:
            cls.methods.append(self.parse_method())
        self._consume(TokenType.DEDENT)

        logger.debug("parsed class %s with %d method(s)", name, len(cls.methods))
        return ClassDefinition(cls)

    def parse_method(self) -> Method:
        self._consume(TokenType.DEF)
        name = self._consume_id()
        self._consume_char("(")
        params: List[str] = []
        if not self._is_char(")"):
            params.append(self._consume_id())
            while self._is_char(","):
                self._advance()
                params.append(self._consume_id())
        self._consume_char(")")
        return Method(name, params, MethodBody(self.parse_suite()))

    # ----- expressions -----

    def parse_expression(self) -> Statement:
        result = self._parse_and()
        while self.token.type is TokenType.OR:
            self._advance()
            result = Or(result, self._parse_and())
        return result

    def _parse_and(self) -> Statement:
        result = self._parse_not()
        while self.token.type is TokenType.AND:
            self._advance()
            result = And(result, self._parse_not())
        return result

    def _parse_not(self) -> Statement:
        if self.token.type is TokenType.NOT:
            self._advance()
            return Not(self._parse_not())
        return self._parse_comparison()

    def _parse_comparison(self) -> Statement:
        lhs = self._parse_sum()
        op = _COMPARISON_TOKENS.get(self.token.type)
        if op is None and (self._is_char("<") or self._is_char(">")):
            op = self.token.value
        if op is None:
            return lhs
        self._advance()
        return Comparison(COMPARATORS[op], lhs, self._parse_sum())

    def _parse_sum(self) -> Statement:
        result = self._parse_term()
        while self._is_char("+") or self._is_char("-"):
            op = self.token.value
            self._advance()
            rhs = self._parse_term()
            result = Add(result, rhs) if op == "+" else Sub(result, rhs)
        return result

    def _parse_term(self) -> Statement:
        result = self._parse_unary()
        while self._is_char("*") or self._is_char("/"):
            op = self.token.value
            self._advance()
            rhs = self._parse_unary()
            result = Mult(result, rhs) if op == "*" else Div(result, rhs)
        return result

    def _parse_unary(self) -> Statement:
        if self._is_char("-"):
            self._advance()
            if self.token.type is TokenType.NUMBER:
                value = self.token.value
                self._advance()
                return NumericConst(-value)
            return Mult(NumericConst(-1), self._parse_unary())
        return self._parse_primary()

    def _parse_primary(self) -> Statement:
        token = self.token

        if token.type is TokenType.NUMBER:
            self._advance()
            return NumericConst(token.value)
        if token.type is TokenType.STRING:
            self._advance()
            return StringConst(token.value)
        if token.type is TokenType.TRUE:
            self._advance()
            return BoolConst(True)
        if token.type is TokenType.FALSE:
            self._advance()
            return BoolConst(False)
        if token.type is TokenType.NONE:
            self._advance()
            return NoneConst()
        if self._is_char("("):
            self._advance()
            result = self.parse_expression()
            self._consume_char(")")
            return result
        if token.type is TokenType.ID:
            return self._parse_name()

        raise self._error("expected an expression")

    def _parse_call_args(self) -> List[Statement]:
        self._consume_char("(")
        args: List[Statement] = []
        if not self._is_char(")"):
            args.append(self.parse_expression())
            while self._is_char(","):
                self._advance()
                args.append(self.parse_expression())
        self._consume_char(")")
        return args

    def _parse_name(self) -> Statement:
        names = self._parse_dotted_ids()

        if not self._is_char("("):
            return VariableValue(names)

        result: Statement
        if len(names) > 1:
            result = self._method_call(VariableValue(names[:-1]), names[-1], self._parse_call_args())
        elif names[0] in self.classes:
            result = NewInstance(self.classes[names[0]], self._parse_call_args())
        elif names[0] == "str":
            args = self._parse_call_args()
            if len(args) != 1:
                raise self._error("str() takes exactly one argument")
            result = Stringify(args[0])
        else:
            raise self._error(f"unknown class '{names[0]}'")

        # Point(1, 2).norm(), x.f().g(), Point(1, 2).x
        while self._is_char("."):
            self._advance()
            name = self._consume_id()
            if self._is_char("("):
                result = self._method_call(result, name, self._parse_call_args())
            else:
                result = FieldValue(result, name)
        return result

    def _method_call(self, obj: Statement, method: str, args: List[Statement]) -> MethodCall:
        return MethodCall(obj, method, args, strict=self.strict_method_calls)


def parse_program(source: str, *, strict_method_calls: bool = False) -> Compound:
    return Parser(Lexer(source), strict_method_calls=strict_method_calls).parse_program()
