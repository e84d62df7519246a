from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .objects import ObjectHolder


class MythonError(Exception):
    """Base class for every failure raised while lexing, parsing or evaluating."""


class UndefinedNameError(MythonError, NameError):
    pass


class MethodNotFoundError(MythonError, AttributeError):
    pass


class OperandTypeError(MythonError, TypeError):
    pass


class DivisionByZeroError(MythonError, ZeroDivisionError):
    pass


class ComparisonError(MythonError, TypeError):
    pass


class OutputNotAvailableError(MythonError, RuntimeError):
    pass


class LexerError(MythonError, SyntaxError):
    pass


class ParseError(MythonError, SyntaxError):
    pass


class Statement:
    """An executable AST node: `evaluate(closure, context)` -> ObjectHolder."""

    __slots__ = ()

    def evaluate(self, closure, context):
        raise NotImplementedError


class Returning:
    """
    Result of evaluating `return expr`.

    Statement nodes hand it upward unchanged until a method-call boundary
    unwraps it into the plain holder.
    """

    __slots__ = ("value",)

    def __init__(self, value: "ObjectHolder"):
        self.value = value

    def __repr__(self) -> str:
        return f"<Returning {self.value!r}>"
