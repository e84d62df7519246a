from .classes import Class, ClassInstance, Method
from .common import (
    ComparisonError,
    DivisionByZeroError,
    LexerError,
    MethodNotFoundError,
    MythonError,
    OperandTypeError,
    OutputNotAvailableError,
    ParseError,
    Returning,
    UndefinedNameError,
)
from .core import RunResult
from .main import Interpreter
from .objects import Bool, Number, ObjectHolder, String, is_true
from .scopes import Closure, Context, DummyContext, SimpleContext

__all__ = [
    "Bool",
    "Class",
    "ClassInstance",
    "Closure",
    "ComparisonError",
    "Context",
    "DivisionByZeroError",
    "DummyContext",
    "Interpreter",
    "LexerError",
    "Method",
    "MethodNotFoundError",
    "MythonError",
    "Number",
    "ObjectHolder",
    "OperandTypeError",
    "OutputNotAvailableError",
    "ParseError",
    "Returning",
    "RunResult",
    "SimpleContext",
    "String",
    "UndefinedNameError",
    "is_true",
]
