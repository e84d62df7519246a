from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Sequence, Union

from .classes import Class, ClassInstance
from .common import OperandTypeError, Returning, Statement
from .expressions import VariableValue, kind_name
from .objects import Bool, ObjectHolder

if TYPE_CHECKING:
    from .scopes import Closure, Context

logger = logging.getLogger(__name__)

Result = Union[ObjectHolder, Returning]


class Assignment(Statement):
    __slots__ = ("var", "rv")

    def __init__(self, var: str, rv: Statement):
        self.var = var
        self.rv = rv

    def evaluate(self, closure: "Closure", context: "Context") -> ObjectHolder:
        # Classes live in the same table, so this may replace one.
        return closure.store(self.var, self.rv.evaluate(closure, context))


class FieldAssignment(Statement):
    __slots__ = ("obj", "field_name", "rv")

    def __init__(self, obj: Statement, field_name: str, rv: Statement):
        self.obj = obj
        self.field_name = field_name
        self.rv = rv

    def evaluate(self, closure: "Closure", context: "Context") -> ObjectHolder:
        target = self.obj.evaluate(closure, context)
        instance = target.try_as(ClassInstance)
        if instance is None:
            raise OperandTypeError(f"cannot set field '{self.field_name}' on {kind_name(target)}")
        return instance.fields.store(self.field_name, self.rv.evaluate(closure, context))


class Print(Statement):
    __slots__ = ("args",)

    def __init__(self, args: Union[Statement, Sequence[Statement]] = ()):
        if isinstance(args, Statement):
            args = [args]
        self.args: List[Statement] = list(args)

    @classmethod
    def variable(cls, name: str) -> "Print":
        return cls(VariableValue(name))

    def evaluate(self, closure: "Closure", context: "Context") -> ObjectHolder:
        out = context.output
        for index, arg in enumerate(self.args):
            value = arg.evaluate(closure, context)
            if index:
                out.write(" ")
            obj = value.get()
            if obj is None:
                out.write("None")
            else:
                obj.print(out, context)
        out.write("\n")
        return ObjectHolder.none()


class Return(Statement):
    __slots__ = ("statement",)

    def __init__(self, statement: Statement):
        self.statement = statement

    def evaluate(self, closure: "Closure", context: "Context") -> Returning:
        return Returning(self.statement.evaluate(closure, context))


class ClassDefinition(Statement):
    __slots__ = ("cls",)

    def __init__(self, cls: Union[Class, ObjectHolder]):
        if isinstance(cls, Class):
            cls = ObjectHolder.own(cls)
        if cls.try_as(Class) is None:
            raise TypeError("ClassDefinition expects a Class")
        self.cls = cls

    def evaluate(self, closure: "Closure", context: "Context") -> ObjectHolder:
        name = self.cls.deref().name
        logger.debug("defining class %s", name)
        closure.store(name, self.cls)
        return ObjectHolder.none()


class IfElse(Statement):
    __slots__ = ("condition", "if_body", "else_body")

    def __init__(
        self, condition: Statement, if_body: Statement, else_body: Optional[Statement] = None
    ):
        self.condition = condition
        self.if_body = if_body
        self.else_body = else_body

    def evaluate(self, closure: "Closure", context: "Context") -> Result:
        test = self.condition.evaluate(closure, context)
        flag = test.try_as(Bool)
        if flag is None:
            raise OperandTypeError(f"if condition must be a Bool, got {kind_name(test)}")
        if flag.value:
            return self.if_body.evaluate(closure, context)
        if self.else_body is not None:
            return self.else_body.evaluate(closure, context)
        return ObjectHolder.none()


class Compound(Statement):
    """
    A block of statements sharing one closure.

    The first statement that evaluates to `Returning` ends the block, and the
    marker is passed on so it escapes every enclosing block up to the method
    call. Other results are dropped.
    """

    __slots__ = ("statements",)

    def __init__(self, *statements: Statement):
        self.statements: List[Statement] = list(statements)

    def add_statement(self, statement: Statement) -> None:
        self.statements.append(statement)

    def evaluate(self, closure: "Closure", context: "Context") -> Result:
        for statement in self.statements:
            result = statement.evaluate(closure, context)
            if isinstance(result, Returning):
                return result
        return ObjectHolder.none()


class MethodBody(Statement):
    __slots__ = ("body",)

    def __init__(self, body: Statement):
        self.body = body

    def evaluate(self, closure: "Closure", context: "Context") -> ObjectHolder:
        result = self.body.evaluate(closure, context)
        if isinstance(result, Returning):
            return result.value
        return ObjectHolder.none()
