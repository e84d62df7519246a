from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence, Union

from .classes import ADD_METHOD, INIT_METHOD, Class, ClassInstance
from .common import (
    DivisionByZeroError,
    MethodNotFoundError,
    OperandTypeError,
    Statement,
    UndefinedNameError,
)
from .helpers import Comparator
from .objects import Bool, Number, Object, ObjectHolder, String, render

if TYPE_CHECKING:
    from .scopes import Closure, Context


class ValueStatement(Statement):
    """A literal. Values are immutable, so every evaluation hands out the same holder."""

    __slots__ = ("holder",)

    def __init__(self, obj: Object | None):
        self.holder = ObjectHolder.none() if obj is None else ObjectHolder.own(obj)

    def evaluate(self, closure: "Closure", context: "Context") -> ObjectHolder:
        return self.holder


class NumericConst(ValueStatement):
    __slots__ = ()

    def __init__(self, value: int):
        super().__init__(Number(value))


class StringConst(ValueStatement):
    __slots__ = ()

    def __init__(self, value: str):
        super().__init__(String(value))


class BoolConst(ValueStatement):
    __slots__ = ()

    def __init__(self, value: bool):
        super().__init__(Bool(value))


class NoneConst(ValueStatement):
    __slots__ = ()

    def __init__(self):
        super().__init__(None)


class VariableValue(Statement):
    """`name` or a dotted path `a.b.c` resolved through instance field tables."""

    __slots__ = ("dotted_ids",)

    def __init__(self, dotted_ids: Union[str, Sequence[str]]):
        if isinstance(dotted_ids, str):
            dotted_ids = [dotted_ids]
        if not dotted_ids:
            raise ValueError("VariableValue needs at least one name")
        self.dotted_ids: List[str] = list(dotted_ids)

    def evaluate(self, closure: "Closure", context: "Context") -> ObjectHolder:
        head, *rest = self.dotted_ids
        result = closure.load(head)
        path = head
        for name in rest:
            instance = result.try_as(ClassInstance)
            if instance is None:
                raise UndefinedNameError(f"'{path}' is not an object, cannot read '{name}'")
            if name not in instance.fields:
                raise UndefinedNameError(f"'{path}' has no field '{name}'")
            result = instance.fields[name]
            path = f"{path}.{name}"
        return result


class FieldValue(Statement):
    """Field read on the result of an arbitrary expression: `Point(1, 2).x`."""

    __slots__ = ("obj", "field_name")

    def __init__(self, obj: Statement, field_name: str):
        self.obj = obj
        self.field_name = field_name

    def evaluate(self, closure: "Closure", context: "Context") -> ObjectHolder:
        value = self.obj.evaluate(closure, context)
        instance = value.try_as(ClassInstance)
        if instance is None:
            raise UndefinedNameError(f"{kind_name(value)} is not an object, cannot read '{self.field_name}'")
        if self.field_name not in instance.fields:
            raise UndefinedNameError(f"'{instance.cls.name}' object has no field '{self.field_name}'")
        return instance.fields[self.field_name]


class Stringify(Statement):
    __slots__ = ("argument",)

    def __init__(self, argument: Statement):
        self.argument = argument

    def evaluate(self, closure: "Closure", context: "Context") -> ObjectHolder:
        value = self.argument.evaluate(closure, context)
        context.require_output()
        return ObjectHolder.own(String(render(value, context)))


class BinaryOperation(Statement):
    __slots__ = ("lhs", "rhs")

    def __init__(self, lhs: Statement, rhs: Statement):
        self.lhs = lhs
        self.rhs = rhs

    def _operands(self, closure: "Closure", context: "Context") -> tuple[ObjectHolder, ObjectHolder]:
        # Both sides always run, left first.
        lhs = self.lhs.evaluate(closure, context)
        rhs = self.rhs.evaluate(closure, context)
        return lhs, rhs

    def _numbers(self, lhs: ObjectHolder, rhs: ObjectHolder, verb: str) -> tuple[int, int]:
        left = lhs.try_as(Number)
        right = rhs.try_as(Number)
        if left is None or right is None:
            raise OperandTypeError(f"cannot {verb} {kind_name(lhs)} and {kind_name(rhs)}")
        return left.value, right.value


class Add(BinaryOperation):
    __slots__ = ()

    def evaluate(self, closure: "Closure", context: "Context") -> ObjectHolder:
        lhs, rhs = self._operands(closure, context)

        left_num, right_num = lhs.try_as(Number), rhs.try_as(Number)
        if left_num is not None and right_num is not None:
            return ObjectHolder.own(Number(left_num.value + right_num.value))

        left_str, right_str = lhs.try_as(String), rhs.try_as(String)
        if left_str is not None and right_str is not None:
            return ObjectHolder.own(String(left_str.value + right_str.value))

        instance = lhs.try_as(ClassInstance)
        if instance is not None and instance.has_method(ADD_METHOD, 1):
            return instance.call(ADD_METHOD, [rhs], context)

        raise OperandTypeError(f"cannot add {kind_name(lhs)} and {kind_name(rhs)}")


class Sub(BinaryOperation):
    __slots__ = ()

    def evaluate(self, closure: "Closure", context: "Context") -> ObjectHolder:
        left, right = self._numbers(*self._operands(closure, context), "subtract")
        return ObjectHolder.own(Number(left - right))


class Mult(BinaryOperation):
    __slots__ = ()

    def evaluate(self, closure: "Closure", context: "Context") -> ObjectHolder:
        left, right = self._numbers(*self._operands(closure, context), "multiply")
        return ObjectHolder.own(Number(left * right))


class Div(BinaryOperation):
    __slots__ = ()

    def evaluate(self, closure: "Closure", context: "Context") -> ObjectHolder:
        left, right = self._numbers(*self._operands(closure, context), "divide")
        if right == 0:
            raise DivisionByZeroError("integer division by zero")
        return ObjectHolder.own(Number(_truncating_div(left, right)))


class Or(BinaryOperation):
    __slots__ = ()

    def evaluate(self, closure: "Closure", context: "Context") -> ObjectHolder:
        left, right = _bools(*self._operands(closure, context), "or")
        return ObjectHolder.own(Bool(left or right))


class And(BinaryOperation):
    __slots__ = ()

    def evaluate(self, closure: "Closure", context: "Context") -> ObjectHolder:
        left, right = _bools(*self._operands(closure, context), "and")
        return ObjectHolder.own(Bool(left and right))


class Not(Statement):
    __slots__ = ("argument",)

    def __init__(self, argument: Statement):
        self.argument = argument

    def evaluate(self, closure: "Closure", context: "Context") -> ObjectHolder:
        value = self.argument.evaluate(closure, context)
        flag = value.try_as(Bool)
        if flag is None:
            raise OperandTypeError(f"'not' needs a Bool, got {kind_name(value)}")
        return ObjectHolder.own(Bool(not flag.value))


class Comparison(BinaryOperation):
    __slots__ = ("comparator",)

    def __init__(self, comparator: Comparator, lhs: Statement, rhs: Statement):
        super().__init__(lhs, rhs)
        self.comparator = comparator

    def evaluate(self, closure: "Closure", context: "Context") -> ObjectHolder:
        lhs, rhs = self._operands(closure, context)
        return ObjectHolder.own(Bool(self.comparator(lhs, rhs, context)))


class NewInstance(Statement):
    __slots__ = ("cls", "args")

    def __init__(self, cls: Class, args: Sequence[Statement] = ()):
        self.cls = cls
        self.args = list(args)

    def evaluate(self, closure: "Closure", context: "Context") -> ObjectHolder:
        instance = ClassInstance(self.cls)
        holder = ObjectHolder.own(instance)
        # No matching __init__ is fine; the instance just starts without fields.
        if instance.has_method(INIT_METHOD, len(self.args)):
            actual_args = [arg.evaluate(closure, context) for arg in self.args]
            instance.call(INIT_METHOD, actual_args, context)
        return holder


class MethodCall(Statement):
    """
    `obj.method(args)`.

    A method that does not exist for this arity yields None unless `strict`
    is set, in which case the call fails like any other lookup.
    """

    __slots__ = ("obj", "method", "args", "strict")

    def __init__(
        self, obj: Statement, method: str, args: Sequence[Statement] = (), *, strict: bool = False
    ):
        self.obj = obj
        self.method = method
        self.args = list(args)
        self.strict = strict

    def evaluate(self, closure: "Closure", context: "Context") -> ObjectHolder:
        receiver = self.obj.evaluate(closure, context)
        instance = receiver.try_as(ClassInstance)
        if instance is None:
            raise OperandTypeError(f"cannot call method '{self.method}' on {kind_name(receiver)}")
        if not instance.has_method(self.method, len(self.args)):
            if self.strict:
                raise MethodNotFoundError(
                    f"method '{self.method}' taking {len(self.args)} argument(s) "
                    f"is not found in class '{instance.cls.name}'"
                )
            return ObjectHolder.none()
        actual_args = [arg.evaluate(closure, context) for arg in self.args]
        return instance.call(self.method, actual_args, context)


def kind_name(holder: ObjectHolder) -> str:
    obj = holder.get()
    if obj is None:
        return "None"
    if isinstance(obj, ClassInstance):
        return obj.cls.name
    return type(obj).__name__


def _bools(lhs: ObjectHolder, rhs: ObjectHolder, op: str) -> tuple[bool, bool]:
    left = lhs.try_as(Bool)
    right = rhs.try_as(Bool)
    if left is None or right is None:
        raise OperandTypeError(f"'{op}' needs two Bools, got {kind_name(lhs)} and {kind_name(rhs)}")
    return left.value, right.value


def _truncating_div(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return -quotient if (left < 0) != (right < 0) else quotient
