from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from .classes import EQ_METHOD, LT_METHOD, ClassInstance
from .common import ComparisonError
from .objects import Bool, Number, ObjectHolder, String

if TYPE_CHECKING:
    from .scopes import Context

Comparator = Callable[[ObjectHolder, ObjectHolder, "Context"], bool]

_NATIVE_KINDS = (Bool, Number, String)


def _pass_by_reference(holder: ObjectHolder) -> ObjectHolder:
    obj = holder.get()
    return ObjectHolder.none() if obj is None else ObjectHolder.share(obj)


def _dispatch(method: str, lhs: ClassInstance, rhs: ObjectHolder, context: "Context") -> bool:
    if not lhs.has_method(method, 1):
        raise ComparisonError(f"cannot compare objects: '{lhs.cls.name}' has no {method}(other)")
    result = lhs.call(method, [_pass_by_reference(rhs)], context).try_as(Bool)
    if result is None:
        raise ComparisonError(f"{lhs.cls.name}.{method} must return a Bool")
    return result.value


def _native_pair(lhs: ObjectHolder, rhs: ObjectHolder):
    for kind in _NATIVE_KINDS:
        left = lhs.try_as(kind)
        right = rhs.try_as(kind)
        if left is not None and right is not None:
            return left.value, right.value
    return None


def equal(lhs: ObjectHolder, rhs: ObjectHolder, context: "Context") -> bool:
    if not lhs and not rhs:
        return True
    instance = lhs.try_as(ClassInstance)
    if instance is not None:
        return _dispatch(EQ_METHOD, instance, rhs, context)
    pair = _native_pair(lhs, rhs)
    if pair is None:
        raise ComparisonError("cannot compare objects for equality")
    return pair[0] == pair[1]


def less(lhs: ObjectHolder, rhs: ObjectHolder, context: "Context") -> bool:
    if not lhs and not rhs:
        raise ComparisonError("cannot compare None with None for order")
    instance = lhs.try_as(ClassInstance)
    if instance is not None:
        return _dispatch(LT_METHOD, instance, rhs, context)
    pair = _native_pair(lhs, rhs)
    if pair is None:
        raise ComparisonError("cannot compare objects for order")
    return pair[0] < pair[1]


def not_equal(lhs: ObjectHolder, rhs: ObjectHolder, context: "Context") -> bool:
    return not equal(lhs, rhs, context)


def greater(lhs: ObjectHolder, rhs: ObjectHolder, context: "Context") -> bool:
    return not less(lhs, rhs, context) and not equal(lhs, rhs, context)


def less_or_equal(lhs: ObjectHolder, rhs: ObjectHolder, context: "Context") -> bool:
    return not greater(lhs, rhs, context)


def greater_or_equal(lhs: ObjectHolder, rhs: ObjectHolder, context: "Context") -> bool:
    return not less(lhs, rhs, context)


COMPARATORS: dict[str, Comparator] = {
    "==": equal,
    "!=": not_equal,
    "<": less,
    "<=": less_or_equal,
    ">": greater,
    ">=": greater_or_equal,
}
