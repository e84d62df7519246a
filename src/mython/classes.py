from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Sequence

from .common import MethodNotFoundError, Returning
from .objects import Object, ObjectHolder
from .scopes import Closure

if TYPE_CHECKING:
    from .scopes import Context

logger = logging.getLogger(__name__)

INIT_METHOD = "__init__"
ADD_METHOD = "__add__"
EQ_METHOD = "__eq__"
LT_METHOD = "__lt__"
STR_METHOD = "__str__"
SELF_NAME = "self"


class Method:
    __slots__ = ("name", "formal_params", "body")

    def __init__(self, name: str, formal_params: Sequence[str], body: Any):
        self.name = name
        self.formal_params = list(formal_params)
        self.body = body

    def __repr__(self) -> str:
        return f"<Method {self.name}({', '.join(self.formal_params)})>"


class Class(Object):
    """
    A user-defined class: a name, its own methods and an optional parent.

    Method lookup is by name only. Arity is checked by the caller, so a
    method can be found yet still be inapplicable to a given call.
    """

    __slots__ = ("name", "methods", "parent")

    def __init__(self, name: str, methods: Sequence[Method], parent: Optional["Class"] = None):
        self.name = name
        self.methods = list(methods)
        self.parent = parent

    def get_method(self, name: str) -> Optional[Method]:
        for method in self.methods:
            if method.name == name:
                return method
        if self.parent is not None:
            return self.parent.get_method(name)
        return None

    def print(self, stream: Any, context: "Context") -> None:
        stream.write(f"Class {self.name}")

    def __repr__(self) -> str:
        return f"<Class {self.name}>"


class ClassInstance(Object):
    __slots__ = ("cls", "fields", "__weakref__")

    def __init__(self, cls: Class):
        self.cls = cls
        self.fields = Closure()

    def has_method(self, name: str, argument_count: int) -> bool:
        method = self.cls.get_method(name)
        return method is not None and len(method.formal_params) == argument_count

    def call(self, name: str, args: Sequence[ObjectHolder], context: "Context") -> ObjectHolder:
        if not self.has_method(name, len(args)):
            raise MethodNotFoundError(
                f"method '{name}' taking {len(args)} argument(s) "
                f"is not found in class '{self.cls.name}'"
            )
        method = self.cls.get_method(name)
        logger.debug("calling %s.%s with %d argument(s)", self.cls.name, name, len(args))

        # Each call gets its own flat table: positional formals plus `self`.
        call_closure = Closure(dict(zip(method.formal_params, args)))
        call_closure[SELF_NAME] = ObjectHolder.share(self)

        result = method.body.evaluate(call_closure, context)
        if isinstance(result, Returning):
            return result.value
        return result

    def print(self, stream: Any, context: "Context") -> None:
        if self.has_method(STR_METHOD, 0):
            text = self.call(STR_METHOD, [], context)
            if text:
                text.deref().print(stream, context)
            else:
                stream.write("None")
            return
        stream.write(f"<{self.cls.name} object at {id(self):#x}>")

    def __repr__(self) -> str:
        return f"<ClassInstance of {self.cls.name}>"
