from __future__ import annotations

import io
from typing import TYPE_CHECKING, Any, Optional, Type, TypeVar

if TYPE_CHECKING:
    from .scopes import Context

T = TypeVar("T", bound="Object")


class Object:
    """A Mython runtime value. Every kind knows how to render itself."""

    __slots__ = ()

    def print(self, stream: Any, context: "Context") -> None:
        raise NotImplementedError


class ValueObject(Object):
    __slots__ = ("value",)

    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


class Number(ValueObject):
    def __init__(self, value: int):
        super().__init__(int(value))

    def print(self, stream: Any, context: "Context") -> None:
        stream.write(str(self.value))


class String(ValueObject):
    def __init__(self, value: str):
        super().__init__(str(value))

    def print(self, stream: Any, context: "Context") -> None:
        stream.write(self.value)


class Bool(ValueObject):
    def __init__(self, value: bool):
        super().__init__(bool(value))

    def print(self, stream: Any, context: "Context") -> None:
        stream.write("True" if self.value else "False")


class ObjectHolder:
    """
    A nullable reference to a runtime object.

    Three states:
      - empty: the Mython `None`
      - owning: wraps an object constructed for this holder (`own`)
      - sharing: aliases an object that some other holder already reaches
        (`share`), e.g. `self` inside a method call

    Python keeps every reachable object alive, so the owning/sharing flag is
    bookkeeping only; both states point at the same storage and mutations
    through either are visible through the other.
    """

    __slots__ = ("_data", "_owned")

    def __init__(self, data: Optional[Object] = None, *, owned: bool = True):
        self._data = data
        self._owned = owned and data is not None

    @classmethod
    def own(cls, obj: Object) -> "ObjectHolder":
        if obj is None:
            raise ValueError("ObjectHolder.own() requires an object")
        return cls(obj, owned=True)

    @classmethod
    def share(cls, obj: Object) -> "ObjectHolder":
        if obj is None:
            raise ValueError("ObjectHolder.share() requires an object")
        return cls(obj, owned=False)

    @classmethod
    def none(cls) -> "ObjectHolder":
        return cls()

    @property
    def owned(self) -> bool:
        return self._owned

    def get(self) -> Optional[Object]:
        return self._data

    def deref(self) -> Object:
        if self._data is None:
            raise RuntimeError("dereferenced an empty ObjectHolder")
        return self._data

    def try_as(self, kind: Type[T]) -> Optional[T]:
        data = self._data
        if data is not None and isinstance(data, kind):
            return data
        return None

    def __bool__(self) -> bool:
        return self._data is not None

    def __repr__(self) -> str:
        if self._data is None:
            return "<ObjectHolder None>"
        mode = "own" if self._owned else "share"
        return f"<ObjectHolder {mode} {self._data!r}>"


def is_true(holder: ObjectHolder) -> bool:
    obj = holder.get()
    if obj is None:
        return False
    if isinstance(obj, Bool):
        return obj.value
    if isinstance(obj, Number):
        return obj.value != 0
    if isinstance(obj, String):
        return obj.value != ""
    return False


def render(holder: ObjectHolder, context: "Context") -> str:
    """Text a holder prints as; the empty holder renders as `None`."""
    obj = holder.get()
    if obj is None:
        return "None"
    buf = io.StringIO()
    obj.print(buf, context)
    return buf.getvalue()
