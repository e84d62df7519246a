from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any, Dict, Iterator, Mapping, Optional

from .common import OutputNotAvailableError, UndefinedNameError
from .objects import ObjectHolder


class Closure(MutableMapping):
    """
    One flat name -> ObjectHolder table.

    Used for the global scope, for each method call, and as the field table
    of a class instance. There is no parent chain: a lookup that misses here
    misses everywhere.
    """

    __slots__ = ("_vars",)

    def __init__(self, values: Optional[Mapping[str, ObjectHolder]] = None):
        self._vars: Dict[str, ObjectHolder] = dict(values or {})

    def load(self, name: str) -> ObjectHolder:
        try:
            return self._vars[name]
        except KeyError:
            raise UndefinedNameError(f"name '{name}' is not defined") from None

    def store(self, name: str, value: ObjectHolder) -> ObjectHolder:
        self._vars[name] = value
        return value

    def __getitem__(self, name: str) -> ObjectHolder:
        return self._vars[name]

    def __setitem__(self, name: str, value: ObjectHolder) -> None:
        self._vars[name] = value

    def __delitem__(self, name: str) -> None:
        del self._vars[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)

    def __repr__(self) -> str:
        return f"Closure({sorted(self._vars)!r})"


class Context:
    """Execution context handed to every evaluation; owns nothing but the output sink."""

    @property
    def output(self) -> Any:
        raise NotImplementedError

    def require_output(self) -> None:
        """Raise if this context must not produce text (print or str())."""


class SimpleContext(Context):
    def __init__(self, output: Any):
        self._output = output

    @property
    def output(self) -> Any:
        return self._output


class DummyContext(Context):
    """
    Context for evaluations that must not print.

    Any attempt to reach the output sink raises, so a stray `print` or
    `str()` in a unit test fails loudly instead of writing somewhere.
    """

    @property
    def output(self) -> Any:
        raise OutputNotAvailableError("DummyContext has no output stream")

    def require_output(self) -> None:
        raise OutputNotAvailableError("DummyContext does not allow rendering output")
