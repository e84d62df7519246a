from __future__ import annotations

import io
import logging
import sys
from dataclasses import dataclass
from collections.abc import Mapping
from typing import Any, Optional

from .common import MythonError, Returning, Statement
from .objects import ObjectHolder
from .parser import parse_program
from .scopes import Closure, Context, SimpleContext
from .statements import Compound

logger = logging.getLogger(__name__)

# Each Mython call costs several Python frames.
RECURSION_LIMIT = 10_000


@dataclass
class RunResult:
    closure: Closure
    output: Any
    value: ObjectHolder
    exception: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.exception is None

    def raise_for_exception(self) -> None:
        if self.exception is not None:
            raise self.exception


class InterpreterCore:
    def __init__(self, strict_method_calls: bool = False, recursion_limit: int = RECURSION_LIMIT):
        """
        strict_method_calls:
          - False -> `obj.missing()` evaluates to None
          - True  -> `obj.missing()` raises MethodNotFoundError
        recursion_limit:
          - Python recursion limit while a program runs; never lowers the
            interpreter's current limit
        """
        self.strict_method_calls = bool(strict_method_calls)
        self.recursion_limit = int(recursion_limit)

    def make_default_closure(self, closure: Optional[Mapping[str, ObjectHolder]] = None) -> Closure:
        if closure is None:
            return Closure()
        if not isinstance(closure, Mapping):
            raise TypeError("closure must be a mapping or None")
        return Closure(closure)

    def parse(self, source: str) -> Compound:
        return parse_program(source, strict_method_calls=self.strict_method_calls)

    # ----- run -----

    def execute(self, program: Statement, closure: Closure, context: Context) -> ObjectHolder:
        """Evaluate an already-built tree; a top-level `return` yields its value."""
        result = program.evaluate(closure, context)
        if isinstance(result, Returning):
            return result.value
        return result

    def run(
        self,
        source: str,
        closure: Optional[Closure] = None,
        output: Any = None,
    ) -> RunResult:
        """
        Parse and execute `source`.

        Program output goes to `output` (an in-memory buffer by default).
        Failures are reported on the result, not raised; whatever was
        printed before the failure stays printed.
        """
        if closure is None:
            closure = Closure()
        elif not isinstance(closure, Closure):
            raise TypeError("closure must be a Closure")
        if output is None:
            output = io.StringIO()

        logger.debug("running program (%d chars)", len(source))
        result = RunResult(closure=closure, output=output, value=ObjectHolder.none())
        previous_limit = sys.getrecursionlimit()
        sys.setrecursionlimit(max(previous_limit, self.recursion_limit))
        try:
            program = self.parse(source)
            result.value = self.execute(program, closure, SimpleContext(output))
        except (MythonError, RecursionError) as exc:
            logger.debug("program failed: %s", exc, exc_info=True)
            result.exception = exc
        else:
            logger.debug("program finished")
        finally:
            sys.setrecursionlimit(previous_limit)
        return result
