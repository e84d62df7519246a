from __future__ import annotations

from pathlib import Path
from typing import Any

from .core import InterpreterCore, RunResult


class Interpreter(InterpreterCore):
    def run_path(self, path: str | Path, output: Any = None) -> RunResult:
        source = Path(path).read_text()
        return self.run(source, closure=self.make_default_closure(), output=output)
