from __future__ import annotations

import sys
from pathlib import Path

# Allow importing the package when running plain `pytest` without an editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

import pytest

from mython import Interpreter


@pytest.fixture
def run_program():
    def _run(source: str, *, strict_method_calls: bool = False) -> str:
        interpreter = Interpreter(strict_method_calls=strict_method_calls)
        result = interpreter.run(source, closure=interpreter.make_default_closure())
        result.raise_for_exception()
        return result.output.getvalue()

    return _run
