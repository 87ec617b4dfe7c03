import asyncio
import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import common...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

import pytest

from common.validation_engine.check import Check
from common.validation_engine.context import ValidationContext
from common.validation_engine.runner import CheckRunner


class StubCheck(Check):
    """Check with a scripted result; counts invocations for assertions."""

    name = "Stub"

    def __init__(self, name: str, *, passed: bool = True, delay: float = 0.0, error=None, **overrides):
        super().__init__(name=name, **overrides)
        self._passed = passed
        self._delay = delay
        self._error = error
        self.calls = 0
        self.completed = 0

    async def evaluate(self, context):
        self.calls += 1
        if self._delay:
            await asyncio.sleep(self._delay)
        self.completed += 1
        if self._error is not None:
            raise self._error
        return self.outcome(self._passed, "stub passed" if self._passed else "stub failed", {"issues": []})


@pytest.fixture
def make_stub():
    def _make(name: str, **kwargs) -> StubCheck:
        return StubCheck(name, **kwargs)

    return _make


@pytest.fixture
def make_ctx():
    def _make(**values) -> ValidationContext:
        return ValidationContext(values)

    return _make


@pytest.fixture
def make_runner():
    def _make(checks=(), **options) -> CheckRunner:
        return CheckRunner(list(checks), **options)

    return _make
