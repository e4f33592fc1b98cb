"""Test configuration and shared fixtures."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from opdispatch.core.resolver import Resolver
from opdispatch.eval.machine import Evaluator
from opdispatch.eval.value import ClassDef, Instance, ValueHost


class CallLog:
    """Records every override invocation as (class, method, args)."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, tuple[Any, ...]]] = []

    def recording(self, cls_name: str, method: str, result: Callable[..., Any]) -> Callable[..., Any]:
        def override(this: Instance, *args: Any) -> Any:
            self.calls.append((cls_name, method, args))
            return result(this, *args)

        return override

    def methods(self) -> list[str]:
        return [method for _, method, _ in self.calls]


@pytest.fixture
def call_log() -> CallLog:
    return CallLog()


@pytest.fixture
def resolver() -> Resolver:
    return Resolver(ValueHost())


@pytest.fixture
def evaluator() -> Evaluator:
    return Evaluator()


@pytest.fixture
def make_class(call_log: CallLog) -> Callable[..., ClassDef]:
    """Define a one-field class whose overrides are recorded in ``call_log``.

    Usage: make_class("A", __add=lambda this, other, left: ...)
    """

    def _make(name: str, **overrides: Callable[..., Any]) -> ClassDef:
        methods = {m: call_log.recording(name, m, impl) for m, impl in overrides.items()}
        return ClassDef(name, ("value",), methods)

    return _make
