"""Interpreter host for the dispatch engine."""

from opdispatch.eval.machine import EvalError, Evaluator
from opdispatch.eval.value import Builtin, ClassDef, Instance, ValueHost, show

__all__ = [
    "Builtin",
    "ClassDef",
    "EvalError",
    "Evaluator",
    "Instance",
    "ValueHost",
    "show",
]
