"""Host collaborator interface.

The engine never evaluates primitives or calls user code on its own. Every
such step goes through a ``Host``: invoking an override handle, built-in
arithmetic for native operands, truthiness, equality and ordering.
"""

from __future__ import annotations

import operator
from enum import Enum
from typing import Any, Callable, Protocol, Sequence

from opdispatch.core.operators import OperatorKind
from opdispatch.core.table import CallableHandle


class _Unsupported(Enum):
    UNSUPPORTED = "unsupported"

    def __repr__(self) -> str:
        return "UNSUPPORTED"


# Returned by host fallbacks that have no built-in rule for their operands
UNSUPPORTED = _Unsupported.UNSUPPORTED


class Host(Protocol):
    """Everything the resolver needs from the embedding evaluator."""

    def invoke(self, handle: CallableHandle, receiver: Any, args: Sequence[Any]) -> Any: ...

    def truthy(self, value: Any) -> bool: ...

    def equals(self, left: Any, right: Any) -> bool: ...

    def compare(self, left: Any, right: Any) -> int | _Unsupported: ...

    def binary(self, kind: OperatorKind, left: Any, right: Any) -> Any: ...

    def unary(self, kind: OperatorKind, operand: Any) -> Any: ...

    def type_name(self, value: Any) -> str: ...


_BINARY_PRIMITIVES: dict[OperatorKind, Callable[[Any, Any], Any]] = {
    OperatorKind.ADD: operator.add,
    OperatorKind.SUB: operator.sub,
    OperatorKind.MUL: operator.mul,
    OperatorKind.DIV: operator.truediv,
    OperatorKind.MOD: operator.mod,
    OperatorKind.POW: operator.pow,
    OperatorKind.BIT_AND: operator.and_,
    OperatorKind.BIT_OR: operator.or_,
    OperatorKind.BIT_XOR: operator.xor,
    OperatorKind.SHIFT_LEFT: operator.lshift,
    OperatorKind.SHIFT_RIGHT: operator.rshift,
}

_UNARY_PRIMITIVES: dict[OperatorKind, Callable[[Any], Any]] = {
    OperatorKind.BIT_NOT: operator.invert,
}

_NATIVE_TYPES = (bool, int, float, str, type(None))


class PythonHost:
    """Host backed by Python's own semantics for native values.

    Natives are ``None``, booleans, ints, floats and strings. Combinations
    Python rejects with ``TypeError`` are reported as ``UNSUPPORTED`` so the
    resolver can raise its own error. Other failures, such as division by
    zero, propagate unchanged.
    """

    def invoke(self, handle: CallableHandle, receiver: Any, args: Sequence[Any]) -> Any:
        return handle(receiver, *args)

    def truthy(self, value: Any) -> bool:
        return bool(value)

    def equals(self, left: Any, right: Any) -> bool:
        if self._is_native(left) and self._is_native(right):
            return left == right
        return left is right

    def compare(self, left: Any, right: Any) -> int | _Unsupported:
        if not (self._is_native(left) and self._is_native(right)):
            return UNSUPPORTED
        try:
            if left < right:
                return -1
            if left > right:
                return 1
            if left == right:
                return 0
        except TypeError:
            return UNSUPPORTED
        # Unordered pair, e.g. NaN
        return UNSUPPORTED

    def binary(self, kind: OperatorKind, left: Any, right: Any) -> Any:
        impl = _BINARY_PRIMITIVES.get(kind)
        if impl is None or not (self._is_native(left) and self._is_native(right)):
            return UNSUPPORTED
        if left is None or right is None:
            return UNSUPPORTED
        try:
            return impl(left, right)
        except TypeError:
            return UNSUPPORTED

    def unary(self, kind: OperatorKind, operand: Any) -> Any:
        impl = _UNARY_PRIMITIVES.get(kind)
        if impl is None or not isinstance(operand, int) or isinstance(operand, bool):
            return UNSUPPORTED
        return impl(operand)

    def type_name(self, value: Any) -> str:
        if value is None:
            return "null"
        return type(value).__name__

    @staticmethod
    def _is_native(value: Any) -> bool:
        return isinstance(value, _NATIVE_TYPES)
