"""Error types raised by the dispatch engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from opdispatch.core.operators import OperatorKind


class DispatchError(Exception):
    """Base class for dispatch failures."""


class InvalidOperator(DispatchError):
    """No override applies and the host has no built-in rule for the operands."""

    def __init__(
        self,
        symbol: str,
        left_type: str,
        right_type: str | None = None,
    ):
        self.symbol = symbol
        self.left_type = left_type
        self.right_type = right_type
        if right_type is None:
            message = f"Unsupported operand type for unary {symbol}: '{left_type}'"
        else:
            message = f"Unsupported operand types for {symbol}: '{left_type}' and '{right_type}'"
        super().__init__(message)


class MalformedOverrideResult(DispatchError):
    """An ordering override returned something that is not an integer."""

    def __init__(self, kind: OperatorKind, value: Any, type_name: str):
        self.kind = kind
        self.value = value
        self.type_name = type_name
        super().__init__(
            f"{kind.spec.method_name} must return an integer, got {type_name} ({value!r})"
        )


class UnknownOperator(DispatchError):
    """Symbol or method name that is not in the operator registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown operator: {name}")


class ArityError(DispatchError):
    """Operator kind used with the wrong number of operands."""

    def __init__(self, kind: OperatorKind, expected: int):
        self.kind = kind
        self.expected = expected
        noun = "operand" if expected == 1 else "operands"
        super().__init__(f"Operator {kind.spec.symbol} takes {expected} {noun}")
