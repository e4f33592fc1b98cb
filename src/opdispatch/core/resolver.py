"""Operator resolution.

Decides which operand's override runs for an operator application, invokes
it through the host, normalizes the result and falls back to host semantics
or fails when nothing applies.

Binary resolution order:
    1. left operand's override, called with (right, left=True)
    2. right operand's override, called with (left, left=False)
    3. kind-specific fallback (host primitives, equality, ordering)

Step 2 only runs when the left operand has no entry for the kind. An override
that runs is final, whatever it returns or raises.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from loguru import logger

from opdispatch.core.errors import ArityError, InvalidOperator, MalformedOverrideResult
from opdispatch.core.host import UNSUPPORTED, Host, PythonHost
from opdispatch.core.operators import OperatorKind, ResultPolicy, spec_for
from opdispatch.core.table import CallableHandle, Overloadable, classify, override_for


class Side(Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class ResolutionRequest:
    """One operator application. Not retained after dispatch."""

    kind: OperatorKind
    left: Any
    right: Any = None


@dataclass(frozen=True)
class _Selected:
    handle: CallableHandle
    side: Side


def clamp(value: int) -> int:
    """Collapse an ordering result to -1, 0 or 1."""
    return (value > 0) - (value < 0)


class Resolver:
    """Resolves operator applications against override tables.

    Holds no per-resolution state, so one instance may be shared across
    threads and re-entered from inside overrides.
    """

    def __init__(self, host: Host | None = None, *, trace: bool = False) -> None:
        self.host: Host = host if host is not None else PythonHost()
        self.trace = trace

    # =====================================================================
    # Entry points
    # =====================================================================

    def resolve(self, request: ResolutionRequest) -> Any:
        if spec_for(request.kind).is_binary:
            return self.resolve_binary(request.kind, request.left, request.right)
        return self.resolve_unary(request.kind, request.left)

    def resolve_binary(self, kind: OperatorKind, left: Any, right: Any) -> Any:
        """Apply a binary operator to two operands."""
        spec = spec_for(kind)
        if not spec.is_binary:
            raise ArityError(kind, 1)

        selected = self._select(kind, left, right)
        if selected is None:
            return self._fallback(kind, left, right)

        if selected.side is Side.LEFT:
            receiver, other = left, right
        else:
            receiver, other = right, left
        args = (other, selected.side is Side.LEFT) if spec.passes_side else (other,)
        self._log("override", kind, selected.side.value, left, right)
        result = self.host.invoke(selected.handle, receiver, args)
        return self._normalize(kind, result, selected.side)

    def resolve_unary(self, kind: OperatorKind, operand: Any) -> Any:
        """Apply a unary operator. No retry and no fallback for instances."""
        spec = spec_for(kind)
        if spec.is_binary:
            raise ArityError(kind, 2)

        classification = classify(operand)
        handle = override_for(classification, kind)
        if handle is not None:
            self._log("override", kind, "sole", operand)
            result = self.host.invoke(handle, operand, ())
            return self._normalize(kind, result, Side.LEFT)

        if isinstance(classification, Overloadable):
            # Instances without an entry get no host fallback
            raise InvalidOperator(spec.symbol, self.host.type_name(operand))

        result = self.host.unary(kind, operand)
        if result is UNSUPPORTED:
            raise InvalidOperator(spec.symbol, self.host.type_name(operand))
        self._log("native", kind, "sole", operand)
        return result

    def equals(self, left: Any, right: Any) -> bool:
        return self.resolve_binary(OperatorKind.EQUALS, left, right)

    def compare(self, left: Any, right: Any) -> int:
        return self.resolve_binary(OperatorKind.COMPARE_TO, left, right)

    # =====================================================================
    # Selection and fallback
    # =====================================================================

    def _select(self, kind: OperatorKind, left: Any, right: Any) -> _Selected | None:
        handle = override_for(classify(left), kind)
        if handle is not None:
            return _Selected(handle, Side.LEFT)
        handle = override_for(classify(right), kind)
        if handle is not None:
            return _Selected(handle, Side.RIGHT)
        return None

    def _fallback(self, kind: OperatorKind, left: Any, right: Any) -> Any:
        if kind is OperatorKind.EQUALS:
            return self._equals_fallback(left, right)
        if kind is OperatorKind.COMPARE_TO:
            return self._compare_fallback(left, right)

        result = self.host.binary(kind, left, right)
        if result is UNSUPPORTED:
            self._log("fail", kind, "none", left, right)
            raise self._invalid(kind, left, right)
        self._log("native", kind, "none", left, right)
        return result

    def _equals_fallback(self, left: Any, right: Any) -> bool:
        # An ordering override implies equality: x == y iff (x <=> y) == 0
        if self._select(OperatorKind.COMPARE_TO, left, right) is not None:
            self._log("equals_via_compare", OperatorKind.EQUALS, "none", left, right)
            return self.resolve_binary(OperatorKind.COMPARE_TO, left, right) == 0
        self._log("native", OperatorKind.EQUALS, "none", left, right)
        return self.host.equals(left, right)

    def _compare_fallback(self, left: Any, right: Any) -> int:
        result = self.host.compare(left, right)
        if result is UNSUPPORTED:
            self._log("fail", OperatorKind.COMPARE_TO, "none", left, right)
            raise self._invalid(OperatorKind.COMPARE_TO, left, right)
        self._log("native", OperatorKind.COMPARE_TO, "none", left, right)
        return clamp(result)

    def compare_for_equality(self, left: Any, right: Any) -> int:
        """Ordering result for an equality-shaped comparison.

        When neither operand overrides ``__compareTo`` but one overrides
        ``__equals``, equal operands compare as 0 and unequal ones as 1, so
        ``== 0`` and ``!= 0`` tests keep working.
        """
        if self._select(OperatorKind.COMPARE_TO, left, right) is None and (
            self._select(OperatorKind.EQUALS, left, right) is not None
        ):
            return 0 if self.equals(left, right) else 1
        return self.compare(left, right)

    # =====================================================================
    # Normalization
    # =====================================================================

    def _normalize(self, kind: OperatorKind, value: Any, side: Side) -> Any:
        match spec_for(kind).policy:
            case ResultPolicy.RAW:
                return value
            case ResultPolicy.BOOL:
                return self.host.truthy(value)
            case ResultPolicy.TRI_STATE:
                result = clamp(self._as_int(kind, value))
                # __compareTo has no side flag; flip when the right operand answered
                return -result if side is Side.RIGHT else result

    def _as_int(self, kind: OperatorKind, value: Any) -> int:
        if isinstance(value, bool):
            raise MalformedOverrideResult(kind, value, self.host.type_name(value))
        try:
            return operator.index(value)
        except TypeError:
            raise MalformedOverrideResult(kind, value, self.host.type_name(value)) from None

    def _invalid(self, kind: OperatorKind, left: Any, right: Any) -> InvalidOperator:
        return InvalidOperator(
            spec_for(kind).symbol,
            self.host.type_name(left),
            self.host.type_name(right),
        )

    def _log(self, event: str, kind: OperatorKind, side: str, *operands: Any) -> None:
        if not self.trace:
            return
        logger.debug(
            "dispatch.{} op={} side={} operands={}",
            event,
            spec_for(kind).symbol,
            side,
            ",".join(self.host.type_name(o) for o in operands),
        )
