"""Operator registry.

Static table of every operator that user types may override. Built once at
import time and exposed read-only; nothing outside this module may invent an
operator identity.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from opdispatch.core.errors import UnknownOperator


class Arity(Enum):
    UNARY = 1
    BINARY = 2


class ResultPolicy(Enum):
    """How an override's return value is normalized."""

    RAW = "raw"
    BOOL = "bool"
    TRI_STATE = "tri_state"


class OperatorKind(Enum):
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"
    MOD = "mod"
    POW = "pow"
    BIT_AND = "bit_and"
    BIT_OR = "bit_or"
    BIT_XOR = "bit_xor"
    BIT_NOT = "bit_not"
    SHIFT_LEFT = "shift_left"
    SHIFT_RIGHT = "shift_right"
    EQUALS = "equals"
    COMPARE_TO = "compare_to"

    @property
    def spec(self) -> OperatorSpec:
        return REGISTRY[self]

    def __str__(self) -> str:
        return REGISTRY[self].symbol


@dataclass(frozen=True)
class OperatorSpec:
    """Fixed metadata for one operator kind."""

    kind: OperatorKind
    symbol: str
    method_name: str
    arity: Arity
    policy: ResultPolicy
    # Arithmetic overrides receive (other, left); equality and ordering only (other)
    passes_side: bool

    @property
    def is_binary(self) -> bool:
        return self.arity is Arity.BINARY


def _binary(kind: OperatorKind, symbol: str, method: str) -> OperatorSpec:
    return OperatorSpec(kind, symbol, method, Arity.BINARY, ResultPolicy.RAW, passes_side=True)


_SPECS: tuple[OperatorSpec, ...] = (
    _binary(OperatorKind.ADD, "+", "__add"),
    _binary(OperatorKind.SUB, "-", "__sub"),
    _binary(OperatorKind.MUL, "*", "__mul"),
    _binary(OperatorKind.DIV, "/", "__div"),
    _binary(OperatorKind.MOD, "%", "__mod"),
    _binary(OperatorKind.POW, "**", "__pow"),
    _binary(OperatorKind.BIT_AND, "&", "__bitwiseAnd"),
    _binary(OperatorKind.BIT_OR, "|", "__bitwiseOr"),
    _binary(OperatorKind.BIT_XOR, "^", "__bitwiseXor"),
    OperatorSpec(
        OperatorKind.BIT_NOT, "~", "__bitwiseNot", Arity.UNARY, ResultPolicy.RAW, passes_side=False
    ),
    _binary(OperatorKind.SHIFT_LEFT, "<<", "__shiftLeft"),
    _binary(OperatorKind.SHIFT_RIGHT, ">>", "__shiftRight"),
    OperatorSpec(
        OperatorKind.EQUALS, "==", "__equals", Arity.BINARY, ResultPolicy.BOOL, passes_side=False
    ),
    OperatorSpec(
        OperatorKind.COMPARE_TO,
        "<=>",
        "__compareTo",
        Arity.BINARY,
        ResultPolicy.TRI_STATE,
        passes_side=False,
    ),
)

REGISTRY: Mapping[OperatorKind, OperatorSpec] = MappingProxyType({s.kind: s for s in _SPECS})

_BY_METHOD: Mapping[str, OperatorSpec] = MappingProxyType({s.method_name: s for s in _SPECS})

# `-` is also unary negation and `~` is unary-only; the parser decides arity
_BY_SYMBOL: Mapping[str, OperatorSpec] = MappingProxyType({s.symbol: s for s in _SPECS})

if set(REGISTRY) != set(OperatorKind):
    raise RuntimeError("every operator kind needs registry metadata")


def spec_for(kind: OperatorKind) -> OperatorSpec:
    return REGISTRY[kind]


def kind_for_method(method_name: str) -> OperatorKind:
    """Map a canonical override method name (``__add``) to its kind."""
    spec = _BY_METHOD.get(method_name)
    if spec is None:
        raise UnknownOperator(method_name)
    return spec.kind


def kind_for_symbol(symbol: str) -> OperatorKind:
    """Map a surface symbol (``+``, ``<=>``) to its kind."""
    spec = _BY_SYMBOL.get(symbol)
    if spec is None:
        raise UnknownOperator(symbol)
    return spec.kind


def is_override_method(name: str) -> bool:
    return name in _BY_METHOD
