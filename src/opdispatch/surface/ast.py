"""Expression AST.

Surface nodes are what the parser produces. Canonical nodes are what the
expander reduces compound and derived forms to; the evaluator only dispatches
operators in canonical shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from opdispatch.core.operators import OperatorKind
from opdispatch.utils.location import Location


class Term:
    """Base class for all expression nodes."""

    pass


# =============================================================================
# Leaves (shared by surface and canonical forms)
# =============================================================================


@dataclass(frozen=True)
class Literal(Term):
    """Native constant: 1, 2.5, "text", true, null."""

    value: Any
    location: Location | None = None

    def __str__(self) -> str:
        match self.value:
            case None:
                return "null"
            case bool():
                return "true" if self.value else "false"
            case str():
                return f'"{self.value}"'
            case _:
                return str(self.value)


@dataclass(frozen=True)
class Name(Term):
    """Variable reference: x."""

    name: str
    location: Location | None = None

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Call(Term):
    """Call of a bound name: Number(5)."""

    func: Term
    args: tuple[Term, ...]
    location: Location | None = None

    def __str__(self) -> str:
        return f"{self.func}({', '.join(str(a) for a in self.args)})"


@dataclass(frozen=True)
class Assign(Term):
    """Assignment: x = value.

    With ``yield_previous`` the expression evaluates to the value ``x`` held
    before the assignment (postfix increment and decrement).
    """

    target: str
    value: Term
    yield_previous: bool = False
    location: Location | None = None

    def __str__(self) -> str:
        return f"{self.target} = {self.value}"


# =============================================================================
# Surface forms
# =============================================================================


@dataclass(frozen=True)
class BinaryOp(Term):
    """Infix operator as written: left op right."""

    left: Term
    op: str
    right: Term
    location: Location | None = None

    def __str__(self) -> str:
        return f"({self.left} {self.op} {self.right})"


@dataclass(frozen=True)
class UnaryOp(Term):
    """Prefix operator as written: -x, ~x."""

    op: str
    operand: Term
    location: Location | None = None

    def __str__(self) -> str:
        return f"{self.op}{self.operand}"


@dataclass(frozen=True)
class CompoundAssign(Term):
    """Assignment operator: x += value."""

    target: str
    op: str
    value: Term
    location: Location | None = None

    def __str__(self) -> str:
        return f"{self.target} {self.op} {self.value}"


@dataclass(frozen=True)
class IncDec(Term):
    """Increment or decrement: ++x, x++, --x, x--."""

    target: str
    op: str
    prefix: bool
    location: Location | None = None

    def __str__(self) -> str:
        if self.prefix:
            return f"{self.op}{self.target}"
        return f"{self.target}{self.op}"


# =============================================================================
# Canonical forms
# =============================================================================


@dataclass(frozen=True)
class Apply(Term):
    """Operator application resolved by the dispatch engine."""

    kind: OperatorKind
    operands: tuple[Term, ...]
    location: Location | None = None

    def __str__(self) -> str:
        if len(self.operands) == 1:
            return f"{self.kind.spec.method_name}({self.operands[0]})"
        left, right = self.operands
        return f"({left} {self.kind.spec.method_name} {right})"


@dataclass(frozen=True)
class Not(Term):
    """Boolean negation of an equality result: a != b."""

    operand: Term
    location: Location | None = None

    def __str__(self) -> str:
        return f"not {self.operand}"


@dataclass(frozen=True)
class CompareTest(Term):
    """Test of a clamped ordering result.

    ``a < b`` is ``(a <=> b) == -1`` and ``a <= b`` is ``(a <=> b) != 1``.
    ``equality_shaped`` marks tests against 0, which may be answered by an
    ``__equals`` override when no ordering override exists.
    """

    compare: Apply
    expected: int
    negate: bool = False
    equality_shaped: bool = False
    location: Location | None = None

    def __str__(self) -> str:
        op = "!=" if self.negate else "=="
        return f"({self.compare} {op} {self.expected})"
