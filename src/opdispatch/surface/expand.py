"""Expansion of compound and derived operator forms.

Rewrites every surface operator into the canonical shapes the dispatch engine
resolves. The rewrite depends only on the input term; nothing is evaluated.

    a op= b     ->  a = (a op b)
    ++a, a++    ->  a = (a __add 1)
    --a, a--    ->  a = (a __sub 1)
    -a          ->  (a __mul -1)
    a != b      ->  not (a __equals b)
    a < b       ->  (a __compareTo b) == -1
    a <= b      ->  (a __compareTo b) != 1
    a > b       ->  (a __compareTo b) == 1
    a >= b      ->  (a __compareTo b) != -1
"""

from __future__ import annotations

from opdispatch.core.operators import OperatorKind, kind_for_symbol
from opdispatch.surface.ast import (
    Apply,
    Assign,
    BinaryOp,
    Call,
    CompareTest,
    CompoundAssign,
    IncDec,
    Literal,
    Name,
    Not,
    Term,
    UnaryOp,
)

# derived ordering -> (expected clamped value, negate)
ORDERING_TESTS: dict[str, tuple[int, bool]] = {
    "<": (-1, False),
    "<=": (1, True),
    ">": (1, False),
    ">=": (-1, True),
}

INCREMENTS: dict[str, OperatorKind] = {
    "++": OperatorKind.ADD,
    "--": OperatorKind.SUB,
}


class Expander:
    """Reduces surface terms to canonical form, children first."""

    def expand(self, term: Term) -> Term:
        match term:
            case BinaryOp(left, op, right, loc):
                return self._expand_binary(op, self.expand(left), self.expand(right), term, loc)

            case UnaryOp("-", operand, loc):
                return Apply(OperatorKind.MUL, (self.expand(operand), Literal(-1, loc)), loc)

            case UnaryOp("~", operand, loc):
                return Apply(OperatorKind.BIT_NOT, (self.expand(operand),), loc)

            case UnaryOp(op, _, _):
                raise ValueError(f"Unknown prefix operator: {op}")

            case CompoundAssign(target, op, value, loc):
                kind = kind_for_symbol(op[:-1])
                return Assign(target, Apply(kind, (Name(target, loc), self.expand(value)), loc), location=loc)

            case IncDec(target, op, prefix, loc):
                kind = INCREMENTS[op]
                step = Apply(kind, (Name(target, loc), Literal(1, loc)), loc)
                return Assign(target, step, yield_previous=not prefix, location=loc)

            case Assign(target, value, yield_previous, loc):
                return Assign(target, self.expand(value), yield_previous, loc)

            case Call(func, args, loc):
                return Call(self.expand(func), tuple(self.expand(a) for a in args), loc)

            case Apply(kind, operands, loc):
                return Apply(kind, tuple(self.expand(o) for o in operands), loc)

            case Not(operand, loc):
                return Not(self.expand(operand), loc)

            case _:
                return term

    def _expand_binary(self, op: str, left: Term, right: Term, original: BinaryOp, loc) -> Term:
        if op in ("==", "!="):
            shaped = self._equality_shaped(original)
            if shaped is not None:
                return CompareTest(shaped, 0, negate=op == "!=", equality_shaped=True, location=loc)
            equals = Apply(OperatorKind.EQUALS, (left, right), loc)
            return equals if op == "==" else Not(equals, loc)

        if op in ORDERING_TESTS:
            expected, negate = ORDERING_TESTS[op]
            compare = Apply(OperatorKind.COMPARE_TO, (left, right), loc)
            return CompareTest(compare, expected, negate, location=loc)

        return Apply(kind_for_symbol(op), (left, right), loc)

    def _equality_shaped(self, term: BinaryOp) -> Apply | None:
        """Recognize ``(a <=> b) == 0`` and ``0 != (a <=> b)``."""
        match term:
            case BinaryOp(BinaryOp(a, "<=>", b, loc), _, Literal(0), _) | BinaryOp(
                Literal(0), _, BinaryOp(a, "<=>", b, loc), _
            ):
                return Apply(OperatorKind.COMPARE_TO, (self.expand(a), self.expand(b)), loc)
            case _:
                return None


def expand(term: Term) -> Term:
    """Reduce a surface term to canonical form."""
    return Expander().expand(term)
