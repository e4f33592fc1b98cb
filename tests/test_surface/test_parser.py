"""Tests for the Pratt parser."""

import pytest

from opdispatch.surface.ast import (
    Assign,
    BinaryOp,
    Call,
    CompoundAssign,
    IncDec,
    Literal,
    Name,
    UnaryOp,
)
from opdispatch.surface.parser import ParseError, parse_expression, parse_program


def strip(term):
    """Drop locations so trees compare structurally."""
    match term:
        case Literal(value):
            return Literal(value)
        case Name(name):
            return Name(name)
        case Call(func, args):
            return Call(strip(func), tuple(strip(a) for a in args))
        case BinaryOp(left, op, right):
            return BinaryOp(strip(left), op, strip(right))
        case UnaryOp(op, operand):
            return UnaryOp(op, strip(operand))
        case Assign(target, value, yield_previous):
            return Assign(target, strip(value), yield_previous)
        case CompoundAssign(target, op, value):
            return CompoundAssign(target, op, strip(value))
        case IncDec(target, op, prefix):
            return IncDec(target, op, prefix)
    raise AssertionError(f"unexpected node {term!r}")


def p(source: str):
    return strip(parse_expression(source))


a, b, c = Name("a"), Name("b"), Name("c")


class TestPrecedence:
    def test_multiplication_binds_tighter(self):
        assert p("a + b * c") == BinaryOp(a, "+", BinaryOp(b, "*", c))

    def test_left_associative(self):
        assert p("a - b - c") == BinaryOp(BinaryOp(a, "-", b), "-", c)

    def test_power_right_associative(self):
        assert p("a ** b ** c") == BinaryOp(a, "**", BinaryOp(b, "**", c))

    def test_unary_minus_below_power(self):
        assert p("-a ** b") == UnaryOp("-", BinaryOp(a, "**", b))

    def test_comparison_below_arithmetic(self):
        assert p("a + 1 < b") == BinaryOp(BinaryOp(a, "+", Literal(1)), "<", b)

    def test_equality_below_ordering(self):
        assert p("a < b == c") == BinaryOp(BinaryOp(a, "<", b), "==", c)

    def test_bitwise_levels(self):
        assert p("a | b ^ c & 1") == BinaryOp(a, "|", BinaryOp(b, "^", BinaryOp(c, "&", Literal(1))))

    def test_shift_between_additive_and_bitwise(self):
        assert p("a & b << 1 + c") == BinaryOp(
            a, "&", BinaryOp(b, "<<", BinaryOp(Literal(1), "+", c))
        )

    def test_spaceship(self):
        assert p("(a <=> b) == 0") == BinaryOp(BinaryOp(a, "<=>", b), "==", Literal(0))

    def test_parentheses(self):
        assert p("(a + b) * c") == BinaryOp(BinaryOp(a, "+", b), "*", c)


class TestAssignment:
    def test_plain(self):
        assert p("a = b + 1") == Assign("a", BinaryOp(b, "+", Literal(1)))

    def test_right_associative(self):
        assert p("a = b = 2") == Assign("a", Assign("b", Literal(2)))

    @pytest.mark.parametrize("op", ["+=", "-=", "*=", "/=", "%=", "**=", "&=", "|=", "^=", "<<=", ">>="])
    def test_compound(self, op):
        assert p(f"a {op} b") == CompoundAssign("a", op, b)

    def test_invalid_target(self):
        with pytest.raises(ParseError, match="Invalid target"):
            parse_expression("a + b = 1")


class TestIncrement:
    def test_prefix_and_postfix(self):
        assert p("++a") == IncDec("a", "++", True)
        assert p("a--") == IncDec("a", "--", False)

    def test_postfix_inside_expression(self):
        assert p("a++ + 1") == BinaryOp(IncDec("a", "++", False), "+", Literal(1))

    def test_requires_name(self):
        with pytest.raises(ParseError):
            parse_expression("++1")


class TestAtoms:
    def test_literals(self):
        assert p('"hi\\n"') == Literal("hi\n")
        assert p("2.5") == Literal(2.5)
        assert p("null") == Literal(None)
        assert p("false") == Literal(False)

    def test_string_escapes_decode_in_one_pass(self):
        assert p(r'"a\\n"') == Literal("a\\n")
        assert p(r'"tab\there"') == Literal("tab\there")
        assert p(r'"say \"hi\""') == Literal('say "hi"')
        assert p(r'"\\\\"') == Literal("\\\\")

    def test_call(self):
        assert p("Vector(1, a)") == Call(Name("Vector"), (Literal(1), a))
        assert p("Opaque()") == Call(Name("Opaque"), ())

    def test_bitwise_not(self):
        assert p("~a") == UnaryOp("~", a)


class TestProgram:
    def test_statements(self):
        statements = parse_program("a = 1; b = 2\n\na + b;")
        assert [strip(s) for s in statements] == [
            Assign("a", Literal(1)),
            Assign("b", Literal(2)),
            BinaryOp(a, "+", b),
        ]

    def test_empty_program(self):
        assert parse_program("  # nothing\n") == []

    def test_trailing_garbage(self):
        with pytest.raises(ParseError, match="Unexpected token"):
            parse_program("a b")

    def test_unclosed_paren(self):
        with pytest.raises(ParseError, match="Expected RPAREN"):
            parse_program("(a + b")

    def test_parse_expression_rejects_many(self):
        with pytest.raises(ParseError):
            parse_expression("a; b")
