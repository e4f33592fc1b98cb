"""Pratt parser for the expression language.

Grammar (statements separated by ``;`` or newlines):

    program ::= (expr (";" expr)*)?

    expr ::= NAME ("=" | "+=" | ... | ">>=") expr
           | expr binop expr
           | ("-" | "~" | "++" | "--") expr
           | expr ("++" | "--")
           | expr "(" (expr ("," expr)*)? ")"
           | "(" expr ")"
           | literal | NAME

Binding powers, loosest first: assignment (right), ``== != <=>``,
``< <= > >=``, ``|``, ``^``, ``&``, ``<< >>``, ``+ -``, ``* / %``,
prefix ``- ~``, ``**`` (right), postfix ``++ --``, call.
"""

from __future__ import annotations

import re

from opdispatch.surface.ast import (
    Assign,
    BinaryOp,
    Call,
    CompoundAssign,
    IncDec,
    Literal,
    Name,
    Term,
    UnaryOp,
)
from opdispatch.surface.lexer import Lexer, Token
from opdispatch.utils.location import Location


class ParseError(Exception):
    """Error during parsing."""

    def __init__(self, message: str, location: Location):
        super().__init__(f"{location}: {message}")
        self.location = location


ASSIGNMENT_TOKENS = frozenset({"ASSIGN", "OP_ASSIGN", "POW_ASSIGN", "SHL_ASSIGN", "SHR_ASSIGN"})

# token type -> (left binding power, surface symbol)
INFIX: dict[str, tuple[int, str]] = {
    "EQ": (30, "=="),
    "NE": (30, "!="),
    "SPACESHIP": (30, "<=>"),
    "LT": (40, "<"),
    "LE": (40, "<="),
    "GT": (40, ">"),
    "GE": (40, ">="),
    "BAR": (50, "|"),
    "CARET": (60, "^"),
    "AMP": (70, "&"),
    "SHL": (80, "<<"),
    "SHR": (80, ">>"),
    "PLUS": (90, "+"),
    "MINUS": (90, "-"),
    "STAR": (100, "*"),
    "SLASH": (100, "/"),
    "PERCENT": (100, "%"),
    "POW": (120, "**"),
}

RIGHT_ASSOC = frozenset({"POW"})

ASSIGN_BP = 10
PREFIX_BP = 110
POSTFIX_BP = 130
CALL_BP = 140


class Parser:
    """Pratt parser over a token list produced by ``Lexer``."""

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0

    def _current(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return self.tokens[-1]

    def _advance(self) -> Token:
        token = self._current()
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return token

    def _expect(self, token_type: str) -> Token:
        token = self._current()
        if token.type != token_type:
            raise ParseError(f"Expected {token_type}, got {token.type}", token.location)
        return self._advance()

    def _match(self, *token_types: str) -> bool:
        return self._current().type in token_types

    def at_end(self) -> bool:
        return self._current().type == "EOF"

    # =====================================================================
    # Statements
    # =====================================================================

    def parse(self) -> list[Term]:
        """Parse a whole program into its statements."""
        statements: list[Term] = []
        while True:
            while self._match("SEMI"):
                self._advance()
            if self.at_end():
                return statements
            statements.append(self.parse_expression())
            if not self._match("SEMI", "EOF"):
                token = self._current()
                raise ParseError(f"Unexpected token {token.value!r}", token.location)

    # =====================================================================
    # Expressions
    # =====================================================================

    def parse_expression(self, min_bp: int = 0) -> Term:
        left = self._parse_prefix()

        while True:
            token = self._current()

            if token.type in ASSIGNMENT_TOKENS:
                if ASSIGN_BP < min_bp:
                    break
                left = self._parse_assignment(left, self._advance())
                continue

            if token.type in ("INCR", "DECR"):
                if POSTFIX_BP < min_bp:
                    break
                self._advance()
                left = IncDec(self._target_name(left, token), token.value, False, token.location)
                continue

            if token.type == "LPAREN":
                if CALL_BP < min_bp:
                    break
                self._advance()
                left = Call(left, self._parse_arguments(), token.location)
                continue

            infix = INFIX.get(token.type)
            if infix is None:
                break
            bp, symbol = infix
            if bp < min_bp:
                break
            self._advance()
            next_bp = bp if token.type in RIGHT_ASSOC else bp + 1
            right = self.parse_expression(next_bp)
            left = BinaryOp(left, symbol, right, token.location)

        return left

    def _parse_prefix(self) -> Term:
        token = self._advance()
        match token.type:
            case "NUMBER":
                return Literal(int(token.value), token.location)
            case "FLOAT":
                return Literal(float(token.value), token.location)
            case "STRING":
                return Literal(_unescape(token.value[1:-1]), token.location)
            case "TRUE":
                return Literal(True, token.location)
            case "FALSE":
                return Literal(False, token.location)
            case "NULL":
                return Literal(None, token.location)
            case "IDENT":
                return Name(token.value, token.location)
            case "LPAREN":
                inner = self.parse_expression()
                self._expect("RPAREN")
                return inner
            case "MINUS" | "TILDE":
                operand = self.parse_expression(PREFIX_BP)
                return UnaryOp(token.value, operand, token.location)
            case "INCR" | "DECR":
                operand = self.parse_expression(PREFIX_BP)
                return IncDec(self._target_name(operand, token), token.value, True, token.location)
            case _:
                raise ParseError(f"Unexpected token {token.value or token.type!r}", token.location)

    def _parse_assignment(self, left: Term, token: Token) -> Term:
        target = self._target_name(left, token)
        # Right associative: a = b = c
        value = self.parse_expression(ASSIGN_BP)
        if token.type == "ASSIGN":
            return Assign(target, value, location=token.location)
        return CompoundAssign(target, token.value, value, token.location)

    def _parse_arguments(self) -> tuple[Term, ...]:
        args: list[Term] = []
        if not self._match("RPAREN"):
            args.append(self.parse_expression())
            while self._match("COMMA"):
                self._advance()
                args.append(self.parse_expression())
        self._expect("RPAREN")
        return tuple(args)

    @staticmethod
    def _target_name(term: Term, token: Token) -> str:
        if not isinstance(term, Name):
            raise ParseError(f"Invalid target for {token.value}: {term}", token.location)
        return term.name


_ESCAPES = {"n": "\n", "t": "\t"}


def _unescape(text: str) -> str:
    return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m[1], m[1]), text)


# =============================================================================
# Convenience Functions
# =============================================================================


def parse_program(source: str, filename: str = "<stdin>") -> list[Term]:
    """Parse source text into a list of statements."""
    return Parser(Lexer(source, filename).tokenize()).parse()


def parse_expression(source: str) -> Term:
    """Parse source text holding exactly one expression."""
    statements = parse_program(source)
    if len(statements) != 1:
        raise ParseError(
            f"Expected one expression, got {len(statements)}", Location(1, 1, "<stdin>")
        )
    return statements[0]
