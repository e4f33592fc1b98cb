"""Lexer for the expression language.

Regex-table tokenizer. Statements are separated by newlines or ``;``; both
produce a SEMI token so the parser sees one statement terminator.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from opdispatch.utils.location import Location


class LexerError(Exception):
    """Unexpected character in the source."""

    def __init__(self, message: str, location: Location):
        super().__init__(f"{location}: {message}")
        self.location = location


@dataclass(frozen=True)
class Token:
    type: str
    value: str
    location: Location

    def __str__(self) -> str:
        return f"{self.type}({self.value!r})"


class Lexer:
    """Tokenizes source text into a list ending with an EOF token."""

    # Longer operators must precede their prefixes
    TOKEN_PATTERNS = [
        ("WHITESPACE", r"[ \t]+"),
        ("NEWLINE", r"\n|\r\n?"),
        ("COMMENT", r"#[^\n]*"),
        ("SEMI", r";"),
        # Literals
        ("FLOAT", r"[0-9]+\.[0-9]+"),
        ("NUMBER", r"[0-9]+"),
        ("STRING", r'"(?:[^"\\]|\\.)*"'),
        ("TRUE", r"\btrue\b"),
        ("FALSE", r"\bfalse\b"),
        ("NULL", r"\bnull\b"),
        ("IDENT", r"[A-Za-z_][A-Za-z0-9_]*"),
        # Three-character operators
        ("SPACESHIP", r"<=>"),
        ("POW_ASSIGN", r"\*\*="),
        ("SHL_ASSIGN", r"<<="),
        ("SHR_ASSIGN", r">>="),
        # Two-character operators
        ("POW", r"\*\*"),
        ("INCR", r"\+\+"),
        ("DECR", r"--"),
        ("SHL", r"<<"),
        ("SHR", r">>"),
        ("EQ", r"=="),
        ("NE", r"!="),
        ("LE", r"<="),
        ("GE", r">="),
        ("OP_ASSIGN", r"[-+*/%&|^]="),
        # Single-character operators
        ("PLUS", r"\+"),
        ("MINUS", r"-"),
        ("STAR", r"\*"),
        ("SLASH", r"/"),
        ("PERCENT", r"%"),
        ("AMP", r"&"),
        ("BAR", r"\|"),
        ("CARET", r"\^"),
        ("TILDE", r"~"),
        ("LT", r"<"),
        ("GT", r">"),
        ("ASSIGN", r"="),
        # Delimiters
        ("LPAREN", r"\("),
        ("RPAREN", r"\)"),
        ("COMMA", r","),
    ]

    _SKIPPED = frozenset({"WHITESPACE", "COMMENT"})

    def __init__(self, source: str, filename: str = "<stdin>"):
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self._pattern = re.compile(
            "|".join(f"(?P<{name}>{pattern})" for name, pattern in self.TOKEN_PATTERNS)
        )

    def tokenize(self) -> list[Token]:
        """Convert source text to a token list.

        Raises:
            LexerError: If an unexpected character is encountered
        """
        tokens: list[Token] = []
        while self.pos < len(self.source):
            match = self._pattern.match(self.source, self.pos)
            if not match or match.lastgroup is None:
                char = self.source[self.pos]
                raise LexerError(f"Unexpected character: {char!r}", self._location())

            token_type = match.lastgroup
            value = match.group()
            location = self._location()
            self._advance(value)

            if token_type in self._SKIPPED:
                continue
            if token_type == "NEWLINE":
                token_type, value = "SEMI", "\n"
            tokens.append(Token(token_type, value, location))

        tokens.append(Token("EOF", "", self._location()))
        return tokens

    def _location(self) -> Location:
        return Location(self.line, self.column, self.filename)

    def _advance(self, text: str) -> None:
        self.pos += len(text)
        newlines = text.count("\n") + (text.count("\r") if "\n" not in text else 0)
        if newlines:
            self.line += newlines
            self.column = 1
        else:
            self.column += len(text)


def tokenize(source: str, filename: str = "<stdin>") -> list[Token]:
    return Lexer(source, filename).tokenize()
