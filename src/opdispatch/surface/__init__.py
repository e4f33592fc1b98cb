"""Surface language: lexer, parser and operator expansion."""

from opdispatch.surface.expand import Expander, expand
from opdispatch.surface.lexer import Lexer, LexerError, Token, tokenize
from opdispatch.surface.parser import ParseError, Parser, parse_expression, parse_program

__all__ = [
    "Expander",
    "Lexer",
    "LexerError",
    "ParseError",
    "Parser",
    "Token",
    "expand",
    "parse_expression",
    "parse_program",
    "tokenize",
]
