"""Source positions for lexer, parser and evaluator errors."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    """1-based line and column inside a named source."""

    line: int
    column: int
    file: str | None = None

    def __str__(self) -> str:
        if self.file:
            return f"{self.file}:{self.line}:{self.column}"
        return f"line {self.line}, column {self.column}"

    def pointer(self, source: str) -> str:
        """Render the offending source line with a caret under the column."""
        lines = source.splitlines()
        if not 0 < self.line <= len(lines):
            return ""
        text = lines[self.line - 1]
        return f"{text}\n{' ' * (self.column - 1)}^"
