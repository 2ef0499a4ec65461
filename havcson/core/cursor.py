"""
Character cursor over decoded havcson source.

The cursor tracks a 1-based line and column for every position. "\\n", "\\r\\n"
and a lone "\\r" each count as a single line break.
"""

from typing import NamedTuple

from ..security.exceptions import Position
from .constants import COMMENT_CHAR, INLINE_SPACES, LINE_BREAK_PATTERN, LINE_BREAKS


class Mark(NamedTuple):
    """Saved cursor state used to rewind after a lookahead."""

    pos: int
    line: int
    column: int
    line_start: int


def position_at(text: str, index: int) -> Position:
    """Compute the line/column of a character index in text."""
    prefix = LINE_BREAK_PATTERN.sub("\n", text[:index])
    line = prefix.count("\n") + 1
    column = len(prefix) - prefix.rfind("\n")
    return Position(line, column)


class Cursor:
    """Forward-only reader over a string with line/column bookkeeping."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1
        self.line_start = 0

    def current_position(self) -> Position:
        """Get current position in text."""
        return Position(self.line, self.column)

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, offset: int = 0) -> str:
        """Look at a character without consuming it; empty string past the end."""
        index = self.pos + offset
        if index >= len(self.text):
            return ""
        return self.text[index]

    def startswith(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.pos)

    def advance(self) -> str:
        """Consume one character and update the position."""
        if self.pos >= len(self.text):
            return ""

        char = self.text[self.pos]
        self.pos += 1

        if char == "\n":
            self.line += 1
            self.column = 1
            self.line_start = self.pos
        elif char == "\r":
            # a "\r\n" pair bumps the line on its "\n"
            if self.peek() != "\n":
                self.line += 1
                self.column = 1
                self.line_start = self.pos
        else:
            self.column += 1

        return char

    def match(self, char: str) -> bool:
        """Consume char if it is next."""
        if self.peek() == char:
            self.advance()
            return True
        return False

    def mark(self) -> Mark:
        return Mark(self.pos, self.line, self.column, self.line_start)

    def reset(self, mark: Mark) -> None:
        self.pos, self.line, self.column, self.line_start = mark

    def at_line_break(self) -> bool:
        return self.peek() in LINE_BREAKS and not self.at_end()

    def consume_line_break(self) -> bool:
        """Consume one "\\n", "\\r\\n" or lone "\\r"."""
        if self.peek() == "\r":
            self.advance()
            self.match("\n")
            return True
        return self.match("\n")

    def skip_inline_spaces(self) -> None:
        while self.peek() in INLINE_SPACES and not self.at_end():
            self.advance()

    def skip_to_eol(self) -> None:
        """Skip the rest of the current line, including its line break."""
        while not self.at_end():
            if self.at_line_break():
                self.consume_line_break()
                return
            self.advance()

    def read_to_eol(self) -> str:
        """Consume and return the rest of the line, leaving the line break."""
        start = self.pos
        while not self.at_end() and not self.at_line_break():
            self.advance()
        return self.text[start:self.pos]

    def skip_whitespace_and_comments(self) -> None:
        """Skip spaces, tabs, line breaks and '#' comments."""
        while not self.at_end():
            char = self.peek()
            if char in INLINE_SPACES or char in LINE_BREAKS:
                self.advance()
            elif char == COMMENT_CHAR:
                self.skip_to_eol()
            else:
                return

    def line_offset(self) -> int:
        """Zero-based character offset of the cursor within its line."""
        return self.pos - self.line_start

    def at_line_content(self) -> bool:
        """True when only spaces precede the cursor on the current line."""
        if self.at_end():
            return False
        return self.text[self.line_start:self.pos].strip(" ") == ""
