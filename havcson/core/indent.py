"""
Indentation tracking for block-structured havcson documents.

The first non-zero indent fixes the indent unit for the whole document.
Every later indent must be a multiple of that unit and, on dedent, must
land exactly on a level that is still open.
"""

from ..security.exceptions import ErrorCode, ParseError, Position


class IndentTracker:
    """Stack of open indentation levels, bottom always 0."""

    def __init__(self) -> None:
        self.unit = 0
        self.stack: list[int] = [0]

    @property
    def top(self) -> int:
        """The innermost open indentation level."""
        return self.stack[-1]

    def apply(self, indent: int, position: Position) -> None:
        """
        Apply the indentation of a new content line.

        Args:
            indent: Number of leading spaces on the line.
            position: Location reported if the indent is rejected.

        Raises:
            ParseError: InconsistentIndent when the indent is not a multiple
                of the unit or does not match an open level on dedent.
        """
        if self.unit == 0 and indent > 0:
            self.unit = indent

        if self.unit > 0 and indent % self.unit != 0:
            raise ParseError(
                ErrorCode.INCONSISTENT_INDENT,
                "Indentation is not a multiple of the indent unit",
                position,
            )

        if indent > self.top:
            self.stack.append(indent)
            return

        while self.stack and indent < self.stack[-1]:
            self.stack.pop()

        if not self.stack or self.stack[-1] != indent:
            raise ParseError(
                ErrorCode.INCONSISTENT_INDENT,
                "Dedent does not match any outer indentation level",
                position,
            )
