"""
Exception types and error reporting for havcson.

Every grammar failure is a ParseError carrying one ErrorCode, a 1-based
line/column position and a human-readable message. SecurityError is kept
separate: it reports an exceeded configured limit, not malformed input.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import regex


class ErrorCode(Enum):
    """Discriminated failure codes reported by the parsers."""

    UNEXPECTED_CHAR = "UnexpectedChar"
    UNEXPECTED_END = "UnexpectedEnd"
    INVALID_NUMBER = "InvalidNumber"
    INVALID_ESCAPE = "InvalidEscape"
    INVALID_UTF8 = "InvalidUtf8"
    UNTERMINATED_STRING = "UnterminatedString"
    UNTERMINATED_TRIPLE_STRING = "UnterminatedTripleString"
    INVALID_INDENT_CHAR = "InvalidIndentChar"
    INCONSISTENT_INDENT = "InconsistentIndent"
    INTERNAL_ERROR = "InternalError"


DEFAULT_MESSAGES = {
    ErrorCode.UNEXPECTED_CHAR: "Unexpected character",
    ErrorCode.UNEXPECTED_END: "Unexpected end of input",
    ErrorCode.INVALID_NUMBER: "Invalid number literal",
    ErrorCode.INVALID_ESCAPE: "Invalid escape sequence",
    ErrorCode.INVALID_UTF8: "Invalid UTF-8 encoding",
    ErrorCode.UNTERMINATED_STRING: "Unterminated string literal",
    ErrorCode.UNTERMINATED_TRIPLE_STRING: "Unterminated triple string literal",
    ErrorCode.INVALID_INDENT_CHAR: "Tabs are not allowed in indentation",
    ErrorCode.INCONSISTENT_INDENT: "Inconsistent indentation",
    ErrorCode.INTERNAL_ERROR: "Internal parser error",
}


@dataclass
class Position:
    """Position in source text (1-based line and column, in characters)."""

    line: int = 1
    column: int = 1


@dataclass
class ErrorContext:
    """Source excerpt around an error position."""

    text: str
    position: Position
    context_before: str
    context_after: str
    error_char: str
    line_text: str
    column_indicator: str


class HavcsonError(Exception):
    """Base class for all havcson errors."""

    def __init__(
        self,
        message: str,
        position: Optional[Position] = None,
        context: Optional[ErrorContext] = None,
        suggestions: Optional[list[str]] = None,
    ):
        self.message = message
        self.position = position
        self.context = context
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = self.message
        if self.position:
            msg += f" at line {self.position.line}, column {self.position.column}"

        if self.context:
            msg += "\n\nContext:\n"
            msg += f"  {self.context.line_text}\n"
            msg += f"  {self.context.column_indicator}"

        if self.suggestions:
            msg += "\n\nSuggestions:"
            for suggestion in self.suggestions:
                msg += f"\n  - {suggestion}"

        return msg


class ParseError(HavcsonError):
    """Raised (or returned inside a result) when the input violates the grammar."""

    def __init__(
        self,
        code: ErrorCode,
        message: str = "",
        position: Optional[Position] = None,
        context: Optional[ErrorContext] = None,
        suggestions: Optional[list[str]] = None,
    ):
        self.code = code
        super().__init__(
            message or DEFAULT_MESSAGES[code], position, context, suggestions
        )

    @property
    def location(self) -> Optional[Position]:
        """Alias for the error position."""
        return self.position

    def __reduce__(self):  # type: ignore[no-untyped-def]
        return (
            self.__class__,
            (self.code, self.message, self.position, self.context, self.suggestions),
        )


class SecurityError(HavcsonError):
    """Raised when a configured parsing limit is exceeded."""


class ErrorSuggestionEngine:
    """Hints attached to parse errors, keyed by error code."""

    _SUGGESTIONS = {
        ErrorCode.UNEXPECTED_CHAR: [
            "Check for a missing ':' after a key or a missing ',' between items",
            "Quote values that contain special characters",
        ],
        ErrorCode.UNEXPECTED_END: [
            "Check for an unclosed '{' or '['",
            "Make sure a value follows every ':'",
        ],
        ErrorCode.INVALID_NUMBER: [
            "Numbers allow one optional sign, one '.' and one exponent",
            "Quote the value if it is meant to be a string",
        ],
        ErrorCode.INVALID_ESCAPE: [
            "Supported escapes are \\\", \\', \\\\, \\n, \\r, \\t and \\uXXXX",
            "A high surrogate \\uD800-\\uDBFF must be followed by a low surrogate",
        ],
        ErrorCode.INVALID_UTF8: [
            "Save the document as UTF-8",
            "A byte order mark is only allowed at the very start",
        ],
        ErrorCode.UNTERMINATED_STRING: [
            "Add the missing closing quote",
            'Use a triple-quoted string (""") for multi-line text',
        ],
        ErrorCode.UNTERMINATED_TRIPLE_STRING: [
            'Close the string with """',
        ],
        ErrorCode.INVALID_INDENT_CHAR: [
            "Indent with spaces only",
        ],
        ErrorCode.INCONSISTENT_INDENT: [
            "Indent every level by the same number of spaces",
            "Dedent back to a column used by an enclosing block",
        ],
        ErrorCode.INTERNAL_ERROR: [
            "This is a bug in havcson; please report the input that caused it",
        ],
    }

    @classmethod
    def suggest_for_code(cls, code: ErrorCode) -> list[str]:
        """Return hints for an error code."""
        return list(cls._SUGGESTIONS.get(code, []))

    @staticmethod
    def suggest_for_unclosed_structure(structure_type: str) -> list[str]:
        """Return hints for an object or array that was never closed."""
        if structure_type == "object":
            return [
                "Add missing closing brace '}'",
                "Check for a missing ',' between key/value pairs",
            ]
        if structure_type == "array":
            return [
                "Add missing closing bracket ']'",
                "Check for a missing ',' between array elements",
            ]
        return []


class ErrorReporter:
    """Builds ParseError instances that carry a source excerpt."""

    def __init__(self, text: str, max_context: int = 50):
        self.text = text
        self.max_context = max_context
        self.lines = regex.split(r"\r\n|\r|\n", text)

    def create_parse_error(
        self,
        code: ErrorCode,
        message: str,
        position: Optional[Position],
        suggestions: Optional[list[str]] = None,
    ) -> ParseError:
        """Create a ParseError with context for the given position."""
        context = self._build_context(position) if position else None
        return ParseError(code, message, position, context, suggestions)

    def create_security_error(self, message: str) -> SecurityError:
        """Create a SecurityError."""
        return SecurityError(message)

    def decorate(self, error: ParseError) -> ParseError:
        """Return a copy of error with source context attached."""
        if error.context is not None or error.position is None:
            return error
        return self.create_parse_error(
            error.code, error.message, error.position, error.suggestions
        )

    def _build_context(self, position: Position) -> ErrorContext:
        line_index = min(max(position.line - 1, 0), max(len(self.lines) - 1, 0))
        line_text = self.lines[line_index] if self.lines else ""
        col = max(position.column - 1, 0)

        half = self.max_context // 2
        start = max(0, col - half)
        end = min(len(line_text), col + half)
        excerpt = line_text[start:end]
        indicator_col = min(col, len(line_text)) - start

        return ErrorContext(
            text=self.text,
            position=position,
            context_before=line_text[start:col],
            context_after=line_text[col:end],
            error_char=line_text[col] if col < len(line_text) else "",
            line_text=excerpt,
            column_indicator=" " * indicator_col + "^",
        )
