"""
Shared lexical rules for the havcson parsers.

BaseParser implements everything both parse modes agree on token for token:
line and indentation handling, strings, numbers, keys and the continuation
rules that follow a value inside a block.
"""

import logging
from typing import Any, Callable, NoReturn, Optional

from ..security.exceptions import (
    ErrorCode,
    ErrorReporter,
    ErrorSuggestionEngine,
    ParseError,
)
from ..security.limits import LimitValidator
from ..utils.config import ParseConfig
from .constants import (
    COMMENT_CHAR,
    ESCAPE_MAP,
    QUOTE_CHARS,
    TRIPLE_QUOTE,
    is_identifier_char,
    is_identifier_start,
)
from .cursor import Cursor
from .indent import IndentTracker
from .utf8 import Source, decode_source, replacement_text

logger = logging.getLogger(__name__)


class BaseParser:
    """Cursor, indentation state and token readers shared by both parsers."""

    def __init__(self, text: str, config: Optional[ParseConfig] = None):
        self.config = config or ParseConfig()
        self.text = text
        self.cursor = Cursor(text)
        self.indents = IndentTracker()
        self.validator = LimitValidator(self.config.limits)

    def _fail(self, code: ErrorCode, message: str = "") -> NoReturn:
        self._fail_at(code, message, self.cursor.current_position())

    def _fail_at(self, code: ErrorCode, message: str, position: Any) -> NoReturn:
        raise ParseError(
            code,
            message,
            position,
            suggestions=ErrorSuggestionEngine.suggest_for_code(code),
        )

    # Line structure

    def _on_skipped_line(self, indent: int, comment: Optional[str]) -> None:
        """Called for every blank (comment is None) or comment-only line."""

    def _read_line_indent(self) -> bool:
        """
        Consume leading spaces of the current line.

        Blank and comment-only lines are consumed entirely and reported to
        _on_skipped_line. Returns True when the cursor stopped at content.
        """
        cursor = self.cursor
        indent = 0
        while True:
            char = cursor.peek()
            if char == " ":
                cursor.advance()
                indent += 1
            elif char == "\t":
                self._fail(
                    ErrorCode.INVALID_INDENT_CHAR,
                    "Tab character in indentation",
                )
            else:
                break

        if cursor.at_end():
            return False

        if cursor.peek() == COMMENT_CHAR:
            cursor.advance()
            text = cursor.read_to_eol()
            cursor.consume_line_break()
            self._on_skipped_line(indent, text)
            return False

        if cursor.at_line_break():
            cursor.consume_line_break()
            self._on_skipped_line(indent, None)
            return False

        return True

    def next_content_line(self) -> bool:
        """
        Move to the start of the next line holding a value and apply its indent.

        If the cursor is in the middle of a line, the rest of that line is
        skipped first. Returns False when the input ends before content.
        """
        cursor = self.cursor
        if cursor.pos != cursor.line_start:
            cursor.skip_to_eol()

        while not cursor.at_end():
            if self._read_line_indent():
                self.indents.apply(cursor.line_offset(), cursor.current_position())
                return True
        return False

    def _landed_on_new_line(self, start_line: int) -> bool:
        """True when a value ended by moving the cursor onto a later content line."""
        return self.cursor.line != start_line and self.cursor.at_line_content()

    def _on_sibling_comment(self, last: Any, block_indent: int) -> None:
        """Called with the cursor on a '#' that follows a block sibling."""

    def _continue_block(self, block_indent: int, start_line: int, last: Any = None) -> bool:
        """
        Decide whether a block (indented object body or multiline array)
        continues after one of its entries.

        Returns True with the cursor positioned before the next entry, or
        False when the block ends (dedent, end of input or unrelated text).
        """
        cursor = self.cursor
        if self._landed_on_new_line(start_line):
            return self.indents.top >= block_indent

        cursor.skip_inline_spaces()
        if cursor.peek() == COMMENT_CHAR:
            self._on_sibling_comment(last, block_indent)
            if not self.next_content_line():
                return False
            return self.indents.top >= block_indent

        if cursor.match(","):
            cursor.skip_inline_spaces()
            return True

        if cursor.at_line_break():
            cursor.consume_line_break()
            if not self.next_content_line():
                return False
            return self.indents.top >= block_indent

        return False

    def _expect_block(self, body_indent: int) -> None:
        """Move to the first line of a block value that follows 'key:'."""
        if not self.next_content_line():
            self._fail(
                ErrorCode.INCONSISTENT_INDENT,
                "Expected an indented block after ':'",
            )
        if self.indents.top <= body_indent:
            self._fail(
                ErrorCode.INCONSISTENT_INDENT,
                "Expected deeper indentation for block value",
            )

    def _at_line_end_or_comment(self) -> bool:
        cursor = self.cursor
        return cursor.peek() == COMMENT_CHAR or cursor.at_line_break()

    def _finish_document(self) -> None:
        """Check that nothing but whitespace and comments follows the root value."""
        cursor = self.cursor
        cursor.skip_inline_spaces()
        if cursor.peek() == COMMENT_CHAR:
            self._on_root_comment()
        elif not cursor.at_end() and not cursor.at_line_break():
            self._fail(
                ErrorCode.UNEXPECTED_CHAR,
                "Trailing characters after top-level value",
            )

        if self.next_content_line():
            self._fail(
                ErrorCode.UNEXPECTED_CHAR,
                "Trailing characters after top-level value",
            )

    def _on_root_comment(self) -> None:
        """Called with the cursor on a '#' on the last line of the root value."""

    def _fail_unclosed(self, structure: str, message: str) -> NoReturn:
        """Report a missing separator, or UnexpectedEnd if the input ran out."""
        if self.cursor.at_end():
            raise ParseError(
                ErrorCode.UNEXPECTED_END,
                f"Unexpected end of input, unclosed {structure}",
                self.cursor.current_position(),
                suggestions=ErrorSuggestionEngine.suggest_for_unclosed_structure(structure),
            )
        self._fail(ErrorCode.UNEXPECTED_CHAR, message)

    # Tokens

    def read_identifier(self) -> str:
        cursor = self.cursor
        start = cursor.pos
        while is_identifier_char(cursor.peek()):
            cursor.advance()
        return cursor.text[start:cursor.pos]

    def read_comment_text(self) -> str:
        """Consume a '#' comment up to (not including) the line break."""
        self.cursor.advance()
        return self.cursor.read_to_eol()

    def parse_key(self) -> str:
        """Parse an object key: a quoted string or a bare identifier."""
        char = self.cursor.peek()
        if char in QUOTE_CHARS:
            return self.parse_quoted_string(char)
        if is_identifier_start(char):
            return self.read_identifier()
        if self.cursor.at_end():
            self._fail(ErrorCode.UNEXPECTED_END, "Expected object key")
        self._fail(ErrorCode.UNEXPECTED_CHAR, "Expected object key")

    def parse_string(self) -> str:
        """Parse a quoted or triple-quoted string at the cursor."""
        if self.cursor.startswith(TRIPLE_QUOTE):
            return self.parse_triple_string()
        return self.parse_quoted_string(self.cursor.peek())

    def parse_triple_string(self) -> str:
        """Parse a raw \"\"\"...\"\"\" string; no escapes are processed."""
        cursor = self.cursor
        start = cursor.current_position()
        for _ in range(len(TRIPLE_QUOTE)):
            cursor.advance()

        begin = cursor.pos
        end = cursor.text.find(TRIPLE_QUOTE, begin)
        if end == -1:
            self._fail_at(
                ErrorCode.UNTERMINATED_TRIPLE_STRING,
                "Unterminated triple string literal",
                start,
            )

        while cursor.pos < end + len(TRIPLE_QUOTE):
            cursor.advance()
        return cursor.text[begin:end]

    def parse_quoted_string(self, quote: str) -> str:
        """Parse a single-line string delimited by quote, decoding escapes."""
        cursor = self.cursor
        cursor.advance()
        chars: list[str] = []

        while not cursor.at_end():
            if cursor.at_line_break():
                self._fail(ErrorCode.UNTERMINATED_STRING, "Newline in string literal")

            char = cursor.advance()
            if char == quote:
                return "".join(chars)

            if char != "\\":
                chars.append(char)
                continue

            if cursor.at_end():
                break
            escape = cursor.advance()
            if escape == quote:
                chars.append(quote)
            elif escape in ESCAPE_MAP:
                chars.append(ESCAPE_MAP[escape])
            elif escape == "u":
                chars.append(self._read_unicode_escape())
            else:
                self._fail(ErrorCode.INVALID_ESCAPE, "Invalid escape in string")

        self._fail(ErrorCode.UNTERMINATED_STRING, "Unterminated string literal")

    def _read_hex4(self) -> int:
        cursor = self.cursor
        value = 0
        for _ in range(4):
            if cursor.at_end():
                self._fail(ErrorCode.INVALID_ESCAPE, "Incomplete unicode escape")
            digit = cursor.advance()
            try:
                value = (value << 4) | int(digit, 16)
            except ValueError:
                self._fail(ErrorCode.INVALID_ESCAPE, "Invalid hex in unicode escape")
        return value

    def _read_unicode_escape(self) -> str:
        """Decode the XXXX of a \\uXXXX escape, joining surrogate pairs."""
        cursor = self.cursor
        code = self._read_hex4()

        if 0xD800 <= code <= 0xDBFF:
            if not (cursor.peek() == "\\" and cursor.peek(1) == "u"):
                self._fail(ErrorCode.INVALID_ESCAPE, "Unpaired surrogate")
            cursor.advance()
            cursor.advance()
            low = self._read_hex4()
            if not 0xDC00 <= low <= 0xDFFF:
                self._fail(ErrorCode.INVALID_ESCAPE, "Invalid low surrogate")
            code = 0x10000 + (((code - 0xD800) << 10) | (low - 0xDC00))
        elif 0xDC00 <= code <= 0xDFFF:
            self._fail(ErrorCode.INVALID_ESCAPE, "Unpaired surrogate")

        return chr(code)

    def parse_number(self) -> float:
        """Parse a number literal; every number is returned as a float."""
        cursor = self.cursor
        start_position = cursor.current_position()
        start = cursor.pos
        has_dot = False
        has_exp = False

        if cursor.peek() in ("+", "-"):
            cursor.advance()

        while not cursor.at_end():
            char = cursor.peek()
            if "0" <= char <= "9":
                cursor.advance()
            elif char == "." and not has_dot:
                has_dot = True
                cursor.advance()
            elif char in ("e", "E") and not has_exp:
                has_exp = True
                cursor.advance()
                if cursor.peek() in ("+", "-"):
                    cursor.advance()
            else:
                break

        lexeme = cursor.text[start:cursor.pos]
        try:
            return float(lexeme)
        except ValueError:
            self._fail_at(
                ErrorCode.INVALID_NUMBER,
                f"Invalid number literal '{lexeme}'",
                start_position,
            )

    def _string_is_key(self) -> bool:
        """
        Look ahead from a quoted string to see whether it is followed by ':'.

        A quoted key can open an indented object, e.g. '"my key": 1'. The
        cursor is left where it was.
        """
        cursor = self.cursor
        if cursor.startswith(TRIPLE_QUOTE):
            return False
        mark = cursor.mark()
        try:
            self.parse_quoted_string(cursor.peek())
        except ParseError:
            cursor.reset(mark)
            return False
        cursor.skip_inline_spaces()
        is_key = cursor.peek() == ":"
        cursor.reset(mark)
        return is_key

    def _identifier_is_key(self) -> bool:
        """Look ahead from an identifier to see whether it is followed by ':'."""
        cursor = self.cursor
        mark = cursor.mark()
        self.read_identifier()
        cursor.skip_inline_spaces()
        is_key = cursor.peek() == ":"
        cursor.reset(mark)
        return is_key


def run_parser(
    source: Source,
    config: Optional[ParseConfig],
    factory: Callable[[str, ParseConfig], Any],
) -> Any:
    """
    Decode source, build a parser with factory and run it to completion.

    Raises:
        ParseError: With a source excerpt attached when context is enabled.
        SecurityError: If a configured limit is exceeded.
    """
    config = config or ParseConfig()
    reporter = ErrorReporter(replacement_text(source), config.max_error_context)
    try:
        text = decode_source(source)
        logger.debug("Parsing %d characters", len(text))
        parser = factory(text, config)
        parser.validator.validate_input_size(text)
        return parser.parse()
    except ParseError as exc:
        logger.debug("Parse failed with %s at %s: %s", exc.code.value, exc.location, exc.message)
        if config.include_context:
            raise reporter.decorate(exc) from None
        raise
