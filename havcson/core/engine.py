"""
Value parser for havcson documents.

Produces plain Python values: None, bool, float, str, list and dict.
Comments are recognised and discarded; use havcson.core.lossless to keep them.
"""

import logging
from typing import Any, Optional, TextIO

from ..security.exceptions import ErrorCode, ParseError
from ..utils.config import ParseConfig
from .constants import (
    KEYWORDS,
    QUOTE_CHARS,
    is_identifier_start,
    is_number_start,
)
from .parser_base import BaseParser, run_parser
from .results import ParseResult
from .utf8 import Source

logger = logging.getLogger(__name__)


class Parser(BaseParser):
    """Recursive-descent parser that builds plain values."""

    def parse(self) -> Any:
        """
        Parse the whole document.

        Returns None for a document holding only whitespace and comments.
        """
        if not self.next_content_line():
            logger.debug("Document has no content, returning null")
            return None

        value = self.parse_value(self.indents.top)
        self._finish_document()
        return value

    def parse_value(self, current_indent: int) -> Any:
        """Parse any value at the cursor."""
        cursor = self.cursor
        cursor.skip_whitespace_and_comments()
        char = cursor.peek()

        if cursor.at_end():
            self._fail(ErrorCode.UNEXPECTED_END, "Expected a value")
        if char == "{":
            return self.parse_inline_object(current_indent)
        if char == "[":
            return self.parse_array(current_indent)
        if char in QUOTE_CHARS:
            if self._string_is_key():
                return self.parse_indented_object()
            return self.parse_string()
        if is_identifier_start(char):
            if self._identifier_is_key():
                return self.parse_indented_object()
            word = self.read_identifier()
            return KEYWORDS[word] if word in KEYWORDS else word
        if is_number_start(char):
            return self.parse_number()

        self._fail(ErrorCode.UNEXPECTED_CHAR, f"Unexpected character '{char}'")

    def parse_inline_object(self, current_indent: int) -> dict[str, Any]:
        """Parse a brace-delimited object."""
        cursor = self.cursor
        cursor.advance()
        self.validator.enter_structure()
        obj: dict[str, Any] = {}

        cursor.skip_whitespace_and_comments()
        if cursor.match("}"):
            self.validator.exit_structure()
            return obj

        while True:
            cursor.skip_whitespace_and_comments()
            key = self.parse_key()
            cursor.skip_whitespace_and_comments()
            if not cursor.match(":"):
                self._fail_unclosed("object", "Expected ':' in inline object")
            cursor.skip_whitespace_and_comments()
            value = self.parse_value(current_indent)
            obj.pop(key, None)
            obj[key] = value

            cursor.skip_whitespace_and_comments()
            if cursor.match("}"):
                break
            if not cursor.match(","):
                self._fail_unclosed("object", "Expected ',' or '}' in inline object")

        self.validator.exit_structure()
        return obj

    def parse_array(self, current_indent: int) -> list[Any]:
        """Parse an array; a '[' followed by a line break opens a multiline array."""
        cursor = self.cursor
        cursor.advance()
        self.validator.enter_structure()

        cursor.skip_inline_spaces()
        if cursor.at_line_break():
            items = self._parse_multiline_array()
        else:
            items = self._parse_inline_array(current_indent)

        self.validator.exit_structure()
        return items

    def _parse_inline_array(self, current_indent: int) -> list[Any]:
        cursor = self.cursor
        items: list[Any] = []

        cursor.skip_whitespace_and_comments()
        if cursor.match("]"):
            return items

        while True:
            items.append(self.parse_value(current_indent))
            cursor.skip_whitespace_and_comments()
            if cursor.match("]"):
                return items
            if not cursor.match(","):
                self._fail_unclosed("array", "Expected ',' or ']' in inline array")
            cursor.skip_whitespace_and_comments()
            if cursor.match("]"):
                return items

    def _parse_multiline_array(self) -> list[Any]:
        cursor = self.cursor
        items: list[Any] = []

        cursor.consume_line_break()
        if not self.next_content_line():
            return items
        if cursor.match("]"):
            return items

        array_indent = self.indents.top
        while True:
            cursor.skip_inline_spaces()
            if cursor.at_end():
                return items
            if self._at_line_end_or_comment():
                if not self.next_content_line() or self.indents.top < array_indent:
                    break
                continue
            if cursor.match("]"):
                return items

            start_line = cursor.line
            items.append(self.parse_value(array_indent))

            if not self._landed_on_new_line(start_line):
                cursor.skip_inline_spaces()
                if cursor.match("]"):
                    return items
                if not (self._at_line_end_or_comment() or cursor.at_end()
                        or cursor.peek() == ","):
                    self._fail(
                        ErrorCode.UNEXPECTED_CHAR,
                        "Expected ',', ']' or a line break in multiline array",
                    )
            if not self._continue_block(array_indent, start_line):
                break

        cursor.match("]")
        return items

    def parse_indented_object(self) -> dict[str, Any]:
        """Parse 'key: value' pairs laid out at the current indentation level."""
        cursor = self.cursor
        self.validator.enter_structure()
        obj: dict[str, Any] = {}
        body_indent = self.indents.top

        while True:
            cursor.skip_inline_spaces()
            if cursor.at_end():
                break
            if self._at_line_end_or_comment():
                if not self.next_content_line() or self.indents.top < body_indent:
                    break
                continue

            char = cursor.peek()
            if not (is_identifier_start(char) or char in QUOTE_CHARS):
                break

            start_line = cursor.line
            key = self.parse_key()
            cursor.skip_inline_spaces()
            if not cursor.match(":"):
                self._fail(ErrorCode.UNEXPECTED_CHAR, "Expected ':' after object key")
            cursor.skip_inline_spaces()

            if self._at_line_end_or_comment() or cursor.at_end():
                self._expect_block(body_indent)
                value = self.parse_value(self.indents.top)
            else:
                value = self.parse_value(body_indent)
            # last write wins and moves the key to its latest position
            obj.pop(key, None)
            obj[key] = value

            if not self._continue_block(body_indent, start_line):
                break

        self.validator.exit_structure()
        return obj


def _make_parser(text: str, config: ParseConfig) -> Parser:
    return Parser(text, config)


def loads(text: Source, config: Optional[ParseConfig] = None) -> Any:
    """
    Parse a havcson document into plain Python values.

    Args:
        text: The document, as str or UTF-8 encoded bytes.
        config: Optional parse configuration (limits, error context).

    Returns:
        The parsed value. Objects become dicts, arrays lists and every
        number a float. An empty document yields None.

    Raises:
        ParseError: If the document is malformed.
        SecurityError: If a configured limit is exceeded.

    Example:
        >>> loads('name: "Havoc"\\nlevel: 1')
        {'name': 'Havoc', 'level': 1.0}
    """
    return run_parser(text, config, _make_parser)


def load(fp: TextIO, config: Optional[ParseConfig] = None) -> Any:
    """Parse a havcson document from a file-like object."""
    return loads(fp.read(), config)


def parse(text: Source, config: Optional[ParseConfig] = None) -> ParseResult:
    """
    Parse a document without raising on malformed input.

    Returns:
        ParseResult holding either the value or the ParseError.
    """
    try:
        return ParseResult(value=loads(text, config))
    except ParseError as exc:
        return ParseResult(error=exc)
