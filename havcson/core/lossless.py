"""
Lossless parser for havcson documents.

Builds an AnnotatedValue tree that keeps object key order, comment lines,
blank lines and inline comments, so that serialize_lossless() reproduces a
canonically formatted document byte for byte.

Comment attribution:
    * Comment and blank lines are collected as pending and become the
      leading comments of the next object pair or array element.
    * Pending lines left before a closing ']' become the array's closing
      comments; those left at the end of input become the root's trailing
      comments.
    * A '#' after a value on the same line is that value's inline comment,
      unless it sits at or left of the enclosing block's indent column, in
      which case it is treated as a leading comment for what follows.
    * Comments inside braces or inline arrays are skipped.
"""

import logging
from typing import Optional, TextIO

from ..security.exceptions import ErrorCode, ParseError
from ..utils.config import ParseConfig
from .constants import (
    COMMENT_CHAR,
    KEYWORDS,
    QUOTE_CHARS,
    is_identifier_start,
    is_number_start,
)
from .nodes import AnnotatedValue, Comment
from .parser_base import BaseParser, run_parser
from .results import LosslessParseResult
from .utf8 import Source

logger = logging.getLogger(__name__)


class LosslessParser(BaseParser):
    """Parser that builds an AnnotatedValue tree."""

    def __init__(self, text: str, config: Optional[ParseConfig] = None):
        super().__init__(text, config)
        self.pending: list[Comment] = []
        self.root: Optional[AnnotatedValue] = None

    def _on_skipped_line(self, indent: int, comment: Optional[str]) -> None:
        if comment is None:
            self.pending.append(Comment(indent, "", blank=True))
        else:
            self.pending.append(Comment(indent, comment, blank=False))

    def _take_pending(self) -> list[Comment]:
        taken, self.pending = self.pending, []
        return taken

    def _on_sibling_comment(self, last: Optional[AnnotatedValue], block_indent: int) -> None:
        column = self.cursor.line_offset()
        text = self.read_comment_text()
        if last is None or column <= block_indent or last.inline_comment is not None:
            self.pending.append(Comment(column, text, blank=False))
        else:
            last.inline_comment = text

    def _on_root_comment(self) -> None:
        column = self.cursor.line_offset()
        text = self.read_comment_text()
        root = self.root
        if root is not None and root.inline_comment is None and not root.object_items:
            root.inline_comment = text
        else:
            self.pending.append(Comment(column, text, blank=False))

    def parse(self) -> AnnotatedValue:
        """Parse the whole document into an annotated tree."""
        if not self.next_content_line():
            logger.debug("Document has no content, returning absent root")
            return AnnotatedValue(absent=True, trailing_comments=self._take_pending())

        self.root = self.parse_node(self.indents.top)
        self._finish_document()
        self.root.trailing_comments.extend(self._take_pending())
        return self.root

    def parse_node(self, current_indent: int, take_pending: bool = True) -> AnnotatedValue:
        """Parse any value at the cursor into a node."""
        node = AnnotatedValue()
        if take_pending:
            node.leading_comments = self._take_pending()

        cursor = self.cursor
        cursor.skip_whitespace_and_comments()
        char = cursor.peek()

        if cursor.at_end():
            self._fail(ErrorCode.UNEXPECTED_END, "Expected a value")
        if char == "{":
            self._parse_inline_object(node, current_indent)
        elif char == "[":
            self._parse_array(node, current_indent)
        elif char in QUOTE_CHARS:
            if self._string_is_key():
                self._parse_indented_object(node)
            else:
                node.value = self.parse_string()
        elif is_identifier_start(char):
            if self._identifier_is_key():
                self._parse_indented_object(node)
            else:
                word = self.read_identifier()
                node.value = KEYWORDS[word] if word in KEYWORDS else word
        elif is_number_start(char):
            node.value = self.parse_number()
        else:
            self._fail(ErrorCode.UNEXPECTED_CHAR, f"Unexpected character '{char}'")
        return node

    def _parse_inline_object(self, node: AnnotatedValue, current_indent: int) -> None:
        cursor = self.cursor
        cursor.advance()
        self.validator.enter_structure()
        node.value = {}

        cursor.skip_whitespace_and_comments()
        if not cursor.match("}"):
            while True:
                cursor.skip_whitespace_and_comments()
                key = self.parse_key()
                cursor.skip_whitespace_and_comments()
                if not cursor.match(":"):
                    self._fail_unclosed("object", "Expected ':' in inline object")
                cursor.skip_whitespace_and_comments()
                node.set_item(key, self.parse_node(current_indent, take_pending=False))

                cursor.skip_whitespace_and_comments()
                if cursor.match("}"):
                    break
                if not cursor.match(","):
                    self._fail_unclosed("object", "Expected ',' or '}' in inline object")

        self.validator.exit_structure()

    def _parse_array(self, node: AnnotatedValue, current_indent: int) -> None:
        cursor = self.cursor
        cursor.advance()
        self.validator.enter_structure()
        node.value = []

        cursor.skip_inline_spaces()
        if cursor.at_line_break():
            self._parse_multiline_array(node)
        else:
            self._parse_inline_array(node, current_indent)

        self.validator.exit_structure()

    def _parse_inline_array(self, node: AnnotatedValue, current_indent: int) -> None:
        cursor = self.cursor
        cursor.skip_whitespace_and_comments()
        if cursor.match("]"):
            return

        while True:
            node.append(self.parse_node(current_indent, take_pending=False))
            cursor.skip_whitespace_and_comments()
            if cursor.match("]"):
                return
            if not cursor.match(","):
                self._fail_unclosed("array", "Expected ',' or ']' in inline array")
            cursor.skip_whitespace_and_comments()
            if cursor.match("]"):
                return

    def _close_array(self, node: AnnotatedValue) -> None:
        """Consume ']' if present; comments pending before it belong to the array."""
        if self.cursor.match("]"):
            node.closing_comments.extend(self._take_pending())

    def _parse_multiline_array(self, node: AnnotatedValue) -> None:
        cursor = self.cursor
        cursor.consume_line_break()
        if not self.next_content_line():
            return
        if cursor.peek() == "]":
            self._close_array(node)
            return

        array_indent = self.indents.top
        while True:
            cursor.skip_inline_spaces()
            if cursor.at_end():
                return
            if self._at_line_end_or_comment():
                if not self.next_content_line() or self.indents.top < array_indent:
                    break
                continue
            if cursor.peek() == "]":
                break

            start_line = cursor.line
            element = self.parse_node(array_indent)
            node.append(element)

            if not self._landed_on_new_line(start_line):
                cursor.skip_inline_spaces()
                if cursor.peek() == "]":
                    break
                if not (self._at_line_end_or_comment() or cursor.at_end()
                        or cursor.peek() == ","):
                    self._fail(
                        ErrorCode.UNEXPECTED_CHAR,
                        "Expected ',', ']' or a line break in multiline array",
                    )
            if not self._continue_block(array_indent, start_line, element):
                break

        self._close_array(node)

    def _parse_indented_object(self, node: AnnotatedValue) -> None:
        cursor = self.cursor
        self.validator.enter_structure()
        node.value = {}
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
            leading = self._take_pending()
            key = self.parse_key()
            cursor.skip_inline_spaces()
            if not cursor.match(":"):
                self._fail(ErrorCode.UNEXPECTED_CHAR, "Expected ':' after object key")
            cursor.skip_inline_spaces()

            if self._at_line_end_or_comment() or cursor.at_end():
                key_comment = None
                if cursor.peek() == COMMENT_CHAR:
                    key_comment = self.read_comment_text()
                self._expect_block(body_indent)
                # comments between the key line and the block stay pending
                # for the block's first entry
                child = self.parse_node(self.indents.top, take_pending=False)
                child.inline_comment = key_comment
            else:
                child = self.parse_node(body_indent, take_pending=False)
            child.leading_comments[:0] = leading
            node.set_item(key, child)

            if not self._continue_block(body_indent, start_line, child):
                break

        self.validator.exit_structure()


def _make_parser(text: str, config: ParseConfig) -> LosslessParser:
    return LosslessParser(text, config)


def loads_lossless(text: Source, config: Optional[ParseConfig] = None) -> AnnotatedValue:
    """
    Parse a havcson document into an AnnotatedValue tree.

    Args:
        text: The document, as str or UTF-8 encoded bytes.
        config: Optional parse configuration.

    Returns:
        The root node. ``node.to_value()`` (or ``node.value``) equals what
        loads() returns for the same text. An empty document yields a node
        with ``absent`` set, still holding any comment lines.

    Raises:
        ParseError: If the document is malformed; the codes are the same
            ones loads() reports for the same text.
        SecurityError: If a configured limit is exceeded.
    """
    return run_parser(text, config, _make_parser)


def load_lossless(fp: TextIO, config: Optional[ParseConfig] = None) -> AnnotatedValue:
    """Parse a havcson document from a file-like object into a tree."""
    return loads_lossless(fp.read(), config)


def parse_lossless(text: Source, config: Optional[ParseConfig] = None) -> LosslessParseResult:
    """Parse into a tree without raising on malformed input."""
    try:
        return LosslessParseResult(node=loads_lossless(text, config))
    except ParseError as exc:
        return LosslessParseResult(error=exc)
