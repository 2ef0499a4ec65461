"""
Writer for havcson documents.

Two modes share one layout:

    * serialize() renders a plain value in canonical form.
    * serialize_lossless() renders an AnnotatedValue tree, re-emitting its
      comments and blank lines and following its key order.

Canonical layout:
    * Objects use the indented 'key: value' form. Non-empty objects and
      arrays that cannot be inlined start on the next, deeper line.
    * Arrays of at most three simple scalars are written inline; others are
      written one element per line between '[' and ']'.
    * Objects inside arrays are written inline in braces.
    * An indent width of 0 writes the whole document inline.
"""

import logging
import math
from typing import Any, Iterable, Optional, TextIO

from ..utils.config import WriteOptions
from .constants import (
    BARE_KEY_PATTERN,
    MAX_EXACT_INTEGER,
    MAX_INLINE_ARRAY_ITEMS,
    MAX_INLINE_STRING_LENGTH,
    TRIPLE_QUOTE,
    WRITER_ESCAPE_MAP,
)
from .nodes import AnnotatedValue, Comment

logger = logging.getLogger(__name__)


def format_number(value: float) -> str:
    """Render a number; integral values below 1e16 are written without a fraction."""
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Cannot serialize non-finite number {number!r}")
    if number.is_integer() and abs(number) < MAX_EXACT_INTEGER:
        return str(int(number))
    return repr(number)


def quote_string(value: str) -> str:
    """Render value as a double-quoted string with escapes."""
    return '"' + "".join(WRITER_ESCAPE_MAP.get(char, char) for char in value) + '"'


def format_string(value: str) -> str:
    """Render a string value; multi-line strings use triple quotes when possible."""
    if "\n" in value and TRIPLE_QUOTE not in value and not value.endswith('"'):
        return TRIPLE_QUOTE + value + TRIPLE_QUOTE
    return quote_string(value)


def format_key(key: str) -> str:
    if BARE_KEY_PATTERN.fullmatch(key):
        return key
    return quote_string(key)


def format_scalar(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, str):
        return format_string(value)
    raise TypeError(f"Object of type {type(value).__name__} is not havcson serializable")


def is_simple_scalar(value: Any) -> bool:
    """Null, bool, number, or a short single-line string."""
    if value is None or isinstance(value, (bool, int, float)):
        return True
    if isinstance(value, str):
        return "\n" not in value and len(value) <= MAX_INLINE_STRING_LENGTH
    return False


def can_inline_array(items: list[Any]) -> bool:
    return len(items) <= MAX_INLINE_ARRAY_ITEMS and all(is_simple_scalar(v) for v in items)


class Writer:
    """Renders values or annotated trees as havcson text."""

    def __init__(self, options: Optional[WriteOptions] = None):
        self.options = options or WriteOptions()

    def _indent(self, level: int) -> str:
        return " " * (self.options.indent_width * level)

    def _ordered(self, items: Iterable[Any]) -> list[Any]:
        """Apply key sorting to (key, value) pairs when requested."""
        items = list(items)
        if self.options.sort_object_keys:
            items.sort(key=lambda item: item[0])
        return items

    @staticmethod
    def _finish(lines: list[str]) -> str:
        if not lines:
            return ""
        return "\n".join(lines) + "\n"

    # Canonical mode

    def write(self, value: Any) -> str:
        """Serialize a plain value in canonical form."""
        lines: list[str] = []
        if self.options.indent_width == 0:
            lines.append(self.inline(value))
        elif isinstance(value, dict) and value:
            self._write_pairs(value.items(), 0, lines)
        elif self._is_block_array(value):
            self._write_block_array(value, 0, lines)
        else:
            lines.append(self.inline(value))
        return self._finish(lines)

    def inline(self, value: Any) -> str:
        """Render value on one line (objects in braces, arrays in brackets)."""
        if isinstance(value, dict):
            pairs = ", ".join(
                f"{format_key(key)}: {self.inline(item)}"
                for key, item in self._ordered(value.items())
            )
            return "{" + pairs + "}"
        if isinstance(value, (list, tuple)):
            return "[" + ", ".join(self.inline(item) for item in value) + "]"
        return format_scalar(value)

    @staticmethod
    def _is_block_array(value: Any) -> bool:
        return isinstance(value, (list, tuple)) and bool(value) and not can_inline_array(list(value))

    def _write_pairs(self, items: Iterable[Any], level: int, lines: list[str]) -> None:
        for key, value in self._ordered(items):
            head = self._indent(level) + format_key(key) + ":"
            if isinstance(value, dict) and value:
                lines.append(head)
                self._write_pairs(value.items(), level + 1, lines)
            elif self._is_block_array(value):
                lines.append(head)
                self._write_block_array(value, level + 1, lines)
            else:
                lines.append(head + " " + self.inline(value))

    def _write_block_array(self, items: Iterable[Any], level: int, lines: list[str]) -> None:
        lines.append(self._indent(level) + "[")
        for item in items:
            if self._is_block_array(item):
                self._write_block_array(item, level + 1, lines)
            else:
                lines.append(self._indent(level + 1) + self.inline(item))
        lines.append(self._indent(level) + "]")

    # Lossless mode

    def write_lossless(self, node: AnnotatedValue) -> str:
        """Serialize an annotated tree, re-emitting its comments."""
        lines: list[str] = []
        self._write_comments(node.leading_comments, lines)

        if not node.absent:
            suffix = self._inline_comment(node)
            if self.options.indent_width == 0:
                lines.append(self.inline_node(node) + suffix)
            elif node.is_object and node.object_items:
                self._write_node_pairs(node, 0, lines)
            elif self._is_block_node(node):
                self._write_node_array(node, 0, lines, suffix)
            else:
                lines.append(self.inline_node(node) + suffix)

        self._write_comments(node.trailing_comments, lines)
        return self._finish(lines)

    @staticmethod
    def _write_comments(comments: list[Comment], lines: list[str]) -> None:
        for comment in comments:
            if comment.blank:
                lines.append("")
            else:
                lines.append(" " * comment.indent + "#" + comment.text)

    @staticmethod
    def _inline_comment(node: AnnotatedValue) -> str:
        if node.inline_comment is None:
            return ""
        return " #" + node.inline_comment.rstrip()

    @staticmethod
    def _is_block_node(node: AnnotatedValue) -> bool:
        """Arrays go on their own lines when too big or when they carry comments."""
        if not node.is_array:
            return False
        if node.closing_comments:
            return True
        if not node.array_items:
            return False
        if len(node.array_items) > MAX_INLINE_ARRAY_ITEMS:
            return True
        if not all(
            not (item.is_array or item.is_object) and is_simple_scalar(item.value)
            for item in node.array_items
        ):
            return True
        return any(
            item.leading_comments or item.inline_comment is not None
            for item in node.array_items
        )

    def inline_node(self, node: AnnotatedValue) -> str:
        """Render a node on one line, following its source key order."""
        if node.is_object:
            pairs = ", ".join(
                f"{format_key(key)}: {self.inline_node(child)}"
                for key, child in self._ordered(node.object_items)
            )
            return "{" + pairs + "}"
        if node.is_array:
            return "[" + ", ".join(self.inline_node(item) for item in node.array_items) + "]"
        return format_scalar(node.value)

    def _write_node_pairs(self, node: AnnotatedValue, level: int, lines: list[str]) -> None:
        for key, child in self._ordered(node.object_items):
            self._write_comments(child.leading_comments, lines)
            head = self._indent(level) + format_key(key) + ":"
            suffix = self._inline_comment(child)
            if child.is_object and child.object_items:
                lines.append(head + suffix)
                self._write_node_pairs(child, level + 1, lines)
            elif self._is_block_node(child):
                lines.append(head + suffix)
                self._write_node_array(child, level + 1, lines, "")
            else:
                lines.append(head + " " + self.inline_node(child) + suffix)
            self._write_comments(child.trailing_comments, lines)

    def _write_node_array(
        self, node: AnnotatedValue, level: int, lines: list[str], suffix: str
    ) -> None:
        lines.append(self._indent(level) + "[")
        for item in node.array_items:
            self._write_comments(item.leading_comments, lines)
            if self._is_block_node(item):
                self._write_node_array(item, level + 1, lines, self._inline_comment(item))
            else:
                lines.append(
                    self._indent(level + 1) + self.inline_node(item) + self._inline_comment(item)
                )
        self._write_comments(node.closing_comments, lines)
        lines.append(self._indent(level) + "]" + suffix)


def serialize(value: Any, options: Optional[WriteOptions] = None) -> str:
    """
    Serialize a plain value in canonical havcson form.

    Args:
        value: None, bool, int/float, str, list/tuple or dict with str keys.
        options: Indent width and key sorting.

    Returns:
        The document text, ending with a single newline.

    Raises:
        ValueError: For NaN or infinite numbers.
        TypeError: For values of unsupported types.
    """
    logger.debug("Serializing %s value", type(value).__name__)
    return Writer(options).write(value)


def serialize_lossless(node: AnnotatedValue, options: Optional[WriteOptions] = None) -> str:
    """
    Serialize an annotated tree, keeping its comments and key order.

    Parsing a canonically formatted document with loads_lossless() and
    writing it back with the same options reproduces it exactly.
    """
    logger.debug("Serializing annotated tree")
    return Writer(options).write_lossless(node)


def dumps(value: Any, *, indent: int = 2, sort_keys: bool = False) -> str:
    """Serialize value; keyword arguments mirror json.dumps."""
    return serialize(value, WriteOptions(indent_width=indent, sort_object_keys=sort_keys))


def dump(value: Any, fp: TextIO, *, indent: int = 2, sort_keys: bool = False) -> None:
    """Serialize value and write it to a file-like object."""
    fp.write(dumps(value, indent=indent, sort_keys=sort_keys))


def dumps_lossless(node: AnnotatedValue, *, indent: int = 2, sort_keys: bool = False) -> str:
    return serialize_lossless(node, WriteOptions(indent_width=indent, sort_object_keys=sort_keys))


def dump_lossless(
    node: AnnotatedValue, fp: TextIO, *, indent: int = 2, sort_keys: bool = False
) -> None:
    """Serialize an annotated tree and write it to a file-like object."""
    fp.write(dumps_lossless(node, indent=indent, sort_keys=sort_keys))
