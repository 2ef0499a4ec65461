"""
Input decoding and UTF-8 validation.

Byte input is decoded strictly: overlong forms, encoded surrogates, truncated
sequences and code points above U+10FFFF are rejected. A byte order mark is
accepted (and dropped) only at the very start of the input.
"""

import logging
from typing import Union

from ..security.exceptions import ErrorCode, ParseError
from .constants import BOM
from .cursor import position_at

logger = logging.getLogger(__name__)

UTF8_BOM = b"\xef\xbb\xbf"

Source = Union[str, bytes, bytearray]


def _first_bad_byte(data: bytes) -> int:
    """Return the offset of the first invalid byte, or -1 if data is valid."""
    bad = -1
    try:
        data.decode("utf-8")
    except UnicodeDecodeError as exc:
        bad = exc.start

    bom = data.find(UTF8_BOM)
    if bom != -1 and (bad == -1 or bom < bad):
        bad = bom
    return bad


def decode_source(source: Source) -> str:
    """
    Decode and validate parser input.

    Args:
        source: Document text, or its UTF-8 encoded bytes.

    Returns:
        The document as a str without a leading byte order mark.

    Raises:
        ParseError: InvalidUtf8, positioned at the offending character.
    """
    if isinstance(source, (bytes, bytearray)):
        data = bytes(source)
        if data.startswith(UTF8_BOM):
            data = data[len(UTF8_BOM):]

        bad = _first_bad_byte(data)
        if bad != -1:
            prefix = data[:bad].decode("utf-8")
            position = position_at(prefix, len(prefix))
            logger.debug("Invalid UTF-8 at byte offset %d", bad)
            raise ParseError(
                ErrorCode.INVALID_UTF8,
                "Invalid UTF-8 sequence",
                position,
            )
        return data.decode("utf-8")

    text = source
    if text.startswith(BOM):
        text = text[1:]

    for index, char in enumerate(text):
        if char == BOM or "\ud800" <= char <= "\udfff":
            raise ParseError(
                ErrorCode.INVALID_UTF8,
                "Unpaired surrogate or misplaced byte order mark",
                position_at(text, index),
            )
    return text


def replacement_text(source: Source) -> str:
    """Best-effort text of source for error excerpts."""
    if isinstance(source, (bytes, bytearray)):
        text = bytes(source).decode("utf-8", errors="replace")
    else:
        text = source
    return text[1:] if text.startswith(BOM) else text
