"""
Constants shared by the havcson parsers and writer.
"""

import regex

# Escape sequences accepted inside single- and double-quoted strings
# (\uXXXX is handled separately).
ESCAPE_MAP = {
    "\\": "\\",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

# Characters the writer escapes inside double-quoted strings.
WRITER_ESCAPE_MAP = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

QUOTE_CHARS = ('"', "'")
TRIPLE_QUOTE = '"""'
COMMENT_CHAR = "#"
INLINE_SPACES = (" ", "\t")
LINE_BREAKS = ("\n", "\r")
# "\r\n" or a lone "\r"; used to normalise line breaks to "\n".
LINE_BREAK_PATTERN = regex.compile(r"\r\n?")

BOM = "\ufeff"

KEYWORDS = {
    "true": True,
    "false": False,
    "null": None,
}

# Keys matching this pattern are written without quotes.
BARE_KEY_PATTERN = regex.compile(r"[A-Za-z_][A-Za-z0-9_\-]*")

# Arrays of at most this many simple scalars are written on one line.
MAX_INLINE_ARRAY_ITEMS = 3
# Longest string still considered a simple scalar.
MAX_INLINE_STRING_LENGTH = 32

# Integral numbers below this magnitude are written without a fraction.
MAX_EXACT_INTEGER = 1e16


def is_identifier_start(char: str) -> bool:
    """Check whether char may start a bare identifier."""
    return char == "_" or ("a" <= char <= "z") or ("A" <= char <= "Z")


def is_identifier_char(char: str) -> bool:
    """Check whether char may continue a bare identifier."""
    return is_identifier_start(char) or ("0" <= char <= "9") or char == "-"


def is_number_start(char: str) -> bool:
    """Check whether char may start a number literal."""
    return ("0" <= char <= "9") or char in ("+", "-")
