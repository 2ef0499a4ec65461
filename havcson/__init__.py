"""
havcson - parser and writer for an indentation-aware, comment-bearing JSON superset.

havcson documents mix JSON-style braces and brackets with indentation-delimited
objects and arrays, and allow bare identifiers, single-, double- and
triple-quoted strings, and '#' line comments.

Key Features:
- loads()/load() and dumps()/dump() in the style of the json module
- Lossless mode that keeps comments, blank lines and key order for exact
  round-tripping of canonically formatted documents
- Precise line/column error reporting with one error code per failure
- Strict UTF-8 validation of byte input
- Optional limits on input size and nesting depth

Quick Start:
    import havcson

    data = havcson.loads('name: "Havoc"\\nlevel: 1\\nitems: [1, 2, 3]')
    text = havcson.dumps(data)

    # Keep comments while editing a document
    tree = havcson.loads_lossless(text)
    tree.get("level").value = 2.0
    havcson.dumps_lossless(tree)

    # Result-style API that never raises on malformed input
    result = havcson.parse("foo: [1, 2")
    if not result.ok:
        print(result.error.code, result.error.location)
"""

from .core.engine import load, loads, parse
from .core.lossless import load_lossless, loads_lossless, parse_lossless
from .core.nodes import AnnotatedValue, Comment, ObjectItem
from .core.results import LosslessParseResult, ParseResult
from .core.writer import (
    dump,
    dump_lossless,
    dumps,
    dumps_lossless,
    serialize,
    serialize_lossless,
)
from .security.exceptions import ErrorCode, HavcsonError, ParseError, Position, SecurityError
from .utils.config import ErrorReporting, ParseConfig, ParseLimits, WriteOptions

__version__ = "0.1.0"
__author__ = "havcson contributors"

__all__ = [
    # json-style functions
    "loads", "load", "dumps", "dump",
    # Result-style parsing and serialization
    "parse", "parse_lossless", "serialize", "serialize_lossless",
    # Lossless mode
    "loads_lossless", "load_lossless", "dumps_lossless", "dump_lossless",
    "AnnotatedValue", "Comment", "ObjectItem",
    "ParseResult", "LosslessParseResult",
    # Configuration classes
    "ParseConfig", "ParseLimits", "ErrorReporting", "WriteOptions",
    # Exception classes
    "HavcsonError", "ParseError", "SecurityError", "ErrorCode", "Position",
]
