"""
havcson Core Parsing Engine.

This module provides the value parser, the lossless parser and the writer.
"""

from .cursor import Cursor
from .engine import Parser, parse
from .indent import IndentTracker
from .lossless import LosslessParser, parse_lossless
from .writer import Writer, serialize, serialize_lossless

__all__ = [
    'parse', 'Parser',
    'parse_lossless', 'LosslessParser',
    'serialize', 'serialize_lossless', 'Writer',
    'Cursor', 'IndentTracker',
]
