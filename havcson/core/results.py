"""
Result containers returned by the non-raising parse entry points.
"""

from dataclasses import dataclass
from typing import Any, Optional

from ..security.exceptions import ParseError
from .nodes import AnnotatedValue


@dataclass
class ParseResult:
    """Outcome of parse(): a value on success, otherwise the error."""

    value: Any = None
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Return the value, raising the stored error if parsing failed."""
        if self.error is not None:
            raise self.error
        return self.value


@dataclass
class LosslessParseResult:
    """Outcome of parse_lossless(): an annotated tree or the error."""

    node: Optional[AnnotatedValue] = None
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> AnnotatedValue:
        if self.error is not None:
            raise self.error
        assert self.node is not None
        return self.node
