"""
Configuration for havcson parsing and writing.

Limits are disabled by default; callers processing untrusted documents can
opt in with ParseLimits.strict() or explicit values.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ParseLimits:
    """Optional resource limits enforced while parsing."""

    max_input_size: Optional[int] = None
    max_nesting_depth: Optional[int] = None

    def __post_init__(self) -> None:
        if self.max_input_size is not None and self.max_input_size <= 0:
            raise ValueError("max_input_size must be positive")
        if self.max_nesting_depth is not None and self.max_nesting_depth <= 0:
            raise ValueError("max_nesting_depth must be positive")

    @classmethod
    def strict(cls) -> "ParseLimits":
        """Limits suitable for untrusted input."""
        return cls(max_input_size=10 * 1024 * 1024, max_nesting_depth=100)


@dataclass
class ErrorReporting:
    """Error reporting and context settings."""

    include_context: bool = True
    max_error_context: int = 50


@dataclass
class ParseConfig:
    """Configuration options for one parse call."""

    limits: Optional[ParseLimits] = None
    error_reporting: Optional[ErrorReporting] = None

    def __post_init__(self) -> None:
        if self.limits is None:
            self.limits = ParseLimits()
        if self.error_reporting is None:
            self.error_reporting = ErrorReporting()

    @property
    def include_context(self) -> bool:
        """Whether errors carry a source excerpt."""
        assert self.error_reporting is not None
        return self.error_reporting.include_context

    @include_context.setter
    def include_context(self, value: bool) -> None:
        assert self.error_reporting is not None
        self.error_reporting.include_context = value

    @property
    def max_error_context(self) -> int:
        """Maximum characters of source shown around an error."""
        assert self.error_reporting is not None
        return self.error_reporting.max_error_context

    @max_error_context.setter
    def max_error_context(self, value: int) -> None:
        assert self.error_reporting is not None
        self.error_reporting.max_error_context = value


@dataclass
class WriteOptions:
    """Layout options shared by the canonical and lossless writers."""

    indent_width: int = 2
    sort_object_keys: bool = False

    def __post_init__(self) -> None:
        if self.indent_width < 0:
            raise ValueError("indent_width must not be negative")
