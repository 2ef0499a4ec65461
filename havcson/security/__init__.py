"""
havcson errors and resource limits.

This module provides the exception hierarchy and limit validation.
"""

from .exceptions import (
    ErrorCode,
    ErrorContext,
    ErrorReporter,
    ErrorSuggestionEngine,
    HavcsonError,
    ParseError,
    Position,
    SecurityError,
)
from .limits import LimitValidator

__all__ = [
    'ErrorCode', 'ErrorContext', 'ErrorReporter', 'ErrorSuggestionEngine',
    'HavcsonError', 'ParseError', 'Position', 'SecurityError', 'LimitValidator',
]
