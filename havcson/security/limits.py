"""
Security limits and validation for havcson.
This module provides optional guards against resource exhaustion.
"""

from typing import Optional

from ..utils.config import ParseLimits
from .exceptions import SecurityError


class LimitValidator:
    """Validates parsing limits; a limit set to None is not enforced."""

    def __init__(self, limits: Optional[ParseLimits] = None):
        self.limits = limits or ParseLimits()
        self.nesting_depth = 0

    def validate_input_size(self, text: str) -> None:
        """Validate that input text size is within limits."""
        limit = self.limits.max_input_size
        if limit is not None and len(text) > limit:
            raise SecurityError(f"Input size {len(text)} exceeds limit {limit}")

    def enter_structure(self) -> None:
        """Track entering a nested structure and validate depth."""
        self.nesting_depth += 1
        limit = self.limits.max_nesting_depth
        if limit is not None and self.nesting_depth > limit:
            raise SecurityError(
                f"Nesting depth {self.nesting_depth} exceeds limit {limit}"
            )

    def exit_structure(self) -> None:
        """Track exiting a nested structure."""
        if self.nesting_depth > 0:
            self.nesting_depth -= 1
