"""
Test cases for exceptions and error reporting.

Tests focus on error context creation, message formatting, and error reporting accuracy.
"""

import pickle
import unittest

from havcson.security.exceptions import (
    ErrorCode, ErrorContext, ErrorReporter, ErrorSuggestionEngine,
    HavcsonError, ParseError, Position, SecurityError
)


class TestErrorContext(unittest.TestCase):
    """Test ErrorContext dataclass functionality."""

    def test_error_context_creation(self):
        """Test ErrorContext creation with all fields."""
        position = Position(line=5, column=10)
        context = ErrorContext(
            text="key: @value",
            position=position,
            context_before="key: ",
            context_after="@value",
            error_char="@",
            line_text="key: @value",
            column_indicator="     ^"
        )

        self.assertEqual(context.position, position)
        self.assertEqual(context.error_char, "@")
        self.assertEqual(context.column_indicator, "     ^")


class TestHavcsonError(unittest.TestCase):
    """Test base HavcsonError exception class."""

    def test_basic_error_creation(self):
        """Test basic error creation with message only."""
        error = HavcsonError("Test error message")

        self.assertEqual(error.message, "Test error message")
        self.assertIsNone(error.position)
        self.assertIsNone(error.context)
        self.assertEqual(error.suggestions, [])
        self.assertEqual(str(error), "Test error message")

    def test_error_with_position(self):
        """Test error creation with position information."""
        error = HavcsonError("Parse error", position=Position(line=3, column=15))
        self.assertIn("at line 3, column 15", str(error))

    def test_error_with_suggestions(self):
        """Test error creation with suggestions."""
        suggestions = ["Check for missing quotes", "Indent with spaces"]
        error = HavcsonError("Syntax error", suggestions=suggestions)

        error_str = str(error)
        self.assertIn("Suggestions:", error_str)
        self.assertIn("  - Check for missing quotes", error_str)
        self.assertIn("  - Indent with spaces", error_str)

    def test_error_with_context(self):
        """Test error creation with full context."""
        position = Position(line=2, column=6)
        context = ErrorContext(
            text="a: 1\nkey: @",
            position=position,
            context_before="key: ",
            context_after="@",
            error_char="@",
            line_text="key: @",
            column_indicator="     ^"
        )
        error = HavcsonError("Unexpected character", position=position, context=context)

        self.assertEqual(
            str(error),
            "Unexpected character at line 2, column 6\n\nContext:\n  key: @\n       ^",
        )


class TestParseError(unittest.TestCase):
    """Test ParseError specific functionality."""

    def test_parse_error_inheritance(self):
        """Test that ParseError inherits from HavcsonError."""
        error = ParseError(ErrorCode.UNEXPECTED_CHAR, "Parse failure")
        self.assertIsInstance(error, HavcsonError)
        self.assertEqual(error.message, "Parse failure")
        self.assertEqual(error.code, ErrorCode.UNEXPECTED_CHAR)

    def test_default_message_per_code(self):
        """Test that every code has a default message."""
        for code in ErrorCode:
            with self.subTest(code=code):
                error = ParseError(code)
                self.assertTrue(error.message)

    def test_location_alias(self):
        """Test that location mirrors position."""
        position = Position(line=4, column=20)
        error = ParseError(ErrorCode.INVALID_NUMBER, position=position)

        self.assertEqual(error.location, position)
        self.assertIn("Invalid number literal at line 4, column 20", str(error))

    def test_code_values(self):
        """Test the public names of error codes."""
        self.assertEqual(ErrorCode.INCONSISTENT_INDENT.value, "InconsistentIndent")
        self.assertEqual(ErrorCode.INVALID_UTF8.value, "InvalidUtf8")

    def test_pickle_round_trip(self):
        """Test that ParseError survives pickling."""
        error = ParseError(
            ErrorCode.UNEXPECTED_END, "Unclosed array", Position(2, 3), suggestions=["x"]
        )
        restored = pickle.loads(pickle.dumps(error))

        self.assertEqual(restored.code, ErrorCode.UNEXPECTED_END)
        self.assertEqual(restored.message, "Unclosed array")
        self.assertEqual(restored.location, Position(2, 3))
        self.assertEqual(restored.suggestions, ["x"])


class TestSecurityError(unittest.TestCase):
    """Test SecurityError specific functionality."""

    def test_security_error_inheritance(self):
        """Test that SecurityError inherits from HavcsonError."""
        error = SecurityError("Nesting depth 6 exceeds limit 5")
        self.assertIsInstance(error, HavcsonError)
        self.assertNotIsInstance(error, ParseError)
        self.assertIn("Nesting depth 6", str(error))


class TestErrorReporter(unittest.TestCase):
    """Test ErrorReporter functionality."""

    def setUp(self):
        """Set up test ErrorReporter."""
        self.test_text = 'name: "Havoc"\r\nlevel: 1x\n'
        self.reporter = ErrorReporter(self.test_text)

    def test_lines_drop_carriage_returns(self):
        """Test that CRLF line endings are not part of the line text."""
        self.assertEqual(self.reporter.lines[:2], ['name: "Havoc"', "level: 1x"])

    def test_lines_split_on_lone_carriage_return(self):
        reporter = ErrorReporter("a: 1\rb: @\nc: 3")
        self.assertEqual(reporter.lines, ["a: 1", "b: @", "c: 3"])

    def test_create_parse_error(self):
        """Test creating ParseError through ErrorReporter."""
        position = Position(line=2, column=9)
        error = self.reporter.create_parse_error(
            ErrorCode.UNEXPECTED_CHAR, "Test parse error", position, ["Check syntax"]
        )

        self.assertIsInstance(error, ParseError)
        self.assertEqual(error.position, position)
        self.assertEqual(error.suggestions, ["Check syntax"])
        self.assertEqual(error.context.error_char, "x")
        self.assertEqual(error.context.line_text, "level: 1x")
        self.assertEqual(error.context.column_indicator, "        ^")
        self.assertEqual(error.context.context_before, "level: 1")

    def test_create_security_error(self):
        """Test creating SecurityError through ErrorReporter."""
        error = self.reporter.create_security_error("Security issue")

        self.assertIsInstance(error, SecurityError)
        self.assertEqual(error.message, "Security issue")

    def test_decorate_adds_context_once(self):
        """Test that decorate attaches context to a bare error."""
        bare = ParseError(ErrorCode.UNEXPECTED_CHAR, position=Position(2, 9))
        decorated = self.reporter.decorate(bare)

        self.assertIsNotNone(decorated.context)
        self.assertEqual(decorated.code, bare.code)
        self.assertIs(self.reporter.decorate(decorated), decorated)

    def test_long_line_is_clipped(self):
        """Test that long lines are clipped around the error column."""
        reporter = ErrorReporter("x" * 200 + "@", max_context=20)
        error = reporter.create_parse_error(
            ErrorCode.UNEXPECTED_CHAR, "", Position(1, 201)
        )

        self.assertEqual(error.context.error_char, "@")
        self.assertEqual(len(error.context.line_text), 11)
        self.assertEqual(error.context.column_indicator, " " * 10 + "^")

    def test_edge_position_handling(self):
        """Test error reporting with positions past the end."""
        for position in (Position(2, 10), Position(3, 1), Position(1, 1000)):
            with self.subTest(position=position):
                error = self.reporter.create_parse_error(
                    ErrorCode.UNEXPECTED_END, "", position
                )
                self.assertIsNotNone(error.context)
                self.assertEqual(error.context.error_char, "")


class TestErrorSuggestionEngine(unittest.TestCase):
    """Test ErrorSuggestionEngine functionality."""

    def test_every_code_has_suggestions(self):
        """Test that suggestions are helpful and non-empty."""
        for code in ErrorCode:
            with self.subTest(code=code):
                suggestions = ErrorSuggestionEngine.suggest_for_code(code)
                self.assertGreater(len(suggestions), 0)
                for suggestion in suggestions:
                    self.assertGreater(len(suggestion.strip()), 0)

    def test_suggestions_are_copies(self):
        """Test that callers cannot mutate the shared table."""
        ErrorSuggestionEngine.suggest_for_code(ErrorCode.UNEXPECTED_CHAR).clear()
        self.assertTrue(ErrorSuggestionEngine.suggest_for_code(ErrorCode.UNEXPECTED_CHAR))

    def test_suggest_for_unclosed_structure(self):
        """Test suggestions for unclosed structures."""
        obj_suggestions = ErrorSuggestionEngine.suggest_for_unclosed_structure("object")
        self.assertTrue(any("}" in s for s in obj_suggestions))

        arr_suggestions = ErrorSuggestionEngine.suggest_for_unclosed_structure("array")
        self.assertTrue(any("]" in s for s in arr_suggestions))

        self.assertEqual(ErrorSuggestionEngine.suggest_for_unclosed_structure("set"), [])


if __name__ == '__main__':
    unittest.main()
