"""
Test cases for parse and write configuration.
"""

import unittest

from havcson.utils.config import ErrorReporting, ParseConfig, ParseLimits, WriteOptions


class TestParseLimits(unittest.TestCase):
    """Test ParseLimits defaults and validation."""

    def test_defaults_disable_limits(self):
        limits = ParseLimits()
        self.assertIsNone(limits.max_input_size)
        self.assertIsNone(limits.max_nesting_depth)

    def test_strict_preset(self):
        limits = ParseLimits.strict()
        self.assertEqual(limits.max_nesting_depth, 100)
        self.assertEqual(limits.max_input_size, 10 * 1024 * 1024)

    def test_non_positive_limits_rejected(self):
        for kwargs in ({"max_input_size": 0}, {"max_nesting_depth": -1}):
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ValueError):
                    ParseLimits(**kwargs)


class TestParseConfig(unittest.TestCase):
    """Test ParseConfig defaults and passthrough properties."""

    def test_defaults(self):
        config = ParseConfig()
        self.assertEqual(config.limits, ParseLimits())
        self.assertTrue(config.include_context)
        self.assertEqual(config.max_error_context, 50)

    def test_error_reporting_passthrough(self):
        config = ParseConfig(error_reporting=ErrorReporting(max_error_context=10))
        self.assertEqual(config.max_error_context, 10)

        config.include_context = False
        config.max_error_context = 80
        self.assertFalse(config.error_reporting.include_context)
        self.assertEqual(config.error_reporting.max_error_context, 80)


class TestWriteOptions(unittest.TestCase):
    """Test WriteOptions validation."""

    def test_defaults(self):
        options = WriteOptions()
        self.assertEqual(options.indent_width, 2)
        self.assertFalse(options.sort_object_keys)

    def test_zero_indent_allowed(self):
        self.assertEqual(WriteOptions(indent_width=0).indent_width, 0)

    def test_negative_indent_rejected(self):
        with self.assertRaises(ValueError):
            WriteOptions(indent_width=-2)


if __name__ == '__main__':
    unittest.main()
