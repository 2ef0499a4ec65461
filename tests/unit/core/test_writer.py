"""
Test cases for the havcson writer.

Tests cover canonical layout decisions, quoting policy and the lossless
re-emission of comments.
"""

import io
import unittest

import havcson
from havcson import AnnotatedValue, Comment, WriteOptions
from havcson.core.writer import format_key, format_number, format_string


class TestScalarFormatting(unittest.TestCase):
    """Test scalar rendering rules."""

    def test_numbers(self):
        cases = [
            (1.0, "1"),
            (-3.0, "-3"),
            (0.0, "0"),
            (-0.0, "0"),
            (2.5, "2.5"),
            (0.1, "0.1"),
            (1e20, "1e+20"),
            (1.5e-7, "1.5e-07"),
            (7, "7"),
        ]
        for value, expected in cases:
            with self.subTest(value=value):
                self.assertEqual(format_number(value), expected)

    def test_non_finite_numbers_rejected(self):
        for value in (float("nan"), float("inf"), float("-inf")):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    format_number(value)

    def test_strings(self):
        cases = [
            ("plain", '"plain"'),
            ('say "hi"', '"say \\"hi\\""'),
            ("back\\slash", '"back\\\\slash"'),
            ("tab\there", '"tab\\there"'),
            ("cr\r", '"cr\\r"'),
            ("a\nb", '"""a\nb"""'),
            ('has """ inside\n', '"has \\"\\"\\" inside\\n"'),
            ('ends with quote\n"', '"ends with quote\\n\\""'),
            ("it's", '"it\'s"'),
            ("", '""'),
        ]
        for value, expected in cases:
            with self.subTest(value=value):
                self.assertEqual(format_string(value), expected)

    def test_keys(self):
        cases = [
            ("name", "name"),
            ("_private", "_private"),
            ("max-size_2", "max-size_2"),
            ("my key", '"my key"'),
            ("1st", '"1st"'),
            ("-dash", '"-dash"'),
            ("", '""'),
            ("multi\nline", '"multi\\nline"'),
        ]
        for key, expected in cases:
            with self.subTest(key=key):
                self.assertEqual(format_key(key), expected)


class TestCanonicalLayout(unittest.TestCase):
    """Test canonical document layout."""

    def test_flat_object(self):
        value = {"name": "Havoc", "level": 1.0, "items": [1.0, 2.0, 3.0]}
        self.assertEqual(
            havcson.serialize(value),
            'name: "Havoc"\nlevel: 1\nitems: [1, 2, 3]\n',
        )

    def test_nested_object(self):
        self.assertEqual(
            havcson.serialize({"foo": {"bar": 1, "baz": 2}}),
            "foo:\n  bar: 1\n  baz: 2\n",
        )

    def test_long_array_goes_multiline(self):
        self.assertEqual(
            havcson.serialize({"xs": [1, 2, 3, 4]}),
            "xs:\n  [\n    1\n    2\n    3\n    4\n  ]\n",
        )

    def test_array_with_long_string_goes_multiline(self):
        long_text = "x" * 33
        self.assertEqual(
            havcson.serialize([long_text]),
            '[\n  "' + long_text + '"\n]\n',
        )
        self.assertEqual(havcson.serialize(["x" * 32]), '["' + "x" * 32 + '"]\n')

    def test_objects_in_arrays_are_inline(self):
        value = {"people": [{"n": "a", "tags": [1, 2, 3, 4]}, {}]}
        self.assertEqual(
            havcson.serialize(value),
            'people:\n  [\n    {n: "a", tags: [1, 2, 3, 4]}\n    {}\n  ]\n',
        )

    def test_nested_block_arrays(self):
        self.assertEqual(
            havcson.serialize([[1, 2, 3, 4], [5]]),
            "[\n  [\n    1\n    2\n    3\n    4\n  ]\n  [5]\n]\n",
        )

    def test_empty_containers_and_scalars(self):
        cases = [
            ({}, "{}\n"),
            ([], "[]\n"),
            (None, "null\n"),
            (True, "true\n"),
            ("text", '"text"\n'),
            ({"a": {}, "b": []}, "a: {}\nb: []\n"),
        ]
        for value, expected in cases:
            with self.subTest(value=value):
                self.assertEqual(havcson.serialize(value), expected)

    def test_multiline_string_value(self):
        self.assertEqual(
            havcson.serialize({"a": "x\ny", "b": 1}),
            'a: """x\ny"""\nb: 1\n',
        )

    def test_quoted_keys(self):
        self.assertEqual(
            havcson.serialize({"my key": 1, "ok_key-1": 2}),
            '"my key": 1\nok_key-1: 2\n',
        )

    def test_sort_object_keys(self):
        options = WriteOptions(sort_object_keys=True)
        self.assertEqual(
            havcson.serialize({"b": 1, "a": {"d": 1, "c": 2}}, options),
            "a:\n  c: 2\n  d: 1\nb: 1\n",
        )

    def test_indent_width(self):
        options = WriteOptions(indent_width=4)
        self.assertEqual(
            havcson.serialize({"a": {"b": [1, 2, 3, 4]}}, options),
            "a:\n    b:\n        [\n            1\n            2\n            3\n            4\n        ]\n",
        )

    def test_zero_indent_writes_inline(self):
        self.assertEqual(
            havcson.serialize({"a": {"b": [1, 2, 3, 4]}}, WriteOptions(indent_width=0)),
            "{a: {b: [1, 2, 3, 4]}}\n",
        )

    def test_unsupported_type(self):
        with self.assertRaises(TypeError):
            havcson.serialize({"a": {1, 2}})

    def test_dumps_and_dump(self):
        self.assertEqual(
            havcson.dumps({"b": 1, "a": 2}, indent=4, sort_keys=True),
            "a: 2\nb: 1\n",
        )
        buffer = io.StringIO()
        havcson.dump([1, 2], buffer)
        self.assertEqual(buffer.getvalue(), "[1, 2]\n")


class TestLosslessWriter(unittest.TestCase):
    """Test comment re-emission from hand-built trees."""

    def test_leading_and_inline_comments(self):
        root = AnnotatedValue(leading_comments=[Comment(0, " settings")])
        root.set_item(
            "a", AnnotatedValue(1.0, inline_comment=" one   ")
        )
        root.set_item(
            "b",
            AnnotatedValue(
                "x",
                leading_comments=[Comment(0, ""), Comment(0, " about b")],
            ),
        )
        self.assertEqual(
            havcson.serialize_lossless(root),
            '# settings\na: 1 # one\n\n# about b\nb: "x"\n',
        )

    def test_commented_short_array_is_written_as_block(self):
        array = AnnotatedValue()
        array.append(AnnotatedValue(1.0))
        array.append(AnnotatedValue(2.0, inline_comment=" two"))
        root = AnnotatedValue()
        root.set_item("xs", array)
        self.assertEqual(
            havcson.serialize_lossless(root),
            "xs:\n  [\n    1\n    2 # two\n  ]\n",
        )

    def test_closing_comments_before_bracket(self):
        array = AnnotatedValue(closing_comments=[Comment(2, " none yet")])
        array.value = []
        self.assertEqual(havcson.serialize_lossless(array), "[\n  # none yet\n]\n")

    def test_absent_document(self):
        self.assertEqual(havcson.serialize_lossless(AnnotatedValue(absent=True)), "")
        node = AnnotatedValue(absent=True, trailing_comments=[Comment(0, " only")])
        self.assertEqual(havcson.serialize_lossless(node), "# only\n")

    def test_sort_keys_in_lossless_mode(self):
        root = havcson.loads_lossless("b: 1 # bee\na: 2\n")
        self.assertEqual(
            havcson.dumps_lossless(root, sort_keys=True),
            "a: 2\nb: 1 # bee\n",
        )

    def test_dump_lossless(self):
        buffer = io.StringIO()
        havcson.dump_lossless(havcson.loads_lossless("# c\nx: 1\n"), buffer)
        self.assertEqual(buffer.getvalue(), "# c\nx: 1\n")


if __name__ == '__main__':
    unittest.main()
