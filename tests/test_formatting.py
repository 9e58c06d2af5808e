#!/usr/bin/env python3
"""
Unit tests for message, object and table rendering.
"""

import unittest

from logging_console.formatting import (
    format_arguments,
    has_format_directives,
    inspect_object,
    render_table,
)


class Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y
        self._cache = None


class TestFormatArguments(unittest.TestCase):
    """Test cases for format_arguments."""

    def test_no_arguments(self):
        self.assertEqual(format_arguments(()), '')

    def test_plain_arguments_joined(self):
        """Test that arguments without a template are joined with commas."""
        self.assertEqual(format_arguments(('a', 1, [1, 2])), 'a, 1, [1, 2]')
        self.assertEqual(format_arguments(({'k': 'v'},)), "{'k': 'v'}")

    def test_printf_template(self):
        self.assertEqual(format_arguments(('%s has %d items', 'cart', 3)), 'cart has 3 items')
        self.assertEqual(format_arguments(('%i%%', 42.9)), '42%')
        self.assertEqual(format_arguments(('%f', '1.5')), '1.5')

    def test_leftover_arguments_appended(self):
        self.assertEqual(format_arguments(('%s!', 'hi', 'there', 2)), 'hi! there 2')

    def test_missing_arguments_leave_directive(self):
        self.assertEqual(format_arguments(('%s and %s', 'a')), 'a and %s')

    def test_json_repr_and_style_directives(self):
        self.assertEqual(format_arguments(('%j', {'a': 1})), '{"a": 1}')
        self.assertEqual(format_arguments(('%r', 'x')), "'x'")
        self.assertEqual(format_arguments(('%cstyled', 'color: red')), 'styled')

    def test_bad_number(self):
        self.assertEqual(format_arguments(('%d', 'many')), 'NaN')
        self.assertEqual(format_arguments(('%i', None)), 'NaN')

    def test_decimal_keeps_fraction_integer_truncates(self):
        """Test that %d keeps fractional values while %i truncates them."""
        self.assertEqual(format_arguments(('%d|%i', 3.7, 3.7)), '3.7|3')
        self.assertEqual(format_arguments(('%d', 4.0)), '4')
        self.assertEqual(format_arguments(('%d', '12')), '12')
        self.assertEqual(format_arguments(('%d', True)), '1')

    def test_json_of_cyclic_data(self):
        """Test that %j on self-referencing data renders a marker instead of raising."""
        cyclic = {}
        cyclic['self'] = cyclic
        self.assertEqual(format_arguments(('%j', cyclic)), '[Circular]')
        self.assertEqual(format_arguments(('data %j done', cyclic)), 'data [Circular] done')

    def test_has_format_directives(self):
        self.assertTrue(has_format_directives('%s'))
        self.assertFalse(has_format_directives('100 percent'))
        self.assertFalse(has_format_directives(5))

    def test_depth_limits_nesting(self):
        text = format_arguments(({'a': {'b': {'c': 1}}},), depth=1)
        self.assertEqual(text, "{'a': {...}}")


class TestInspectObject(unittest.TestCase):
    """Test cases for inspect_object."""

    def test_container_depth(self):
        """Test that nesting beyond depth is elided."""
        text = inspect_object({'a': {'b': {'c': {'d': 1}}}}, depth=2)
        self.assertEqual(text, "{'a': {'b': {'c': {...}}}}")

    def test_object_attributes(self):
        text = inspect_object(Point(1, 2))
        self.assertEqual(text, "Point {'x': 1, 'y': 2}")

    def test_hidden_attributes(self):
        text = inspect_object(Point(1, 2), show_hidden=True)
        self.assertIn("'_cache': None", text)

    def test_scalar(self):
        self.assertEqual(inspect_object(42), '42')
        self.assertEqual(inspect_object('text'), "'text'")


class TestRenderTable(unittest.TestCase):
    """Test cases for render_table."""

    def test_rows_of_mappings(self):
        """Test a list of dictionaries with a missing cell."""
        expected = '\n'.join([
            '┌─────────┬───┬─────┐',
            '│ (index) │ a │  b  │',
            '├─────────┼───┼─────┤',
            "│    0    │ 1 │ 'x' │",
            '│    1    │ 2 │     │',
            '└─────────┴───┴─────┘',
        ])
        self.assertEqual(render_table([{'a': 1, 'b': 'x'}, {'a': 2}]), expected)

    def test_scalar_rows(self):
        lines = render_table([10, 20]).split('\n')
        self.assertEqual(lines[1], '│ (index) │ Values │')
        self.assertEqual(lines[3], '│    0    │   10   │')

    def test_mapping_index(self):
        text = render_table({'first': {'a': 1}})
        self.assertIn('first', text)

    def test_sequence_rows(self):
        lines = render_table([[1, 2]]).split('\n')
        self.assertEqual(lines[1], '│ (index) │ 0 │ 1 │')

    def test_properties_select_columns(self):
        lines = render_table([{'a': 1, 'b': 2}], ['b']).split('\n')
        self.assertEqual(lines[1], '│ (index) │ b │')
        self.assertEqual(lines[3], '│    0    │ 2 │')

    def test_not_tabular(self):
        self.assertEqual(render_table(5), '5')
        self.assertEqual(render_table('text'), 'text')


if __name__ == '__main__':
    unittest.main()
