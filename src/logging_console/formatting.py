"""
Text rendering for console output: printf-style messages, object dumps and tables.
"""

import re
import sys
import json
import pprint
from collections.abc import Mapping

_DIRECTIVE_RE = re.compile(r'%[sdifjoOcr%]')

_SCALAR_TYPES = (str, bytes, int, float, complex, bool, type(None))


def has_format_directives(value):
    """True when value is a string containing printf-style directives."""
    return isinstance(value, str) and _DIRECTIVE_RE.search(value) is not None


def render_value(value, depth=None, compact=True):
    """Render a value on one line; strings are returned as they are."""
    if isinstance(value, str):
        return value
    return pprint.pformat(value, depth=depth, compact=compact, width=sys.maxsize)


def _number(value, convert):
    try:
        return str(convert(value))
    except (TypeError, ValueError, OverflowError):
        return 'NaN'


def _decimal(value):
    """%d keeps fractions and drops a trailing .0; %i truncates."""
    if isinstance(value, int):
        return str(int(value))
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 'NaN'
    if number.is_integer():
        return str(int(number))
    return str(number)


def _json(value):
    try:
        return json.dumps(value, default=str)
    except (TypeError, ValueError):
        # Cyclic data
        return '[Circular]'


def _format_directive(directive, value, depth, compact):
    if directive == 's':
        return render_value(value, depth, compact)
    if directive == 'd':
        return _decimal(value)
    if directive == 'i':
        return _number(value, int)
    if directive == 'f':
        return _number(value, float)
    if directive == 'j':
        return _json(value)
    if directive == 'r':
        return repr(value)
    if directive == 'c':
        # CSS styling directive, consumes its argument
        return ''
    return pprint.pformat(value, depth=depth, compact=compact, width=sys.maxsize)


def format_arguments(args, depth=None, compact=True):
    """
    Build the message text for a console call.

    When the first argument is a string with printf-style directives the
    remaining arguments are interpolated into it and any left over are
    appended, separated by spaces. Otherwise all arguments are rendered and
    joined with ', '.

    Args:
        args (tuple): Arguments of the console call
        depth (int): Nesting depth for rendering containers and objects
        compact (bool): Pack short container items onto shared lines

    Returns:
        str: The message text
    """
    args = list(args)
    if not args:
        return ''

    if has_format_directives(args[0]):
        template = args.pop(0)
        remaining = iter(args)
        consumed = 0

        def substitute(match):
            nonlocal consumed
            directive = match.group(0)[1]
            if directive == '%':
                return '%'
            if consumed >= len(args):
                return match.group(0)
            consumed += 1
            return _format_directive(directive, next(remaining), depth, compact)

        text = _DIRECTIVE_RE.sub(substitute, template)
        extra = [render_value(arg, depth, compact) for arg in remaining]
        return ' '.join([text] + extra)

    return ', '.join(render_value(arg, depth, compact) for arg in args)


def inspect_object(obj, show_hidden=False, depth=2):
    """
    Render an object for console.dir().

    Plain values and containers are pretty-printed. Other objects are shown as
    their class name followed by their attributes; attributes starting with an
    underscore are only included when show_hidden is set.
    """
    pprint_depth = None if depth is None else depth + 1

    if isinstance(obj, _SCALAR_TYPES + (list, tuple, set, frozenset, dict)) or not hasattr(obj, '__dict__'):
        return pprint.pformat(obj, depth=pprint_depth, width=sys.maxsize)

    attributes = {
        name: value for name, value in vars(obj).items()
        if show_hidden or not name.startswith('_')
    }
    return f"{type(obj).__name__} {pprint.pformat(attributes, depth=pprint_depth, width=sys.maxsize)}"


def _table_rows(data):
    if isinstance(data, Mapping):
        return list(data.items())
    return list(enumerate(data))


def render_table(data, properties=None):
    """
    Render tabular data as a box-drawn table.

    Rows come from a mapping (keys as index) or any other iterable (positions
    as index). Mapping rows spread over named columns, sequence rows over
    positional columns, and scalar rows go into a 'Values' column.

    Args:
        data: Mapping or iterable of rows
        properties (list): Restrict and order the columns shown

    Returns:
        str: The table, or the rendered value when data is not tabular
    """
    if isinstance(data, _SCALAR_TYPES) or not hasattr(data, '__iter__'):
        return render_value(data)

    index_header = '(index)'
    values_header = 'Values'
    columns = []
    table = []
    has_values = False

    for index, row in _table_rows(data):
        if isinstance(row, Mapping):
            cells = {str(key): value for key, value in row.items()}
        elif isinstance(row, (list, tuple)):
            cells = {str(position): value for position, value in enumerate(row)}
        else:
            cells = {values_header: row}
            has_values = True

        for key in cells:
            if key != values_header and key not in columns:
                columns.append(key)
        table.append((index, cells))

    if properties is not None:
        columns = [str(p) for p in properties]
        has_values = False

    headers = [index_header] + columns + ([values_header] if has_values else [])
    rows = []
    for index, cells in table:
        row = [str(index)]
        for header in headers[1:]:
            row.append(repr(cells[header]) if header in cells else '')
        rows.append(row)

    widths = [len(h) + 2 for h in headers]
    for row in rows:
        for position, cell in enumerate(row):
            widths[position] = max(widths[position], len(cell) + 2)

    def line(left, middle, right):
        return left + middle.join('─' * w for w in widths) + right

    def cells_line(values):
        return '│' + '│'.join(v.center(w) for v, w in zip(values, widths)) + '│'

    output = [line('┌', '┬', '┐'), cells_line(headers), line('├', '┼', '┤')]
    output.extend(cells_line(row) for row in rows)
    output.append(line('└', '┴', '┘'))
    return '\n'.join(output)
