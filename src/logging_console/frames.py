"""
Parser for captured stack frame texts.

A frame text looks like:

      File "/srv/app/jobs/worker.py", line 42, in Worker.run
        console.info("started")

Only the first line is used. The location is the quoted path, the function is
the (qualified) name after "in". Top-level code reports "<module>".
"""

import os
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from .exceptions import FrameParseError

TOP_LEVEL = '<module>'

PACKAGE_DIR = os.path.normcase(os.path.dirname(os.path.abspath(__file__)))

# Console methods that sit between application code and the trace capture
DISPATCH_METHODS = frozenset([
    '_dispatch',
    'error', 'warn', 'info', 'debug', 'trace',
    'count', 'time', 'time_end', 'time_log',
    'dir', 'dirxml', 'table', 'assert_',
])

_FRAME_RE = re.compile(
    r'^\s*File "(?P<location>[^"]*)"'
    r'(?:, line (?P<line>\d+|None))?'
    r'(?:, in (?P<function>.*?))?\s*$'
)


@dataclass(frozen=True)
class Frame:
    """One entry of a captured call stack."""
    raw: str
    location: str
    function: Optional[str] = None
    line: Optional[int] = None

    @property
    def is_top_level(self) -> bool:
        return not self.function or self.function == TOP_LEVEL

    @property
    def function_parts(self) -> Tuple[str, ...]:
        if self.is_top_level:
            return ()
        return tuple(self.function.split('.'))


def parse_frame(text: str) -> Frame:
    """
    Parse one frame text into a Frame.

    Args:
        text: Frame text as produced by traceback formatting

    Returns:
        Frame: the parsed frame

    Raises:
        FrameParseError: if the first line is not a traceback frame line
    """
    if not isinstance(text, str) or not text.strip():
        raise FrameParseError(text)

    first_line = text.strip('\n').split('\n', 1)[0]
    match = _FRAME_RE.match(first_line)
    if not match or not match.group('location'):
        raise FrameParseError(text)

    line = match.group('line')
    return Frame(
        raw=text,
        location=match.group('location'),
        function=match.group('function') or None,
        line=int(line) if line and line != 'None' else None,
    )


def is_dispatch_frame(frame: Frame) -> bool:
    """True when the frame is one of the console's own dispatch methods."""
    if frame.is_top_level:
        return False
    if frame.function_parts[-1] not in DISPATCH_METHODS:
        return False
    location = os.path.normcase(os.path.abspath(frame.location))
    return os.path.dirname(location) == PACKAGE_DIR
