"""
Trace capture for category resolution.

Captures the current call stack as a list of frame texts in the interpreter's
own traceback format, innermost frame first.
"""

import sys
import threading
import traceback
from contextlib import contextmanager

# Frames of the console between the application's call and the capture point:
# LoggingConsole._dispatch and the public console method
INTERNAL_DEPTH = 2

_depth_lock = threading.RLock()
_UNSET = object()


@contextmanager
def trace_depth(limit):
    """
    Temporarily set sys.tracebacklimit, restoring the previous value on exit.

    The lock keeps two threads from saving each other's temporary value as
    the one to restore. It is reentrant so a capture started from inside
    another one on the same thread (a signal handler logging mid-capture)
    nests instead of blocking.
    """
    with _depth_lock:
        previous = getattr(sys, 'tracebacklimit', _UNSET)
        sys.tracebacklimit = limit
        try:
            yield
        finally:
            if previous is _UNSET:
                del sys.tracebacklimit
            else:
                sys.tracebacklimit = previous


def _qualified_name(frame):
    code = frame.f_code
    return getattr(code, 'co_qualname', code.co_name)


def capture(limit, skip=0):
    """
    Capture the stack of the calling code.

    Args:
        limit (int): Maximum number of frames to capture
        skip (int): Number of frames to leave out, counted from the caller

    Returns:
        list: Frame texts ('  File "...", line N, in name\\n...'), innermost first,
        starting with the caller of capture()
    """
    start = sys._getframe(skip + 1)
    visited = []

    def walk():
        for frame, lineno in traceback.walk_stack(start):
            visited.append(frame)
            yield frame, lineno

    # StackSummary.extract reads sys.tracebacklimit when no limit is given
    with trace_depth(limit):
        summary = traceback.StackSummary.extract(walk(), lookup_lines=False)

    texts = []
    for entry, frame in zip(summary, visited):
        named = traceback.FrameSummary(entry.filename, entry.lineno, _qualified_name(frame),
                                       lookup_line=False)
        # One entry per summary so repeated recursive frames are never collapsed
        texts.extend(traceback.StackSummary.from_list([named]).format())
    return texts
