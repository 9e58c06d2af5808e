#!/usr/bin/env python3
"""
Unit tests for trace capture and the scoped trace depth.
"""

import sys
import threading
import unittest

from logging_console.frames import parse_frame
from logging_console.trace_capture import capture, trace_depth

_UNSET = object()


class TestTraceDepth(unittest.TestCase):
    """Test cases for the trace_depth context manager."""

    def setUp(self):
        """Remember and clear sys.tracebacklimit."""
        self.saved_limit = getattr(sys, 'tracebacklimit', _UNSET)
        if self.saved_limit is not _UNSET:
            del sys.tracebacklimit

    def tearDown(self):
        """Put sys.tracebacklimit back as it was."""
        if self.saved_limit is _UNSET:
            if hasattr(sys, 'tracebacklimit'):
                del sys.tracebacklimit
        else:
            sys.tracebacklimit = self.saved_limit

    def test_limit_is_set_inside_and_removed_after(self):
        """Test that an unset limit is unset again on exit."""
        with trace_depth(12):
            self.assertEqual(sys.tracebacklimit, 12)
        self.assertFalse(hasattr(sys, 'tracebacklimit'))

    def test_previous_limit_is_restored(self):
        """Test that an existing limit is restored on exit."""
        sys.tracebacklimit = 7
        with trace_depth(30):
            self.assertEqual(sys.tracebacklimit, 30)
        self.assertEqual(sys.tracebacklimit, 7)

    def test_limit_is_restored_on_error(self):
        """Test that the limit is restored when the body raises."""
        sys.tracebacklimit = 4
        with self.assertRaises(RuntimeError):
            with trace_depth(20):
                raise RuntimeError("capture failed")
        self.assertEqual(sys.tracebacklimit, 4)

    def test_nested_capture_on_same_thread(self):
        """Test that a capture inside a held trace depth nests and restores the outer limit."""
        with trace_depth(9):
            frames = capture(2)
            self.assertEqual(sys.tracebacklimit, 9)
        self.assertEqual(len(frames), 2)
        self.assertFalse(hasattr(sys, 'tracebacklimit'))

    def test_capture_leaves_limit_untouched(self):
        """Test that capture() restores the limit it raised."""
        capture(5)
        self.assertFalse(hasattr(sys, 'tracebacklimit'))

    def test_concurrent_captures_restore_limit(self):
        """Test that captures from several threads leave no limit behind."""
        errors = []

        def worker(limit):
            try:
                for _ in range(50):
                    capture(limit)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n + 1,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(errors, [])
        self.assertFalse(hasattr(sys, 'tracebacklimit'))


class TestCapture(unittest.TestCase):
    """Test cases for capture()."""

    def test_capture_starts_at_caller(self):
        """Test that the first captured frame is the code calling capture()."""
        frames = capture(3)
        frame = parse_frame(frames[0])

        self.assertEqual(frame.function, 'TestCapture.test_capture_starts_at_caller')

    def test_capture_honours_limit(self):
        """Test that no more than the requested number of frames are captured."""
        def recurse(depth):
            if depth == 0:
                return capture(6)
            return recurse(depth - 1)

        frames = recurse(10)

        self.assertEqual(len(frames), 6)
        for text in frames:
            self.assertTrue(parse_frame(text).function.endswith('recurse'))
            self.assertNotIn('Previous line repeated', text)

    def test_capture_skip(self):
        """Test that skipped frames are left out."""
        def helper():
            return capture(2, skip=1)

        frames = helper()

        self.assertEqual(parse_frame(frames[0]).function, 'TestCapture.test_capture_skip')

    def test_frames_are_innermost_first(self):
        """Test that outer callers come after inner ones."""
        def inner():
            return capture(2)

        frames = inner()

        self.assertTrue(parse_frame(frames[0]).function.endswith('inner'))
        self.assertEqual(parse_frame(frames[1]).function, 'TestCapture.test_frames_are_innermost_first')


if __name__ == '__main__':
    unittest.main()
