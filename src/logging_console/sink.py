"""
Dispatch sink: forwards finished console output to category loggers.
"""

import logging
import threading

from .logging_setup import LEVELS, get_logger

# Frames the sink adds between the console's dispatch frame and the backend call
SINK_DEPTH = 1

INDENT = '    '


def indent_lines(text):
    """
    Indent multi-line text and start it on a fresh line.

    Single-line text is returned unchanged.
    """
    lines = text.split('\n')
    if len(lines) == 1:
        return text
    return '\n'.join([''] + [f"{INDENT}{line}" for line in lines])


class DispatchSink:
    """
    Routes console output to one logger per category.

    Handles are cached for the lifetime of the sink. The cache only grows;
    creating a handle is idempotent, so the lock only guards the dictionary.
    """

    def __init__(self, logger_factory=get_logger):
        self._logger_factory = logger_factory
        self._handles = {}
        self._lock = threading.Lock()

    def get_handle(self, category):
        handle = self._handles.get(category)
        if handle is not None:
            return handle

        with self._lock:
            handle = self._handles.get(category)
            if handle is None:
                handle = self._logger_factory(category, SINK_DEPTH)
                self._handles[category] = handle
        return handle

    @property
    def categories(self):
        return list(self._handles)

    def emit(self, method, text, category, levels, caller_index=None, severity=None):
        """
        Log console output under its category.

        Args:
            method (str): Console method that produced the output
            text (str): Finished output
            category (str): Resolved category
            levels (Mapping): Severity for console methods that are not severities themselves
            caller_index (int): Position of the caller frame in the captured trace,
                counted from the frame that called the sink
            severity (str): Severity overriding the method's own
        """
        severity = severity or levels.get(method, method)
        level = LEVELS.get(severity, logging.INFO)

        handle = self.get_handle(category)
        stacklevel = handle.stack_skip + (caller_index or 0) + 1
        handle.log(level, indent_lines(text), stacklevel=stacklevel)
