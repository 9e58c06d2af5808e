"""
Logging console

A console-style diagnostic surface whose output goes to the standard library
logging package. Every call is logged under a category derived from the
calling code, formatted as path.to.module[.Class][.function()] relative to
the configured root directory.

Example:
    console = LoggingConsole('logging.yaml')
    console.info('Hello %s', 'world')   # logged under e.g. "app.main.run()"
"""

import os
import time
import logging
import threading

from .category import resolve
from .config import build_settings, coerce_options, parse_console_options
from .exceptions import ConfigurationError
from .formatting import format_arguments, inspect_object, render_table
from .logging_setup import configure, shutdown
from .sink import DispatchSink
from .trace_capture import INTERNAL_DEPTH, capture
from .watcher import ConfigWatcher

logger = logging.getLogger(__name__)


class LoggingConsole:
    """
    Console replacement that routes every call to a category logger.

    Construction configures the logging backend; a bad backend configuration
    or bad options raise ConfigurationError. After that, console calls never
    fail because of category resolution: a caller that cannot be found is
    logged under the 'unknown' category.
    """

    def __init__(self, config=None, options=None, default_console=None):
        """
        Args:
            config: Logging backend configuration: None, a dictConfig dictionary
                or a path to a YAML, JSON or INI logging config file.
                Falls back to options.logging_config when None.
            options: ConsoleOptions or a mapping of its field names
            default_console: Object receiving profile(), profile_end() and
                time_stamp() calls unchanged
        """
        options = coerce_options(options)
        if config is None:
            config = options.logging_config

        settings = build_settings(options)
        configure(config)

        self._settings = settings
        self._sink = DispatchSink()
        self._default_console = default_console
        self._counters = {}
        self._timers = {}
        self._state_lock = threading.Lock()
        self._reported_failures = set()
        self._watcher = None

        if options.watch_config and isinstance(config, (str, os.PathLike)):
            self._watcher = ConfigWatcher(config, self._on_config_change)
            self._watcher.start()

    @classmethod
    def from_settings(cls, settings_path=None, default_console=None):
        """Create a console from the [console] section of an INI settings file."""
        options = parse_console_options(settings_path)
        return cls(options.logging_config, options, default_console)

    @property
    def settings(self):
        return self._settings

    # Inert, kept for console compatibility
    def clear(self):
        pass

    def group(self, *label):
        pass

    def group_collapsed(self, *label):
        pass

    def group_end(self):
        pass

    # Counters
    def count(self, label='default'):
        with self._state_lock:
            self._counters[label] = self._counters.get(label, 0) + 1
            value = self._counters[label]
        self._dispatch('count', f"{label}: {value}")

    def count_reset(self, label='default'):
        with self._state_lock:
            self._counters[label] = 0

    # Timers
    def time(self, label='default'):
        with self._state_lock:
            exists = label in self._timers
            if not exists:
                self._timers[label] = time.perf_counter()
        if exists:
            self._dispatch('time', f"Label '{label}' already exists for console.time()", severity='warn')

    def time_end(self, label='default'):
        with self._state_lock:
            started = self._timers.pop(label, None)
        if started is None:
            self._dispatch('time_end', f"No such label '{label}' for console.time_end()", severity='warn')
            return
        self._dispatch('time_end', f"{label}: {format_duration(time.perf_counter() - started)}")

    def time_log(self, label='default', *data):
        with self._state_lock:
            started = self._timers.get(label)
        if started is None:
            self._dispatch('time_log', f"No such label '{label}' for console.time_log()", severity='warn')
            return
        text = f"{label}: {format_duration(time.perf_counter() - started)}"
        if data:
            text = f"{text} {self._format(data)}"
        self._dispatch('time_log', text)

    # Object inspection
    def dir(self, obj, show_hidden=False, depth=2, colors=False):
        # colors is accepted for console compatibility; formatters own colouring
        self._dispatch('dir', inspect_object(obj, show_hidden=show_hidden, depth=depth))

    def dirxml(self, *data):
        self._dispatch('dirxml', self._format(data))

    # Logging functions
    def trace(self, *data):
        text = self._format(data)
        if self._settings.print_trace:
            text = f"{text}\n{self._caller_stack()}"
        self._dispatch('trace', text)

    def debug(self, *data):
        self._dispatch('debug', self._format(data))

    def info(self, *data):
        self._dispatch('info', self._format(data))

    def warn(self, *data):
        self._dispatch('warn', self._format(data))

    def error(self, *data):
        self._dispatch('error', self._format(data))

    log = info
    warning = warn

    def table(self, tabular_data, properties=None):
        self._dispatch('table', render_table(tabular_data, properties))

    # Profiling
    def profile(self, label=None):
        self._forward('profile', label)

    def profile_end(self, label=None):
        self._forward('profile_end', label)

    def time_stamp(self, label=None):
        self._forward('time_stamp', label)

    # Misc
    def assert_(self, value, *message):
        if value:
            return
        text = 'Assertion failed'
        if message:
            text = f"{text}: {self._format(message)}"
        self._dispatch('assert', text)

    # Configuration
    def reload(self, config=None, options=None):
        """
        Replace the console configuration.

        New options are validated first, then the backend is reconfigured, and
        only when both succeed are the new settings swapped in as a whole.
        Errors are logged and leave the previous configuration active.

        Args:
            config: New logging backend configuration, or None to keep it
            options: New ConsoleOptions (or mapping), or None to keep them

        Returns:
            bool: True if the new configuration is active
        """
        settings = self._settings
        if options is not None:
            try:
                settings = build_settings(options)
            except ConfigurationError as e:
                logger.error(f"Error while reconfiguring console: {e}")
                return False

        if config is not None and not self._reload_backend(config):
            return False

        self._settings = settings
        return True

    def close(self):
        """Stop watching the backend config file."""
        if self._watcher is not None:
            self._watcher.stop()
            self._watcher = None

    # Private utils
    def _on_config_change(self, path):
        self.reload(config=path)

    def _reload_backend(self, config):
        logger.debug("reloading config for logging")
        shutdown(self._report_shutdown_error)
        try:
            configure(config)
        except ConfigurationError as e:
            logger.error(f"Error while reconfiguring logging: {e}")
            return False
        return True

    @staticmethod
    def _report_shutdown_error(error):
        if error is not None:
            logger.error(f"shutting down logging error: {error}")

    def _forward(self, name, label):
        target = getattr(self._default_console, name, None)
        if callable(target):
            target(label)

    def _format(self, data):
        settings = self._settings
        return format_arguments(data, depth=settings.inspect_depth, compact=settings.inspect_compact)

    def _caller_stack(self):
        frames = capture(self._settings.stack_trace_limit + INTERNAL_DEPTH)
        return ''.join(frames[INTERNAL_DEPTH:]).rstrip('\n')

    def _dispatch(self, method, text, severity=None):
        settings = self._settings
        frames = capture(settings.stack_trace_limit + INTERNAL_DEPTH)
        identity = resolve(frames, settings.category, self._reported_failures)
        self._sink.emit(identity.method or method, text, identity.category, settings.levels,
                        caller_index=identity.index, severity=severity)


def format_duration(seconds):
    """Format an elapsed time like the console does: milliseconds below one second."""
    milliseconds = seconds * 1000
    if milliseconds < 1000:
        return f"{milliseconds:.3f}ms"
    if milliseconds < 60000:
        return f"{seconds:.3f}s"
    return f"{seconds / 60:.3f}min"
