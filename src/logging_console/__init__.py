"""
LoggingConsole Package

A console-style diagnostic surface (info, warn, error, debug, trace, counters,
timers, dir, table, assert) that logs through the standard library logging
package, under categories derived from the code making each call.
"""

__version__ = '0.1.0'
__author__ = 'Mat Davis'

from .console import LoggingConsole, format_duration
from .config import ConsoleOptions, ConsoleSettings, build_settings, parse_console_options
from .category import CallerIdentity, CategoryConfig, FALLBACK_CATEGORY, build_category, find_caller, resolve
from .frames import Frame, parse_frame
from .sink import DispatchSink, indent_lines
from .trace_capture import capture, trace_depth
from .logging_setup import TRACE, LEVELS, CategoryLogger, configure, default_config, get_logger, shutdown
from .exceptions import ConfigurationError, FrameParseError, ShallowTraceError
from .injection import install_console, get_console, reset_console

# Define what's publicly available when using "from logging_console import *"
__all__ = [

    # Console
    'LoggingConsole',
    'format_duration',

    # Configuration
    'ConsoleOptions',
    'ConsoleSettings',
    'build_settings',
    'parse_console_options',

    # Category resolution
    'CallerIdentity',
    'CategoryConfig',
    'FALLBACK_CATEGORY',
    'build_category',
    'find_caller',
    'resolve',
    'Frame',
    'parse_frame',
    'capture',
    'trace_depth',

    # Dispatch
    'DispatchSink',
    'indent_lines',

    # Backend
    'TRACE',
    'LEVELS',
    'CategoryLogger',
    'configure',
    'default_config',
    'get_logger',
    'shutdown',

    # Errors
    'ConfigurationError',
    'FrameParseError',
    'ShallowTraceError',

    # Process-wide console
    'install_console',
    'get_console',
    'reset_console',
]
