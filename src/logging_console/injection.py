"""
Console injection - one process-wide console instead of passing it everywhere
"""
import threading
from typing import Optional

from .console import LoggingConsole

# Global console - set once at application startup
_global_console: Optional[LoggingConsole] = None
_global_lock = threading.Lock()


def install_console(console: LoggingConsole) -> None:
    """
    Install the process-wide console. Call this once at application startup,
    from a single place, before other threads use get_console().

    Args:
        console: The console every get_console() call should return

    Example:
        install_console(LoggingConsole('logging.yaml'))
    """
    global _global_console
    _global_console = console


def get_console(console: Optional[LoggingConsole] = None) -> LoggingConsole:
    """
    Get the console to log with.

    Args:
        console: If provided, just returns this console

    Returns:
        The given console, the installed one, or a default console created
        (and installed) on first use
    """
    global _global_console

    if console is not None:
        return console

    if _global_console is None:
        with _global_lock:
            if _global_console is None:
                _global_console = LoggingConsole()

    return _global_console


def reset_console() -> None:
    """Forget the installed console (mainly for testing)"""
    global _global_console
    with _global_lock:
        if _global_console is not None:
            _global_console.close()
        _global_console = None
