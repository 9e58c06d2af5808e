"""
Exceptions raised by the logging console.

Only ConfigurationError is ever seen by application code; the trace errors
are caught inside the category resolver and turned into the fallback category.
"""


class ConfigurationError(ValueError):
    """Raised when console options or the logging backend configuration are invalid."""


class FrameParseError(ValueError):
    """Raised when a captured frame text does not follow the traceback format."""

    def __init__(self, text):
        super().__init__(f"Unparseable stack frame: {text!r}")
        self.text = text


class ShallowTraceError(LookupError):
    """Raised when a captured trace does not reach past the console's own frames."""
