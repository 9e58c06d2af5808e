"""
Category resolution

Turns a captured stack into the logger category of the code that called the
console. The category is built from the caller's file path relative to a root
directory, followed by its qualified function name:

    /srv/app/jobs/worker.py, Worker.run  ->  jobs.worker.Worker.run()

Code installed under site-packages collapses to "<module_prefix>.<package>".
"""

import os
import re
import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .exceptions import FrameParseError, ShallowTraceError
from .frames import Frame, parse_frame, is_dispatch_frame

logger = logging.getLogger(__name__)

FALLBACK_CATEGORY = 'unknown'

DEFAULT_IGNORE_ELEMENTS = (
    '',
    '<module>',
    '<locals>',
    '<lambda>',
    '<genexpr>',
    '<listcomp>',
    '<dictcomp>',
    '<setcomp>',
)

DEFAULT_VENDOR_DIRECTORIES = ('site-packages', 'dist-packages')

DEFAULT_MODULE_PREFIX = 'modules'

_SCHEME_RE = re.compile(r'^[A-Za-z][A-Za-z0-9+.-]*://')
_POSITION_RE = re.compile(r':\d+(?::\d+)?$')
_SEPARATOR_RE = re.compile(r'[\\/]')

# Failure types already reported when the caller supplies no set of its own
_reported_failures = set()


@dataclass(frozen=True)
class CategoryConfig:
    root_dir: str = ''
    ignore_elements: Tuple[str, ...] = DEFAULT_IGNORE_ELEMENTS
    replace_elements: Tuple[Tuple[str, str], ...] = ()
    module_prefix: str = DEFAULT_MODULE_PREFIX
    include_function: bool = True
    vendor_directories: Tuple[str, ...] = field(default=DEFAULT_VENDOR_DIRECTORIES)


@dataclass(frozen=True)
class CallerIdentity:
    """The frame that called the console, and the category derived from it."""
    category: str
    method: Optional[str] = None
    frame: Optional[Frame] = None
    index: Optional[int] = None

    @property
    def resolved(self) -> bool:
        return self.frame is not None


def find_caller(raw_frames):
    """
    Locate the application frame that called the console.

    Frames are scanned innermost first. The first run of console dispatch
    frames is the console call being resolved; its outermost member names the
    console method and the frame right after it is the caller. Only the first
    run counts, so a console call made while another one is formatting its
    arguments resolves to its own caller.

    Args:
        raw_frames: Captured frame texts, innermost first

    Returns:
        tuple: (method name, caller index, caller Frame)

    Raises:
        ShallowTraceError: if no dispatch frame or no frame past them was captured
        FrameParseError: if a frame up to the caller cannot be parsed
    """
    dispatch = None
    for index, text in enumerate(raw_frames):
        frame = parse_frame(text)
        if is_dispatch_frame(frame):
            dispatch = frame
            continue
        if dispatch is not None:
            method = dispatch.function_parts[-1].rstrip('_')
            return method, index, frame

    if dispatch is None:
        raise ShallowTraceError("No console frame found in captured trace")
    raise ShallowTraceError("Captured trace ends inside the console")


def _path_segments(location, config):
    path = _SCHEME_RE.sub('', location)

    root = config.root_dir
    if root and path.startswith(root):
        path = path[len(root):]

    path = _POSITION_RE.sub('', path)
    path = os.path.splitext(path)[0]
    return _SEPARATOR_RE.split(path)


def _collapse_vendored(segments, config):
    """Reduce a path inside a vendor directory to prefix + package name, or None."""
    for index, segment in enumerate(segments):
        if segment in config.vendor_directories:
            break
    else:
        return None

    package = segments[index + 1:]
    collapsed = [config.module_prefix] if config.module_prefix else []
    if package:
        name = package[0]
        # Scoped package: @scope/name
        if name.startswith('@') and len(package) > 1:
            name = f"{name}/{package[1]}"
        collapsed.append(name)
    return collapsed


def build_category(frame: Frame, config: CategoryConfig) -> str:
    """
    Build the dotted category for a caller frame.

    Args:
        frame: The caller frame
        config: Category rules

    Returns:
        str: The category, FALLBACK_CATEGORY when nothing is left of the frame
    """
    ignored = set(config.ignore_elements)
    segments = [s for s in _path_segments(frame.location, config) if s not in ignored]

    vendored = _collapse_vendored(segments, config)
    if vendored is not None:
        segments = vendored
    elif config.include_function:
        function_parts = [p for p in frame.function_parts if p not in ignored]
        if function_parts:
            function_parts[-1] += '()'
            segments.extend(function_parts)

    category = '.'.join(segments)
    if category.startswith('.'):
        category = category[1:]

    for source, replacement in config.replace_elements:
        category = category.replace(source, replacement)

    return category or FALLBACK_CATEGORY


def resolve(raw_frames, config: CategoryConfig, reported=None) -> CallerIdentity:
    """
    Resolve the caller of a console method from a captured trace.

    Never raises for a bad trace: a shallow or unparseable capture resolves to
    FALLBACK_CATEGORY and the failure is logged once per failure type.

    Args:
        raw_frames: Captured frame texts, innermost first
        config: Category rules
        reported: Set remembering failure types already logged

    Returns:
        CallerIdentity: caller frame, its index in raw_frames, console method and category
    """
    try:
        method, index, frame = find_caller(raw_frames)
    except (ShallowTraceError, FrameParseError) as e:
        _report_once(e, _reported_failures if reported is None else reported)
        return CallerIdentity(category=FALLBACK_CATEGORY)

    return CallerIdentity(
        category=build_category(frame, config),
        method=method,
        frame=frame,
        index=index,
    )


def _report_once(error, reported):
    kind = type(error).__name__
    if kind in reported:
        return
    reported.add(kind)
    logger.warning(f"Could not resolve console caller, using category '{FALLBACK_CATEGORY}': {error}")
