"""
Console Configuration Module

This module provides the options record accepted by LoggingConsole, the
immutable settings object built from it, and parsing of options from an
INI settings file.
"""

import os
import logging
import configparser
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Optional, Any, Callable, TypeVar, Mapping, List, Tuple

from .exceptions import ConfigurationError
from .logging_setup import LEVELS
from .category import (
    CategoryConfig,
    DEFAULT_IGNORE_ELEMENTS,
    DEFAULT_MODULE_PREFIX,
    DEFAULT_VENDOR_DIRECTORIES,
)

T = TypeVar('T')

logger = logging.getLogger(__name__)

SETTINGS_SECTION = 'console'

# Console methods that log under a configurable severity, and their defaults
DEFAULT_LEVELS = {
    'assert': 'warn',
    'count': 'debug',
    'dir': 'debug',
    'dirxml': 'debug',
    'table': 'info',
    'time': 'info',
    'time_end': 'info',
    'time_log': 'info',
}

# Option field -> console methods it sets the severity for
LEVEL_OPTIONS = {
    'assert_level': ('assert',),
    'count_level': ('count',),
    'dir_level': ('dir', 'dirxml'),
    'table_level': ('table',),
    'time_level': ('time', 'time_end', 'time_log'),
}

DEFAULT_STACK_TRACE_LIMIT = 10
DEFAULT_INSPECT_DEPTH = 30


@dataclass
class ConsoleOptions:
    """
    Options accepted by LoggingConsole.
    Unset fields fall back to the defaults when settings are built.
    """
    # Backend
    logging_config: Optional[str] = None
    watch_config: bool = False

    # Severities for console methods that are not severities themselves
    assert_level: Optional[str] = None
    count_level: Optional[str] = None
    dir_level: Optional[str] = None
    table_level: Optional[str] = None
    time_level: Optional[str] = None

    # Category rules
    stack_trace_limit: int = DEFAULT_STACK_TRACE_LIMIT
    include_function_in_category: bool = True
    ignore_category_elements: List[str] = field(default_factory=list)
    replace_elements: List[Any] = field(default_factory=list)
    module_prefix: str = DEFAULT_MODULE_PREFIX
    root_dir: Optional[str] = None

    # Output
    print_trace: bool = False
    inspect_depth: int = DEFAULT_INSPECT_DEPTH
    inspect_compact: bool = True


@dataclass(frozen=True)
class ConsoleSettings:
    """Immutable console configuration; replaced as a whole on reload."""
    category: CategoryConfig
    levels: Mapping[str, str]
    stack_trace_limit: int = DEFAULT_STACK_TRACE_LIMIT
    print_trace: bool = False
    inspect_depth: Optional[int] = DEFAULT_INSPECT_DEPTH
    inspect_compact: bool = True


def coerce_options(options) -> ConsoleOptions:
    """
    Accept None, a ConsoleOptions or a mapping of ConsoleOptions field names.

    Raises:
        ConfigurationError: for unknown option names or a value of the wrong kind
    """
    if options is None:
        return ConsoleOptions()
    if isinstance(options, ConsoleOptions):
        return options
    if isinstance(options, Mapping):
        known = {f.name for f in fields(ConsoleOptions)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ConfigurationError(f"Unknown console options: {', '.join(unknown)}")
        return ConsoleOptions(**options)
    raise ConfigurationError(f"Console options must be a mapping or ConsoleOptions, got {type(options).__name__}")


def normalize_level(value) -> str:
    """
    Convert a severity name or logging level number to one of LEVELS.

    Raises:
        ConfigurationError: if the value names no known severity
    """
    if isinstance(value, int) and not isinstance(value, bool):
        for name, number in LEVELS.items():
            if number == value:
                return name
    elif isinstance(value, str):
        name = value.strip().lower()
        if name == 'warning':
            name = 'warn'
        if name in LEVELS:
            return name
    raise ConfigurationError(f"Unknown log level: {value!r}")


def normalize_replace_elements(rules) -> Tuple[Tuple[str, str], ...]:
    """
    Normalize rename rules to (source, replacement) pairs.

    Each rule is either a {'source': ..., 'replacement': ...} mapping or a
    two-item sequence. Order is preserved.
    """
    normalized = []
    for rule in rules or ():
        if isinstance(rule, Mapping):
            source, replacement = rule.get('source'), rule.get('replacement', '')
        elif isinstance(rule, (list, tuple)) and len(rule) == 2:
            source, replacement = rule
        else:
            raise ConfigurationError(f"Invalid replace rule: {rule!r}")

        if not isinstance(source, str) or not source or not isinstance(replacement, str):
            raise ConfigurationError(f"Invalid replace rule: {rule!r}")
        normalized.append((source, replacement))
    return tuple(normalized)


def build_settings(options) -> ConsoleSettings:
    """
    Build the immutable console settings from caller options merged over defaults.

    Args:
        options: ConsoleOptions, mapping of option names, or None

    Returns:
        ConsoleSettings

    Raises:
        ConfigurationError: if any option is invalid
    """
    options = coerce_options(options)

    levels = dict(DEFAULT_LEVELS)
    for option, methods in LEVEL_OPTIONS.items():
        value = getattr(options, option)
        if value is None:
            continue
        level = normalize_level(value)
        for method in methods:
            levels[method] = level

    limit = options.stack_trace_limit
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
        raise ConfigurationError(f"stack_trace_limit must be a positive integer, got {limit!r}")

    extra_ignore = options.ignore_category_elements or []
    if isinstance(extra_ignore, str):
        extra_ignore = [extra_ignore]
    ignore_elements = tuple(dict.fromkeys(DEFAULT_IGNORE_ELEMENTS + tuple(extra_ignore)))

    root_dir = options.root_dir if options.root_dir is not None else os.getcwd()

    category = CategoryConfig(
        root_dir=os.fspath(root_dir),
        ignore_elements=ignore_elements,
        replace_elements=normalize_replace_elements(options.replace_elements),
        module_prefix=options.module_prefix if options.module_prefix is not None else DEFAULT_MODULE_PREFIX,
        include_function=bool(options.include_function_in_category),
        vendor_directories=DEFAULT_VENDOR_DIRECTORIES,
    )

    return ConsoleSettings(
        category=category,
        levels=MappingProxyType(levels),
        stack_trace_limit=limit,
        print_trace=bool(options.print_trace),
        inspect_depth=options.inspect_depth,
        inspect_compact=bool(options.inspect_compact),
    )


# Convert a value to boolean using string matching for string values
def convert_to_bool(value) -> bool:
    """
    Convert a value to boolean using string matching for string values.
    Strings like 'true', 'yes', and '1' are converted to True.
    Other strings and falsy values are converted to False.
    """
    if isinstance(value, str):
        return value.lower() in ('true', 'yes', '1', 'on')
    return bool(value)


def convert_to_list(value) -> List[str]:
    """Split a comma or newline separated setting into a list of stripped items."""
    if isinstance(value, (list, tuple)):
        return list(value)
    items = value.replace('\n', ',').split(',')
    return [item.strip() for item in items if item.strip()]


def convert_to_rules(value) -> List[Tuple[str, str]]:
    """
    Parse rename rules from a settings value.
    One rule per line, written as: source -> replacement
    """
    rules = []
    for line in value.splitlines():
        line = line.strip()
        if not line:
            continue
        source, separator, replacement = line.partition('->')
        if not separator:
            raise ConfigurationError(f"Invalid replace rule in settings file: {line!r}")
        rules.append((source.strip(), replacement.strip()))
    return rules


# Safely convert a value to a specified type
def convert_to_type(value, type_func) -> Any:
    """
    Safely convert a value to the specified type.
    Special handling for boolean conversion using string matching.

    Returns:
        The converted value, or None if conversion fails
    """
    if type_func is None:
        return value

    if type_func == bool:
        return convert_to_bool(value)

    try:
        return type_func(value)
    except (ValueError, TypeError):
        # Return None to signal conversion failure
        return None


def get_setting(config, section, option, default: T = None, type: Optional[Callable[[Any], T]] = None) -> T:
    """
    Get a setting from a parsed settings file, falling back to the default.

    Args:
        config: ConfigParser object (if None, the default is returned)
        section: Section in config file
        option: Option name in config file
        default: Default value if not found in the config file
        type: Optional type conversion function (int, str, bool, etc.)

    Returns:
        The setting value with type conversion applied
    """
    if config and config.has_section(section) and config.has_option(section, option):
        converted_value = convert_to_type(config.get(section, option), type)
        if converted_value is not None:
            return converted_value
        # If conversion fails, fall back to default

    return default


def find_settings_file():
    """
    Search for a console settings file in standard locations.

    Returns:
        Path to the first settings file found, or None if no file is found
    """
    # Check environment variable first
    env_path = os.getenv('LOGGING_CONSOLE_CONFIG_PATH')
    if env_path and os.path.isfile(env_path):
        return env_path

    home_dir = os.getenv('HOME') or os.path.expanduser('~')

    potential_locations = [
        os.path.join(os.getcwd(), 'logging_console.ini'),
        os.path.join(home_dir, '.config', 'logging_console', 'settings.ini'),
        os.path.join(home_dir, '.logging_console.ini'),
        '/etc/logging_console/settings.ini',
    ]

    for location in filter(None, potential_locations):
        if os.path.isfile(location):
            return location

    return None


def parse_console_options(settings_path=None) -> ConsoleOptions:
    """
    Read console options from the [console] section of an INI settings file.

    Args:
        settings_path: Path to the settings file; standard locations are
            searched when not given

    Returns:
        ConsoleOptions: options from the file, defaults for anything missing

    Raises:
        ConfigurationError: if an explicitly given file is missing or unreadable
    """
    settings_file_config = configparser.ConfigParser(interpolation=None)

    if settings_path is not None and not os.path.isfile(settings_path):
        raise ConfigurationError(f"Settings file not found: {settings_path}")

    config_file_path = settings_path or find_settings_file()
    if config_file_path:
        try:
            settings_file_config.read(config_file_path)
        except configparser.Error as e:
            raise ConfigurationError(f"Error parsing settings file {config_file_path}: {e}") from e

    def setting(option, default=None, type=None):
        return get_setting(settings_file_config, SETTINGS_SECTION, option, default, type)

    options = ConsoleOptions()

    # Backend settings
    options.logging_config = setting('logging_config')
    if options.logging_config and config_file_path and not os.path.isabs(options.logging_config):
        # Relative backend config paths are relative to the settings file
        options.logging_config = os.path.join(os.path.dirname(os.path.abspath(config_file_path)), options.logging_config)
    options.watch_config = setting('watch_config', False, bool)

    # Severity settings
    for option in LEVEL_OPTIONS:
        setattr(options, option, setting(option))

    # Category settings
    options.stack_trace_limit = setting('stack_trace_limit', DEFAULT_STACK_TRACE_LIMIT, int)
    options.include_function_in_category = setting('include_function_in_category', True, bool)
    options.ignore_category_elements = setting('ignore_category_elements', [], convert_to_list)
    options.replace_elements = convert_to_rules(setting('replace_elements', ''))
    options.module_prefix = setting('module_prefix', DEFAULT_MODULE_PREFIX)
    options.root_dir = setting('root_dir')

    # Output settings
    options.print_trace = setting('print_trace', False, bool)
    options.inspect_depth = setting('inspect_depth', DEFAULT_INSPECT_DEPTH, int)
    options.inspect_compact = setting('inspect_compact', True, bool)

    logger.debug(f"Console options read from {config_file_path or 'defaults'}")
    return options
