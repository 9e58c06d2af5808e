"""
Logging backend adapter

Thin layer over the standard library logging package: configures it from a
dict, a YAML/JSON file or an INI file, flushes it on reload and hands out
category loggers that know how many frames to skip when reporting the caller.
"""

import os
import json
import logging
import logging.config
import configparser

import yaml

from .exceptions import ConfigurationError

# Finer than DEBUG, used by console.trace()
TRACE = 5
logging.addLevelName(TRACE, 'TRACE')

LEVELS = {
    'error': logging.ERROR,
    'warn': logging.WARNING,
    'info': logging.INFO,
    'debug': logging.DEBUG,
    'trace': TRACE,
}

DEFAULT_FORMAT = '%(asctime)s %(levelname)s [%(name)s]: %(message)s'
DEFAULT_LEVEL = 'INFO'


def default_config(level=DEFAULT_LEVEL):
    """
    Backend configuration used when the console is created without one:
    every category goes to stderr through the root logger.

    Args:
        level: Root level name or number

    Returns:
        dict: dictConfig dictionary
    """
    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'category': {'format': DEFAULT_FORMAT},
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'category',
            },
        },
        'root': {
            'level': level,
            'handlers': ['console'],
        },
    }


def _load_config_file(path):
    """Read a YAML or JSON logging config file into a dictConfig dictionary."""
    with open(path, 'r') as f:
        if path.endswith('.json'):
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ConfigurationError(f"Logging config {path} does not contain a mapping")
    return data


def configure(config):
    """
    Configure the logging backend.

    Args:
        config: None for default_config(), a dictConfig dictionary, or a path
            to a .yaml/.yml/.json dictConfig file or an INI file in
            logging.config.fileConfig format.

    Raises:
        ConfigurationError: if the file is missing or the configuration is rejected
    """
    if config is None:
        config = default_config()

    try:
        if isinstance(config, dict):
            config = dict(config)
            config.setdefault('version', 1)
            # Category loggers created before a reload must keep working
            config.setdefault('disable_existing_loggers', False)
            logging.config.dictConfig(config)
            return

        path = os.fspath(config)
        if not os.path.isfile(path):
            raise ConfigurationError(f"Logging config file not found: {path}")

        if path.endswith(('.yaml', '.yml', '.json')):
            data = _load_config_file(path)
            data.setdefault('version', 1)
            data.setdefault('disable_existing_loggers', False)
            logging.config.dictConfig(data)
        else:
            logging.config.fileConfig(path, disable_existing_loggers=False)
    except ConfigurationError:
        raise
    except (ValueError, TypeError, KeyError, AttributeError, ImportError, OSError,
            configparser.Error, yaml.YAMLError) as e:
        raise ConfigurationError(f"Invalid logging configuration: {e}") from e


def shutdown(callback=None):
    """
    Flush every handler attached to the root logger ahead of a reconfiguration.

    Args:
        callback: Optional callable receiving the first flush error, or None
    """
    error = None
    for handler in logging.getLogger().handlers[:]:
        try:
            handler.flush()
        except (OSError, ValueError) as e:
            if error is None:
                error = e
    if callback is not None:
        callback(error)


class CategoryLogger(logging.LoggerAdapter):
    """
    Logger handle for one category.

    stack_skip is the number of frames between the code calling this handle and
    the frame the backend should report as the origin of the record. It is
    passed to the standard library as stacklevel unless the call supplies one.
    """

    def __init__(self, logger, stack_skip=1):
        super().__init__(logger, None)
        self.stack_skip = stack_skip

    def process(self, msg, kwargs):
        kwargs.setdefault('stacklevel', self.stack_skip)
        return super().process(msg, kwargs)

    @property
    def category(self):
        return self.logger.name


def get_logger(category, stack_skip=1):
    """Return a CategoryLogger for the given category."""
    return CategoryLogger(logging.getLogger(category), stack_skip)
