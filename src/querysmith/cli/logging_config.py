"""Centralized logging configuration for CLI commands.

Provides three logging levels:
- Default: Clean output, suppress library chatter
- Verbose: Show querysmith progress, suppress HTTP client details
- Debug: Show everything including compiled parameters and HTTP traffic
"""

import logging


HTTP_LOGGERS = ('typesense', 'urllib3', 'requests')


def setup_logging_default():
    """Default logging: only warnings and errors."""
    logging.basicConfig(
        level=logging.WARNING,
        format='%(levelname)s: %(message)s'
    )

    logging.getLogger('querysmith').setLevel(logging.WARNING)
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(logging.ERROR)


def setup_logging_verbose():
    """Verbose logging: querysmith INFO messages, quiet HTTP clients."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(levelname)s: %(message)s'
    )

    logging.getLogger('querysmith').setLevel(logging.INFO)
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging_debug():
    """Debug logging: everything, with logger names."""
    logging.basicConfig(
        level=logging.DEBUG,
        format='%(name)s - %(levelname)s: %(message)s'
    )

    logging.getLogger('querysmith').setLevel(logging.DEBUG)


def setup_logging(verbose: bool = False, debug: bool = False):
    """Pick the preset matching the --verbose/--debug flags."""
    if debug:
        setup_logging_debug()
    elif verbose:
        setup_logging_verbose()
    else:
        setup_logging_default()
