"""Logging helpers shared by the CLI, the browser and the core modules."""

import logging
import sys

ROOT_LOGGER = 'archive_browser'
LOG_FORMAT = '[%(asctime)s] %(levelname)s [%(name)s] %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(level: str = 'INFO', log_file: str | None = None) -> logging.Logger:
    """Configure and return the root archive_browser logger.

    Safe to call more than once: handlers are only installed the first time,
    later calls just adjust the level.
    """
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if root.handlers:
        return root

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root.addHandler(handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return root


def get_logger(name: str) -> logging.Logger:
    """Get a module logger under the archive_browser namespace."""
    return logging.getLogger(f'{ROOT_LOGGER}.{name}')
