"""Logging setup for the process entry points."""

import logging

from pythonjsonlogger import jsonlogger

FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'


def setup_logger(level: int = logging.INFO, json: bool = True) -> None:
    """Send log records to stderr, as JSON objects if ``json`` is set."""
    logHandler = logging.StreamHandler()
    if json:
        formatter: logging.Formatter = jsonlogger.JsonFormatter(
            FORMAT,
            rename_fields={'levelname': 'level', 'asctime': 'timestamp'}
        )
    else:
        formatter = logging.Formatter(FORMAT)
    logHandler.setFormatter(formatter)
    logger = logging.getLogger()
    logger.addHandler(logHandler)
    logger.setLevel(level)
