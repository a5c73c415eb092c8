"""Project-wide logger."""
import logging
import sys

LOGGER_NAME = "expression_calculator"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _build_logger() -> logging.Logger:
    """
    Create the project logger with a single stderr handler.

    :return: Configured logger
    :rtype: logging.Logger
    """
    log = logging.getLogger(LOGGER_NAME)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
    log.setLevel(logging.INFO)
    return log


def set_debug(enabled: bool) -> None:
    """Switch the project logger between DEBUG and INFO levels."""
    logger.setLevel(logging.DEBUG if enabled else logging.INFO)


logger: logging.Logger = _build_logger()
