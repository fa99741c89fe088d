"""
Log output for the meshview command line.

Library modules only create `logging.getLogger(__name__)` loggers under the
"meshview" namespace; nothing is printed until `setup_logging` attaches
handlers, so embedding applications keep control of their own output.
"""
import logging
import sys

LOGGER_NAME = "meshview"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
TIME_FORMAT = '%H:%M:%S'


def _attach(logger, handler, level):
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=TIME_FORMAT))
    logger.addHandler(handler)


def setup_logging(level=logging.INFO, log_file=None):
    """
    Send parser and loader messages to stdout, and optionally to a file.

    Calling it again replaces the handlers from the previous call.

    Args:
        level: Threshold for both outputs; DEBUG also shows skipped OBJ lines
        log_file: Path of a log file, truncated on each run

    Returns:
        The "meshview" logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    _attach(logger, logging.StreamHandler(sys.stdout), level)
    if log_file:
        _attach(logger, logging.FileHandler(log_file, mode='w', encoding='utf-8'), level)

    return logger
