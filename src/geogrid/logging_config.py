"""
Logging Configuration
=====================
Output setup for the 'geogrid' logger tree.

Library modules only create module loggers (`logging.getLogger(__name__)`)
and never configure output. Attach/detach and projection changes are
logged at INFO; per-move recomputation (zoom bucket, density, line and
label counts) at DEBUG, which is what `--debug` in the demo turns on.
"""
import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "geogrid"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%H:%M:%S'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Sends grid logs to stdout and, optionally, to a file.

    Calling it again replaces the previous handlers, so the demo can switch
    level or file without duplicating lines.

    Args:
        level: Level for the package logger and its handlers.
        log_file: Optional path; the file is truncated on each call.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info(f"Logging initialized (level {logging.getLevelName(level)}).")
