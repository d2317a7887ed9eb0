import logging
import os

from rich.logging import RichHandler

from .const import LOG_LEVEL_ENV, PROGNAME

DEFAULT_LOG_LEVEL = logging.INFO
QUIET_LOG_LEVEL = logging.ERROR


def init_logging(quiet: bool = False) -> logging.Logger:
    """
    Attach a rich handler to the package logger.

    Quiet mode only lets errors through; otherwise the level can be overridden
    through the MDLYRICGETTER_LOG environment variable (e.g. ``debug``).
    """

    from .cli.console import console

    logger = logging.getLogger(PROGNAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handler = RichHandler(console=console, show_time=False, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(handler)
    logger.setLevel(QUIET_LOG_LEVEL if quiet else _level_from_env())

    return logger


def _level_from_env() -> int:
    name = os.environ.get(LOG_LEVEL_ENV, '').strip().upper()
    level = logging.getLevelName(name) if name else DEFAULT_LOG_LEVEL
    return level if isinstance(level, int) else DEFAULT_LOG_LEVEL
