import logging
import sys

from obspipe.pipeline.config import LOG_LEVEL

PACKAGE_LOGGER = "obspipe"


def setup_logging(level: str = LOG_LEVEL) -> logging.Logger:
    """
    Give the package logger a stdout handler for standalone runs.

    Does nothing once the package logger or the root logger has a handler,
    so a host application's logging config always wins.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if logger.handlers or logging.getLogger().handlers:
        return logger
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    h = logging.StreamHandler(sys.stdout)
    h.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s :: %(message)s"))
    logger.addHandler(h)
    return logger
