import logging
import sys
from typing import Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Union[str, int] = "INFO") -> logging.Logger:
    """
    Route the package's log records to stderr.

    Only entry points call this; the library itself never adds handlers.
    Calling it again just updates the level.
    """
    logger = logging.getLogger("promptx")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False  # Don't double-print to root logger

    if not any(getattr(h, "_promptx_handler", False) for h in logger.handlers):
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        console._promptx_handler = True
        logger.addHandler(console)

    return logger
