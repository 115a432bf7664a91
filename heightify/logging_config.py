"""
Logging setup for the heightify command line.

Diagnostics go to stderr so that command output on stdout stays parseable.
"""
import logging
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach handlers to the 'heightify' logger, replacing any from an earlier call.

    Args:
        level: Level number or name; unknown names fall back to INFO
        log_file: Optional file that receives the same records
    """
    logger = logging.getLogger("heightify")
    logger.setLevel(_resolve_level(level))
    logger.handlers.clear()

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
