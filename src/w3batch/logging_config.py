"""Logging configuration for w3batch."""

import logging
import sys
from typing import Union

LOG_FORMAT = '[%(levelname)s] %(asctime)s|%(name)s|%(filename)s:%(lineno)d: %(message)s'

NOISY_LOGGERS = (
    "web3.providers.HTTPProvider",
    "web3._utils.http_session_manager",
    "web3.RequestManager",
    "urllib3.connectionpool",
)


def setup_logging(level: Union[str, int] = "INFO", format_str: str = LOG_FORMAT) -> logging.Logger:
    """Configure the root logger on stderr and quiet the web3 transport loggers.

    stdout is left to the program's result lines.

    Returns:
        The w3batch package logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=format_str, stream=sys.stderr)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger("w3batch")
    logger.setLevel(level)
    return logger
