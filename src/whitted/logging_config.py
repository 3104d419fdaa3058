"""Logging configuration for scripts using whitted.

Library modules only create loggers with logging.getLogger(__name__); they
never attach handlers. Scripts call setup_logging() once to see the output.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    fmt: str = LOG_FORMAT,
    log_file: Optional[Path] = None,
    name: str = "whitted",
) -> logging.Logger:
    """
    Set up logging configuration.

    Calling it again replaces the handlers installed by the previous call
    instead of adding more.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        fmt: Format string for every handler
        log_file: Optional path of a rotating log file
        name: Logger name

    Returns:
        Configured logger instance
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    for handler in list(logger.handlers):
        if getattr(handler, "_whitted_handler", False):
            logger.removeHandler(handler)
            handler.close()

    # Create formatters
    formatter = logging.Formatter(fmt)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler._whitted_handler = True
    logger.addHandler(console_handler)

    # File handler
    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10485760,  # 10MB
            backupCount=5,
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        file_handler._whitted_handler = True
        logger.addHandler(file_handler)

    return logger
