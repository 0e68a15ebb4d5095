"""
Logging setup: rich console output plus an optional log file.
"""

import logging
from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from config.settings import LoggingConfig

LOGGER_NAME = "scentreserve"


def setup_logging(
    logging_config: LoggingConfig, console: Optional[Console] = None
) -> logging.Logger:
    """
    Configure the package logger from a LoggingConfig.

    Returns:
        The "scentreserve" logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging_config.log_level.upper())
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if logging_config.log_to_console:
        logger.addHandler(
            RichHandler(console=console, show_path=False, rich_tracebacks=True)
        )

    if logging_config.log_to_file:
        logging_config.ensure_dirs()
        log_path = logging_config.log_dir / f"scrape_{datetime.now():%Y%m%d_%H%M%S}.log"
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger
