"""Panel Check - Logging setup"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "panelcheck"


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """Send panelcheck log records to stderr, leaving stdout for the report."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())
    if not logger.handlers:
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    return logger
