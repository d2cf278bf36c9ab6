"""
Structured logging with verbosity levels for AFLFleet.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

AFLFLEET_THEME = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
    "runner": "bold magenta",
})

# stdout carries the generated commands, so diagnostics go to stderr
console = Console(theme=AFLFLEET_THEME, stderr=True)

LOG_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
}


def setup_logging(verbosity: int = 1, log_file: Optional[str] = None) -> None:
    """
    Configure logging for AFLFleet.

    Args:
        verbosity: 0=warning, 1=info, 2=debug
        log_file: Optional file path for logging output
    """
    level = LOG_LEVELS.get(verbosity, logging.DEBUG)

    handlers = [
        RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            tracebacks_show_locals=verbosity >= 2,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
