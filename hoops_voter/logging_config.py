"""
Logging setup for hoops voter.

Everything goes through loguru; each component binds its name into the
record so log lines can be traced back to the session, store or ranker.
"""

import sys
from pathlib import Path
from typing import Any

from loguru import logger

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} - {message}"
CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)


def setup_logging(level: str = "INFO", debug: bool = False, log_file: str | None = "hoops_voter.log") -> None:
    """
    Route log records to stderr and, optionally, a vote log file.

    Args:
        level: Console level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        debug: Force DEBUG on the console and write a separate debug file
        log_file: File receiving INFO and above, or None for console only
    """
    logger.remove()
    logger.configure(extra={"name": "hoops_voter"})

    _ = logger.add(sys.stderr, level="DEBUG" if debug else level, format=CONSOLE_FORMAT)

    if log_file is None:
        return

    # Votes, refreshes and store anomalies
    _ = logger.add(log_file, level="INFO", format=FILE_FORMAT, rotation="10 MB")

    if debug:
        path = Path(log_file)
        _ = logger.add(path.with_name(f"{path.stem}_debug{path.suffix}"), level="DEBUG", format=FILE_FORMAT)


def get_logger(name: str | None = None) -> Any:
    """Return the shared logger bound to a component name."""
    return logger.bind(name=name or "hoops_voter")
