"""
Logging setup.

Call setup_logging() once from the embedding application; library modules
only ever do `log = logging.getLogger(__name__)`.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

_NOISY = ("sqlalchemy.engine", "aiosqlite", "asyncio")


def setup_logging(level: str | int | None = None) -> logging.Logger:
    """Configure the root logger and quiet chatty third-party loggers."""
    if level is None:
        level = logging.INFO
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    for name in _NOISY:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logging.getLogger("mealcart")


__all__ = ("setup_logging", "LOG_FORMAT")
