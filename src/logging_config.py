"""Shared logging configuration for the site map service.

Call ``configure_logging()`` once at the entry point (API server, scripts).
Idempotent: if the root logger already has handlers, it does nothing.
"""

import logging
import os
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = "logs/sitemap.log",
) -> None:
    """Configure root logger with console + optional file handler.

    Args:
        level: Logging level, as a number or a name such as "DEBUG"
        log_file: File to append to, or None for console only
    """
    root = logging.getLogger()
    if root.handlers:
        return

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    # File handler only if its directory exists or can be created
    if log_file:
        try:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            fh = logging.FileHandler(log_file, mode="a")
            fh.setFormatter(formatter)
            root.addHandler(fh)
        except OSError:
            pass

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)
