"""
Logging setup for the oracle coordination service.

Console-only output so container runtimes collect the stream.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stdout handler on the root logger."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    formatter = logging.Formatter(LOG_FORMAT)

    # Console handler (stdout) for container logging
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    # Remove any pre-existing handlers to avoid duplicates
    if root.hasHandlers():
        root.handlers.clear()

    root.addHandler(console_handler)
