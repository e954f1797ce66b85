"""Logging configuration for the command line entry point."""

import logging
import sys


def setup_logging(level: int | str = logging.INFO) -> None:
    """Configure root logging to stdout and quiet the HTTP client loggers."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
