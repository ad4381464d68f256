"""Logging setup for command-line runs."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger; unknown level names fall back to INFO."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    # matplotlib font discovery is noisy at DEBUG
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
