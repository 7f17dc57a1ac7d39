"""Logging setup for hosts embedding Timelens."""

import logging

from . import LoggingConfig


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure root logging based on config."""
    config = config or LoggingConfig()
    numeric_level = getattr(logging, config.level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=config.format,
        datefmt=config.datefmt,
    )


__all__ = ["setup_logging"]
