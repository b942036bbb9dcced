"""Centralized logging configuration for orgchart."""

import logging
import os


def setup_logging() -> None:
    """
    Configure application-wide logging using LOG_LEVEL environment variable.

    Defaults to INFO if LOG_LEVEL is not set.
    """
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    # Will raise AttributeError if invalid
    numeric_level = getattr(logging, log_level)

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,  # Override any existing configuration
    )

    # SQL echo only in DEBUG mode
    sqlalchemy_level = (
        logging.WARNING if numeric_level > logging.DEBUG else logging.INFO
    )
    logging.getLogger("sqlalchemy.engine").setLevel(sqlalchemy_level)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured at {log_level} level")
