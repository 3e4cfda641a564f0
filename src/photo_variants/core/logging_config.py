"""Centralized logging configuration for the photo variants service."""

import os
import sys
import logging
from typing import Optional

DEFAULT_LOGGER_NAME = "photo-variants"


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: Optional[str] = None,
    format_type: str = "structured",
) -> logging.Logger:
    """
    Setup centralized logging with environment variable configuration.

    Args:
        name: Logger name (defaults to "photo-variants")
        level: Log level override. Without it the level comes from
            LOG_LEVEL (or INFO) the first time the handler is installed
            and is left alone afterwards.
        format_type: Logging format ("structured" or "simple")

    Returns:
        Configured logger instance

    Environment Variables:
        LOG_LEVEL: Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_FORMAT: Set format type ("structured" or "simple")
    """
    logger = logging.getLogger(name)

    if level:
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not logger.handlers:
        if not level:
            env_level = os.getenv("LOG_LEVEL", "INFO").upper()
            logger.setLevel(getattr(logging, env_level, logging.INFO))

        handler = logging.StreamHandler(sys.stdout)

        env_format = os.getenv("LOG_FORMAT", format_type).lower()

        if env_format == "structured":
            formatter = logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)-8s | "
                "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        else:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )

        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Child loggers ("photo-variants.x") reach this handler through the
    # hierarchy, so only the root of the tree stops propagating.
    logger.propagate = False
    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Get a child logger of the service logger.

    ``get_logger("gateways")`` returns ``photo-variants.gateways`` which
    shares the service logger's handler and level. The service logger is
    configured on first use only.
    """
    root = logging.getLogger(DEFAULT_LOGGER_NAME)
    if not root.handlers:
        root = setup_logger()
    if name == DEFAULT_LOGGER_NAME:
        return root
    return root.getChild(name)
