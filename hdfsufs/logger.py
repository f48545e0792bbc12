"""
hdfsufs Logger
==============

This module provides a singleton logger for the hdfsufs adapter,
pre-configured with a consistent format and log level.

Usage
-----

.. code-block:: python

    from hdfsufs.logger import logger

    logger.info("Connecting to the under filesystem")
    logger.debug("Debugging details here")

Configuration
-------------

- The log level is taken from ``UFS_LOG_LEVEL`` (environment or ``hdfsufs.yml``, default: ``INFO``).
- The logger outputs to the standard error stream.
- Only one handler is attached to prevent duplicate logs when imported multiple times.
"""

import logging
import hdfsufs.config as config


def get_logger(name: str = "hdfsufs") -> logging.Logger:
    """
    Returns a configured logger instance.
    """
    logger = logging.getLogger(name)

    # Only configure if it has no handlers (prevents duplicate logs)
    if not logger.hasHandlers():
        log_level = str(config.UFS_LOG_LEVEL).upper()
        logger.setLevel(log_level)

        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


# Singleton logger instance
logger = get_logger()
