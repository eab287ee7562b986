"""Centralized logging configuration.

Example:
    >>> from libs.common.logging import configure_logging
    >>> logger = configure_logging(service_name="credential_health_check", log_level="INFO")
    >>> logger.info("Health check started", extra={"secret_name": "signal9-advisor/api-credentials"})
"""

import logging
import sys
from typing import TextIO

from libs.common.logging.formatter import JSONFormatter


def configure_logging(
    service_name: str,
    log_level: str = "INFO",
    include_context: bool = True,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure structured JSON logging on the root logger.

    This should be called once at process startup.

    Args:
        service_name: Name stamped on every record (e.g., "credential_health_check")
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        include_context: Whether to include extra fields under "context"
        stream: Output stream. Default: sys.stdout

    Returns:
        Configured root logger instance

    Raises:
        ValueError: If log_level is invalid
    """
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(JSONFormatter(service_name=service_name, include_context=include_context))
    root_logger.addHandler(handler)

    return root_logger
