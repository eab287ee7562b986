"""Structured JSON logging.

Usage:
    from libs.common.logging import configure_logging
    configure_logging(service_name="credential_health_check", log_level="INFO")
"""

from libs.common.logging.config import configure_logging
from libs.common.logging.formatter import JSONFormatter

__all__ = [
    "configure_logging",
    "JSONFormatter",
]
